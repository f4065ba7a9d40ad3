import pytest

from shared.clients.storage.StorageClientInterface import StorageClientError, StorageQuotaExceededError
from shared.clients.storage.StorageClientManager import StorageClientManager
from shared.clients.storage.file.StorageClientFile import StorageClientFile
from shared.clients.storage.memory.StorageClientMemory import StorageClientMemory


async def test_memory_get_set_delete(storage_client):
    assert await storage_client.get("missing") is None
    await storage_client.set("key", "value")
    assert await storage_client.get("key") == "value"
    await storage_client.delete("key")
    await storage_client.delete("key")
    assert await storage_client.get("key") is None


async def test_memory_survives_close_and_boot(storage_client):
    await storage_client.set("key", "value")
    await storage_client.close()
    await storage_client.boot()
    assert await storage_client.get("key") == "value"


async def test_use_before_boot_fails(helper_config):
    client = StorageClientMemory(helper_config=helper_config)
    with pytest.raises(StorageClientError):
        await client.get("key")


async def test_quota_is_enforced(monkeypatch, helper_config):
    monkeypatch.setenv("STORAGE_QUOTA_BYTES", "10")
    client = StorageClientMemory(helper_config=helper_config)
    await client.boot()
    await client.set("k", "12345")
    with pytest.raises(StorageQuotaExceededError):
        await client.set("k2", "1234567890")
    assert await client.get("k2") is None


async def test_file_storage_persists_between_instances(monkeypatch, helper_config, tmp_path):
    path = tmp_path / "nested" / "store.json"
    monkeypatch.setenv("STORAGE_FILE_PATH", str(path))

    first = StorageClientFile(helper_config=helper_config)
    await first.boot()
    await first.set("docsynth_history", "[]")
    await first.close()

    second = StorageClientFile(helper_config=helper_config)
    await second.boot()
    assert second.get_path() == str(path)
    assert await second.get("docsynth_history") == "[]"
    assert not [p for p in path.parent.iterdir() if p.name.endswith(".tmp")]


async def test_file_storage_defaults_under_root_dir(monkeypatch, helper_config, tmp_path):
    monkeypatch.delenv("STORAGE_FILE_PATH", raising=False)
    monkeypatch.setenv("ROOT_DIR", str(tmp_path))
    client = StorageClientFile(helper_config=helper_config)
    assert client.get_path() == str(tmp_path / "data" / "storage.json")


async def test_corrupt_storage_file_raises(monkeypatch, helper_config, tmp_path):
    path = tmp_path / "store.json"
    path.write_text("not json", encoding="utf-8")
    monkeypatch.setenv("STORAGE_FILE_PATH", str(path))

    client = StorageClientFile(helper_config=helper_config)
    await client.boot()
    with pytest.raises(StorageClientError):
        await client.get("docsynth_history")


async def test_undecodable_storage_file_raises(monkeypatch, helper_config, tmp_path):
    path = tmp_path / "store.json"
    path.write_bytes(b'{"docsynth_history": "\xff\xfe"}')
    monkeypatch.setenv("STORAGE_FILE_PATH", str(path))

    client = StorageClientFile(helper_config=helper_config)
    await client.boot()
    with pytest.raises(StorageClientError):
        await client.get("docsynth_history")


@pytest.mark.parametrize("engine, expected", [("memory", StorageClientMemory), ("FILE", StorageClientFile)])
def test_manager_selects_engine(monkeypatch, helper_config, tmp_path, engine, expected):
    monkeypatch.setenv("STORAGE_ENGINE", engine)
    monkeypatch.setenv("STORAGE_FILE_PATH", str(tmp_path / "store.json"))
    client = StorageClientManager(helper_config=helper_config).get_client()
    assert isinstance(client, expected)
    assert client.get_client_type() == "storage"


def test_manager_rejects_unknown_engine(monkeypatch, helper_config):
    monkeypatch.setenv("STORAGE_ENGINE", "floppy")
    with pytest.raises(ValueError):
        StorageClientManager(helper_config=helper_config)
