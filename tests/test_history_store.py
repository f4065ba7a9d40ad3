import json
from datetime import datetime, timezone

from shared.clients.storage.file.StorageClientFile import StorageClientFile
from shared.clients.storage.memory.StorageClientMemory import StorageClientMemory
from shared.history.HistoryStore import HistoryStore
from shared.models.history import HISTORY_LOG_ADAPTER


async def _stored_identifiers(store: HistoryStore, storage_client) -> list[str]:
    raw = await storage_client.get(store.storage_key)
    return [entry.identifier for entry in HISTORY_LOG_ADAPTER.validate_json(raw)]


async def test_append_persists_entry(history_store, storage_client, make_entry):
    assert await history_store.append(make_entry(1)) is True
    assert await _stored_identifiers(history_store, storage_client) == ["asset_1"]


async def test_capacity_evicts_oldest_entry(history_store, storage_client, make_entry):
    for index in range(1, 22):
        assert await history_store.append(make_entry(index))

    stored = await _stored_identifiers(history_store, storage_client)
    assert len(stored) == 20
    assert stored[0] == "asset_2"
    assert stored[-1] == "asset_21"


async def test_capacity_is_configurable(monkeypatch, helper_config, storage_client, make_entry):
    monkeypatch.setenv("HISTORY_CAPACITY", "3")
    store = HistoryStore(helper_config=helper_config, storage_client=storage_client)
    for index in range(1, 6):
        await store.append(make_entry(index))
    assert await _stored_identifiers(store, storage_client) == ["asset_3", "asset_4", "asset_5"]


async def test_list_returns_most_recent_first(history_store, make_entry):
    t1 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    t2 = datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)
    t3 = datetime(2026, 3, 1, 11, 0, tzinfo=timezone.utc)
    for index, created_at in enumerate([t1, t2, t3], start=1):
        await history_store.append(make_entry(index, created_at=created_at))

    entries = await history_store.list_entries()
    assert [entry.createdAt for entry in entries] == [t3, t2, t1]


async def test_list_sorts_at_read_time(history_store, storage_client, make_entry):
    late = datetime(2026, 5, 1, tzinfo=timezone.utc)
    early = datetime(2026, 4, 1, tzinfo=timezone.utc)
    await history_store.append(make_entry(1, created_at=late))
    await history_store.append(make_entry(2, created_at=early))

    assert await _stored_identifiers(history_store, storage_client) == ["asset_1", "asset_2"]
    assert [entry.identifier for entry in await history_store.list_entries()] == ["asset_1", "asset_2"]


async def test_stored_format_is_json_array(history_store, storage_client, make_entry, pdf_b64):
    await history_store.append(make_entry(1))
    stored = json.loads(await storage_client.get(history_store.storage_key))
    assert isinstance(stored, list)
    assert set(stored[0]) == {"identifier", "category", "title", "counterpart", "createdAt", "encoded"}
    assert stored[0]["encoded"] == pdf_b64
    assert datetime.fromisoformat(stored[0]["createdAt"].replace("Z", "+00:00")).tzinfo is not None


async def test_corrupt_log_is_replaced(history_store, storage_client, make_entry):
    await storage_client.set(history_store.storage_key, "{not json")
    assert await history_store.list_entries() == []

    assert await history_store.append(make_entry(1))
    assert await _stored_identifiers(history_store, storage_client) == ["asset_1"]


async def test_wrong_shape_counts_as_corrupt(history_store, storage_client, make_entry):
    await storage_client.set(history_store.storage_key, json.dumps([{"identifier": "x"}]))
    assert await history_store.list_entries() == []


async def test_naive_timestamps_are_read_as_utc(history_store, storage_client, pdf_b64):
    legacy = [
        {
            "identifier": "asset_legacy",
            "category": "resume_summary",
            "title": "Resume for Analyst",
            "counterpart": "Initech",
            "createdAt": "2025-12-24T08:00:00",
            "encoded": pdf_b64,
        }
    ]
    await storage_client.set(history_store.storage_key, json.dumps(legacy))
    (entry,) = await history_store.list_entries()
    assert entry.createdAt.tzinfo is not None


async def test_quota_exceeded_is_absorbed(monkeypatch, helper_config, make_entry):
    monkeypatch.setenv("STORAGE_QUOTA_BYTES", "3000")
    storage_client = StorageClientMemory(helper_config=helper_config)
    await storage_client.boot()
    store = HistoryStore(helper_config=helper_config, storage_client=storage_client)

    assert await store.append(make_entry(1, encoded="QUJD")) is True
    assert await store.append(make_entry(2, encoded="A" * 5000)) is False
    assert [entry.identifier for entry in await store.list_entries()] == ["asset_1"]


async def test_unavailable_storage_is_absorbed(helper_config, make_entry):
    storage_client = StorageClientMemory(helper_config=helper_config)
    store = HistoryStore(helper_config=helper_config, storage_client=storage_client)

    assert await store.append(make_entry(1)) is False
    assert await store.list_entries() == []
    assert await store.get("asset_1") is None
    assert await store.clear() is False


async def test_get_and_clear(history_store, make_entry):
    await history_store.append(make_entry(1))
    await history_store.append(make_entry(2))

    assert (await history_store.get("asset_2")).title == "Cover Letter for Role 2"
    assert await history_store.get("asset_404") is None

    assert await history_store.clear() is True
    assert await history_store.list_entries() == []


async def test_undecodable_storage_file_is_absorbed(monkeypatch, helper_config, tmp_path, make_entry):
    path = tmp_path / "store.json"
    path.write_bytes(b'{"docsynth_history": "\xff\xfe"}')
    monkeypatch.setenv("STORAGE_FILE_PATH", str(path))
    storage_client = StorageClientFile(helper_config=helper_config)
    await storage_client.boot()
    store = HistoryStore(helper_config=helper_config, storage_client=storage_client)

    assert await store.append(make_entry(1)) is False
    assert await store.list_entries() == []
    assert path.read_bytes() == b'{"docsynth_history": "\xff\xfe"}'
