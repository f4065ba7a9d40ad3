import asyncio
import json
import os
import tempfile

from shared.clients.storage.StorageClientInterface import StorageClientError, StorageClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class StorageClientFile(StorageClientInterface):
    """Stores all keys in a single JSON object file on disk."""

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._path = self.get_config_val("PATH", default=self._get_default_path(), val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    def _get_engine_name(self) -> str:
        return "File"

    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="PATH", val_type="string", default=self._get_default_path()),
        ]

    def _get_default_path(self) -> str:
        return os.path.join(self._helper_config.get_root_dir(), "data", "storage.json")

    def get_path(self) -> str:
        return self._path

    ##########################################
    ############## LIFECYCLE #################
    ##########################################

    async def boot(self) -> None:
        directory = os.path.dirname(os.path.abspath(self._path))
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise StorageClientError(f"Cannot create storage directory '{directory}': {e}") from e
        self._booted = True
        self.logging.debug("File storage ready at %s", self._path)

    async def close(self) -> None:
        # every write is flushed immediately, nothing is buffered
        self._booted = False

    ##########################################
    ############### BACKEND ##################
    ##########################################

    async def _load(self) -> dict[str, str]:
        return await asyncio.to_thread(self._read_file)

    async def _persist(self, data: dict[str, str]) -> None:
        await asyncio.to_thread(self._write_file, data)

    def _read_file(self) -> dict[str, str]:
        if not os.path.exists(self._path):
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageClientError(f"Cannot read storage file '{self._path}': {e}") from e
        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            raise StorageClientError(f"Storage file '{self._path}' does not hold a key-value object.")
        return data

    def _write_file(self, data: dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self._path))
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".storage_", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f)
                os.replace(tmp_path, self._path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise StorageClientError(f"Cannot write storage file '{self._path}': {e}") from e
