"""Bounded, persisted history of generated documents.

The whole log lives under one key of the storage surface as a JSON array,
oldest entry first. Every append is a full read-modify-write; concurrent
writers sharing the surface follow last-writer-wins.
"""

from collections import deque

from pydantic import ValidationError

from shared.clients.storage.StorageClientInterface import StorageClientError, StorageClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.history import HISTORY_LOG_ADAPTER, HistoryEntry


class HistoryStore:
    """Append-only history log with oldest-first eviction.

    History is convenience data: storage failures are logged and absorbed so
    they never block a generated document from being shown.
    """

    def __init__(self, helper_config: HelperConfig, storage_client: StorageClientInterface) -> None:
        self.logging = helper_config.get_logger()
        self._storage = storage_client
        self.capacity = helper_config.get_int_val("HISTORY_CAPACITY", default=20)
        self.storage_key = helper_config.get_string_val("HISTORY_STORAGE_KEY", default="docsynth_history")

    ##########################################
    ################ CORE ####################
    ##########################################

    async def append(self, entry: HistoryEntry) -> bool:
        """Append an entry, evicting the oldest ones past capacity.

        Args:
            entry (HistoryEntry): The entry to record.

        Returns:
            bool: True if the log was written, False if persistence failed.
        """
        try:
            entries = await self._read_log()
        except StorageClientError as e:
            self.logging.error("History storage unavailable, entry '%s' not recorded: %s", entry.identifier, e)
            return False

        log: deque[HistoryEntry] = deque(entries, maxlen=self.capacity)
        evicted = max(len(entries) + 1 - self.capacity, 0)
        log.append(entry)
        if evicted:
            self.logging.debug("History at capacity %d, evicting %d oldest entries.", self.capacity, evicted)

        try:
            await self._write_log(list(log))
        except StorageClientError as e:
            self.logging.error("Failed to persist history entry '%s': %s", entry.identifier, e)
            return False

        self.logging.info("Recorded '%s' in history (%d/%d).", entry.title, len(log), self.capacity)
        return True

    async def list_entries(self) -> list[HistoryEntry]:
        """Return all entries, most recent first.

        Storage order is insertion order; the recency order is applied on read.

        Returns:
            list[HistoryEntry]: The entries sorted by createdAt descending.
        """
        try:
            entries = await self._read_log()
        except StorageClientError as e:
            self.logging.error("History storage unavailable, returning empty history: %s", e)
            return []
        return sorted(entries, key=lambda entry: entry.createdAt, reverse=True)

    async def get(self, identifier: str) -> HistoryEntry | None:
        """Return the entry with the given identifier, if it is still stored."""
        for entry in await self.list_entries():
            if entry.identifier == identifier:
                return entry
        return None

    async def clear(self) -> bool:
        """Remove the whole log from storage.

        Returns:
            bool: True if the log was removed, False if persistence failed.
        """
        try:
            await self._storage.delete(self.storage_key)
        except StorageClientError as e:
            self.logging.error("Failed to clear history: %s", e)
            return False
        self.logging.info("History cleared.")
        return True

    ##########################################
    ############### HELPERS ##################
    ##########################################

    async def _read_log(self) -> list[HistoryEntry]:
        """Read the persisted log. A missing or corrupt value reads as an empty log.

        Raises:
            StorageClientError: If the storage surface itself fails.
        """
        raw = await self._storage.get(self.storage_key)
        if raw is None:
            return []
        try:
            return HISTORY_LOG_ADAPTER.validate_json(raw)
        except ValidationError as e:
            self.logging.warning("Stored history under '%s' is corrupt, starting over: %s", self.storage_key, e.errors()[:1])
            return []

    async def _write_log(self, entries: list[HistoryEntry]) -> None:
        await self._storage.set(self.storage_key, HISTORY_LOG_ADAPTER.dump_json(entries).decode("utf-8"))
