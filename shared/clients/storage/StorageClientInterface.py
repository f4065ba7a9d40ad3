from abc import abstractmethod

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig


class StorageClientError(Exception):
    """The persistence surface is unavailable or rejected an operation."""


class StorageQuotaExceededError(StorageClientError):
    """A write would push the stored data past the configured quota."""


class StorageClientInterface(ClientInterface):
    """String-keyed get/set store for serialised blobs (the browser local storage equivalent).

    No transactions and no locking: concurrent writers to the same key follow
    last-writer-wins.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self.quota_bytes = helper_config.get_int_val(f"{self.get_client_type().upper()}_QUOTA_BYTES", default=5 * 1024 * 1024)
        self._booted = False

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "storage"

    def is_booted(self) -> bool:
        return self._booted

    ##########################################
    ############### BACKEND ##################
    ##########################################

    @abstractmethod
    async def _load(self) -> dict[str, str]:
        """Read every stored key.

        Returns:
            dict[str, str]: A copy of all stored values by key.

        Raises:
            StorageClientError: If the backend cannot be read.
        """
        pass

    @abstractmethod
    async def _persist(self, data: dict[str, str]) -> None:
        """Replace the stored data as a whole.

        Args:
            data (dict[str, str]): All values by key.

        Raises:
            StorageClientError: If the backend cannot be written.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def get(self, key: str) -> str | None:
        """Return the value stored under key, or None if the key is absent."""
        self._ensure_booted()
        data = await self._load()
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        """Store value under key.

        Raises:
            StorageQuotaExceededError: If the write would exceed the quota.
            StorageClientError: If the backend is unavailable.
        """
        self._ensure_booted()
        data = await self._load()
        data[key] = value
        usage = self._measure(data)
        if usage > self.quota_bytes:
            raise StorageQuotaExceededError(
                f"Writing '{key}' needs {usage} bytes, quota of {self.get_engine_name()} storage is {self.quota_bytes} bytes."
            )
        await self._persist(data)

    async def delete(self, key: str) -> None:
        """Remove key. Removing an absent key is a no-op."""
        self._ensure_booted()
        data = await self._load()
        if data.pop(key, None) is not None:
            await self._persist(data)

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _ensure_booted(self) -> None:
        if not self._booted:
            raise StorageClientError("Storage client not initialised. Call boot() before using it.")

    @staticmethod
    def _measure(data: dict[str, str]) -> int:
        return sum(len(key.encode("utf-8")) + len(value.encode("utf-8")) for key, value in data.items())
