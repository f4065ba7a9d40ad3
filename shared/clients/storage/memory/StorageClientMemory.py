from shared.clients.storage.StorageClientInterface import StorageClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class StorageClientMemory(StorageClientInterface):
    """Process-local storage. Data survives close()/boot() cycles, not restarts."""

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._data: dict[str, str] = {}

    def _get_engine_name(self) -> str:
        return "Memory"

    def _get_required_config(self) -> list[EnvConfig]:
        return []

    async def boot(self) -> None:
        self._booted = True

    async def close(self) -> None:
        self._booted = False

    async def _load(self) -> dict[str, str]:
        return dict(self._data)

    async def _persist(self, data: dict[str, str]) -> None:
        self._data = dict(data)
