import base64
import logging
import os
import tempfile
from datetime import datetime, timedelta, timezone

# Set test environment variables before importing app modules.
os.environ.setdefault("ROOT_DIR", tempfile.mkdtemp(prefix="docsynth_test_"))
os.environ.setdefault("SYNTHESIS_N8N_BASE_URL", "http://synthesis.test")
os.environ.setdefault("LOG_LEVEL", "info")

import pytest
import pytest_asyncio

from shared.clients.storage.memory.StorageClientMemory import StorageClientMemory
from shared.clients.synthesis.SynthesisClientInterface import SynthesisTransportError
from shared.helper.HelperConfig import HelperConfig
from shared.history.HistoryStore import HistoryStore
from shared.logging.logging_setup import ColorLogger
from shared.models.history import HistoryEntry


def _make_pdf(size: int = 1500) -> bytes:
    head = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<< /Type /Catalog /Pages 2 0 R >>\nendobj\n"
    tail = b"\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"
    filler = bytes(range(256)) * (size // 256 + 1)
    return head + filler[: max(size - len(head) - len(tail), 0)] + tail


class StubSynthesisClient:
    """Stands in for the HTTP transport; returns a canned envelope or raises."""

    def __init__(self):
        self.envelope = None
        self.error: Exception | None = None
        self.requests = []

    async def do_synthesize(self, request, action=None):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.envelope


@pytest.fixture
def helper_config() -> HelperConfig:
    return HelperConfig(logger=ColorLogger(logging.getLogger("docsynth_bridge.tests")))


@pytest.fixture
def make_pdf():
    return _make_pdf


@pytest.fixture
def pdf_bytes() -> bytes:
    return _make_pdf()


@pytest.fixture
def pdf_b64(pdf_bytes) -> str:
    return base64.b64encode(pdf_bytes).decode("ascii")


@pytest.fixture
def make_entry(pdf_b64):
    base = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def factory(index: int = 1, encoded: str | None = None, created_at: datetime | None = None) -> HistoryEntry:
        return HistoryEntry(
            identifier=f"asset_{index}",
            category="cover_letter",
            title=f"Cover Letter for Role {index}",
            counterpart="Acme",
            createdAt=created_at or base + timedelta(minutes=index),
            encoded=pdf_b64 if encoded is None else encoded,
        )

    return factory


@pytest.fixture
def stub_synthesis() -> StubSynthesisClient:
    return StubSynthesisClient()


@pytest.fixture
def transport_error() -> SynthesisTransportError:
    return SynthesisTransportError("Synthesis failed: server returned status 404.", status_code=404)


@pytest_asyncio.fixture
async def storage_client(helper_config):
    client = StorageClientMemory(helper_config=helper_config)
    await client.boot()
    yield client
    await client.close()


@pytest_asyncio.fixture
async def history_store(helper_config, storage_client) -> HistoryStore:
    return HistoryStore(helper_config=helper_config, storage_client=storage_client)
