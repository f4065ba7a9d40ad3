"""Turns stored history entries back into viewable documents."""

import os
import tempfile
from datetime import datetime, timezone

from shared.helper.HelperConfig import HelperConfig
from shared.models.document import DecodedDocument, DecodeFailure, DecodeFailureReason
from shared.models.history import HistoryEntry
from shared.payload.PayloadDecoder import PayloadDecoder
from shared.payload.PayloadSanitizer import PayloadSanitizer


def build_document_filename(category: str, created_at: datetime | None = None) -> str:
    """Return the download name of a document, "<category>_<epoch millis>.pdf"."""
    created_at = created_at or datetime.now(timezone.utc)
    return f"{category}_{int(created_at.timestamp() * 1000)}.pdf"


class DocumentHandle:
    """Temporary file holding exactly one document for a viewer or download.

    The owner must call release() once the document is no longer displayed,
    or use the handle as a context manager.
    """

    def __init__(self, path: str, filename: str, media_type: str, verified: bool) -> None:
        self.path = path
        self.filename = filename
        self.media_type = media_type
        self.verified = verified

    def read_bytes(self) -> bytes:
        with open(self.path, "rb") as f:
            return f.read()

    def is_released(self) -> bool:
        return not os.path.exists(self.path)

    def release(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)

    def __enter__(self) -> "DocumentHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class AssetRehydrator:
    """Re-runs the sanitize/decode/validate path on stored entries."""

    def __init__(
        self,
        helper_config: HelperConfig,
        sanitizer: PayloadSanitizer | None = None,
        decoder: PayloadDecoder | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._sanitizer = sanitizer or PayloadSanitizer()
        self._decoder = decoder or PayloadDecoder(helper_config=helper_config)

    def reopen(self, entry: HistoryEntry) -> DecodedDocument | DecodeFailure:
        """Decode the document stored in a history entry.

        Stored data is sanitized again since it may have been contaminated
        before it was stored.

        Args:
            entry (HistoryEntry): The entry to reopen.

        Returns:
            DecodedDocument | DecodeFailure: missing_data if nothing decodable is stored,
            otherwise whatever the decoder concludes.
        """
        encoded = self._sanitizer.sanitize(entry.encoded)
        if encoded is None:
            self.logging.warning("History entry '%s' holds no document data.", entry.identifier)
            return DecodeFailure(reason=DecodeFailureReason.MISSING_DATA, detail=f"Entry '{entry.identifier}' is empty.")

        outcome = self._decoder.decode(encoded)
        if isinstance(outcome, DecodeFailure):
            self.logging.warning("Could not reopen history entry '%s': %s", entry.identifier, outcome.reason.value)
        return outcome

    def open_handle(self, document: DecodedDocument, category: str, created_at: datetime | None = None) -> DocumentHandle:
        """Write a document to a temporary file and return a handle to it.

        The rehydrator does not track handle lifetime; the caller releases it.

        Args:
            document (DecodedDocument): The document to expose.
            category (str): Document category, used for the filename.
            created_at (datetime | None): Creation time, used for the filename.

        Returns:
            DocumentHandle: Handle to the temporary file.
        """
        filename = build_document_filename(category, created_at)
        fd, path = tempfile.mkstemp(prefix=f"{category}_", suffix=".pdf")
        with os.fdopen(fd, "wb") as f:
            f.write(document.content)
        return DocumentHandle(path=path, filename=filename, media_type=document.media_type, verified=document.verified)
