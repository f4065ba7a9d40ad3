"""Generation service: turns one synthesis request into a verified, recorded document.

transport → locate → sanitize → decode → history append
"""

import base64
import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel

from shared.clients.synthesis.SynthesisClientInterface import SynthesisClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.history.AssetRehydrator import build_document_filename
from shared.history.HistoryStore import HistoryStore
from shared.models.document import FAILURE_MESSAGES, DecodedDocument, DecodeFailure, DecodeFailureReason
from shared.models.envelope import ResponseEnvelope
from shared.models.history import HistoryEntry
from shared.models.locate import Candidate, DirectBinary, NotFound, ServerError
from shared.models.synthesis import SynthesisRequest
from shared.payload.PayloadDecoder import PayloadDecoder
from shared.payload.PayloadLocator import PayloadLocator
from shared.payload.PayloadSanitizer import PayloadSanitizer

INVALID_RESPONSE_MESSAGE = "The server failed to return a valid PDF. Check the synthesis workflow output."

CATEGORY_LABELS = {
    "cover_letter": "Cover Letter",
    "resume_summary": "Resume",
}


class GenerationErrorKind(str, Enum):
    SERVER_ERROR = "server_error"
    NOT_FOUND = "not_found"
    MALFORMED_ENCODING = DecodeFailureReason.MALFORMED_ENCODING.value
    NOT_A_DOCUMENT = DecodeFailureReason.NOT_A_DOCUMENT.value
    MISSING_DATA = DecodeFailureReason.MISSING_DATA.value


class GenerationError(Exception):
    """A generation produced no document. Carries the user-facing message."""

    def __init__(self, kind: GenerationErrorKind, message: str, detail: str = ""):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail

    @classmethod
    def from_failure(cls, failure: DecodeFailure) -> "GenerationError":
        return cls(kind=GenerationErrorKind(failure.reason.value), message=failure.message, detail=failure.detail)


class GenerationResult(BaseModel):
    """
    Outcome of a successful generation.

    Attributes:
        document: The decoded document, possibly unverified.
        entry:    The history entry, None if history persistence failed.
        filename: Download name, "<category>_<timestamp>.pdf".
    """

    document: DecodedDocument
    entry: HistoryEntry | None = None
    filename: str


class GenerationService:
    """Orchestrates transport, payload extraction and history for one generation."""

    def __init__(
        self,
        helper_config: HelperConfig,
        synthesis_client: SynthesisClientInterface,
        history_store: HistoryStore,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._synthesis = synthesis_client
        self._history = history_store
        self._locator = PayloadLocator(helper_config=helper_config)
        self._sanitizer = PayloadSanitizer()
        self._decoder = PayloadDecoder(helper_config=helper_config)

    ##########################################
    ################ CORE ####################
    ##########################################

    async def do_generate(self, request: SynthesisRequest) -> GenerationResult:
        """Request a document and verify what comes back.

        Args:
            request (SynthesisRequest): The form data for the workflow.

        Returns:
            GenerationResult: The document and its history entry.

        Raises:
            SynthesisTransportError: If the workflow is unreachable or answers non-2xx.
            GenerationError: If the response holds no usable document.
        """
        envelope = await self._synthesis.do_synthesize(request)
        document, encoded = self._extract_document(envelope)

        if not document.verified:
            self.logging.warning("Generated %s could not be verified as PDF, returning it anyway.", request.category)

        created_at = datetime.now(timezone.utc)
        entry = self._build_entry(request, encoded, created_at)
        stored = await self._history.append(entry)

        self.logging.info("Generated %s of %d bytes (%s).", request.category, len(document.content), entry.identifier)
        return GenerationResult(
            document=document,
            entry=entry if stored else None,
            filename=build_document_filename(request.category, created_at),
        )

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _extract_document(self, envelope: ResponseEnvelope) -> tuple[DecodedDocument, str]:
        """Locate and decode the document in a response envelope.

        Returns:
            tuple[DecodedDocument, str]: The document and its sanitized base64 form.

        Raises:
            GenerationError: If no valid document can be extracted.
        """
        located = self._locator.locate(envelope)

        if isinstance(located, ServerError):
            raise GenerationError(kind=GenerationErrorKind.SERVER_ERROR, message=located.message)
        if isinstance(located, NotFound):
            raise GenerationError(kind=GenerationErrorKind.NOT_FOUND, message=INVALID_RESPONSE_MESSAGE)

        if isinstance(located, DirectBinary):
            outcome = self._decoder.verify(located.content)
            encoded = base64.b64encode(located.content).decode("ascii")
        elif isinstance(located, Candidate):
            encoded = self._sanitizer.sanitize(located.raw)
            if encoded is None:
                raise GenerationError.from_failure(
                    DecodeFailure(reason=DecodeFailureReason.MISSING_DATA, detail="Candidate is empty after sanitizing.")
                )
            outcome = self._decoder.decode(encoded)
        else:
            raise TypeError(f"Unexpected locate result '{type(located).__name__}'.")

        if isinstance(outcome, DecodeFailure):
            raise GenerationError.from_failure(outcome)
        return outcome, encoded

    @staticmethod
    def _build_entry(request: SynthesisRequest, encoded: str, created_at: datetime) -> HistoryEntry:
        label = CATEGORY_LABELS[request.category]
        return HistoryEntry(
            identifier=f"asset_{uuid.uuid4().hex}",
            category=request.category,
            title=f"{label} for {request.job_title or 'Opportunity'}",
            counterpart=request.company_name or "Corporate Target",
            createdAt=created_at,
            encoded=encoded,
        )
