"""Decoded document and decode failure models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

PDF_SIGNATURE = b"%PDF-"
PDF_MEDIA_TYPE = "application/pdf"


class DecodeFailureReason(str, Enum):
    MALFORMED_ENCODING = "malformed_encoding"
    NOT_A_DOCUMENT = "not_a_document"
    MISSING_DATA = "missing_data"


# user-facing text per failure reason
FAILURE_MESSAGES: dict[DecodeFailureReason, str] = {
    DecodeFailureReason.MALFORMED_ENCODING: "Document data could not be decoded. It might be corrupted.",
    DecodeFailureReason.NOT_A_DOCUMENT: "Invalid format: the server returned an invalid response instead of a PDF.",
    DecodeFailureReason.MISSING_DATA: "Document data is missing.",
}


class DecodedDocument(BaseModel):
    """
    Binary document produced by the decoder.

    Attributes:
        content:    The raw document bytes.
        media_type: Declared media type, always PDF.
        verified:   True if the content starts with the PDF signature. False marks a
                    degraded success: a large payload returned without a verifiable header.
    """

    model_config = ConfigDict(frozen=True)

    content: bytes
    media_type: str = PDF_MEDIA_TYPE
    verified: bool = True

    @model_validator(mode="after")
    def _check_signature(self) -> "DecodedDocument":
        if self.verified and not self.content.startswith(PDF_SIGNATURE):
            raise ValueError("A verified document must start with the PDF signature.")
        return self


class DecodeFailure(BaseModel):
    """Typed outcome for a payload that could not be turned into a document."""

    model_config = ConfigDict(frozen=True)

    reason: DecodeFailureReason
    detail: str = ""

    @property
    def message(self) -> str:
        return FAILURE_MESSAGES[self.reason]
