"""Decodes sanitized base64 strings and verifies the result is a PDF document."""

import base64
import binascii

from shared.helper.HelperConfig import HelperConfig
from shared.models.document import PDF_SIGNATURE, DecodedDocument, DecodeFailure, DecodeFailureReason


class PayloadDecoder:
    """Turns encoded payloads into verified documents or typed failures.

    Expected failure modes never raise; they come back as ``DecodeFailure``.
    """

    def __init__(self, helper_config: HelperConfig) -> None:
        self.logging = helper_config.get_logger()
        # below this size a payload without signature is treated as error text
        self.degrade_min_bytes = helper_config.get_int_val("PAYLOAD_DEGRADE_MIN_BYTES", default=1000)

    ##########################################
    ################ CORE ####################
    ##########################################

    def decode(self, doc: str | None) -> DecodedDocument | DecodeFailure:
        """Decode a base64 string into a document.

        The input is not assumed to be sanitized. Missing trailing padding is
        tolerated, any other deviation from the alphabet is a malformed encoding.

        Args:
            doc (str | None): The encoded document.

        Returns:
            DecodedDocument | DecodeFailure: The decoded document, possibly unverified,
            or the reason decoding failed.
        """
        if not doc:
            return DecodeFailure(reason=DecodeFailureReason.MISSING_DATA, detail="Encoded payload is empty.")

        remainder = len(doc) % 4
        if remainder == 1:
            self.logging.warning("Encoded payload has an impossible length of %d characters.", len(doc))
            return DecodeFailure(
                reason=DecodeFailureReason.MALFORMED_ENCODING,
                detail="Encoded length %d is not a valid base64 length." % len(doc),
            )
        padded = doc + "=" * ((4 - remainder) % 4)

        try:
            content = base64.b64decode(padded, validate=True)
        except (binascii.Error, ValueError) as e:
            self.logging.warning("Failed to decode payload of %d characters: %s", len(doc), e)
            return DecodeFailure(reason=DecodeFailureReason.MALFORMED_ENCODING, detail=str(e))

        return self.verify(content)

    def verify(self, content: bytes) -> DecodedDocument | DecodeFailure:
        """Check raw bytes for the PDF signature.

        Large payloads without signature are returned unverified instead of being
        rejected, since real producers occasionally omit or relocate the header.

        Args:
            content (bytes): The raw document bytes.

        Returns:
            DecodedDocument | DecodeFailure: The document or a not-a-document failure.
        """
        if content.startswith(PDF_SIGNATURE):
            return DecodedDocument(content=content, verified=True)

        if len(content) >= self.degrade_min_bytes:
            self.logging.warning(
                "Payload of %d bytes lacks the PDF signature, returning it unverified.", len(content)
            )
            return DecodedDocument(content=content, verified=False)

        preview = content[:80].decode("utf-8", errors="replace")
        self.logging.warning("Payload of %d bytes is not a PDF document: %r", len(content), preview)
        return DecodeFailure(
            reason=DecodeFailureReason.NOT_A_DOCUMENT,
            detail="Payload of %d bytes lacks the PDF signature: %s" % (len(content), preview),
        )
