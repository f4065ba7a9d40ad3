"""Finds the encoded document inside an arbitrarily shaped synthesis response."""

import json
from typing import Any

from shared.helper.HelperConfig import HelperConfig
from shared.models.envelope import (
    BinaryPayload,
    MappingNode,
    PayloadNode,
    ResponseEnvelope,
    ScalarNode,
    StructuredPayload,
    TextPayload,
)
from shared.models.locate import Candidate, DirectBinary, LocateResult, NotFound, ServerError

# fields that hold the payload in well-behaved envelopes, checked in this order
PAYLOAD_FIELDS = ("data", "content")
# markers of an encoded PDF inside free-form strings; "JVBER" is base64 for "%PDF-"
CANDIDATE_MARKERS = ("JVBER", "base64")
ERROR_FIELDS = ("message", "error")
DEFAULT_SERVER_ERROR = "Server error during synthesis."


class PayloadLocator:
    """Resolves a response envelope into a candidate string, a binary document or a failure."""

    def __init__(self, helper_config: HelperConfig) -> None:
        self.logging = helper_config.get_logger()
        self.min_candidate_length = helper_config.get_int_val("PAYLOAD_MIN_CANDIDATE_LENGTH", default=200)
        self.sniff_bytes = helper_config.get_int_val("PAYLOAD_BINARY_SNIFF_BYTES", default=100)

    ##########################################
    ################ CORE ####################
    ##########################################

    def locate(self, response: ResponseEnvelope) -> LocateResult:
        """Locate the document in a response envelope.

        Args:
            response (ResponseEnvelope): Binary, structured or text payload.

        Returns:
            LocateResult: DirectBinary, Candidate, ServerError or NotFound.
        """
        if isinstance(response, BinaryPayload):
            return self._locate_binary(response)
        if isinstance(response, TextPayload):
            return self._locate_text(response)
        if isinstance(response, StructuredPayload):
            return self._search(response.root)
        raise TypeError(f"Unsupported response envelope '{type(response).__name__}'.")

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _locate_binary(self, response: BinaryPayload) -> LocateResult:
        """Detect JSON errors that the transport delivered as a binary blob."""
        sample = response.content[: self.sniff_bytes].decode("utf-8", errors="replace")
        if sample.strip().startswith("{"):
            parsed = self._parse_leading_object(sample)
            if parsed is None:
                parsed = self._parse_leading_object(response.content.decode("utf-8", errors="replace"))
            if parsed is not None and any(field in parsed for field in ERROR_FIELDS):
                message = self._extract_error_message(parsed)
                self.logging.error("Synthesis workflow returned an error instead of a document: %s", message)
                return ServerError(message=message)
        self.logging.debug("Response is a binary payload of %d bytes (%s).", len(response.content), response.content_type)
        return DirectBinary(content=response.content)

    def _locate_text(self, response: TextPayload) -> LocateResult:
        try:
            parsed = json.loads(response.text)
        except (json.JSONDecodeError, RecursionError):
            self.logging.debug("Text response is not JSON, using it as candidate (%d chars).", len(response.text))
            return Candidate(raw=response.text)
        return self._search(StructuredPayload.from_value(parsed).root)

    def _search(self, root: PayloadNode) -> LocateResult:
        """Depth-first, pre-order search for the most likely encoded document."""
        stack: list[PayloadNode] = [root]
        while stack:
            node = stack.pop()
            if isinstance(node, ScalarNode):
                if self._is_candidate_string(node.value):
                    return Candidate(raw=node.value)
                continue

            if isinstance(node, MappingNode):
                for field in PAYLOAD_FIELDS:
                    child = node.entries.get(field)
                    if isinstance(child, ScalarNode) and isinstance(child.value, str) and child.value:
                        self.logging.debug("Found payload in field '%s' (%d chars).", field, len(child.value))
                        return Candidate(raw=child.value)
                children = list(node.entries.values())
            else:
                children = node.items

            # reversed so the first child is visited first
            stack.extend(reversed(children))

        self.logging.warning("No encoded document found in structured response.")
        return NotFound()

    def _is_candidate_string(self, value: Any) -> bool:
        return (
            isinstance(value, str)
            and len(value) > self.min_candidate_length
            and any(marker in value for marker in CANDIDATE_MARKERS)
        )

    @staticmethod
    def _parse_leading_object(text: str) -> dict | None:
        """Parse the JSON object at the start of text, ignoring anything after it."""
        try:
            parsed, _ = json.JSONDecoder().raw_decode(text.lstrip())
        except (json.JSONDecodeError, RecursionError):
            return None
        return parsed if isinstance(parsed, dict) else None

    @staticmethod
    def _extract_error_message(parsed: dict) -> str:
        for field in ERROR_FIELDS:
            value = parsed.get(field)
            if not value:
                continue
            if isinstance(value, str):
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
            return json.dumps(value)
        return DEFAULT_SERVER_ERROR
