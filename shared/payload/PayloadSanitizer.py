"""Normalises a raw candidate string into a pure base64-alphabet string."""

import re

# fence with an optional language tag, e.g. "```pdf\n"; a tag glued to payload text is not a tag
CODE_FENCE_RE = re.compile(r"```(?:[A-Za-z0-9_-]*(?=\s|$))?\s?")
DATA_URI_PREFIX_RE = re.compile(r"^data:application/pdf;base64,", re.IGNORECASE)
NON_ALPHABET_RE = re.compile(r"[^A-Za-z0-9+/=]")


class PayloadSanitizer:
    """Strips transport and formatting artifacts from a candidate payload."""

    def sanitize(self, raw: str | None) -> str | None:
        """Reduce a raw candidate to the characters of the base64 alphabet.

        Generative upstream steps tend to wrap the payload in markdown fences or
        a data URI and to sprinkle whitespace through it. All of that is dropped.
        The function is pure and idempotent.

        Args:
            raw (str | None): The raw candidate text.

        Returns:
            str | None: The sanitized string, or None if nothing is left to decode.
        """
        if not raw:
            return None
        cleaned = CODE_FENCE_RE.sub("", raw.strip()).strip()
        cleaned = DATA_URI_PREFIX_RE.sub("", cleaned)
        cleaned = NON_ALPHABET_RE.sub("", cleaned)
        return cleaned or None
