"""History entry model: one successfully generated document kept for later re-display."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator

HistoryCategory = Literal["cover_letter", "resume_summary"]


class HistoryEntry(BaseModel):
    """Immutable record of a generated document.

    The encoded document is stored inline; the persistence surface has no
    separate blob store.

    Attributes:
        identifier:  Synthetic identifier, unique per entry (e.g. "asset_<hex>").
        category:    Kind of document that was generated.
        title:       Display title (e.g. "Cover Letter for Data Engineer").
        counterpart: Display name of the target organisation.
        createdAt:   Creation timestamp, always timezone-aware.
        encoded:     Sanitized base64 string of the document, no data-URI prefix.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    category: HistoryCategory
    title: str
    counterpart: str
    createdAt: datetime
    encoded: str

    @field_validator("createdAt")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        # older records may carry naive timestamps; they were written in UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class HistoryEntrySummary(BaseModel):
    """History entry without its encoded payload, for listings."""

    identifier: str
    category: HistoryCategory
    title: str
    counterpart: str
    createdAt: datetime
    size: int

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryEntrySummary":
        return cls(
            identifier=entry.identifier,
            category=entry.category,
            title=entry.title,
            counterpart=entry.counterpart,
            createdAt=entry.createdAt,
            size=len(entry.encoded),
        )


# serialised history log: JSON array of entries, oldest first
HISTORY_LOG_ADAPTER = TypeAdapter(list[HistoryEntry])
