from pydantic import BaseModel

from shared.models.history import HistoryEntrySummary


class HistoryListResponse(BaseModel):
    entries: list[HistoryEntrySummary]
    total: int
    capacity: int


class HistoryClearResponse(BaseModel):
    cleared: bool
