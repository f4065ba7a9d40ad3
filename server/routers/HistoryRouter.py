from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from server.models.responses import HistoryClearResponse, HistoryListResponse
from shared.models.document import DecodeFailure
from shared.models.history import HistoryEntrySummary

router = APIRouter(prefix="/history", tags=["history"])


@router.get("")
async def list_history(request: Request) -> HistoryListResponse:
    """List stored documents, most recent first, without their payloads.

    Args:
        request (Request): FastAPI request (provides app.state.history_store).

    Returns:
        HistoryListResponse: Entry summaries plus the log capacity.
    """
    history_store = request.app.state.history_store
    entries = await history_store.list_entries()
    return HistoryListResponse(
        entries=[HistoryEntrySummary.from_entry(entry) for entry in entries],
        total=len(entries),
        capacity=history_store.capacity,
    )


@router.get("/{identifier}/document")
async def reopen_document(request: Request, identifier: str) -> FileResponse:
    """Rehydrate a stored document for viewing.

    The temporary handle is released once the response has been sent.

    Args:
        request (Request): FastAPI request (provides history store and rehydrator).
        identifier (str): The history entry identifier.

    Returns:
        FileResponse: The PDF document.

    Raises:
        HTTPException: 404 for unknown entries, 422 if the stored data is missing or corrupt.
    """
    entry = await request.app.state.history_store.get(identifier)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"No history entry '{identifier}'.")

    rehydrator = request.app.state.asset_rehydrator
    outcome = rehydrator.reopen(entry)
    if isinstance(outcome, DecodeFailure):
        raise HTTPException(status_code=422, detail={"kind": outcome.reason.value, "message": outcome.message})

    handle = rehydrator.open_handle(outcome, entry.category, entry.createdAt)
    return FileResponse(
        handle.path,
        media_type=handle.media_type,
        filename=handle.filename,
        content_disposition_type="inline",
        headers={"X-Document-Verified": "true" if handle.verified else "false"},
        background=BackgroundTask(handle.release),
    )


@router.delete("")
async def clear_history(request: Request) -> HistoryClearResponse:
    """Remove all stored documents."""
    cleared = await request.app.state.history_store.clear()
    if not cleared:
        raise HTTPException(status_code=503, detail="History storage is unavailable.")
    return HistoryClearResponse(cleared=True)
