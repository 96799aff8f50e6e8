"""
Review Queue Endpoints.

Which notes are due for review.
"""

from datetime import datetime

from fastapi import APIRouter, Query

from notehub.backend.core.concurrency import run_blocking
from notehub.backend.core.dependencies import ClockDep, NoteStoreDep
from notehub.backend.schemas.note import NoteCollection

router = APIRouter()


@router.get(
    "",
    response_model=NoteCollection,
    summary="List due notes",
    description="Notes whose next review is at or before as_of (default: now), earliest due first.",
)
async def list_due_notes(
    store: NoteStoreDep,
    clock: ClockDep,
    as_of: datetime | None = Query(
        default=None,
        description="Cut-off time, ISO 8601; naive values are taken as UTC",
        examples=["2024-01-02T00:00:00Z"],
    ),
) -> NoteCollection:
    """List notes due for review."""
    cutoff = as_of if as_of is not None else clock()
    notes = await run_blocking(store.list_due, cutoff)
    return NoteCollection(notes=notes)
