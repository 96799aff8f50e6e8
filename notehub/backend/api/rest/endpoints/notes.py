"""
Notes API Endpoints.

REST API endpoints for note management and the review action.
The store is synchronous; every call is dispatched to the I/O thread pool.
"""

from fastapi import APIRouter

from notehub.backend.core.concurrency import run_blocking
from notehub.backend.core.dependencies import NoteStoreDep
from notehub.backend.core.exceptions import NotFoundError
from notehub.backend.schemas.base import OkResponse
from notehub.backend.schemas.note import NoteCollection, NoteCreate, NoteRead, NoteUpdate

router = APIRouter()


def _found(note: NoteRead | None, note_id: int) -> NoteRead:
    """Turn the store's missing-note outcome into a 404."""
    if note is None:
        raise NotFoundError(f"Note {note_id} not found")
    return note


@router.get(
    "",
    response_model=NoteCollection,
    summary="List notes",
    description="All notes, most recently created first.",
)
async def list_notes(store: NoteStoreDep) -> NoteCollection:
    """List all notes."""
    notes = await run_blocking(store.list_all)
    return NoteCollection(notes=notes)


@router.post(
    "",
    response_model=NoteRead,
    status_code=201,
    summary="Create a note",
    description="Create a note at review stage 0, due one day from now.",
)
async def create_note(data: NoteCreate, store: NoteStoreDep) -> NoteRead:
    """Create a new note."""
    return await run_blocking(store.create_from, data.model_dump())


@router.get(
    "/{note_id}",
    response_model=NoteRead,
    summary="Get a note",
)
async def get_note(note_id: int, store: NoteStoreDep) -> NoteRead:
    """Get a note by ID."""
    note = await run_blocking(store.get_by_id, note_id)
    return _found(note, note_id)


@router.put(
    "/{note_id}",
    response_model=NoteRead,
    summary="Update a note",
    description="Update title, content, tags or pdfPath. Only provided fields are changed.",
)
@router.patch(
    "/{note_id}",
    response_model=NoteRead,
    summary="Update a note (partial)",
    description="Same as PUT; both apply only the provided fields.",
)
async def update_note(note_id: int, data: NoteUpdate, store: NoteStoreDep) -> NoteRead:
    """Update a note."""
    note = await run_blocking(store.update, note_id, data.supplied_fields())
    return _found(note, note_id)


@router.delete(
    "/{note_id}",
    response_model=OkResponse,
    summary="Delete a note",
    description='Permanently delete a note. Responds with {"ok": true}.',
)
async def delete_note(note_id: int, store: NoteStoreDep) -> OkResponse:
    """Delete a note."""
    if not await run_blocking(store.delete, note_id):
        raise NotFoundError(f"Note {note_id} not found")
    return OkResponse()


@router.post(
    "/{note_id}/review",
    response_model=NoteRead,
    summary="Review a note",
    description="Record a successful review: move the note one stage up and reschedule it.",
)
async def review_note(note_id: int, store: NoteStoreDep) -> NoteRead:
    """Advance a note's review stage."""
    note = await run_blocking(store.advance_review, note_id)
    return _found(note, note_id)
