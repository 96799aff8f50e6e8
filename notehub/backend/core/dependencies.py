"""
FastAPI Dependencies.

Shared dependencies for request handling. The note store, attachment
storage and clock are owned by the application and live on ``app.state``;
endpoints receive them through these dependencies.
"""

from typing import Annotated

from fastapi import Depends, Request

from notehub.backend.core.exceptions import StorageError
from notehub.backend.core.utils import Clock
from notehub.backend.services.attachments import AttachmentStorage
from notehub.backend.services.note_store import NoteStore


def get_note_store(request: Request) -> NoteStore:
    """Return the application's note store."""
    store = getattr(request.app.state, "note_store", None)
    if store is None:
        raise StorageError("Note store is not available")
    return store


def get_attachment_storage(request: Request) -> AttachmentStorage:
    """Return the application's attachment storage."""
    return request.app.state.attachments


def get_clock(request: Request) -> Clock:
    """Return the application's time provider."""
    return request.app.state.clock


NoteStoreDep = Annotated[NoteStore, Depends(get_note_store)]
AttachmentsDep = Annotated[AttachmentStorage, Depends(get_attachment_storage)]
ClockDep = Annotated[Clock, Depends(get_clock)]
