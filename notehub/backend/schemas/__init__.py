# Pydantic schemas package
from notehub.backend.schemas.base import (
    ErrorDetail,
    ErrorResponse,
    OkResponse,
    ResponseMetadata,
)
from notehub.backend.schemas.note import (
    NoteCollection,
    NoteCreate,
    NoteRead,
    NoteUpdate,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "NoteCollection",
    "NoteCreate",
    "NoteRead",
    "NoteUpdate",
    "OkResponse",
    "ResponseMetadata",
]
