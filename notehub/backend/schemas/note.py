"""
Note Schemas.

Pydantic schemas for note request parsing and the note wire format.

On the wire a note is a flat object with camelCase keys and timestamps
formatted as ``YYYY-MM-DDTHH:MM:SSZ``:

    {"id": 1, "title": "A", "content": "B", "tags": "x",
     "createdAt": "2024-01-01T00:00:00Z", "nextReviewAt": "2024-01-02T00:00:00Z",
     "reviewStage": 0, "pdfPath": ""}
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from notehub.backend.core.utils import format_timestamp

_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


class NoteCreate(BaseModel):
    """
    Schema for creating a new note.

    Unknown fields are ignored. ``title`` is optional here so that a
    missing or blank title reaches the store and is reported as a
    ValidationError rather than a request-shape error.
    """

    title: str | None = Field(default=None, description="Note title", examples=["Krebs cycle"])
    content: str = Field(default="", description="Note body")
    tags: str = Field(default="", description="Caller-defined tags, stored verbatim")
    pdf_path: str = Field(default="", description="Reference to an uploaded attachment")

    model_config = _WIRE_CONFIG


class NoteUpdate(BaseModel):
    """Schema for updating an existing note. Only fields present in the request are applied."""

    title: str | None = Field(default=None, description="Note title")
    content: str | None = Field(default=None, description="Note body")
    tags: str | None = Field(default=None, description="Caller-defined tags")
    pdf_path: str | None = Field(default=None, description="Attachment reference")

    model_config = _WIRE_CONFIG

    def supplied_fields(self) -> dict[str, Any]:
        """Return the fields the caller actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class NoteRead(BaseModel):
    """
    Immutable snapshot of a stored note.

    Returned by every store operation; never bound to a database session.
    """

    id: int = Field(description="Note identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body")
    tags: str = Field(description="Caller-defined tags")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    next_review_at: datetime = Field(description="When the note is next due (UTC)")
    review_stage: int = Field(ge=0, description="Index into the review interval schedule")
    pdf_path: str = Field(description="Attachment reference")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    @field_serializer("created_at", "next_review_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)


class NoteCollection(BaseModel):
    """Schema for note listings: ``{"notes": [...]}``."""

    notes: list[NoteRead]
