"""
Attachment Schemas.

Response schema for attachment uploads.
"""

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Where an uploaded file can be fetched; store this in a note's pdfPath."""

    path: str = Field(description="Public path of the stored file", examples=["/uploads/notes.pdf"])
