"""
Base Schemas.

Acknowledgement and standard API error response schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from notehub.backend.core.utils import utc_now


class OkResponse(BaseModel):
    """Acknowledgement for actions that return no resource: ``{"ok": true}``."""

    ok: bool = True


class ResponseMetadata(BaseModel):
    """Metadata included in error responses."""

    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
