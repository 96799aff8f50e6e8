"""
Error responses for the notes API.

Every failure reaches the client in one envelope:

    {"success": false, "data": null,
     "error": {"code": "RES_NOT_FOUND", "message": "Note 7 not found", "details": null},
     "metadata": {"timestamp": "...", "request_id": "..."}}

    NotFoundError          404  RES_NOT_FOUND          unknown note id or attachment name
    ValidationError        400  VAL_VALIDATION_ERROR   blank title, empty upload
    PayloadTooLargeError   413  VAL_PAYLOAD_TOO_LARGE  attachment over storage.max_upload_bytes
    StorageError           503  SYS_STORAGE_FAILURE    database failure or closed note store
    request shape          422  VAL_REQUEST_INVALID    wrong JSON types, non-integer id, bad as_of
    anything else          500  SYS_INTERNAL_ERROR
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from notehub.backend.core.exceptions import ApplicationError, ValidationError
from notehub.backend.core.logging import get_logger
from notehub.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

# Leading loc entry FastAPI adds to say where a bad value came from
_REQUEST_PARTS = frozenset({"body", "path", "query", "header"})


def envelope(request: Request, status_code: int, error: ErrorDetail) -> JSONResponse:
    """Wrap an error in the standard response, tagged with the request ID."""
    request_id = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
    body = ErrorResponse(error=error, metadata=ResponseMetadata(request_id=request_id))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def describe_request_error(err: dict[str, Any]) -> dict[str, str]:
    """
    Flatten one pydantic error for the client.

    ``("body", "tags")`` becomes field "tags" in "body"; a note id that is
    not an integer becomes field "note_id" in "path".
    """
    loc = [str(part) for part in err.get("loc", ())]
    where = loc.pop(0) if loc and loc[0] in _REQUEST_PARTS else "body"
    return {
        "field": ".".join(loc) or where,
        "in": where,
        "message": err.get("msg", "Invalid value"),
        "type": err.get("type", "unknown"),
    }


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    """Note store, attachment and endpoint errors, reported at their own status."""
    status_code = exc.status_code
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Note request failed",
        extra={"code": exc.code, "status": status_code, "error": exc.message},
    )

    details = exc.details if isinstance(exc, ValidationError) and exc.details else None
    return envelope(request, status_code, ErrorDetail(code=exc.code, message=exc.message, details=details))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = [describe_request_error(err) for err in exc.errors()]
    logger.warning(
        "Request validation failed",
        extra={"fields": [p["field"] for p in problems]},
    )
    return envelope(
        request,
        422,
        ErrorDetail(
            code="VAL_REQUEST_INVALID",
            message="Request validation failed",
            details={"validation_errors": problems},
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback; the client only sees a generic message."""
    logger.exception("Unhandled exception", extra={"exception_type": type(exc).__name__})
    return envelope(
        request,
        500,
        ErrorDetail(code="SYS_INTERNAL_ERROR", message="An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
