"""
Custom Exceptions.

Errors raised by the note store, attachment storage and endpoints. Each
class carries the error code and HTTP status the API reports for it.

The note store reports a missing note as ``None``/``False``; the HTTP layer
turns that outcome into NotFoundError.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    status_code = 500

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """No note with the requested id, or no attachment with the requested name."""

    status_code = 404

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when caller-supplied data violates a precondition."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class PayloadTooLargeError(ApplicationError):
    """Raised when an uploaded attachment exceeds the configured size limit."""

    status_code = 413

    def __init__(self, message: str = "Payload too large") -> None:
        super().__init__(message, code="VAL_PAYLOAD_TOO_LARGE")


class StorageError(ApplicationError):
    """Raised when the note database or the upload directory cannot be used."""

    status_code = 503

    def __init__(self, message: str = "Storage failure") -> None:
        super().__init__(message, code="SYS_STORAGE_FAILURE")
