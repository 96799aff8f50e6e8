"""
Base Service.

Base class for services providing common patterns for business logic:
logging context, error wrapping for database operations, and common
validation helpers.

Usage:
    from notehub.backend.services.base import BaseService

    class NoteStore(BaseService):
        def create(self, title: str) -> NoteRead:
            self._validate_required({"title": title}, ["title"])
            with self._db_operation("create_note"):
                ...
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from notehub.backend.core.exceptions import StorageError, ValidationError
from notehub.backend.core.logging import get_logger


class BaseService:
    """
    Base class for all services.

    Provides:
    - Logging context
    - Error wrapping for database operations
    - Common validation patterns
    """

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__module__)

    @contextmanager
    def _db_operation(self, operation: str) -> Iterator[None]:
        """
        Run a block of database work with error translation.

        Converts SQLAlchemy exceptions raised inside the block into
        StorageError. Transaction rollback is the job of the session
        context the block runs in.

        Args:
            operation: Description of the operation for logging

        Raises:
            StorageError: For any database error
        """
        try:
            yield
        except SQLAlchemyError as e:
            self._logger.error("Database error", operation=operation, error=str(e))
            raise StorageError(f"Database operation failed: {operation}") from e

    def _validate_required(
        self,
        fields: dict[str, Any],
        field_names: list[str],
    ) -> None:
        """
        Validate that required fields are present and not empty.

        Args:
            fields: Dictionary of field names to values
            field_names: List of required field names

        Raises:
            ValidationError: If any required field is missing or empty
        """
        missing = []
        for name in field_names:
            value = fields.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)

        if missing:
            raise ValidationError(
                "Required fields missing",
                details={"missing_fields": missing},
            )

    def _validate_types(self, fields: dict[str, Any], expected: type) -> None:
        """
        Validate that every supplied field value has the expected type.

        Raises:
            ValidationError: If any value has another type
        """
        wrong = sorted(name for name, value in fields.items() if not isinstance(value, expected))
        if wrong:
            raise ValidationError(
                f"Fields must be of type {expected.__name__}",
                details={"invalid_fields": wrong},
            )

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(operation, service=self.__class__.__name__, **context)

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(message, service=self.__class__.__name__, **context)
