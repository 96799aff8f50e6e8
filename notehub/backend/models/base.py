"""
SQLAlchemy Base Model.

Base class for all database models and shared column types.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import Dialect, Text
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from notehub.backend.core.utils import format_timestamp, parse_timestamp


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class UTCTimestamp(TypeDecorator[datetime]):
    """
    Naive UTC datetime stored as ``YYYY-MM-DDTHH:MM:SSZ`` text.

    The fixed-width format makes lexical comparison in SQL equal to
    chronological comparison, so range filters and ORDER BY work on the
    raw column.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return None
        if isinstance(value, str):
            return format_timestamp(parse_timestamp(value))
        return format_timestamp(value)

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return parse_timestamp(value)
