"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.

All datetime values in the application are timezone-naive and assumed
to be UTC, matching how they are stored in the database.
"""

from collections.abc import Callable
from datetime import datetime, timezone

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

Clock = Callable[[], datetime]
"""A time provider returning the current naive UTC datetime."""


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def truncate_to_seconds(value: datetime) -> datetime:
    """Drop sub-second precision."""
    return value.replace(microsecond=0)


def utc_now_seconds() -> datetime:
    """Default clock: current naive UTC time truncated to whole seconds."""
    return truncate_to_seconds(utc_now())


def format_timestamp(value: datetime) -> str:
    """
    Format a datetime as ``YYYY-MM-DDTHH:MM:SSZ``.

    Aware datetimes are converted to UTC first. The year is always four
    digits (``strftime("%Y")`` does not pad years below 1000), so the text
    sorts in time order for every representable datetime.
    """
    utc = to_naive_utc(value)
    return (
        f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}"
        f"T{utc.hour:02d}:{utc.minute:02d}:{utc.second:02d}Z"
    )


def parse_timestamp(value: str) -> datetime:
    """
    Parse a ``YYYY-MM-DDTHH:MM:SSZ`` string into a naive UTC datetime.

    Raises:
        ValueError: If the string is not in the expected format
    """
    return datetime.strptime(value, TIMESTAMP_FORMAT)
