"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Database Configuration:
    Every test that needs persistence gets its own SQLite file under
    pytest's tmp_path, so tests never share state and never touch
    data/app.db.
"""

from collections.abc import Generator
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from notehub.backend.services.note_store import NoteStore


# =============================================================================
# Clock Fixtures
# =============================================================================


START_TIME = datetime(2024, 1, 1, 0, 0, 0)
"""Fixed naive UTC time that test clocks start at."""


class FakeClock:
    """
    Settable time provider.

    Call it to read the current time; move it with ``advance`` or ``set``.
    """

    def __init__(self, start: datetime = START_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now

    def set(self, value: datetime) -> None:
        self.now = value


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock frozen at START_TIME."""
    return FakeClock()


# =============================================================================
# Note Store Fixtures
# =============================================================================


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    """SQLAlchemy URL for a fresh SQLite file."""
    return f"sqlite:///{tmp_path / 'notes.db'}"


@pytest.fixture
def note_store(db_url: str, clock: FakeClock) -> Generator[NoteStore, None, None]:
    """
    Provide an open note store on a fresh database.

    Usage:
        def test_create(note_store: NoteStore):
            note = note_store.create("Title")
            assert note.review_stage == 0
    """
    store = NoteStore(db_url, clock=clock).open()
    yield store
    store.close()


# =============================================================================
# Utility Fixtures
# =============================================================================


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"
