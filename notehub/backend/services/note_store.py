"""
Note Store.

The single owner of persisted notes: create/read/update/delete, due-date
queries, and the review action that moves a note up the review ladder.

Concurrency:
    Every mutation runs inside one database transaction while holding the
    store-wide write lock, so a read-modify-write never interleaves with
    another mutation. Reads use their own sessions and do not take the lock;
    SQLite commits a row as a whole, so readers never see a half-updated note.
    The exception is an in-memory database (``sqlite:///:memory:``), which
    is a single connection shared by all threads; there reads take the lock
    too.

    Concurrent reviews of the same note coalesce: while a review of a note
    is in flight, further review calls for that note wait for it and return
    its result instead of applying another increment.

Every operation returns immutable NoteRead snapshots, never ORM instances.
A missing note is reported as None (or False for delete), not raised.

Usage:
    with NoteStore("sqlite:///data/app.db") as store:
        note = store.create("Krebs cycle", content="...")
        store.advance_review(note.id)
"""

import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager, nullcontext
from datetime import datetime
from types import TracebackType
from typing import Any

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from notehub.backend.core.database import create_db_engine, create_session_factory, is_memory_url
from notehub.backend.core.exceptions import StorageError
from notehub.backend.core.utils import Clock, to_naive_utc, truncate_to_seconds, utc_now_seconds
from notehub.backend.models.base import Base
from notehub.backend.repositories.note import NoteRepository
from notehub.backend.schemas.note import NoteRead
from notehub.backend.services.base import BaseService
from notehub.backend.services.review_schedule import ReviewScheduler, default_scheduler

EDITABLE_FIELDS: tuple[str, ...] = ("title", "content", "tags", "pdf_path")


class _ReviewFlight:
    """A review of one note that is currently being applied."""

    def __init__(self) -> None:
        self.done = threading.Event()
        self.result: NoteRead | None = None
        self.error: Exception | None = None


class NoteStore(BaseService):
    """
    Durable, queryable home for notes.

    Args:
        url: SQLAlchemy database URL
        clock: Time provider for creation and review timestamps
        scheduler: Review interval ladder
        echo: Log emitted SQL
        busy_timeout_seconds: SQLite lock wait bound
        journal_mode: SQLite journal mode
    """

    def __init__(
        self,
        url: str,
        *,
        clock: Clock = utc_now_seconds,
        scheduler: ReviewScheduler = default_scheduler,
        echo: bool = False,
        busy_timeout_seconds: float = 5.0,
        journal_mode: str = "WAL",
    ) -> None:
        super().__init__()
        self._url = url
        self._clock = clock
        self._scheduler = scheduler
        self._echo = echo
        self._busy_timeout_seconds = busy_timeout_seconds
        self._journal_mode = journal_mode

        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None
        self._write_lock = threading.Lock()
        # An in-memory database is one connection shared by every thread
        self._reads_share_connection = is_memory_url(url)
        self._flights: dict[int, _ReviewFlight] = {}
        self._flights_lock = threading.Lock()

    @classmethod
    def from_config(cls, clock: Clock = utc_now_seconds) -> "NoteStore":
        """Build a store from database.yaml and the PLH_DB_PATH override."""
        from notehub.backend.core.config import get_app_config, get_database_url

        db_config = get_app_config().database
        return cls(
            get_database_url(),
            clock=clock,
            echo=db_config.echo,
            busy_timeout_seconds=db_config.busy_timeout_seconds,
            journal_mode=db_config.journal_mode,
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def scheduler(self) -> ReviewScheduler:
        return self._scheduler

    def open(self) -> "NoteStore":
        """
        Open the database and create the notes table if needed.

        Raises:
            StorageError: If the database cannot be opened or initialized
        """
        if self._engine is not None:
            return self
        try:
            engine = create_db_engine(
                self._url,
                echo=self._echo,
                busy_timeout_seconds=self._busy_timeout_seconds,
                journal_mode=self._journal_mode,
            )
            Base.metadata.create_all(engine)
        except (SQLAlchemyError, OSError) as e:
            self._logger.error(
                "Failed to open note store",
                extra={"url": self._url, "error": str(e)},
            )
            raise StorageError("Failed to open note database") from e

        self._engine = engine
        self._session_factory = create_session_factory(engine)
        self._log_operation("Note store opened", url=self._url)
        return self

    def close(self) -> None:
        """Release all database connections. Safe to call more than once."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        self._log_operation("Note store closed", url=self._url)

    def __enter__(self) -> "NoteStore":
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def _require_factory(self) -> sessionmaker[Session]:
        if self._session_factory is None:
            raise StorageError("Note store is not open")
        return self._session_factory

    @contextmanager
    def _reading(self, operation: str) -> Iterator[Session]:
        """Session for read-only work; no commit, and no lock unless the connection is shared."""
        factory = self._require_factory()
        lock = self._write_lock if self._reads_share_connection else nullcontext()
        with lock, self._db_operation(operation), factory() as session:
            yield session

    @contextmanager
    def _writing(self, operation: str) -> Iterator[Session]:
        """Session in a transaction under the write lock; commits on success, rolls back on error."""
        factory = self._require_factory()
        with self._write_lock, self._db_operation(operation), factory.begin() as session:
            yield session

    def _now(self) -> datetime:
        return truncate_to_seconds(to_naive_utc(self._clock()))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_all(self) -> list[NoteRead]:
        """All notes, newest first."""
        with self._reading("list_notes") as session:
            notes = NoteRepository(session).get_newest_first()
            return [NoteRead.model_validate(note) for note in notes]

    def list_due(self, as_of: datetime) -> list[NoteRead]:
        """
        Notes due for review at ``as_of``, earliest due first.

        The store does not consult its clock here; the caller decides what
        "now" is.
        """
        cutoff = to_naive_utc(as_of)
        with self._reading("list_due_notes") as session:
            notes = NoteRepository(session).get_due(cutoff)
            return [NoteRead.model_validate(note) for note in notes]

    def get_by_id(self, note_id: int) -> NoteRead | None:
        """Get a note by ID, or None if it does not exist."""
        with self._reading("get_note") as session:
            note = NoteRepository(session).get_by_id_or_none(note_id)
            return NoteRead.model_validate(note) if note is not None else None

    def count(self) -> int:
        """Number of stored notes."""
        with self._reading("count_notes") as session:
            return NoteRepository(session).count()

    def ping(self) -> None:
        """
        Check that the database answers.

        Raises:
            StorageError: If the store is closed or the query fails
        """
        with self._reading("ping") as session:
            session.execute(text("SELECT 1"))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create(
        self,
        title: str | None,
        content: str = "",
        tags: str = "",
        pdf_path: str = "",
    ) -> NoteRead:
        """
        Create a note at stage 0, due one interval from now.

        Raises:
            ValidationError: If title is missing or blank, or a field is not a string
            StorageError: If the insert fails
        """
        fields = {"title": title, "content": content, "tags": tags, "pdf_path": pdf_path}
        self._validate_required(fields, ["title"])
        self._validate_types(fields, str)

        now = self._now()
        with self._writing("create_note") as session:
            note = NoteRepository(session).create(
                title=title,
                content=content,
                tags=tags,
                pdf_path=pdf_path,
                created_at=now,
                review_stage=0,
                next_review_at=self._scheduler.first_review_at(now),
            )
            snapshot = NoteRead.model_validate(note)

        self._log_operation("Note created", note_id=snapshot.id)
        return snapshot

    def create_from(self, fields: Mapping[str, Any]) -> NoteRead:
        """Create a note from a field mapping; unknown keys are ignored."""
        values = {name: fields[name] for name in EDITABLE_FIELDS if name in fields}
        for name in ("content", "tags", "pdf_path"):
            if values.get(name) is None:
                values[name] = ""
        return self.create(values.pop("title", None), **values)

    def update(self, note_id: int, fields: Mapping[str, Any]) -> NoteRead | None:
        """
        Apply a partial edit.

        Only title, content, tags and pdf_path can change; other keys are
        ignored. Review state and created_at are never touched. A None value
        for content, tags or pdf_path clears it.

        Returns:
            Updated note, or None if it does not exist

        Raises:
            ValidationError: If a supplied title is blank or a value is not a string
            StorageError: If the update fails
        """
        changes = {name: fields[name] for name in EDITABLE_FIELDS if name in fields}
        for name in ("content", "tags", "pdf_path"):
            if name in changes and changes[name] is None:
                changes[name] = ""
        if "title" in changes:
            self._validate_required(changes, ["title"])
        self._validate_types(changes, str)

        with self._writing("update_note") as session:
            repo = NoteRepository(session)
            note = repo.get_by_id_or_none(note_id)
            if note is None:
                return None
            if changes:
                repo.update(note, **changes)
            snapshot = NoteRead.model_validate(note)

        if changes:
            self._log_operation("Note updated", note_id=note_id, fields=sorted(changes))
        return snapshot

    def delete(self, note_id: int) -> bool:
        """
        Permanently remove a note.

        Returns:
            True if the note was deleted, False if it did not exist
        """
        with self._writing("delete_note") as session:
            deleted = NoteRepository(session).delete_by_id(note_id)

        if deleted:
            self._log_operation("Note deleted", note_id=note_id)
        return deleted

    def advance_review(self, note_id: int) -> NoteRead | None:
        """
        Record a successful review and schedule the next one.

        Moves the note one stage up (saturating at the top stage) and sets
        next_review_at from the clock and the new stage. Calls that arrive
        while a review of the same note is being applied share its outcome.
        A failed review reaches them as a new StorageError chained to the
        original error.

        Returns:
            Updated note, or None if it does not exist

        Raises:
            StorageError: If the update fails
        """
        with self._flights_lock:
            flight = self._flights.get(note_id)
            if flight is not None:
                leader = False
            else:
                flight = _ReviewFlight()
                self._flights[note_id] = flight
                leader = True

        if not leader:
            flight.done.wait()
            self._log_debug("Joined in-flight review", note_id=note_id)
            error = flight.error
            if isinstance(error, StorageError):
                raise StorageError(error.message) from error
            if error is not None:
                raise StorageError(f"Review of note {note_id} failed") from error
            return flight.result

        try:
            flight.result = self._apply_review(note_id)
            return flight.result
        except Exception as e:
            flight.error = e
            raise
        finally:
            with self._flights_lock:
                del self._flights[note_id]
            flight.done.set()

    def _apply_review(self, note_id: int) -> NoteRead | None:
        with self._writing("advance_review") as session:
            repo = NoteRepository(session)
            note = repo.get_by_id_or_none(note_id)
            if note is None:
                return None
            previous_stage = note.review_stage
            step = self._scheduler.next_review(previous_stage, self._now())
            repo.update(note, review_stage=step.stage, next_review_at=step.next_review_at)
            snapshot = NoteRead.model_validate(note)

        self._log_operation(
            "Review advanced",
            note_id=note_id,
            from_stage=previous_stage,
            to_stage=snapshot.review_stage,
        )
        return snapshot
