"""
Database Configuration.

SQLAlchemy engine and session factory construction for the SQLite notes
database. Nothing here is module-level state: the note store creates its
engine through these helpers and owns it for its lifetime.
"""

from pathlib import Path
from typing import Any

from sqlalchemy import Engine, create_engine, event, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from notehub.backend.core.logging import get_logger

logger = get_logger(__name__)


def is_memory_url(url: str) -> bool:
    """True for SQLite URLs that name a private in-memory database."""
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def _ensure_parent_directory(url: str) -> None:
    """Create the directory holding a file-backed SQLite database."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite" or is_memory_url(url):
        return
    Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)


def create_db_engine(
    url: str,
    echo: bool = False,
    busy_timeout_seconds: float = 5.0,
    journal_mode: str = "WAL",
) -> Engine:
    """
    Create a synchronous SQLAlchemy engine for SQLite.

    Connections may be used from any thread of the I/O pool. Every new
    connection gets the configured journal mode and foreign key enforcement.
    An in-memory database lives only as long as its connection, so it gets
    a single connection shared by all threads.

    Args:
        url: SQLAlchemy database URL (sqlite:///path/to/file.db)
        echo: Log emitted SQL
        busy_timeout_seconds: How long a connection waits on a locked database
        journal_mode: SQLite journal mode (WAL lets readers run during writes)

    Returns:
        SQLAlchemy engine instance
    """
    _ensure_parent_directory(url)

    engine_options: dict[str, Any] = {}
    if is_memory_url(url):
        engine_options["poolclass"] = StaticPool

    engine = create_engine(
        url,
        echo=echo,
        connect_args={
            "check_same_thread": False,
            "timeout": busy_timeout_seconds,
        },
        **engine_options,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute(f"PRAGMA journal_mode={journal_mode}")
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    logger.debug("Database engine created", extra={"url": url})
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """
    Create a session factory bound to the engine.

    Sessions do not expire attributes on commit so snapshots can be taken
    after the transaction ends.
    """
    return sessionmaker(
        engine,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )
