"""
Note Model.

Database model for notes, the only persisted entity.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from notehub.backend.models.base import Base, UTCTimestamp


class Note(Base):
    """
    Note database model.

    Represents a note with its spaced-repetition review state.
    Maps onto the single ``notes`` table; ``id`` uses SQLite AUTOINCREMENT
    so identifiers of deleted notes are never handed out again.
    """

    __tablename__ = "notes"
    __table_args__ = (
        CheckConstraint("review_stage >= 0", name="ck_notes_review_stage"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    tags: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(UTCTimestamp, nullable=False)
    next_review_at: Mapped[datetime] = mapped_column(
        UTCTimestamp,
        nullable=False,
        index=True,
    )
    review_stage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pdf_path: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, stage={self.review_stage})>"
