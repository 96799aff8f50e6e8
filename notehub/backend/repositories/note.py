"""
Note Repository.

Data access layer for notes. Handles all queries against the notes table.
"""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from notehub.backend.models.note import Note
from notehub.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard operations from BaseRepository
    and adds the listing and due-date queries.
    """

    model = Note

    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_newest_first(self) -> list[Note]:
        """
        Get all notes, most recently created first.

        Notes created in the same second are ordered by descending ID.
        """
        result = self.session.execute(
            select(Note).order_by(Note.created_at.desc(), Note.id.desc())
        )
        return list(result.scalars().all())

    def get_due(self, as_of: datetime) -> list[Note]:
        """
        Get notes due for review at ``as_of``.

        Args:
            as_of: Cut-off time (naive UTC); notes due at exactly this time are included

        Returns:
            Notes with next_review_at <= as_of, earliest due first
        """
        result = self.session.execute(
            select(Note)
            .where(Note.next_review_at <= as_of)
            .order_by(Note.next_review_at.asc(), Note.id.asc())
        )
        return list(result.scalars().all())

    def count(self) -> int:
        """Get total number of notes."""
        result = self.session.execute(select(func.count()).select_from(Note))
        return result.scalar_one()
