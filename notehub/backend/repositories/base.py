"""
Base Repository.

Base class for repositories with common data access operations.
Repositories run inside a session owned by the caller; they never commit.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy.orm import Session

from notehub.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common operations.

    Subclasses should set the model class:

        class NoteRepository(BaseRepository[Note]):
            model = Note
    """

    model: type[ModelType]

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id_or_none(self, id: int) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        return self.session.get(self.model, id)

    def create(self, **kwargs: Any) -> ModelType:
        """Create a new record and flush it so the database assigns its ID."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.flush()
        return instance

    def update(self, instance: ModelType, **kwargs: Any) -> ModelType:
        """Apply attribute changes to a loaded record and flush them."""
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        self.session.flush()
        return instance

    def delete_by_id(self, id: int) -> bool:
        """
        Delete a record by ID.

        Returns:
            True if a record was deleted, False if none existed
        """
        instance = self.get_by_id_or_none(id)
        if instance is None:
            return False
        self.session.delete(instance)
        self.session.flush()
        return True
