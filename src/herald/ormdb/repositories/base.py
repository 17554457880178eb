"""Base repository class with common functionality."""

from typing import Optional, TypeVar

from sqlalchemy.orm import Session

from ..database import get_session_sync

ModelT = TypeVar("ModelT")


class BaseRepository:
    """Base repository class providing common session management.

    A repository built without a session owns one and closes it on exit;
    a repository given a session leaves its lifetime to the caller.
    """

    def __init__(self, session: Optional[Session] = None):
        self.session = session or get_session_sync()
        self._external_session = session is not None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not self._external_session:
            self.session.close()

    def _persist(self, instance: ModelT) -> ModelT:
        """Add, commit and refresh a single instance."""
        self.session.add(instance)
        self.session.commit()
        self.session.refresh(instance)
        return instance
