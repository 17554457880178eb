"""Repository classes for database operations using SQLAlchemy ORM."""

from .acknowledgment import AcknowledgmentRepository
from .alert import AlertRepository
from .base import BaseRepository
from .user import UserRepository

__all__ = [
    "AcknowledgmentRepository",
    "AlertRepository",
    "BaseRepository",
    "UserRepository",
]
