"""Database module for SQLAlchemy ORM integration."""

from .database import (
    Base,
    check_database_health,
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
    get_session_sync,
    reset_engine,
)
from .models import Alert, AlertAcknowledgment, User
from .repositories import AcknowledgmentRepository, AlertRepository, UserRepository

__all__ = [
    # Database components
    "Base",
    "check_database_health",
    "create_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    "get_session_sync",
    "reset_engine",
    # Models
    "Alert",
    "AlertAcknowledgment",
    "User",
    # Repositories
    "AcknowledgmentRepository",
    "AlertRepository",
    "UserRepository",
]
