"""Service layer for business logic encapsulation."""

from .notification import AlertService
from .users import UserService

__all__ = [
    "AlertService",
    "UserService",
]
