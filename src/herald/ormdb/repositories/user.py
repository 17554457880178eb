"""Repository for user operations."""

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from ...exceptions import ValidationException
from ..models import User
from .base import BaseRepository


class UserRepository(BaseRepository):
    """Repository for user operations."""

    def create_user(self, **fields: Any) -> User:
        """Create a user; username and email must be unique."""
        user = User(**fields)
        try:
            return self._persist(user)
        except IntegrityError:
            self.session.rollback()
            raise ValidationException(
                "Username or email already registered",
                field_errors={"username": "must be unique", "email": "must be unique"},
            )

    def get_user(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def list_users(self, role: Optional[str] = None) -> List[User]:
        """Get all users, optionally filtered by role."""
        query = self.session.query(User)
        if role:
            query = query.filter(User.role == role)
        return query.order_by(User.id).all()

    def update_user(self, user: User, changes: Dict[str, Any]) -> User:
        """Apply field changes to a user and persist them."""
        for field_name, value in changes.items():
            setattr(user, field_name, value)
        try:
            return self._persist(user)
        except IntegrityError:
            self.session.rollback()
            raise ValidationException(
                "Username or email already registered",
                field_errors={"username": "must be unique", "email": "must be unique"},
            )
