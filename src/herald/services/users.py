"""User registration and delivery preferences."""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..config.logging import get_logger, log_audit_event
from ..exceptions import NotFoundError, ValidationException
from ..ormdb.models import User
from ..ormdb.repositories import UserRepository
from .notification.addresses import (
    is_valid_email,
    is_valid_phone_number,
    parse_push_token,
)
from .notification.models import Channel

logger = get_logger(__name__)

PROFILE_FIELDS = ("email", "role", "phone_number", "channels")


def normalize_channels(
    values: Optional[Dict[str, Any]], current: Optional[Dict[str, bool]] = None
) -> Dict[str, bool]:
    """Merge channel toggles over the current preferences."""
    merged = {channel.value: False for channel in Channel}
    merged.update(current or {})
    for key, enabled in (values or {}).items():
        try:
            channel = Channel(key)
        except ValueError:
            raise ValidationException(
                "Invalid channel preference",
                field_errors={"channels": f"unknown channel '{key}'"},
            )
        merged[channel.value] = bool(enabled)
    return merged


def _validate_contact(email: Optional[str], phone_number: Optional[str]) -> None:
    field_errors = {}
    if email is not None and not is_valid_email(email):
        field_errors["email"] = "must be a valid email address"
    if phone_number and not is_valid_phone_number(phone_number):
        field_errors["phone_number"] = "must be an E.164 number such as +15551234567"
    if field_errors:
        raise ValidationException("Invalid contact details", field_errors=field_errors)


class UserService:
    """Manages the users alerts can be addressed to."""

    def __init__(self, session: Session):
        self.users = UserRepository(session)
        self.logger = logger.bind(service="user_service")

    def create_user(
        self,
        username: str,
        email: str,
        role: str = "subscriber",
        phone_number: Optional[str] = None,
        channels: Optional[Dict[str, Any]] = None,
        push_token: Optional[str] = None,
    ) -> User:
        _validate_contact(email, phone_number)

        fields: Dict[str, Any] = {
            "username": username,
            "email": email,
            "role": role,
            "phone_number": phone_number or None,
            "channels": normalize_channels(
                channels, {"email": True, "sms": False, "push": False}
            ),
        }
        if push_token:
            fields.update(self._push_token_fields(push_token))

        user = self.users.create_user(**fields)
        log_audit_event("user_created", user_id=user.id, role=user.role)
        return user

    def get_user(self, user_id: int) -> User:
        user = self.users.get_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def list_users(self, role: Optional[str] = None) -> List[User]:
        return self.users.list_users(role=role)

    def update_user(self, user_id: int, changes: Dict[str, Any]) -> User:
        """Update contact details, role or channel preferences."""
        user = self.get_user(user_id)
        changes = {k: v for k, v in changes.items() if k in PROFILE_FIELDS and v is not None}

        _validate_contact(changes.get("email"), changes.get("phone_number"))
        if "channels" in changes:
            changes["channels"] = normalize_channels(changes["channels"], user.channels)

        if not changes:
            return user

        user = self.users.update_user(user, changes)
        log_audit_event("user_updated", user_id=user.id, fields=sorted(changes))
        return user

    def register_push_token(self, user_id: int, token: Optional[str]) -> User:
        """
        Store a device push token, classifying it once.

        An empty token clears the registration.

        Raises:
            ValidationException: The token matches no known format
        """
        user = self.get_user(user_id)
        if token:
            changes = self._push_token_fields(token)
        else:
            changes = {"push_token": None, "push_token_kind": None}

        user = self.users.update_user(user, changes)
        self.logger.info(
            "Push token registered",
            user_id=user.id,
            token_kind=user.push_token_kind,
        )
        return user

    @staticmethod
    def _push_token_fields(token: str) -> Dict[str, Any]:
        parsed = parse_push_token(token)
        if parsed is None:
            raise ValidationException(
                "Unrecognized push token",
                field_errors={"push_token": "expected an Expo or device push token"},
            )
        return {"push_token": parsed.value, "push_token_kind": parsed.kind.value}
