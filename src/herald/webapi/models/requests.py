"""Request models for the Herald API."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

VALID_SEVERITIES = ["low", "medium", "high", "critical"]
VALID_CHANNELS = ["email", "sms", "push"]
VALID_STATUSES = ["pending", "sent", "cancelled", "failed"]


class TargetingRequest(BaseModel):
    """Who an alert is addressed to; any combination of the three criteria."""

    all: bool = Field(False, description="Send to every user")
    roles: List[str] = Field(default_factory=list, description="Send to users with these roles")
    specific: List[int] = Field(
        default_factory=list, description="Send to these user ids"
    )


def _validate_severity(v):
    if v is None:
        return v
    if v.lower() not in VALID_SEVERITIES:
        raise ValueError(f"Severity must be one of: {', '.join(VALID_SEVERITIES)}")
    return v.lower()


def _validate_channels(v):
    if v is None:
        return v
    if not v:
        raise ValueError("At least one channel is required")
    invalid = [c for c in v if c.lower() not in VALID_CHANNELS]
    if invalid:
        raise ValueError(f"Channels must be drawn from: {', '.join(VALID_CHANNELS)}")
    return list(dict.fromkeys(c.lower() for c in v))


class AlertCreateRequest(BaseModel):
    """Request model for creating an alert."""

    title: str = Field(..., description="Alert title", min_length=1, max_length=100)
    message: str = Field(..., description="Alert body", min_length=1)
    severity: str = Field("medium", description="Severity: low, medium, high, critical")
    channels: List[str] = Field(["email"], description="Delivery channels")
    targeting: TargetingRequest = Field(..., description="Recipient targeting")
    created_by: int = Field(..., description="Id of the user raising the alert")
    send: bool = Field(True, description="Dispatch immediately after creation")

    @field_validator("severity")
    @classmethod
    def validate_severity(cls, v):
        """Validate severity level."""
        return _validate_severity(v)

    @field_validator("channels")
    @classmethod
    def validate_channels(cls, v):
        """Validate delivery channels."""
        return _validate_channels(v)


class AlertUpdateRequest(BaseModel):
    """Request model for editing a pending alert."""

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    message: Optional[str] = Field(None, min_length=1)
    severity: Optional[str] = None
    channels: Optional[List[str]] = None
    targeting: Optional[TargetingRequest] = None

    @field_validator("severity")
    @classmethod
    def validate_severity(cls, v):
        return _validate_severity(v)

    @field_validator("channels")
    @classmethod
    def validate_channels(cls, v):
        return _validate_channels(v)


class AlertCancelRequest(BaseModel):
    """Request model for cancelling an alert."""

    user_id: Optional[int] = Field(None, description="Id of the user cancelling")


class AcknowledgeRequest(BaseModel):
    """Request model for acknowledging an alert."""

    user_id: int = Field(..., description="Id of the acknowledging user")
    notes: Optional[str] = Field(None, description="Optional notes", max_length=1000)


class AlertFilterParams(BaseModel):
    """Filter parameters for alert listing."""

    status: Optional[str] = Field(None, description="Filter by alert status")
    limit: int = Field(50, ge=1, le=500, description="Maximum alerts to return")
    sort_by: str = Field("created_at", description="Sort column")
    sort_order: str = Field("desc", description="asc or desc")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        """Validate alert status."""
        if v and v.lower() not in VALID_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(VALID_STATUSES)}")
        return v.lower() if v else v

    @field_validator("sort_order")
    @classmethod
    def validate_sort_order(cls, v):
        if v.lower() not in ("asc", "desc"):
            raise ValueError("Sort order must be 'asc' or 'desc'")
        return v.lower()


class UserCreateRequest(BaseModel):
    """Request model for registering a user."""

    username: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., description="Email address")
    role: str = Field("subscriber", min_length=1, max_length=32)
    phone_number: Optional[str] = Field(None, description="E.164 phone number")
    channels: Optional[Dict[str, bool]] = Field(
        None, description="Channel toggles, e.g. {'email': true, 'sms': true}"
    )
    push_token: Optional[str] = Field(None, description="Device push token")


class UserUpdateRequest(BaseModel):
    """Request model for updating a user's profile and channel preferences."""

    email: Optional[str] = None
    role: Optional[str] = Field(None, min_length=1, max_length=32)
    phone_number: Optional[str] = None
    channels: Optional[Dict[str, bool]] = None


class PushTokenRequest(BaseModel):
    """Request model for registering a device push token."""

    push_token: Optional[str] = Field(None, description="Token; empty clears it")
