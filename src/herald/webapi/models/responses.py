"""Response models for the Herald API."""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer

# Generic type for data responses
T = TypeVar("T")


class BaseResponse(BaseModel):
    """Base response model for all API responses."""

    success: bool = Field(..., description="Whether the request was successful")
    timestamp: datetime = Field(
        default_factory=datetime.utcnow, description="Response timestamp"
    )
    request_id: Optional[str] = Field(
        None, description="Unique request identifier for tracking"
    )

    model_config = ConfigDict(
        use_enum_values=True,
        arbitrary_types_allowed=True,
    )

    @field_serializer("timestamp")
    def serialize_timestamp(self, dt: datetime) -> str:
        """Serialize datetime to ISO format with Z suffix."""
        return dt.isoformat() + "Z"


class SuccessResponse(BaseResponse, Generic[T]):
    """Generic success response with typed data."""

    success: bool = Field(True, description="Always true for success responses")
    data: T = Field(..., description="Response data")
    message: Optional[str] = Field(None, description="Optional success message")


class ErrorResponse(BaseResponse):
    """Error response model."""

    success: bool = Field(False, description="Always false for error responses")
    error: Dict[str, Any] = Field(..., description="Error details")


class HealthStatus(BaseModel):
    """Health status model."""

    status: str = Field(
        ..., description="Overall health status: healthy, degraded, unhealthy"
    )
    services: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, description="Individual service statuses"
    )
    uptime_seconds: float = Field(..., description="Application uptime in seconds")
    version: Optional[str] = Field(None, description="Application version")


class HealthResponse(BaseResponse):
    """Health check response."""

    success: bool = Field(True, description="Always true for health responses")
    health: HealthStatus = Field(..., description="Detailed health information")


class DeliveryStatsData(BaseModel):
    """Alert-level delivery counters."""

    total: int = 0
    sent: int = 0
    failed: int = 0
    pending: int = 0


class AlertData(BaseModel):
    """Stored alert."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    message: str
    severity: str
    channels: List[str]
    targeting: Dict[str, Any]
    status: str
    created_by: int
    delivery_stats: DeliveryStatsData
    sent_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class DeliveryAttemptData(BaseModel):
    """One (recipient, channel) attempt."""

    recipient_id: int
    channel: str
    success: bool
    provider: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[str] = None
    message_id: Optional[str] = None


class DispatchData(BaseModel):
    """What a dispatch run did."""

    status: str
    recipient_count: int
    simulated_count: int
    attempts: List[DeliveryAttemptData]

    @classmethod
    def from_report(cls, report) -> "DispatchData":
        return cls(
            status=report.status.value,
            recipient_count=len(report.recipients),
            simulated_count=report.simulated_count,
            attempts=[DeliveryAttemptData(**a.to_dict()) for a in report.attempts],
        )


class AlertWithDispatchData(BaseModel):
    """An alert together with the dispatch that was just run for it."""

    alert: AlertData
    dispatch: Optional[DispatchData] = None


class AlertResponse(SuccessResponse[AlertData]):
    """Response model for single alert."""

    data: AlertData = Field(..., description="Alert data")


class AlertDispatchResponse(SuccessResponse[AlertWithDispatchData]):
    """Response model for create and send."""

    data: AlertWithDispatchData = Field(..., description="Alert and dispatch data")


class AlertListResponse(SuccessResponse[List[AlertData]]):
    """Response model for alert list."""

    data: List[AlertData] = Field(..., description="List of alerts")


class AcknowledgmentData(BaseModel):
    """Stored acknowledgment."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    alert_id: int
    user_id: int
    acknowledged_at: datetime
    notes: Optional[str] = None


class AcknowledgeResultData(BaseModel):
    """Outcome of an acknowledgment request."""

    created: bool
    total_acknowledgments: int
    acknowledgment: AcknowledgmentData


class AcknowledgeResponse(SuccessResponse[AcknowledgeResultData]):
    """Response model for acknowledging an alert."""

    data: AcknowledgeResultData


class AcknowledgmentListData(BaseModel):
    total: int
    acknowledgments: List[AcknowledgmentData]


class AcknowledgmentListResponse(SuccessResponse[AcknowledgmentListData]):
    """Response model for an alert's acknowledgments."""

    data: AcknowledgmentListData


class UserData(BaseModel):
    """Registered user; the push token itself is never returned."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: str
    channels: Dict[str, bool]
    phone_number: Optional[str] = None
    push_token_kind: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserResponse(SuccessResponse[UserData]):
    """Response model for a single user."""

    data: UserData


class UserListResponse(SuccessResponse[List[UserData]]):
    """Response model for user list."""

    data: List[UserData]


# Utility response models
class MessageResponse(SuccessResponse[Dict[str, str]]):
    """Simple message response."""

    data: Dict[str, str] = Field(..., description="Message data")

    @classmethod
    def create(
        cls, message: str, request_id: Optional[str] = None
    ) -> "MessageResponse":
        """Create a simple message response."""
        return cls(
            success=True,
            data={"message": message},
            message=message,
            request_id=request_id,
        )


class StatusResponse(SuccessResponse[Dict[str, Any]]):
    """Generic status response."""

    data: Dict[str, Any] = Field(..., description="Status data")

    @classmethod
    def create(
        cls,
        data: Dict[str, Any],
        message: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> "StatusResponse":
        """Create a status response."""
        return cls(success=True, data=data, message=message, request_id=request_id)
