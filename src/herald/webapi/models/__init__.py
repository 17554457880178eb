"""API Models package for request/response schemas."""

from .requests import (
    AcknowledgeRequest,
    AlertCancelRequest,
    AlertCreateRequest,
    AlertFilterParams,
    AlertUpdateRequest,
    PushTokenRequest,
    TargetingRequest,
    UserCreateRequest,
    UserUpdateRequest,
)
from .responses import (
    AcknowledgeResponse,
    AcknowledgmentListResponse,
    AlertData,
    AlertDispatchResponse,
    AlertListResponse,
    AlertResponse,
    BaseResponse,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    StatusResponse,
    SuccessResponse,
    UserData,
    UserListResponse,
    UserResponse,
)

__all__ = [
    # Response models
    "BaseResponse",
    "SuccessResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "StatusResponse",
    "AlertData",
    "AlertResponse",
    "AlertDispatchResponse",
    "AlertListResponse",
    "AcknowledgeResponse",
    "AcknowledgmentListResponse",
    "UserData",
    "UserResponse",
    "UserListResponse",
    # Request models
    "AlertCreateRequest",
    "AlertUpdateRequest",
    "AlertCancelRequest",
    "AlertFilterParams",
    "AcknowledgeRequest",
    "TargetingRequest",
    "UserCreateRequest",
    "UserUpdateRequest",
    "PushTokenRequest",
]
