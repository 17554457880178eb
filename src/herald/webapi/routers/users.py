"""User and delivery preference API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ...config.logging import get_logger
from ...services import UserService
from ..dependencies import get_user_service, verify_auth_token
from ..models.requests import PushTokenRequest, UserCreateRequest, UserUpdateRequest
from ..models.responses import UserData, UserListResponse, UserResponse

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(verify_auth_token)])


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register User",
)
async def create_user(
    user_request: UserCreateRequest,
    request: Request,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Register a user who can receive and acknowledge alerts."""
    user = user_service.create_user(**user_request.model_dump())
    return UserResponse(
        data=UserData.model_validate(user),
        message="User registered",
        request_id=getattr(request.state, "request_id", None),
    )


@router.get("/users", response_model=UserListResponse, summary="List Users")
async def list_users(
    request: Request,
    role: Optional[str] = Query(None, description="Filter by role"),
    user_service: UserService = Depends(get_user_service),
) -> UserListResponse:
    users = user_service.list_users(role=role)
    return UserListResponse(
        data=[UserData.model_validate(u) for u in users],
        request_id=getattr(request.state, "request_id", None),
    )


@router.get("/users/{user_id}", response_model=UserResponse, summary="Get User")
async def get_user(
    user_id: int,
    request: Request,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    return UserResponse(
        data=UserData.model_validate(user_service.get_user(user_id)),
        request_id=getattr(request.state, "request_id", None),
    )


@router.patch("/users/{user_id}", response_model=UserResponse, summary="Update User")
async def update_user(
    user_id: int,
    update_request: UserUpdateRequest,
    request: Request,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Update contact details, role or channel toggles."""
    user = user_service.update_user(user_id, update_request.model_dump(exclude_none=True))
    return UserResponse(
        data=UserData.model_validate(user),
        message="User updated",
        request_id=getattr(request.state, "request_id", None),
    )


@router.put(
    "/users/{user_id}/push-token", response_model=UserResponse, summary="Register Push Token"
)
async def register_push_token(
    user_id: int,
    token_request: PushTokenRequest,
    request: Request,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Store a device push token; the token kind is decided here, once."""
    user = user_service.register_push_token(user_id, token_request.push_token)
    return UserResponse(
        data=UserData.model_validate(user),
        message="Push token registered" if user.push_token else "Push token cleared",
        request_id=getattr(request.state, "request_id", None),
    )
