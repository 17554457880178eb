"""Shared FastAPI dependencies."""

from typing import Generator

from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..config.logging import get_logger
from ..config.settings import Settings, get_settings
from ..events import EventBus, get_event_bus
from ..exceptions import ConfigurationError
from ..ormdb.database import get_session
from ..services import AlertService, UserService
from ..services.notification import ChannelSettings, Dispatcher

logger = get_logger(__name__)

# Security scheme for Bearer token authentication
security = HTTPBearer()


def verify_auth_token(
    credentials: HTTPAuthorizationCredentials = Security(security),
) -> str:
    """
    Verify the authentication token.

    Args:
        credentials: The HTTP authorization credentials

    Returns:
        The token if valid

    Raises:
        ConfigurationError: If no token is configured
        HTTPException: If token is invalid
    """
    expected_token = get_settings().endpoint_auth_token
    if not expected_token:
        logger.error("Endpoint auth token not configured")
        raise ConfigurationError("ENDPOINT_AUTH_TOKEN", "not configured")

    if credentials.credentials != expected_token:
        logger.warning(
            "Invalid authentication attempt",
            provided_token_length=len(credentials.credentials),
        )
        raise HTTPException(status_code=401, detail="Invalid authentication token")

    logger.debug("Authentication successful")
    return credentials.credentials


def get_db_session() -> Generator[Session, None, None]:
    """Request-scoped database session."""
    yield from get_session()


def get_app_settings() -> Settings:
    return get_settings()


def get_dispatcher(settings: Settings = Depends(get_app_settings)) -> Dispatcher:
    """Dispatcher wired to the configured providers."""
    return Dispatcher.from_channel_settings(ChannelSettings.from_settings(settings))


def get_app_event_bus() -> EventBus:
    return get_event_bus()


def get_alert_service(
    session: Session = Depends(get_db_session),
    dispatcher: Dispatcher = Depends(get_dispatcher),
    event_bus: EventBus = Depends(get_app_event_bus),
    settings: Settings = Depends(get_app_settings),
) -> AlertService:
    """Dependency to get alert service instance."""
    return AlertService(session, dispatcher=dispatcher, event_bus=event_bus, settings=settings)


def get_user_service(session: Session = Depends(get_db_session)) -> UserService:
    """Dependency to get user service instance."""
    return UserService(session)
