"""API routers for the Herald alerting service."""

from .alerts import router as alerts_router
from .realtime import router as realtime_router
from .users import router as users_router

__all__ = ["alerts_router", "realtime_router", "users_router"]
