"""FastAPI application for the Herald alerting service."""

import uuid
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..config.logging import get_logger
from ..events import RealtimeEvent, get_event_bus, register_default_handlers
from ..ormdb.database import create_tables
from ..realtime.hub import get_realtime_hub
from .dependencies import verify_auth_token
from .exceptions import setup_exception_handlers
from .health import API_VERSION
from .health import router as health_router
from .models.responses import StatusResponse
from .routers import alerts_router, realtime_router, users_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Herald API")

    create_tables()

    event_bus = get_event_bus()
    app.state.realtime_handler = register_default_handlers(event_bus, get_realtime_hub())
    logger.info("Event system initialized", event_bus_name=event_bus.name)

    yield

    # Shutdown
    logger.info("Shutting down Herald API")
    event_bus.unsubscribe(RealtimeEvent, app.state.realtime_handler)
    await event_bus.drain()
    logger.info("Herald API shutdown completed")


async def add_request_id_middleware(request: Request, call_next):
    """Add unique request ID to each request for tracking."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger.info(
        "Request started",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        query_params=str(request.query_params),
        user_agent=request.headers.get("user-agent"),
        remote_addr=request.client.host if request.client else None,
    )

    response = await call_next(request)

    # Add request ID to response headers
    response.headers["X-Request-ID"] = request_id

    logger.info(
        "Request completed",
        request_id=request_id,
        status_code=response.status_code,
        method=request.method,
        path=request.url.path,
    )

    return response


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Herald Alert API",
        description="""
        Emergency alert dispatch and delivery tracking.

        * **Alerts**: create, dispatch, cancel and acknowledge alerts
        * **Multi-channel delivery**: email (SendGrid), SMS (Twilio) and push (Expo),
          falling back to simulated delivery when a provider is not configured
        * **Delivery tracking**: per-alert delivery statistics and analytics
        * **Real-time events**: WebSocket notifications on `/ws`
        """,
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Add middleware for request tracking
    app.middleware("http")(add_request_id_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(health_router, prefix="/api/v1", tags=["Health & Status"])
    app.include_router(alerts_router, prefix="/api/v1", tags=["Alerts"])
    app.include_router(users_router, prefix="/api/v1", tags=["Users"])
    app.include_router(realtime_router, tags=["Realtime"])

    @app.get(
        "/api/v1/status",
        response_model=StatusResponse,
        summary="API Status",
        description="Event bus and realtime hub statistics",
    )
    async def api_status(
        request: Request, token: str = Depends(verify_auth_token)
    ) -> StatusResponse:
        status_data = {
            "api_version": API_VERSION,
            "status": "operational",
            "event_bus": get_event_bus().get_statistics(),
            "realtime_connections": get_realtime_hub().connection_count,
        }
        return StatusResponse.create(
            data=status_data, request_id=getattr(request.state, "request_id", None)
        )

    logger.info("FastAPI application created")
    return app


# Create the app instance
app = create_app()
