"""Health check endpoints for the Herald API."""

import time

from fastapi import APIRouter, Depends

from ..config.logging import get_logger
from ..config.settings import get_settings
from ..ormdb.database import check_database_health
from ..realtime.hub import get_realtime_hub
from .dependencies import get_dispatcher
from .models.responses import HealthResponse, HealthStatus

logger = get_logger(__name__)
router = APIRouter()

# Track application start time for uptime calculation
_app_start_time = time.time()

API_VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponse, summary="Basic Health Check")
async def basic_health_check(dispatcher=Depends(get_dispatcher)):
    """
    Perform a basic health check.

    Reports database connectivity, whether each channel is live or
    simulated, and the number of connected realtime clients. Simulated
    channels are not a degradation.
    """
    uptime_seconds = time.time() - _app_start_time

    db_health = check_database_health()
    overall_status = "healthy" if db_health["status"] == "healthy" else "unhealthy"

    services = {
        "database": db_health,
        "channels": {"status": "healthy", **dispatcher.channel_status()},
        "realtime": {
            "status": "healthy",
            "connections": get_realtime_hub().connection_count,
        },
    }

    health_status = HealthStatus(
        status=overall_status,
        services=services,
        uptime_seconds=uptime_seconds,
        version=API_VERSION,
    )

    logger.debug(
        "Basic health check completed",
        status=overall_status,
        environment=get_settings().environment,
    )
    return HealthResponse(success=True, health=health_status)


@router.get("/health/live", summary="Liveness Probe")
async def liveness_probe():
    """Returns 200 while the process can serve requests."""
    return {"status": "alive", "uptime_seconds": time.time() - _app_start_time}
