"""
TrailMix Backend: Health and Connectivity Routes
==================================================

What:  Welcome message, the mobile connectivity probe, and a health check.
Who:   GET / and GET /api/test are called by the mobile app on startup to
       confirm it can reach the server; GET /health by Docker and monitoring.

Status levels (GET /health):
    - healthy:   database answers SELECT 1
    - unhealthy: database unreachable (still HTTP 200; the body says why)
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from sqlalchemy import text

from trailmix import __version__
from trailmix.schemas.common import ConnectivityResponse, HealthResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_model=MessageResponse, summary="Welcome message")
async def root() -> MessageResponse:
    return MessageResponse(message="Welcome to Travel Trace API")


@router.get(
    "/api/test",
    response_model=ConnectivityResponse,
    summary="Connectivity probe for the mobile app",
)
async def connectivity_test(request: Request) -> ConnectivityResponse:
    """Echo back what the server sees of the caller."""
    client_ip = request.client.host if request.client else None
    logger.info("Connectivity test from %s", client_ip or "unknown")
    return ConnectivityResponse(
        message="Server is running and accessible",
        timestamp=datetime.now(timezone.utc).isoformat(),
        server="TrailMix Backend",
        host=request.headers.get("host"),
        ip=client_ip,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Reports database connectivity and uptime for load balancers and Docker.",
)
async def health_check(request: Request) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
