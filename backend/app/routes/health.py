"""
Samanvi Backend — Health Check Route
======================================

What:  Liveness/diagnostic endpoint for probes and operators.
Why:   Load balancers and Docker health checks need a cheap, ungated way to
       know whether this instance can serve traffic.
How:   Pings the database with SELECT 1 and reports process diagnostics.
Who:   Docker health checks, load balancers, uptime monitors.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503, stop routing traffic here)

Payload:
    status, version, environment, database, uptimeSeconds, pid, platform,
    python, memory.maxRssKb, timestamp
"""

import logging
import os
import platform
import resource
import sys
import time

from fastapi import APIRouter, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError

from app import __version__
from app.schemas.common import HealthResponse, MemoryUsage
from app.utils.time_utils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module import time stands in for process start
_start_time = time.time()


def _max_rss_kb() -> int:
    """Peak resident set size of this process in KiB."""
    usage = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports KiB, macOS reports bytes
    if sys.platform == "darwin":
        return usage // 1024
    return usage


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
    description=(
        "Reports whether the service can reach its database, plus process "
        "diagnostics. Never gated and never rate limited."
    ),
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    settings = request.app.state.settings
    db_status = "connected"
    overall = "healthy"

    try:
        await request.app.state.database.ping()
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        environment=settings.environment,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
        pid=os.getpid(),
        platform=platform.platform(),
        python=platform.python_version(),
        memory=MemoryUsage(max_rss_kb=_max_rss_kb()),
        timestamp=utc_now(),
    )
