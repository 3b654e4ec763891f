"""
Notes API Backend - Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the database with `SELECT 1` and reports uptime and version.
Who:   Called by container health checks and load balancers.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response, status

from notesapi import __version__
from notesapi.database import Database
from notesapi.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Process start, for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
    description="Returns the health status of the backend service and its database.",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    database: Database = request.app.state.database

    if await database.ping():
        db_status, overall = "connected", "healthy"
    else:
        db_status, overall = "disconnected", "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
