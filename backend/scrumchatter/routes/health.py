"""
Scrum Chatter Backend: Health Check Route
==========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the database and reports the number of open
       dialog sessions and unfinished background jobs.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from scrumchatter import __version__
from scrumchatter.database import engine
from scrumchatter.dialogs.registry import dialog_registry
from scrumchatter.schemas.member import HealthResponse
from scrumchatter.services.background import background_executor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        open_dialogs=len(dialog_registry),
        pending_jobs=background_executor.pending,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
