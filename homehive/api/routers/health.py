"""
Health check endpoints for monitoring and orchestration (K8s, Docker, etc.)

- /health, /health/live: Liveness (always 200 while the process serves)
- /health/db: Database connectivity check
- /health/ready: Readiness check (all dependencies healthy)

In in-memory mode there is no database to probe and both checks report it.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from homehive.api.deps import get_db_session
from homehive.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "homehive-bookings"


async def _database_ok(session: AsyncSession) -> bool:
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
    except (SQLAlchemyError, OSError) as e:
        logger.error("Database health check failed", exc_info=e)
        return False
    return True


@router.get("/health")
async def health_check():
    """Basic liveness probe."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/live")
async def health_check_live():
    """Alias for /health for orchestrators that prefer the /live naming."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/db")
async def health_check_db(
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Database connectivity health check.

    Returns 503 Service Unavailable if the database is down.
    """
    if settings.use_in_memory:
        return {"status": "healthy", "component": "database", "mode": "in_memory"}
    if not await _database_ok(session):
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "component": "database",
                "error": "Database connection failed",
            },
        )
    return {"status": "healthy", "component": "database"}


@router.get("/health/ready")
async def health_check_ready(
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_db_session),
):
    """Readiness probe: 503 until the database answers."""
    if settings.use_in_memory:
        return {"status": "ready", "checks": {"database": "in_memory"}}
    if not await _database_ok(session):
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "checks": {"database": "unhealthy"}},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
