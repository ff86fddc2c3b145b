"""Health check endpoints."""

from fastapi import APIRouter

from kaede.config import get_settings
from kaede.core.database import AsyncCassandraConnection
from kaede.core.redis import RedisConnection


router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness probe - the process is serving requests."""
    return {"status": "alive"}


@router.get("/ready")
async def readiness() -> dict[str, str | bool]:
    """Readiness probe - storage connections.

    The cache is reported but optional; only ``database`` gates readiness.
    """
    settings = get_settings()
    return {
        "status": "ready",
        "environment": settings.environment,
        "database": AsyncCassandraConnection.is_connected(),
        "cache": RedisConnection.is_connected(),
    }


@router.get("")
async def health() -> dict[str, str]:
    """General health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }
