"""Health check endpoints."""

from fastapi import APIRouter, Request, status
from fastapi.responses import ORJSONResponse

from coursetrack.config import get_settings


router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness probe - checks if the application is running."""
    return {"status": "alive"}


@router.get("/ready")
async def readiness(request: Request) -> ORJSONResponse:
    """Readiness probe - Cassandra is required, Redis is optional."""
    settings = get_settings()
    cassandra_ready = getattr(request.app.state, "cassandra_session", None) is not None
    redis_ready = getattr(request.app.state, "redis", None) is not None

    return ORJSONResponse(
        status_code=status.HTTP_200_OK
        if cassandra_ready
        else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if cassandra_ready else "degraded",
            "cassandra": cassandra_ready,
            "redis": redis_ready,
            "environment": settings.environment,
            "debug": settings.debug,
        },
    )


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
