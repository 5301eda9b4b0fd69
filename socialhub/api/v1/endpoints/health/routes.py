"""Health check API routes."""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from socialhub.api.dependencies import get_connection_registry, get_database_session
from socialhub.core.realtime.registry import ConnectionRegistry
from socialhub.infrastructure.cache.redis_client import get_redis_client
from socialhub.settings import get_settings
from .schemas import DetailedHealthResponse, HealthResponse, LivenessResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health Check"])


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get(
    "/",
    response_model=HealthResponse,
    summary="Basic health check",
    responses={200: {"description": "Service is healthy"}},
)
async def basic_health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns minimal health status information without dependency checks.
    Useful for load balancer health checks.
    """
    return HealthResponse(status="healthy", timestamp=_timestamp())


@router.get(
    "/detailed",
    response_model=DetailedHealthResponse,
    summary="Detailed health check",
    responses={
        200: {"description": "Service is healthy"},
        503: {"description": "Service is unhealthy"},
    },
)
async def detailed_health_check(
    session: AsyncSession = Depends(get_database_session),
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> DetailedHealthResponse:
    """
    Perform detailed health check of the application and its dependencies.

    Checks the status of:
    - Database connectivity
    - Redis connectivity (rate limiting and task broker)

    Also reports how many realtime connections are live.
    """
    services = {}
    overall_status = "healthy"

    try:
        await session.execute(text("SELECT 1"))
        services["database"] = "healthy"
    except SQLAlchemyError:
        logger.warning("Database health check failed", exc_info=True)
        services["database"] = "unhealthy"
        overall_status = "unhealthy"

    redis_healthy = await get_redis_client().ping()
    services["redis"] = "healthy" if redis_healthy else "unhealthy"
    if not redis_healthy:
        overall_status = "degraded" if overall_status == "healthy" else overall_status

    return DetailedHealthResponse(
        status=overall_status,
        version=get_settings().app_version,
        timestamp=_timestamp(),
        services=services,
        connections=len(await registry.connected_account_ids()),
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    responses={
        200: {"description": "Service is ready"},
        503: {"description": "Service is not ready"},
    },
)
async def readiness_check(
    session: AsyncSession = Depends(get_database_session),
):
    """
    Readiness check for container deployments.

    The database is required; Redis is reported but not required since the
    rate limiter fails open without it.
    """
    checks = {}

    start_time = time.perf_counter()
    try:
        await session.execute(text("SELECT 1"))
        latency = (time.perf_counter() - start_time) * 1000
        checks["database"] = {"status": "ready", "latency_ms": round(latency, 2)}
        ready = True
    except SQLAlchemyError as e:
        checks["database"] = {"status": "not_ready", "error": str(e)}
        ready = False

    start_time = time.perf_counter()
    if await get_redis_client().ping():
        latency = (time.perf_counter() - start_time) * 1000
        checks["redis"] = {"status": "ready", "latency_ms": round(latency, 2)}
    else:
        checks["redis"] = {"status": "not_ready"}

    response = ReadinessResponse(ready=ready, checks=checks)
    if not ready:
        return JSONResponse(status_code=503, content=response.model_dump())
    return response


@router.get(
    "/live",
    response_model=LivenessResponse,
    summary="Liveness check",
    responses={200: {"description": "Service is alive"}},
)
async def liveness_check() -> LivenessResponse:
    """
    Liveness check.

    Indicates the application process is alive and responsive. Does not
    check dependencies.
    """
    return LivenessResponse(alive=True, timestamp=_timestamp())
