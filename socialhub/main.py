"""Main FastAPI application entry point."""

import logging
import time
import traceback
from contextlib import asynccontextmanager
from typing import Any, AsyncContextManager, AsyncGenerator, Callable, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from socialhub.api.v1.endpoints.admin.routes import router as admin_router
from socialhub.api.v1.endpoints.auth.routes import router as auth_router
from socialhub.api.v1.endpoints.health.routes import router as health_router
from socialhub.api.v1.endpoints.messages.routes import router as messages_router
from socialhub.api.v1.endpoints.notifications.routes import router as notifications_router
from socialhub.api.v1.endpoints.posts.routes import router as posts_router
from socialhub.api.v1.endpoints.realtime.routes import router as realtime_router
from socialhub.api.v1.endpoints.stories.routes import router as stories_router
from socialhub.api.v1.endpoints.users.routes import router as users_router
from socialhub.core.exceptions import (
    DomainException,
    RateLimitExceededException,
    ValidationException,
)
from socialhub.core.realtime.registry import InMemoryConnectionRegistry
from socialhub.infrastructure.cache.rate_limiter import RateLimiter
from socialhub.infrastructure.cache.redis_client import close_redis_connection, get_redis_client
from socialhub.infrastructure.database.init_db import create_tables
from socialhub.infrastructure.database.session import close_db_connections
from socialhub.settings import get_settings
from socialhub.utils.logging import setup_logging

logger = logging.getLogger("socialhub")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events."""
    setup_logging()
    settings = get_settings()
    logger.info("Starting %s (%s)...", settings.app_name, settings.environment)

    try:
        app.state.connection_registry = InMemoryConnectionRegistry()

        if settings.is_development:
            await create_tables()

        redis_client = get_redis_client()
        await redis_client.connect()
        if await redis_client.ping():
            logger.info("Redis connection established")
        else:
            logger.warning("Redis ping failed, rate limiting will fail open")
        app.state.redis_client = redis_client

        if settings.rate_limit_enabled:
            app.state.rate_limiter = RateLimiter(
                redis_client,
                max_requests=settings.rate_limit_max_requests,
                window_seconds=settings.rate_limit_window_seconds,
            )

        logger.info("%s started successfully", settings.app_name)
    except Exception:
        logger.exception("Startup failed")
        raise

    yield

    logger.info("Shutting down %s...", settings.app_name)

    await app.state.connection_registry.close_all()
    await close_redis_connection()
    await close_db_connections()
    logger.info("Connections closed")


def create_app(
    lifespan_context: Optional[Callable[[FastAPI], AsyncContextManager[None]]] = lifespan,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        lifespan_context: Startup/shutdown handler (tests pass a lighter one)
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Social network backend with realtime chat and notifications",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan_context,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, prefix="/api/v1")
    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")
    app.include_router(posts_router, prefix="/api/v1")
    app.include_router(stories_router, prefix="/api/v1")
    app.include_router(messages_router, prefix="/api/v1")
    app.include_router(notifications_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")
    app.include_router(realtime_router, prefix="/api/v1")

    register_exception_handlers(app)

    register_middleware(app)

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint."""
        return {
            "message": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
        }

    @app.get("/health", include_in_schema=False)
    async def health_check():
        """Basic health check endpoint."""
        return {"status": "healthy", "service": "socialhub"}

    return app


def error_response(
    status_code: int,
    message: str,
    code: str,
    details: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Render the failure envelope shared by every endpoint."""
    error: Dict[str, Any] = {"message": message, "code": code}
    if details is not None:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
        headers=headers,
    )


def _field_name(loc) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        """Handle typed domain exceptions."""
        details = exc.errors if isinstance(exc, ValidationException) else None
        headers = None
        if isinstance(exc, RateLimitExceededException):
            headers = {"Retry-After": str(exc.retry_after)}
        return error_response(exc.status_code, exc.message, exc.code, details, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request body and parameter validation errors."""
        details = [
            {"field": _field_name(error.get("loc", ())), "message": error.get("msg", "")}
            for error in exc.errors()
        ]
        return error_response(400, "Validation failed", "VALIDATION_ERROR", details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions, including unknown routes."""
        return error_response(
            exc.status_code,
            str(exc.detail),
            "HTTP_ERROR",
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)

        details = None
        if get_settings().is_development:
            details = {
                "message": str(exc),
                "stack": traceback.format_exception(type(exc), exc, exc.__traceback__),
            }
        return error_response(500, "Internal Server Error", "INTERNAL_ERROR", details)


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware."""

    @app.middleware("http")
    async def rate_limit_middleware(request: Request, call_next):
        """Apply the fixed-window rate limit to API requests."""
        rate_limiter: Optional[RateLimiter] = getattr(request.app.state, "rate_limiter", None)
        if rate_limiter is None or not request.url.path.startswith("/api/"):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        result = await rate_limiter.check(client_ip)
        if not result.allowed:
            exc = RateLimitExceededException(result.retry_after)
            return error_response(
                exc.status_code,
                exc.message,
                exc.code,
                headers={"Retry-After": str(result.retry_after)},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(result.limit)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)
        return response

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log all HTTP requests."""
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        logger.info("Request started: %s %s from %s", request.method, request.url.path, client_ip)

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        logger.info(
            "Request completed: %s %s status=%s time=%.3fs",
            request.method,
            request.url.path,
            response.status_code,
            process_time,
        )

        return response

    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        """Add security headers to responses."""
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "socialhub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
