"""Integration tests for health checks, error envelopes and middleware."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from socialhub.infrastructure.cache.rate_limiter import RateLimitResult


def fake_redis(healthy: bool) -> MagicMock:
    redis_client = MagicMock()
    redis_client.ping = AsyncMock(return_value=healthy)
    return redis_client


class TestHealthEndpoints:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_root_health(self, client):
        response = client.get("/health")

        assert response.json() == {"status": "healthy", "service": "socialhub"}

    def test_basic_health(self, client):
        response = client.get("/api/v1/health/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["timestamp"].endswith("Z")

    def test_liveness(self, client):
        response = client.get("/api/v1/health/live")

        assert response.status_code == 200
        assert response.json()["alive"] is True

    def test_detailed_health_degraded_without_redis(self, client):
        with patch(
            "socialhub.api.v1.endpoints.health.routes.get_redis_client",
            return_value=fake_redis(False),
        ):
            response = client.get("/api/v1/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["services"] == {"database": "healthy", "redis": "unhealthy"}
        assert data["connections"] == 0

    def test_readiness(self, client):
        with patch(
            "socialhub.api.v1.endpoints.health.routes.get_redis_client",
            return_value=fake_redis(True),
        ):
            response = client.get("/api/v1/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["ready"] is True
        assert data["checks"]["database"]["status"] == "ready"
        assert data["checks"]["redis"]["status"] == "ready"


class TestErrorEnvelope:
    def test_unknown_route(self, client):
        response = client.get("/api/v1/nowhere")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": {"message": "Not Found", "code": "HTTP_ERROR"},
        }

    def test_method_not_allowed(self, client):
        response = client.delete("/api/v1/auth/login")

        assert response.status_code == 405
        assert response.json()["error"]["code"] == "HTTP_ERROR"

    @pytest.mark.parametrize(
        "path", ["/api/v1/posts/{}", "/api/v1/users/{}", "/api/v1/posts/{}/comments"]
    )
    def test_id_beyond_integer_range_is_a_validation_error(self, client, path):
        response = client.get(path.format(2**70))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_unhandled_exception_hides_details_outside_development(self, app):
        @app.get("/explode")
        async def explode():
            raise RuntimeError("kaboom")

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/explode")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": {"message": "Internal Server Error", "code": "INTERNAL_ERROR"},
        }


class TestMiddleware:
    def test_security_headers(self, client):
        response = client.get("/api/v1/health/")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"

    def test_rate_limit_headers(self, app, client):
        app.state.rate_limiter = MagicMock()
        app.state.rate_limiter.check = AsyncMock(
            return_value=RateLimitResult(allowed=True, limit=100, remaining=99, retry_after=900)
        )

        response = client.get("/api/v1/health/")

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Limit"] == "100"
        assert response.headers["X-RateLimit-Remaining"] == "99"

    def test_rate_limit_exceeded(self, app, client):
        app.state.rate_limiter = MagicMock()
        app.state.rate_limiter.check = AsyncMock(
            return_value=RateLimitResult(allowed=False, limit=100, remaining=0, retry_after=42)
        )

        response = client.get("/api/v1/health/")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "42"
        assert response.json()["error"]["code"] == "RATE_LIMIT_EXCEEDED"

    def test_rate_limit_skips_non_api_paths(self, app, client):
        app.state.rate_limiter = MagicMock()
        app.state.rate_limiter.check = AsyncMock()

        response = client.get("/health")

        assert response.status_code == 200
        app.state.rate_limiter.check.assert_not_called()
