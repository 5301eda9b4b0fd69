"""Health check API schemas."""

from typing import Any, Dict

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Basic health check response schema."""

    status: str = Field(..., description="Service health status", examples=["healthy"])
    timestamp: str = Field(..., description="Response timestamp", examples=["2024-01-01T12:00:00Z"])


class DetailedHealthResponse(BaseModel):
    """Detailed health check response schema."""

    status: str = Field(..., description="Overall service health status", examples=["healthy"])
    timestamp: str = Field(..., description="Response timestamp")
    services: Dict[str, str] = Field(
        ...,
        description="Status of individual services",
        examples=[{"database": "healthy", "redis": "healthy"}],
    )
    version: str = Field(..., description="Application version", examples=["1.0.0"])
    connections: int = Field(..., description="Live realtime connections", examples=[12])


class ReadinessResponse(BaseModel):
    """Readiness check response schema."""

    ready: bool = Field(..., description="Whether service is ready to accept requests")
    checks: Dict[str, Any] = Field(
        ...,
        description="Individual readiness checks",
        examples=[{"database": {"status": "ready", "latency_ms": 5.2}}],
    )


class LivenessResponse(BaseModel):
    """Liveness check response schema."""

    alive: bool = Field(..., description="Whether service is alive", examples=[True])
    timestamp: str = Field(..., description="Response timestamp")
