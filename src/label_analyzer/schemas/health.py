"""Health and readiness schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from label_analyzer.schemas.base import APIResponse
from label_analyzer.schemas.enums import HealthStatus, ReadinessStatus


class HealthCheckItem(APIResponse):
    """Individual component health status."""

    status: HealthStatus = Field(..., description="Component health status")
    message: str = Field(..., description="Status message")
    response_time_ms: float | None = Field(
        default=None,
        description="Response time in milliseconds",
    )


class HealthCheckResponse(APIResponse):
    """Liveness response."""

    status: HealthStatus
    timestamp: datetime
    version: str


class ReadinessResponse(APIResponse):
    """Readiness response with per-dependency checks."""

    status: ReadinessStatus
    timestamp: datetime
    checks: dict[str, HealthCheckItem] = Field(default_factory=dict)
