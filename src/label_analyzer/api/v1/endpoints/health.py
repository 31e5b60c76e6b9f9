"""Health check endpoints.

Provides liveness and readiness probes for Kubernetes and load balancers.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from label_analyzer.cache.redis import check_redis_health
from label_analyzer.core.config import Settings, get_settings
from label_analyzer.schemas.enums import HealthStatus, ReadinessStatus
from label_analyzer.schemas.health import (
    HealthCheckItem,
    HealthCheckResponse,
    ReadinessResponse,
)


router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Liveness probe",
    description="Basic health check to verify the service is running.",
)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthCheckResponse:
    """Check if the service is alive.

    Does not check external dependencies.
    """
    return HealthCheckResponse(
        status=HealthStatus.HEALTHY,
        timestamp=datetime.now(UTC),
        version=settings.app.version,
    )


async def _check_cache() -> HealthCheckItem:
    started = time.perf_counter()
    redis_status = await check_redis_health()
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

    if redis_status == "healthy":
        return HealthCheckItem(
            status=HealthStatus.HEALTHY,
            message="Redis reachable",
            response_time_ms=elapsed_ms,
        )
    if redis_status == "not_initialized":
        return HealthCheckItem(
            status=HealthStatus.DEGRADED,
            message="Cache disabled, every ingredient goes to the classifier",
        )
    return HealthCheckItem(
        status=HealthStatus.DEGRADED,
        message="Redis unreachable, cache lookups are misses",
        response_time_ms=elapsed_ms,
    )


def _check_analysis(request: Request) -> HealthCheckItem:
    if getattr(request.app.state, "analysis_service", None) is None:
        return HealthCheckItem(
            status=HealthStatus.UNHEALTHY,
            message="Analysis service not initialized",
        )
    return HealthCheckItem(status=HealthStatus.HEALTHY, message="Ready")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Readiness check reporting the status of each dependency.",
)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Check if the service is ready to handle requests.

    The cache is optional: losing it degrades the service but doesn't take
    it out of rotation.
    """
    checks = {
        "analysis": _check_analysis(request),
        "cache": await _check_cache(),
    }

    statuses = [check.status for check in checks.values()]
    if HealthStatus.UNHEALTHY in statuses:
        status = ReadinessStatus.NOT_READY
    elif HealthStatus.DEGRADED in statuses:
        status = ReadinessStatus.DEGRADED
    else:
        status = ReadinessStatus.READY

    return ReadinessResponse(
        status=status,
        timestamp=datetime.now(UTC),
        checks=checks,
    )
