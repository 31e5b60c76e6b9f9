"""FastAPI dependencies for service access.

Services are initialized during application startup and stored in
app.state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

from label_analyzer.core.config import get_settings
from label_analyzer.core.exceptions import ServiceUnavailableException


if TYPE_CHECKING:
    from label_analyzer.services.analysis.service import AnalysisService
    from label_analyzer.services.rate_limit.service import RateLimiter


ANONYMOUS_CALLER = "anonymous"


async def get_analysis_service(request: Request) -> AnalysisService:
    """Get the analysis service from app state.

    Raises:
        ServiceUnavailableException: 503 if the service is not initialized.
    """
    service: AnalysisService | None = getattr(
        request.app.state, "analysis_service", None
    )
    if service is None:
        msg = "Analysis service not available"
        raise ServiceUnavailableException(msg)
    return service


async def get_rate_limiter(request: Request) -> RateLimiter:
    """Get the rate limiter from app state.

    Raises:
        ServiceUnavailableException: 503 if the limiter is not initialized.
    """
    limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        msg = "Rate limiter not available"
        raise ServiceUnavailableException(msg)
    return limiter


async def get_caller_identity(request: Request) -> str:
    """Identify the caller for rate limiting.

    Uses the configured identity header set by the upstream gateway, then
    the client address.
    """
    settings = getattr(request.app.state, "settings", None) or get_settings()
    identity = request.headers.get(settings.api.caller_identity_header, "").strip()
    if identity:
        return identity
    if request.client is not None and request.client.host:
        return request.client.host
    return ANONYMOUS_CALLER
