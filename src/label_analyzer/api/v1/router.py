"""API v1 router aggregating all endpoint routers.

All endpoints are mounted under /api/v1/label-analyzer/ via the v1_prefix
configuration.
"""

from __future__ import annotations

from fastapi import APIRouter

from label_analyzer.api.v1.endpoints import analysis, health


router = APIRouter()

# Include health endpoints
router.include_router(health.router)

# Include analysis endpoints
router.include_router(analysis.router)
