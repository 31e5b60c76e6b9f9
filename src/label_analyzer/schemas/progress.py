"""Progress event schema streamed while an analysis runs."""

from __future__ import annotations

from pydantic import Field

from label_analyzer.schemas.base import APIResponse
from label_analyzer.schemas.enums import IngredientStatus, ProgressEventType


class ProgressEvent(APIResponse):
    """Snapshot of classification progress."""

    type: ProgressEventType
    current: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    progress: float = Field(..., ge=0.0, le=100.0, description="Percent complete")
    message: str
    emoji: str
    ingredient: str | None = None
    status: IngredientStatus | None = None
