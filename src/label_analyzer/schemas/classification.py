"""Classification and cache entry schemas."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field

from label_analyzer.schemas.base import APIResponse, DownstreamResponse
from label_analyzer.schemas.enums import IngredientStatus, SourceType


class Source(APIResponse):
    """Reference supporting a classification."""

    title: str
    url: str
    type: SourceType = SourceType.OTHER


class IngredientClassification(APIResponse):
    """Classifier verdict for one ingredient."""

    status: IngredientStatus
    confidence: float = Field(..., ge=0.0, le=1.0)
    educational_note: str
    basic_note: str
    reasoning: str = ""
    sources: list[Source] = Field(default_factory=list)


class CacheEntry(DownstreamResponse):
    """Stored classification for a normalized ingredient name."""

    ingredient_name: str
    status: IngredientStatus
    educational_note: str
    basic_note: str
    cached_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the entry is past its expiry time."""
        current = now or datetime.now(UTC)
        return self.expires_at <= current
