"""Builders for classification and cache entry objects."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from label_analyzer.schemas.classification import CacheEntry, IngredientClassification
from label_analyzer.schemas.enums import IngredientStatus


def make_classification(
    status: IngredientStatus = IngredientStatus.CLEAN,
    *,
    confidence: float = 0.9,
    note: str = "A whole-food ingredient.",
) -> IngredientClassification:
    """Build a classifier result."""
    return IngredientClassification(
        status=status,
        confidence=confidence,
        educational_note=note,
        basic_note=f"Basic: {note}",
        reasoning="test",
    )


def make_cache_entry(
    name: str,
    status: IngredientStatus = IngredientStatus.CLEAN,
    *,
    expires_in: timedelta = timedelta(days=30),
) -> CacheEntry:
    """Build a cache entry expiring ``expires_in`` from now."""
    now = datetime.now(UTC)
    return CacheEntry(
        ingredient_name=name,
        status=status,
        educational_note=f"Cached note for {name}",
        basic_note="cached basic note",
        cached_at=now - timedelta(days=1),
        expires_at=now + expires_in,
    )
