"""Ingredient classification cache."""

from label_analyzer.cache.store import (
    CacheStoreProtocol,
    IngredientCacheStore,
    normalize_ingredient_name,
)
from label_analyzer.cache.writer import BackgroundCacheWriter, CacheWrite


__all__ = [
    "BackgroundCacheWriter",
    "CacheStoreProtocol",
    "CacheWrite",
    "IngredientCacheStore",
    "normalize_ingredient_name",
]
