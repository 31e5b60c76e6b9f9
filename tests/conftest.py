"""Shared test fixtures for the ingredient label analyzer tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from label_analyzer.core.config import AnalysisSettings, RateLimitRule
from label_analyzer.schemas.classification import IngredientClassification
from label_analyzer.services.rate_limit.service import RateLimiter
from tests.fixtures.classifications import make_classification


@pytest.fixture
def analysis_settings() -> AnalysisSettings:
    """Analysis settings without backoff or progress delays."""
    return AnalysisSettings(
        chunk_size=8,
        batch_max_retries=2,
        item_max_retries=1,
        initial_backoff_seconds=0.0,
        backoff_factor=2.0,
        progress_stagger_seconds=0.0,
    )


@pytest.fixture
def rate_limit_rules() -> dict[str, RateLimitRule]:
    """Small quotas that are easy to exhaust in tests."""
    return {
        "classification": RateLimitRule(
            window_seconds=60, max_requests=3, block_seconds=300
        ),
        "general": RateLimitRule(window_seconds=60, max_requests=5, block_seconds=60),
    }


@pytest.fixture
def permissive_rate_limiter() -> RateLimiter:
    """Rate limiter that allows everything."""
    return RateLimiter(
        {"classification": RateLimitRule(window_seconds=60, max_requests=1000)},
        enabled=False,
    )


@pytest.fixture
def mock_classifier() -> MagicMock:
    """Classifier whose batch call answers "clean" for every name."""
    classifier = MagicMock()

    async def classify_batch(names: list[str]) -> list[IngredientClassification]:
        return [make_classification() for _ in names]

    classifier.classify_batch = AsyncMock(side_effect=classify_batch)
    classifier.classify = AsyncMock(return_value=make_classification())
    classifier.identify_product = AsyncMock(return_value="Chocolate chip cookies")
    return classifier


@pytest.fixture
def mock_cache_store() -> MagicMock:
    """Cache store that misses on every lookup."""
    store = MagicMock()
    store.get_many = AsyncMock(return_value={})
    store.upsert = AsyncMock(return_value=True)
    return store


@pytest.fixture
def mock_redis() -> MagicMock:
    """Redis client double for the cache store."""
    client = MagicMock()
    client.mget = AsyncMock(return_value=[])
    client.set = AsyncMock(return_value=True)
    client.ping = AsyncMock(return_value=True)
    return client

