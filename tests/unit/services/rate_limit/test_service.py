"""Unit tests for the per-caller rate limiter.

Tests cover:
- Window quotas and remaining counts
- Blocking after the quota is exceeded
- Window reset
- Disabled limiter and unknown operations
- Expired block sweeping and the sweep task lifecycle
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from freezegun import freeze_time

from label_analyzer.core.config import RateLimitRule
from label_analyzer.services.rate_limit import (
    OperationClass,
    RateLimiter,
    RateLimitExceededError,
    UnknownOperationError,
)


if TYPE_CHECKING:
    from collections.abc import Iterator

    from freezegun.api import FrozenDateTimeFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def clock() -> Iterator[FrozenDateTimeFactory]:
    """Frozen wall clock; the event loop keeps real time."""
    with freeze_time("2026-01-01 12:00:00", real_asyncio=True) as frozen:
        yield frozen


@pytest.fixture
def limiter(
    rate_limit_rules: dict[str, RateLimitRule], clock: FrozenDateTimeFactory
) -> RateLimiter:
    """Limiter with 3 classifications per minute and a 5 minute block."""
    return RateLimiter(rate_limit_rules)


class TestRateLimiterCheck:
    """Tests for RateLimiter.check."""

    async def test_allows_up_to_quota(self, limiter: RateLimiter) -> None:
        """Should allow max_requests and count down remaining."""
        results = [
            await limiter.check("user-1", OperationClass.CLASSIFICATION)
            for _ in range(3)
        ]

        assert [r.allowed for r in results] == [True, True, True]
        assert [r.remaining for r in results] == [2, 1, 0]
        assert all(r.retry_after is None for r in results)

    async def test_reset_at_is_window_end(self, limiter: RateLimiter) -> None:
        """Should report the end of the window opened by the first request."""
        result = await limiter.check("user-1", OperationClass.CLASSIFICATION)

        assert result.reset_at == datetime(2026, 1, 1, 12, 1, tzinfo=UTC)

    async def test_blocks_after_quota(
        self, limiter: RateLimiter, clock: FrozenDateTimeFactory
    ) -> None:
        """Should deny and block for the rule's block duration."""
        for _ in range(3):
            await limiter.check("user-1", OperationClass.CLASSIFICATION)

        denied = await limiter.check("user-1", OperationClass.CLASSIFICATION)

        assert denied.allowed is False
        assert denied.remaining == 0
        assert denied.retry_after == 300

        clock.tick(100)
        still_blocked = await limiter.check("user-1", OperationClass.CLASSIFICATION)

        assert still_blocked.allowed is False
        assert still_blocked.retry_after == 200

    async def test_allows_again_after_block(
        self, limiter: RateLimiter, clock: FrozenDateTimeFactory
    ) -> None:
        """Should start a fresh window once the block expires."""
        for _ in range(4):
            await limiter.check("user-1", OperationClass.CLASSIFICATION)

        clock.tick(301)
        result = await limiter.check("user-1", OperationClass.CLASSIFICATION)

        assert result.allowed is True
        assert result.remaining == 2

    async def test_block_lasts_at_least_until_window_end(
        self, clock: FrozenDateTimeFactory
    ) -> None:
        """Should not unblock before the current window ends."""
        rules = {
            "general": RateLimitRule(
                window_seconds=60, max_requests=1, block_seconds=5
            )
        }
        limiter = RateLimiter(rules)

        await limiter.check("user-1", "general")
        clock.tick(10)
        denied = await limiter.check("user-1", "general")

        assert denied.allowed is False
        assert denied.retry_after == 50

    async def test_window_resets(
        self, limiter: RateLimiter, clock: FrozenDateTimeFactory
    ) -> None:
        """Should reset the count when the window elapses."""
        for _ in range(3):
            await limiter.check("user-1", OperationClass.CLASSIFICATION)
        clock.tick(60)
        result = await limiter.check("user-1", OperationClass.CLASSIFICATION)

        assert result.allowed is True
        assert result.remaining == 2

    async def test_identities_are_independent(self, limiter: RateLimiter) -> None:
        """Should keep separate counts per caller."""
        for _ in range(4):
            await limiter.check("user-1", OperationClass.CLASSIFICATION)

        result = await limiter.check("user-2", OperationClass.CLASSIFICATION)

        assert result.allowed is True

    async def test_operations_are_independent(self, limiter: RateLimiter) -> None:
        """Should keep separate counts per operation class."""
        for _ in range(4):
            await limiter.check("user-1", OperationClass.CLASSIFICATION)

        result = await limiter.check("user-1", OperationClass.GENERAL)

        assert result.allowed is True
        assert result.remaining == 4

    async def test_disabled_always_allows(
        self, rate_limit_rules: dict[str, RateLimitRule]
    ) -> None:
        """Should allow everything and block nobody when disabled."""
        limiter = RateLimiter(rate_limit_rules, enabled=False)

        for _ in range(10):
            result = await limiter.check("user-1", OperationClass.CLASSIFICATION)
            assert result.allowed is True

        assert limiter.blocked_keys == 0

    async def test_unknown_operation(self, limiter: RateLimiter) -> None:
        """Should raise for operations without a rule."""
        with pytest.raises(UnknownOperationError, match="ocr"):
            await limiter.check("user-1", OperationClass.OCR)


class TestRateLimiterEnforce:
    """Tests for RateLimiter.enforce."""

    async def test_raises_when_denied(self, limiter: RateLimiter) -> None:
        """Should raise with the caller, operation and retry delay."""
        for _ in range(3):
            await limiter.enforce("user-1", OperationClass.CLASSIFICATION)

        with pytest.raises(RateLimitExceededError) as exc_info:
            await limiter.enforce("user-1", OperationClass.CLASSIFICATION)

        assert exc_info.value.identity == "user-1"
        assert exc_info.value.operation == "classification"
        assert exc_info.value.retry_after == 300


class TestRateLimiterSweep:
    """Tests for expired block sweeping."""

    async def test_sweeps_expired_blocks(
        self, limiter: RateLimiter, clock: FrozenDateTimeFactory
    ) -> None:
        """Should drop blocks whose period has ended."""
        for _ in range(6):
            await limiter.check("user-1", OperationClass.GENERAL)
        clock.tick(30)
        for _ in range(4):
            await limiter.check("user-2", OperationClass.CLASSIFICATION)
        clock.tick(31)

        removed = await limiter.sweep()

        assert removed == 1
        assert limiter.blocked_keys == 1

    async def test_keeps_active_blocks(self, limiter: RateLimiter) -> None:
        """Should keep blocks that are still in force."""
        for _ in range(6):
            await limiter.check("user-1", OperationClass.GENERAL)

        assert await limiter.sweep() == 0
        assert limiter.blocked_keys == 1

    async def test_start_and_stop(
        self, rate_limit_rules: dict[str, RateLimitRule]
    ) -> None:
        """Should run the sweep task until stopped."""
        limiter = RateLimiter(rate_limit_rules, sweep_interval_seconds=0.01)

        await limiter.start()
        task = limiter._sweep_task
        await asyncio.sleep(0.03)
        await limiter.stop()

        assert task is not None
        assert task.done()
        assert limiter._sweep_task is None
