"""In-process, per-caller rate limiter.

Window counting uses the ``limits`` fixed-window strategy over its async
memory storage. Block periods sit on top of it: state lives on the instance
(one limiter per application), guarded by an ``asyncio.Lock`` and swept
periodically by a background task started with ``start()`` and cancelled
with ``stop()``.
"""

from __future__ import annotations

import asyncio
import contextlib
import math
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from limits import RateLimitItem, RateLimitItemPerSecond
from limits.aio.storage import MemoryStorage
from limits.aio.strategies import FixedWindowRateLimiter

from label_analyzer.observability.logging import get_logger
from label_analyzer.services.rate_limit.constants import DEFAULT_SWEEP_INTERVAL_SECONDS
from label_analyzer.services.rate_limit.exceptions import (
    RateLimitExceededError,
    UnknownOperationError,
)


if TYPE_CHECKING:
    from collections.abc import Mapping

    from label_analyzer.core.config import RateLimitRule

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RateLimitResult:
    """Outcome of a rate limit check."""

    allowed: bool
    remaining: int
    reset_at: datetime
    retry_after: int | None = None


def _window_item(rule: RateLimitRule) -> RateLimitItem:
    return RateLimitItemPerSecond(
        rule.max_requests, max(math.ceil(rule.window_seconds), 1)
    )


class RateLimiter:
    """Fixed-window limiter keyed by identity and operation.

    A caller who exceeds the window quota is blocked for the rule's block
    duration, and at least until the window ends; every check during the
    block is denied without being counted.
    """

    def __init__(
        self,
        rules: Mapping[str, RateLimitRule],
        *,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        enabled: bool = True,
    ) -> None:
        """Initialize the limiter.

        Args:
            rules: Rule per operation class.
            sweep_interval_seconds: Seconds between expired-block sweeps.
            enabled: When False every check is allowed.
        """
        self._rules = dict(rules)
        self._items = {name: _window_item(rule) for name, rule in self._rules.items()}
        self._sweep_interval = sweep_interval_seconds
        self._enabled = enabled
        self._windows = FixedWindowRateLimiter(MemoryStorage())
        self._blocked_until: dict[str, float] = {}
        self._lock = asyncio.Lock()
        self._sweep_task: asyncio.Task[None] | None = None

    @property
    def blocked_keys(self) -> int:
        """Number of identity/operation pairs with a recorded block."""
        return len(self._blocked_until)

    def _rule_for(self, operation: str) -> RateLimitRule:
        rule = self._rules.get(str(operation))
        if rule is None:
            raise UnknownOperationError(operation)
        return rule

    @staticmethod
    def _as_datetime(timestamp: float) -> datetime:
        return datetime.fromtimestamp(timestamp, UTC)

    def _denied(self, blocked_until: float, now: float) -> RateLimitResult:
        return RateLimitResult(
            allowed=False,
            remaining=0,
            reset_at=self._as_datetime(blocked_until),
            retry_after=max(math.ceil(blocked_until - now), 1),
        )

    async def check(self, identity: str, operation: str) -> RateLimitResult:
        """Count one request and decide whether it is allowed.

        Args:
            identity: Caller identity (user ID or client address).
            operation: Operation class name.

        Returns:
            The decision; ``retry_after`` is set only when denied.

        Raises:
            UnknownOperationError: If no rule exists for ``operation``.
        """
        rule = self._rule_for(operation)
        now = time.time()

        if not self._enabled:
            return RateLimitResult(
                allowed=True,
                remaining=rule.max_requests,
                reset_at=self._as_datetime(now + rule.window_seconds),
            )

        key = f"{identity}:{operation}"
        item = self._items[str(operation)]
        async with self._lock:
            blocked_until = self._blocked_until.get(key, 0.0)
            if blocked_until > now:
                return self._denied(blocked_until, now)

            allowed = await self._windows.hit(item, identity, str(operation))
            stats = await self._windows.get_window_stats(item, identity, str(operation))

            if not allowed:
                blocked_until = max(now + rule.block_seconds, stats.reset_time)
                self._blocked_until[key] = blocked_until
                logger.warning(
                    "Rate limit exceeded",
                    identity=identity,
                    operation=operation,
                    blocked_seconds=rule.block_seconds,
                )
                return self._denied(blocked_until, now)

            return RateLimitResult(
                allowed=True,
                remaining=stats.remaining,
                reset_at=self._as_datetime(stats.reset_time),
            )

    async def enforce(self, identity: str, operation: str) -> RateLimitResult:
        """Like ``check`` but raise when denied.

        Raises:
            RateLimitExceededError: If the request is not allowed.
        """
        result = await self.check(identity, operation)
        if not result.allowed:
            raise RateLimitExceededError(identity, operation, result.retry_after or 1)
        return result

    async def sweep(self) -> int:
        """Drop blocks that have expired.

        Window counters expire inside the ``limits`` storage on their own.

        Returns:
            Number of entries removed.
        """
        now = time.time()
        async with self._lock:
            expired = [
                key for key, until in self._blocked_until.items() if until <= now
            ]
            for key in expired:
                del self._blocked_until[key]
        if expired:
            logger.debug("Swept rate limit blocks", removed=len(expired))
        return len(expired)

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            try:
                await self.sweep()
            except Exception:
                logger.exception("Rate limit sweep failed")

    async def start(self) -> None:
        """Start the periodic sweep task."""
        if self._sweep_task is not None:
            return
        self._sweep_task = asyncio.create_task(
            self._sweep_forever(), name="rate-limit-sweep"
        )
        logger.info(
            "RateLimiter started",
            enabled=self._enabled,
            sweep_interval=self._sweep_interval,
        )

    async def stop(self) -> None:
        """Cancel the sweep task."""
        if self._sweep_task is None:
            return
        self._sweep_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._sweep_task
        self._sweep_task = None
        logger.info("RateLimiter stopped")
