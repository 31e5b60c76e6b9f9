"""Retry with exponential backoff, and the failure predicates it runs with."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TypeVar

from label_analyzer.llm.exceptions import (
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from label_analyzer.observability.logging import get_logger
from label_analyzer.services.analysis.constants import (
    RETRYABLE_STATUS_CODES,
    SERVICE_DOWN_REASON,
    SERVICE_DOWN_SIGNATURES,
    TRANSIENT_REASON,
)


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


logger = get_logger(__name__)

T = TypeVar("T")


def _has_down_signature(error: BaseException) -> bool:
    text = f"{type(error).__name__} {error}".lower()
    return any(signature in text for signature in SERVICE_DOWN_SIGNATURES)


def is_retryable_error(error: BaseException) -> bool:
    """Check whether another attempt could plausibly succeed.

    Timeouts, rate limiting, 429/5xx responses and connection failures are
    retryable. A connection failure that looks like DNS resolution or a
    refused connection is not: the service is down, not flaky.
    """
    if isinstance(error, LLMTimeoutError | LLMRateLimitError):
        return True
    if isinstance(error, LLMResponseError):
        return error.status_code in RETRYABLE_STATUS_CODES
    if isinstance(error, LLMUnavailableError):
        return not _has_down_signature(error)
    return False


def is_service_down_error(error: BaseException) -> bool:
    """Check whether a failure means the classifier is unavailable.

    Called after retries are exhausted, so transient errors count here too.
    Malformed responses and other client errors do not.
    """
    if isinstance(error, LLMUnavailableError | LLMRateLimitError):
        return True
    if isinstance(error, LLMResponseError):
        return error.status_code in RETRYABLE_STATUS_CODES
    return False


def describe_failure(error: BaseException) -> str:
    """Return a user-facing reason for a service-down failure."""
    if isinstance(error, LLMUnavailableError) and not isinstance(
        error, LLMTimeoutError
    ):
        return SERVICE_DOWN_REASON
    return TRANSIENT_REASON


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    *,
    should_retry: Callable[[BaseException], bool] = is_retryable_error,
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    factor: float = 2.0,
    max_delay: float = 30.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Await ``operation()`` until it succeeds or retrying stops making sense.

    The delay before attempt ``n + 1`` is ``initial_delay * factor ** (n - 1)``,
    raised to the server's ``retry_after`` when a rate limit error carries one,
    and never longer than ``max_delay``.

    Args:
        operation: Zero-argument coroutine function to call.
        should_retry: Predicate deciding whether an error is retryable.
        max_attempts: Total attempts, including the first.
        initial_delay: Seconds to wait after the first failure.
        factor: Multiplier applied to the delay after each failure.
        max_delay: Upper bound on any single wait, ``retry_after`` included.
        sleep: Sleep function, replaceable in tests.

    Returns:
        The first successful result.

    Raises:
        Exception: The last error, once attempts run out or it is not
            retryable.
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= max_attempts or not should_retry(e):
                raise
            delay = initial_delay * factor ** (attempt - 1)
            retry_after = getattr(e, "retry_after", None)
            if retry_after:
                delay = max(delay, retry_after)
            delay = min(delay, max_delay)
            logger.warning(
                "Retrying after transient failure",
                attempt=attempt,
                max_attempts=max_attempts,
                delay=delay,
                error=str(e),
            )
            await sleep(delay)
            attempt += 1
