"""Rate limiting exceptions."""

from __future__ import annotations


class RateLimitError(Exception):
    """Base exception for rate limiting errors."""


class UnknownOperationError(RateLimitError):
    """Raised when no rule is configured for an operation class."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"No rate limit rule configured for operation: {operation}")


class RateLimitExceededError(RateLimitError):
    """Raised when a caller exceeds the quota for an operation class."""

    def __init__(self, identity: str, operation: str, retry_after: int) -> None:
        """Initialize the exception.

        Args:
            identity: Caller identity that was denied.
            operation: Operation class that was denied.
            retry_after: Seconds until the caller may retry.
        """
        self.identity = identity
        self.operation = operation
        self.retry_after = retry_after
        super().__init__(
            f"Rate limit exceeded for {operation}, retry after {retry_after}s"
        )
