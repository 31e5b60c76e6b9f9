"""LLM client exceptions.

The classification orchestrator decides from these types whether a
failure is worth retrying, means the service is down, or means the
response was malformed.
"""

from __future__ import annotations


class LLMError(Exception):
    """Base exception for LLM client errors."""


class LLMUnavailableError(LLMError):
    """Raised when the LLM service cannot be reached.

    Covers connection failures and DNS resolution errors.
    """


class LLMTimeoutError(LLMUnavailableError):
    """Raised when an LLM request times out."""


class LLMResponseError(LLMError):
    """Raised when the LLM returns an HTTP error response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LLMValidationError(LLMError):
    """Raised when an LLM response fails schema validation.

    The service answered, but not with the structure we asked for.
    """


class LLMRateLimitError(LLMError):
    """Raised when the LLM service rate limits the request."""

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class LLMConfigurationError(LLMError):
    """Raised when the LLM client is misconfigured."""
