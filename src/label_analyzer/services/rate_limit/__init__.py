"""Per-caller rate limiting."""

from label_analyzer.services.rate_limit.constants import OperationClass
from label_analyzer.services.rate_limit.exceptions import (
    RateLimitError,
    RateLimitExceededError,
    UnknownOperationError,
)
from label_analyzer.services.rate_limit.service import RateLimiter, RateLimitResult


__all__ = [
    "OperationClass",
    "RateLimitError",
    "RateLimitExceededError",
    "RateLimitResult",
    "RateLimiter",
    "UnknownOperationError",
]
