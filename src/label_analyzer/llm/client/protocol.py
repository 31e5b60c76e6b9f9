"""LLM client protocol.

Lets the classifier depend on an interface rather than a provider, and
lets tests substitute a mock.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel


if TYPE_CHECKING:
    from label_analyzer.llm.models import LLMCompletionResult


T = TypeVar("T", bound=BaseModel)


@runtime_checkable
class LLMClientProtocol(Protocol):
    """Protocol for LLM client implementations.

    Clients make exactly one attempt per call; retry policy belongs to the
    caller.
    """

    async def initialize(self) -> None:
        """Initialize client resources (HTTP connections, etc.)."""
        ...

    async def shutdown(self) -> None:
        """Release client resources."""
        ...

    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        schema: type[T] | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Generate a completion, optionally validated against ``schema``.

        Raises:
            LLMUnavailableError: Service unreachable.
            LLMTimeoutError: Request timed out.
            LLMRateLimitError: Service answered 429.
            LLMResponseError: Other HTTP error from the service.
            LLMValidationError: Response doesn't match schema.
        """
        ...

    async def generate_structured(
        self,
        prompt: str,
        schema: type[T],
        *,
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> T:
        """Generate output parsed into ``schema``.

        Raises:
            LLMValidationError: If response doesn't match schema.
        """
        ...
