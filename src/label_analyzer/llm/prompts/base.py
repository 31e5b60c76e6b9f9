"""Base class for classifier prompts.

A prompt bundles the instructions sent to the classifier, the schema its
answer must validate against, and the sampling options for the call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel


class BasePrompt[T: BaseModel](ABC):
    """A classifier prompt producing ``T``.

    Subclasses set ``output_schema`` and implement ``format``; the
    remaining class attributes tune the request.
    """

    output_schema: ClassVar[type[BaseModel]]
    system_prompt: ClassVar[str | None] = None
    temperature: ClassVar[float] = 0.2
    # None leaves the output length to the model
    max_tokens: ClassVar[int | None] = None

    @abstractmethod
    def format(self, **kwargs: Any) -> str:
        """Render the user message.

        Raises:
            ValueError: If a required input is missing or empty.
        """
        ...

    @staticmethod
    def require(kwargs: dict[str, Any], key: str) -> Any:
        """Return ``kwargs[key]``, rejecting missing or empty values."""
        value = kwargs.get(key)
        if not value:
            msg = f"{key} is required"
            raise ValueError(msg)
        return value

    @property
    def name(self) -> str:
        """Prompt identifier for logging."""
        return self.__class__.__name__

    def get_options(self, *, max_tokens: int | None = None) -> dict[str, Any]:
        """Sampling options; ``max_tokens`` overrides the class default."""
        options: dict[str, Any] = {"temperature": self.temperature}
        limit = max_tokens if max_tokens is not None else self.max_tokens
        if limit is not None:
            options["max_tokens"] = limit
        return options
