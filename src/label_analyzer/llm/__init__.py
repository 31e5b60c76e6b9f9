"""LLM integration: an OpenAI-compatible chat client and prompt templates."""

from label_analyzer.llm.client.openai_chat import OpenAIChatClient
from label_analyzer.llm.exceptions import (
    LLMConfigurationError,
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from label_analyzer.llm.models import LLMCompletionResult
from label_analyzer.llm.prompts.base import BasePrompt


__all__ = [
    "BasePrompt",
    "LLMCompletionResult",
    "LLMConfigurationError",
    "LLMError",
    "LLMRateLimitError",
    "LLMResponseError",
    "LLMTimeoutError",
    "LLMUnavailableError",
    "LLMValidationError",
    "OpenAIChatClient",
]
