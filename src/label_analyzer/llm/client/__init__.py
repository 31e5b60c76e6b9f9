"""LLM client implementations."""

from label_analyzer.llm.client.openai_chat import OpenAIChatClient
from label_analyzer.llm.client.protocol import LLMClientProtocol


__all__ = [
    "LLMClientProtocol",
    "OpenAIChatClient",
]
