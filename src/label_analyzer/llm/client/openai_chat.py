"""HTTP client for OpenAI-compatible chat completion services.

Supports JSON mode for structured output via ``response_format``. Each
call is a single attempt; callers own the retry policy.
"""

from __future__ import annotations

from typing import Any, TypeVar, cast

import httpx
from aiolimiter import AsyncLimiter
from pydantic import BaseModel, ValidationError

from label_analyzer.llm.exceptions import (
    LLMConfigurationError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from label_analyzer.llm.models import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    LLMCompletionResult,
)
from label_analyzer.observability.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


def _parse_retry_after(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class OpenAIChatClient:
    """Async HTTP client for an OpenAI-compatible chat completions API.

    Attributes:
        base_url: API base URL.
        model: Default model.
        timeout: HTTP request timeout in seconds.
    """

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        requests_per_minute: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key sent as a bearer token.
            model: Default model name.
            base_url: API base URL.
            timeout: HTTP request timeout in seconds.
            requests_per_minute: Pacing for outgoing requests.
            transport: Optional httpx transport (tests).

        Raises:
            LLMConfigurationError: If the API key is empty or the request
                rate is not positive.
        """
        if not api_key:
            msg = "Classifier API key is not configured"
            raise LLMConfigurationError(msg)
        if requests_per_minute <= 0:
            msg = "requests_per_minute must be positive"
            raise LLMConfigurationError(msg)

        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None
        # One request per (60 / rpm) seconds, no initial burst
        self._rate_limiter = AsyncLimiter(1, 60.0 / requests_per_minute)

    @property
    def chat_url(self) -> str:
        """Get the chat completions endpoint URL."""
        return f"{self.base_url}/chat/completions"

    async def initialize(self) -> None:
        """Initialize the HTTP client with auth headers."""
        if self._http_client is not None:
            return

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            limits=httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20,
            ),
            transport=self._transport,
        )
        logger.info(
            "OpenAIChatClient initialized",
            model=self.model,
            timeout=self.timeout,
        )

    async def shutdown(self) -> None:
        """Close the HTTP client and release connections."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("OpenAIChatClient shutdown")

    async def _execute(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        """Send one request and translate transport failures."""
        if self._http_client is None:
            await self.initialize()

        assert self._http_client is not None

        await self._rate_limiter.acquire()

        try:
            response = await self._http_client.post(
                self.chat_url,
                json=request.model_dump(exclude_none=True),
            )

            if response.status_code == 429:
                retry_after = response.headers.get("retry-after")
                msg = f"Classifier rate limit exceeded, retry after {retry_after}s"
                raise LLMRateLimitError(
                    msg, retry_after=_parse_retry_after(retry_after)
                )

            response.raise_for_status()
            return ChatCompletionResponse.model_validate(response.json())

        except httpx.TimeoutException as e:
            logger.warning("Classifier request timeout", timeout=self.timeout)
            msg = f"Classifier timeout after {self.timeout}s"
            raise LLMTimeoutError(msg) from e

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.warning(
                "Classifier request failed",
                status_code=status_code,
                url=self.chat_url,
            )
            msg = f"Classifier returned {status_code}"
            raise LLMResponseError(msg, status_code=status_code) from e

        except httpx.RequestError as e:
            logger.warning("Classifier connection error", error=str(e))
            msg = f"Cannot connect to classifier: {e}"
            raise LLMUnavailableError(msg) from e

        except ValueError as e:
            # Invalid JSON body or unexpected envelope
            msg = f"Malformed completion response: {e}"
            raise LLMValidationError(msg) from e

    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        schema: type[T] | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Generate a chat completion.

        Args:
            prompt: User message.
            system: Optional system prompt.
            schema: Optional Pydantic model for structured JSON output.
            options: ``temperature`` and ``max_tokens``.

        Returns:
            LLMCompletionResult with raw response and optionally parsed output.

        Raises:
            LLMUnavailableError: If the service cannot be reached.
            LLMTimeoutError: If the request times out.
            LLMRateLimitError: If the service answers 429.
            LLMResponseError: If the service returns another HTTP error.
            LLMValidationError: If the response doesn't match ``schema``.
        """
        system_content = system or ""
        if schema is not None:
            schema_instruction = (
                "You must respond with valid JSON matching this schema: "
                f"{schema.model_json_schema()}"
            )
            system_content = (
                f"{system_content}\n\n{schema_instruction}"
                if system_content
                else schema_instruction
            )

        messages: list[ChatMessage] = []
        if system_content:
            messages.append(ChatMessage(role="system", content=system_content))
        messages.append(ChatMessage(role="user", content=prompt))

        options = options or {}
        request = ChatCompletionRequest(
            model=self.model,
            messages=messages,
            response_format={"type": "json_object"} if schema is not None else None,
            temperature=options.get("temperature", 0.2),
            max_tokens=options.get("max_tokens"),
        )

        response = await self._execute(request)
        raw_response = response.choices[0].message.content

        parsed: Any = None
        if schema is not None:
            try:
                parsed = schema.model_validate_json(raw_response)
            except ValidationError as e:
                logger.warning(
                    "Failed to parse structured classifier output",
                    schema=schema.__name__,
                    error=str(e),
                    raw_response=raw_response[:500],
                )
                msg = f"Response does not match {schema.__name__} schema: {e}"
                raise LLMValidationError(msg) from e

        return LLMCompletionResult(
            raw_response=raw_response,
            parsed=parsed,
            model=response.model,
            prompt_tokens=response.usage.prompt_tokens if response.usage else None,
            completion_tokens=(
                response.usage.completion_tokens if response.usage else None
            ),
        )

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
        result = await self.generate(
            prompt=prompt,
            system=system,
            schema=schema,
            options=options,
        )

        if result.parsed is None:
            msg = "Structured generation returned no parsed result"
            raise LLMValidationError(msg)

        return cast("T", result.parsed)
