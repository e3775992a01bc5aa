"""
LiteLLM Client - Streaming chat completions for every synchronous backend.

One client covers OpenAI, DeepSeek, Anthropic, xAI, Google and any
OpenAI-compatible host; the registry decides the LiteLLM model name and
base URL.

Opening the stream is retried on transient errors. Nothing is retried once
the first chunk has been requested.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

from litellm import acompletion
from litellm.exceptions import (
    APIConnectionError,
    RateLimitError,
    ServiceUnavailableError,
    Timeout,
)
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

__all__ = ["LiteLLMClient"]

TRANSIENT_ERRORS = (APIConnectionError, RateLimitError, ServiceUnavailableError, Timeout)


class LiteLLMClient:
    """
    Streaming LLM client backed by LiteLLM.

    Example:
        >>> client = LiteLLMClient("deepseek/deepseek-chat", api_key="sk-...")
        >>> async for chunk in client.stream_text(messages, temperature=0.8):
        ...     print(chunk, end="")
    """

    def __init__(
        self,
        model: str,
        api_key: str,
        api_base: str | None = None,
        timeout: float = 60.0,
    ) -> None:
        """
        Initialize client.

        Args:
            model: LiteLLM model name including provider prefix
            api_key: Provider API key
            api_base: Optional base URL for OpenAI-compatible hosts
            timeout: Request timeout in seconds
        """
        self.model = model
        self.api_base = api_base
        self.timeout = timeout
        self._api_key = api_key

        logger.info("LiteLLMClient initialized: model=%s, api_base=%s", model, api_base)

    @retry(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    async def _open_stream(
        self,
        messages: list[dict[str, str]],
        temperature: float,
    ) -> Any:
        """Start a streaming completion."""
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "stream": True,
            "api_key": self._api_key,
            "timeout": self.timeout,
        }
        if self.api_base:
            kwargs["api_base"] = self.api_base

        return await acompletion(**kwargs)

    async def stream_text(
        self,
        messages: list[dict[str, str]],
        temperature: float,
    ) -> AsyncIterator[str]:
        """
        Stream answer text.

        Args:
            messages: Chat messages
            temperature: Sampling temperature

        Yields:
            Non-empty text deltas
        """
        response = await self._open_stream(messages, temperature)

        async for chunk in response:
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content

    async def close(self) -> None:
        """LiteLLM pools its own connections; nothing to release."""
        return None
