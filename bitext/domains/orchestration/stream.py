"""
Stream Aggregator - Collect a streamed answer into one raw string.

The payload is the system prompt followed by the most recent messages.
Chunks are kept in arrival order. A transport failure discards whatever
arrived and raises StreamError; partial text is never returned.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable, Sequence

from bitext.config.errors import StreamError
from bitext.domains.providers.contracts import StreamingBackend

from .models import ChatMessage, Role
from .prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

__all__ = ["StreamAggregator"]


class StreamAggregator:
    """
    Streams a translation from a synchronous backend.

    Example:
        >>> aggregator = StreamAggregator(backend, temperature=0.8)
        >>> raw = await aggregator.aggregate(request.messages(), on_text=print)
    """

    def __init__(
        self,
        backend: StreamingBackend,
        system_prompt: str = SYSTEM_PROMPT,
        temperature: float = 0.8,
        history_limit: int = 20,
    ) -> None:
        """
        Initialize aggregator.

        Args:
            backend: Streaming adapter
            system_prompt: Instruction sent ahead of the conversation
            temperature: Sampling temperature
            history_limit: Most recent messages kept in the payload
        """
        self._backend = backend
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.history_limit = history_limit

    def set_system_prompt(self, prompt: str) -> None:
        self.system_prompt = prompt

    def build_messages(self, messages: Sequence[ChatMessage]) -> list[dict[str, str]]:
        """System prompt plus the last ``history_limit`` messages."""
        recent = list(messages)[-self.history_limit :]
        payload = [ChatMessage(role=Role.SYSTEM, content=self.system_prompt).to_dict()]
        payload.extend(message.to_dict() for message in recent)
        return payload

    async def stream(self, messages: Sequence[ChatMessage]) -> AsyncIterator[str]:
        """
        Lazily yield answer chunks in arrival order.

        Nothing is sent until the first chunk is requested.
        """
        payload = self.build_messages(messages)
        logger.debug("Streaming %d messages", len(payload))

        async for chunk in self._backend.stream_text(payload, self.temperature):
            yield chunk

    async def aggregate(
        self,
        messages: Sequence[ChatMessage],
        on_text: Callable[[str], None] | None = None,
    ) -> str:
        """
        Consume the stream and return the full answer.

        Args:
            messages: Conversation, most recent last
            on_text: Called with each chunk as it arrives

        Returns:
            Concatenated answer text

        Raises:
            StreamError: If the transport fails before the stream ends
        """
        chunks: list[str] = []

        try:
            async for chunk in self.stream(messages):
                chunks.append(chunk)
                if on_text is not None:
                    on_text(chunk)
        except StreamError:
            raise
        except Exception as e:
            logger.warning("Stream failed after %d chunks: %s", len(chunks), e)
            raise StreamError(
                f"Stream failed: {e}",
                {"chunks_received": len(chunks), "error_type": type(e).__name__},
            ) from e

        raw_answer = "".join(chunks)
        logger.info("Stream complete: %d chunks, %d chars", len(chunks), len(raw_answer))
        return raw_answer
