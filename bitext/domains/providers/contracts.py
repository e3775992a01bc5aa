"""
Provider Contracts - Interfaces implemented by backend adapters.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable

from .models import ChatHandle, ChatRecord


@runtime_checkable
class StreamingBackend(Protocol):
    """
    Contract for backends that answer with one incremental text stream.

    Example:
        >>> class MyBackend:
        ...     def stream_text(self, messages, temperature):
        ...         ...
        ...     async def close(self) -> None:
        ...         ...
        >>> assert isinstance(MyBackend(), StreamingBackend)
    """

    def stream_text(
        self,
        messages: list[dict[str, str]],
        temperature: float,
    ) -> AsyncIterator[str]:
        """
        Stream answer text.

        Args:
            messages: Chat messages ({"role": ..., "content": ...})
            temperature: Sampling temperature

        Yields:
            Text chunks in arrival order
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


@runtime_checkable
class PollingBackend(Protocol):
    """Contract for stateful backends driven by submit → poll → fetch."""

    async def submit(self, text: str) -> ChatHandle:
        """Start a chat job for the given user text."""
        ...

    async def retrieve_status(self, conversation_id: str, chat_id: str) -> str:
        """Return the job status (e.g. "in_progress", "completed")."""
        ...

    async def list_messages(self, conversation_id: str, chat_id: str) -> list[ChatRecord]:
        """Fetch the messages produced by a completed job."""
        ...

    async def cancel(self, conversation_id: str, chat_id: str) -> None:
        """Ask the backend to abandon a job."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
