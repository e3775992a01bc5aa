"""
Tests for the stream aggregator.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest

from bitext.config.errors import ErrorCode, StreamError
from bitext.domains.providers.contracts import StreamingBackend

from .models import ChatMessage, Role
from .stream import StreamAggregator


class FakeStreamingBackend:
    """Yields fixed chunks, optionally failing after ``fail_after`` of them."""

    def __init__(self, chunks: list[str], fail_after: int | None = None) -> None:
        self.chunks = chunks
        self.fail_after = fail_after
        self.calls: list[tuple[list[dict[str, str]], float]] = []
        self.closed = False

    async def stream_text(
        self,
        messages: list[dict[str, str]],
        temperature: float,
    ) -> AsyncIterator[str]:
        self.calls.append((messages, temperature))
        for index, chunk in enumerate(self.chunks):
            if self.fail_after is not None and index == self.fail_after:
                raise ConnectionError("connection reset")
            yield chunk

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def messages() -> list[ChatMessage]:
    return [
        ChatMessage(role=Role.USER, content="第一句。"),
        ChatMessage(role=Role.ASSISTANT, content='{"en": [], "zh": [], "words": []}'),
        ChatMessage(role=Role.USER, content="时近半夜，硬卧车厢熄灯。"),
    ]


def test_fake_backend_satisfies_contract() -> None:
    assert isinstance(FakeStreamingBackend([]), StreamingBackend)


def test_build_messages_prepends_system_prompt(messages: list[ChatMessage]) -> None:
    """Test the system prompt leads and only recent messages are kept."""
    aggregator = StreamAggregator(FakeStreamingBackend([]), system_prompt="SYS", history_limit=2)

    payload = aggregator.build_messages(messages)

    assert payload == [
        {"role": "system", "content": "SYS"},
        {"role": "assistant", "content": '{"en": [], "zh": [], "words": []}'},
        {"role": "user", "content": "时近半夜，硬卧车厢熄灯。"},
    ]


def test_set_system_prompt(messages: list[ChatMessage]) -> None:
    aggregator = StreamAggregator(FakeStreamingBackend([]))
    aggregator.set_system_prompt("Translate.")
    assert aggregator.build_messages(messages)[0]["content"] == "Translate."


async def test_aggregate_concatenates_in_order(messages: list[ChatMessage]) -> None:
    """Test chunks are joined in arrival order without dedup."""
    backend = FakeStreamingBackend(['{"en"', ': [], ', ': [], ', '"x"}'])
    aggregator = StreamAggregator(backend, temperature=0.3)

    raw = await aggregator.aggregate(messages)

    assert raw == '{"en": [], : [], "x"}'
    assert backend.calls[0][1] == 0.3


async def test_aggregate_calls_on_text(messages: list[ChatMessage]) -> None:
    """Test the callback sees every chunk."""
    seen: list[str] = []
    aggregator = StreamAggregator(FakeStreamingBackend(["a", "b", "c"]))

    await aggregator.aggregate(messages, on_text=seen.append)

    assert seen == ["a", "b", "c"]


async def test_aggregate_discards_partial_text_on_error(messages: list[ChatMessage]) -> None:
    """Test a mid-stream failure raises instead of returning partial text."""
    seen: list[str] = []
    aggregator = StreamAggregator(FakeStreamingBackend(["a", "b", "c"], fail_after=2))

    with pytest.raises(StreamError) as exc_info:
        await aggregator.aggregate(messages, on_text=seen.append)

    assert exc_info.value.code == ErrorCode.STREAM_FAILED
    assert exc_info.value.details["chunks_received"] == 2
    assert isinstance(exc_info.value.__cause__, ConnectionError)


async def test_stream_is_lazy(messages: list[ChatMessage]) -> None:
    """Test nothing is sent until iteration starts."""
    backend = FakeStreamingBackend(["a", "b"])
    aggregator = StreamAggregator(backend)

    stream = aggregator.stream(messages)
    assert backend.calls == []

    assert [chunk async for chunk in stream] == ["a", "b"]
    assert len(backend.calls) == 1


async def test_aggregate_empty_stream(messages: list[ChatMessage]) -> None:
    aggregator = StreamAggregator(FakeStreamingBackend([]))
    assert await aggregator.aggregate(messages) == ""
