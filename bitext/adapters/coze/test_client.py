"""
Tests for Coze Client adapter.
"""

from __future__ import annotations

import json

import httpx
import pytest

from bitext.config.errors import PollTransportError
from bitext.domains.providers.contracts import PollingBackend

from .client import CozeClient


class RecordingHandler:
    """httpx MockTransport handler returning canned JSON per path."""

    def __init__(self, responses: dict[str, httpx.Response]) -> None:
        self.responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.get(request.url.path, httpx.Response(404, text="not found"))


def make_client(handler: RecordingHandler) -> CozeClient:
    return CozeClient(
        api_token="pat-test",
        bot_id="bot-1",
        base_url="https://api.coze.test/v3/",
        transport=httpx.MockTransport(handler),
    )


def test_client_satisfies_contract() -> None:
    assert isinstance(CozeClient(api_token="t", bot_id="b"), PollingBackend)


async def test_submit_sends_chat_payload() -> None:
    """Test the chat request body, auth header and returned ids."""
    handler = RecordingHandler(
        {
            "/v3/chat": httpx.Response(
                200,
                json={"code": 0, "data": {"id": "chat-1", "conversation_id": "conv-1", "status": "created"}},
            )
        }
    )
    client = make_client(handler)

    handle = await client.submit("时近半夜，硬卧车厢熄灯。")
    await client.close()

    assert handle.conversation_id == "conv-1"
    assert handle.chat_id == "chat-1"

    request = handler.requests[0]
    body = json.loads(request.content)
    assert request.method == "POST"
    assert request.headers["Authorization"] == "Bearer pat-test"
    assert body["bot_id"] == "bot-1"
    assert body["user_id"].startswith("user_")
    assert body["stream"] is False
    assert body["auto_save_history"] is True
    assert body["additional_messages"] == [
        {"role": "user", "content": "时近半夜，硬卧车厢熄灯。", "content_type": "text"}
    ]


async def test_submit_without_ids() -> None:
    """Test a body without data yields an incomplete handle."""
    handler = RecordingHandler({"/v3/chat": httpx.Response(200, json={"code": 4100, "msg": "bad token"})})
    client = make_client(handler)

    handle = await client.submit("你好")

    assert not handle.is_complete


async def test_retrieve_status() -> None:
    handler = RecordingHandler(
        {"/v3/chat/retrieve": httpx.Response(200, json={"data": {"status": "in_progress"}})}
    )
    client = make_client(handler)

    status = await client.retrieve_status("conv-1", "chat-1")

    assert status == "in_progress"
    assert handler.requests[0].url.params["conversation_id"] == "conv-1"
    assert handler.requests[0].url.params["chat_id"] == "chat-1"


async def test_list_messages() -> None:
    handler = RecordingHandler(
        {
            "/v3/chat/message/list": httpx.Response(
                200,
                json={
                    "data": [
                        {"role": "assistant", "type": "answer", "content": "{}"},
                        {"role": "assistant", "type": "follow_up", "content": None},
                    ]
                },
            )
        }
    )
    client = make_client(handler)

    records = await client.list_messages("conv-1", "chat-1")

    assert [(r.type, r.content) for r in records] == [("answer", "{}"), ("follow_up", "")]


async def test_cancel_posts_ids() -> None:
    handler = RecordingHandler({"/v3/chat/cancel": httpx.Response(200, json={"code": 0})})
    client = make_client(handler)

    await client.cancel("conv-1", "chat-1")

    assert json.loads(handler.requests[0].content) == {"conversation_id": "conv-1", "chat_id": "chat-1"}


async def test_http_error_status_raises() -> None:
    """Test non-2xx responses become transport errors."""
    handler = RecordingHandler({"/v3/chat/retrieve": httpx.Response(503, text="unavailable")})
    client = make_client(handler)

    with pytest.raises(PollTransportError) as exc_info:
        await client.retrieve_status("conv-1", "chat-1")

    assert exc_info.value.details["status_code"] == 503


async def test_connection_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = CozeClient(api_token="t", bot_id="b", transport=httpx.MockTransport(handler))

    with pytest.raises(PollTransportError):
        await client.submit("你好")


async def test_non_json_body_raises() -> None:
    handler = RecordingHandler({"/v3/chat/retrieve": httpx.Response(200, text="<html>")})
    client = make_client(handler)

    with pytest.raises(PollTransportError):
        await client.retrieve_status("conv-1", "chat-1")


async def test_close_is_idempotent() -> None:
    client = make_client(RecordingHandler({}))
    await client.close()
    await client.close()
