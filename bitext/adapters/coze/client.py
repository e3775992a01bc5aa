"""
Coze Client - Submit/poll chat API (Coze v3).

Features:
- Async HTTP client with bearer-token auth
- Non-streaming chat submission with server-side history
- Status retrieval and message listing for a submitted chat
- Best-effort chat cancellation
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from bitext.config.errors import PollTransportError
from bitext.domains.providers.models import ChatHandle, ChatRecord

logger = logging.getLogger(__name__)

__all__ = ["CozeClient"]


class CozeClient:
    """
    Coze chat API client.

    Example:
        >>> client = CozeClient(api_token="pat_xxx", bot_id="7420000000")
        >>> handle = await client.submit("时近半夜，硬卧车厢熄灯。")
        >>> status = await client.retrieve_status(handle.conversation_id, handle.chat_id)
    """

    def __init__(
        self,
        api_token: str,
        bot_id: str,
        base_url: str = "https://api.coze.cn/v3",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Coze client.

        Args:
            api_token: Personal access token
            bot_id: Bot that performs the translation
            base_url: API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.bot_id = bot_id
        self.timeout = timeout
        self._api_token = api_token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "Authorization": f"Bearer {self._api_token}",
                    "Content-Type": "application/json",
                },
            )
        return self._client

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request and return the decoded JSON body."""
        client = await self._get_client()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise PollTransportError(
                f"Coze request {method} {path} failed: {e}",
                {"path": path},
            ) from e

        if response.is_error:
            body = response.text[:200]
            logger.error("Coze error: %s %s %s", response.status_code, path, body)
            raise PollTransportError(
                f"Coze request {path} failed with status {response.status_code}: {body}",
                {"path": path, "status_code": response.status_code},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise PollTransportError(
                f"Coze returned a non-JSON body for {path}",
                {"path": path},
            ) from e

        if not isinstance(data, dict):
            raise PollTransportError(
                f"Coze returned an unexpected body for {path}",
                {"path": path},
            )

        if data.get("code"):
            logger.warning("Coze %s returned code=%s msg=%s", path, data["code"], data.get("msg"))
        return data

    async def submit(self, text: str) -> ChatHandle:
        """
        Start a chat with the bot.

        Args:
            text: User message content

        Returns:
            Conversation/chat identifiers; either may be missing if the
            backend answered without them
        """
        payload = {
            "bot_id": self.bot_id,
            "user_id": f"user_{int(time.time() * 1000)}",
            "stream": False,
            "auto_save_history": True,
            "additional_messages": [
                {"role": "user", "content": text, "content_type": "text"},
            ],
        }

        data = await self._request("POST", "/chat", json=payload)
        chat = data.get("data") or {}

        handle = ChatHandle(
            conversation_id=chat.get("conversation_id"),
            chat_id=chat.get("id"),
        )
        logger.debug(
            "Coze chat submitted: conversation_id=%s chat_id=%s",
            handle.conversation_id,
            handle.chat_id,
        )
        return handle

    async def retrieve_status(self, conversation_id: str, chat_id: str) -> str:
        """Get the current status of a chat."""
        data = await self._request(
            "GET",
            "/chat/retrieve",
            params={"conversation_id": conversation_id, "chat_id": chat_id},
        )
        return (data.get("data") or {}).get("status", "")

    async def list_messages(self, conversation_id: str, chat_id: str) -> list[ChatRecord]:
        """List the messages of a chat."""
        data = await self._request(
            "GET",
            "/chat/message/list",
            params={"conversation_id": conversation_id, "chat_id": chat_id},
        )
        return [
            ChatRecord(
                role=item.get("role") or "",
                type=item.get("type") or "",
                content=item.get("content") or "",
            )
            for item in data.get("data") or []
            if isinstance(item, dict)
        ]

    async def cancel(self, conversation_id: str, chat_id: str) -> None:
        """Cancel an in-progress chat."""
        await self._request(
            "POST",
            "/chat/cancel",
            json={"conversation_id": conversation_id, "chat_id": chat_id},
        )

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
