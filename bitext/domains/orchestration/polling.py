"""
Polling Orchestrator - Drive a submit/poll/fetch chat to its answer.

submitted -> polling -> completed | timeout | failed

Polls are strictly sequential with a fixed wait after every poll that is
not complete. A transport error ends the session without retry.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from bitext.config.errors import (
    BitextError,
    NoAnswerFoundError,
    PollingTimeoutError,
    PollTransportError,
)
from bitext.domains.providers.contracts import PollingBackend

from .models import ChatSession, PollOutcome, SessionStatus

logger = logging.getLogger(__name__)

__all__ = ["PollingOrchestrator", "COMPLETED_STATUS", "TERMINAL_STATUSES"]

T = TypeVar("T")

COMPLETED_STATUS = "completed"
TERMINAL_STATUSES = frozenset({"failed", "canceled", "requires_action"})
ANSWER_TYPE = "answer"


class PollingOrchestrator:
    """
    Runs one chat session against a polling backend.

    Example:
        >>> poller = PollingOrchestrator(coze_client)
        >>> outcome = await poller.run("时近半夜，硬卧车厢熄灯。")
        >>> outcome.degraded
        False
    """

    def __init__(
        self,
        backend: PollingBackend,
        interval_seconds: float = 2.0,
        max_attempts: int = 15,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            backend: Submit/poll adapter
            interval_seconds: Wait between polls
            max_attempts: Polls before giving up
            sleep: Awaitable used for the wait
        """
        self._backend = backend
        self.interval_seconds = interval_seconds
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._background: set[asyncio.Task[None]] = set()
        # Set once a background cancel owns the backend and will close it.
        self.closes_backend = False

    async def _call(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        try:
            return await call()
        except BitextError:
            raise
        except Exception as e:
            logger.error("Backend %s failed: %s", operation, e)
            raise PollTransportError(
                f"{operation} failed: {e}",
                {"operation": operation, "error_type": type(e).__name__},
            ) from e

    async def run(self, text: str) -> PollOutcome:
        """
        Submit text and wait for the answer.

        Args:
            text: Text to send to the bot

        Returns:
            Outcome with the raw answer, or degraded when the backend
            returned no session ids

        Raises:
            PollTransportError: If any backend call fails
            PollingTimeoutError: If the chat never completes
            NoAnswerFoundError: If the completed chat has no answer message
        """
        handle = await self._call("submit", lambda: self._backend.submit(text))

        if not handle.is_complete:
            logger.warning(
                "Submit returned incomplete ids (conversation_id=%s, chat_id=%s); degrading",
                handle.conversation_id,
                handle.chat_id,
            )
            return PollOutcome()

        session = ChatSession(
            conversation_id=handle.conversation_id or "",
            chat_id=handle.chat_id or "",
        )
        logger.info("Chat submitted: conversation=%s chat=%s", session.conversation_id, session.chat_id)

        try:
            await self.wait_for_completion(session)
            raw_answer = await self.fetch_answer(session)
        except asyncio.CancelledError:
            if session.status != SessionStatus.COMPLETED:
                session.status = SessionStatus.FAILED
                self._schedule_cancel(session)
            raise

        return PollOutcome(raw_answer=raw_answer, session=session)

    async def wait_for_completion(self, session: ChatSession) -> None:
        """
        Poll until the chat completes.

        Raises:
            PollTransportError: On transport failure or a terminal status
            PollingTimeoutError: After ``max_attempts`` polls
        """
        session.status = SessionStatus.POLLING

        while session.attempts < self.max_attempts:
            session.attempts += 1
            try:
                status = await self._call(
                    "retrieve",
                    lambda: self._backend.retrieve_status(session.conversation_id, session.chat_id),
                )
            except BitextError:
                session.status = SessionStatus.FAILED
                raise

            logger.debug("Poll %d/%d: status=%s", session.attempts, self.max_attempts, status)

            if status == COMPLETED_STATUS:
                session.status = SessionStatus.COMPLETED
                return

            if status in TERMINAL_STATUSES:
                session.status = SessionStatus.FAILED
                raise PollTransportError(
                    f"Chat ended with status '{status}'",
                    {"status": status, "attempts": session.attempts},
                )

            await self._sleep(self.interval_seconds)

        session.status = SessionStatus.TIMEOUT
        logger.warning("Polling timed out after %d attempts", session.attempts)
        raise PollingTimeoutError(self.max_attempts, self.interval_seconds)

    async def fetch_answer(self, session: ChatSession) -> str:
        """
        Return the content of the first answer message.

        Raises:
            NoAnswerFoundError: If no message has type "answer"
        """
        records = await self._call(
            "list_messages",
            lambda: self._backend.list_messages(session.conversation_id, session.chat_id),
        )

        for record in records:
            if record.type == ANSWER_TYPE:
                return record.content

        logger.warning("No answer among %d messages", len(records))
        raise NoAnswerFoundError(
            details={"message_types": [record.type for record in records]},
        )

    def _schedule_cancel(self, session: ChatSession) -> None:
        self.closes_backend = True
        task = asyncio.get_running_loop().create_task(self._cancel_quietly(session))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _cancel_quietly(self, session: ChatSession) -> None:
        try:
            await self._backend.cancel(session.conversation_id, session.chat_id)
            logger.info("Cancelled abandoned chat %s", session.chat_id)
        except Exception as e:
            logger.warning("Failed to cancel chat %s: %s", session.chat_id, e)
        finally:
            await self._backend.close()
