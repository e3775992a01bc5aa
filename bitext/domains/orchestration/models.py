"""
Orchestration Models - Data types for orchestration domain.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from bitext.config.errors import ValidationError

MAX_SOURCE_LENGTH = 1024


def _error_list(error: PydanticValidationError) -> list[dict[str, str]]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in error.errors()
    ]


class Role(str, Enum):
    """Chat message roles."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """One turn of a conversation."""

    role: Role = Role.USER
    content: str

    model_config = {"frozen": True}

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class TranslationRequest(BaseModel):
    """
    Validated translation input.

    Build with ``parse`` or ``from_messages`` to get taxonomy errors
    instead of pydantic's.
    """

    source_text: str = Field(max_length=MAX_SOURCE_LENGTH)
    model_id: str
    history: tuple[ChatMessage, ...] = ()

    model_config = {"frozen": True, "protected_namespaces": ()}

    @field_validator("source_text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("source text must not be empty")
        return value

    @field_validator("model_id")
    @classmethod
    def _model_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("model must not be empty")
        return value

    @classmethod
    def parse(
        cls,
        source_text: Any,
        model_id: Any,
        history: Any = (),
    ) -> TranslationRequest:
        """
        Validate raw input into a request.

        Raises:
            ValidationError: If the text is empty, too long or malformed
        """
        try:
            return cls(source_text=source_text, model_id=model_id, history=history)
        except PydanticValidationError as e:
            errors = _error_list(e)
            message = errors[0]["message"] if errors else "Invalid translation request"
            raise ValidationError(message, {"errors": errors}) from e

    @classmethod
    def from_messages(
        cls,
        messages: list[Any],
        model_id: Any,
    ) -> TranslationRequest:
        """
        Build a request from a chat transcript.

        The last message is the text to translate; earlier ones become
        history.

        Raises:
            ValidationError: If there are no messages or any is malformed
        """
        if not messages:
            raise ValidationError("No messages provided")

        try:
            turns = [
                message if isinstance(message, ChatMessage) else ChatMessage.model_validate(message)
                for message in messages
            ]
        except PydanticValidationError as e:
            raise ValidationError("Invalid message format", {"errors": _error_list(e)}) from e

        return cls.parse(turns[-1].content, model_id, tuple(turns[:-1]))

    def messages(self) -> list[ChatMessage]:
        """History followed by the text to translate."""
        return [*self.history, ChatMessage(role=Role.USER, content=self.source_text)]


class SessionStatus(str, Enum):
    """Lifecycle of a submit/poll chat session."""

    SUBMITTED = "submitted"
    POLLING = "polling"
    COMPLETED = "completed"
    TIMEOUT = "timeout"
    FAILED = "failed"


class ChatSession(BaseModel):
    """Server-side chat being polled; mutated only by the poller."""

    conversation_id: str
    chat_id: str
    status: SessionStatus = SessionStatus.SUBMITTED
    attempts: int = 0


class PollOutcome(BaseModel):
    """Result of a polling run: an answer, or degraded when ids were missing."""

    raw_answer: str | None = None
    session: ChatSession | None = None

    @property
    def degraded(self) -> bool:
        return self.raw_answer is None
