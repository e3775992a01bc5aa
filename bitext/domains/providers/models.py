"""
Provider Models - Data types for the provider registry.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class BackendFamily(str, Enum):
    """Groups of models sharing one API shape."""

    OPENAI = "OpenAI"
    DEEPSEEK = "DeepSeek"
    ANTHROPIC = "Anthropic"
    XAI = "xAI"
    GOOGLE = "Google"
    SILICONFLOW = "SiliconFlow"
    COZE = "Coze"


class BackendKind(str, Enum):
    """How a family delivers its answer."""

    STREAMING = "streaming"  # one call, incremental text chunks
    POLLING = "polling"  # submit, poll status, fetch messages


class FamilySpec(BaseModel):
    """One row of the registry table."""

    family: BackendFamily
    kind: BackendKind
    models: list[str] = Field(default_factory=list)
    base_endpoint: str | None = None
    credential: str  # Settings field holding the API key/token
    litellm_prefix: str = ""
    # False when LiteLLM already knows the vendor URL and a custom one would
    # change its routing
    send_endpoint: bool = True

    model_config = {"frozen": True}


class ModelDescriptor(BaseModel):
    """Resolved model: everything needed to build an adapter for it."""

    model_id: str
    family: BackendFamily
    kind: BackendKind
    base_endpoint: str
    credential_ref: str
    litellm_prefix: str = ""
    send_endpoint: bool = True

    model_config = {"frozen": True, "protected_namespaces": ()}

    @property
    def litellm_model(self) -> str:
        """Model name as LiteLLM routes it (e.g. "deepseek/deepseek-chat")."""
        if not self.litellm_prefix:
            return self.model_id
        return f"{self.litellm_prefix}/{self.model_id}"

    @property
    def is_streaming(self) -> bool:
        return self.kind == BackendKind.STREAMING


class ChatHandle(BaseModel):
    """Identifiers returned by a polling backend's submit call."""

    conversation_id: str | None = None
    chat_id: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.conversation_id and self.chat_id)


class ChatRecord(BaseModel):
    """One message from a polling backend's message list."""

    role: str = ""
    type: str = ""
    content: str = ""
