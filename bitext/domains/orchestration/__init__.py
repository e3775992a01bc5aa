"""
Orchestration Domain - Running a translation end to end.

This domain handles:
- Request validation
- Streaming aggregation for synchronous backends
- Submit/poll/fetch for asynchronous chat backends
- Wiring extraction and vocabulary normalization into one call
"""

from .contracts import Translator
from .models import (
    ChatMessage,
    ChatSession,
    PollOutcome,
    Role,
    SessionStatus,
    TranslationRequest,
)
from .orchestrator import TranslationOrchestrator
from .polling import PollingOrchestrator
from .prompts import SYSTEM_PROMPT
from .stream import StreamAggregator

__all__ = [
    # Contracts
    "Translator",
    # Models
    "ChatMessage",
    "ChatSession",
    "PollOutcome",
    "Role",
    "SessionStatus",
    "TranslationRequest",
    # Implementations
    "TranslationOrchestrator",
    "PollingOrchestrator",
    "StreamAggregator",
    "SYSTEM_PROMPT",
]
