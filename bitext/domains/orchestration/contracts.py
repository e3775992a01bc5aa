"""
Orchestration Contracts - Interfaces for orchestration domain.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from bitext.domains.extraction.models import TranslationResult

from .models import TranslationRequest


@runtime_checkable
class Translator(Protocol):
    """Contract for translation entry points used by the interfaces."""

    async def translate(
        self,
        request: TranslationRequest,
        on_text: Callable[[str], None] | None = None,
    ) -> TranslationResult:
        """
        Translate a validated request.

        Args:
            request: Text, model and history
            on_text: Optional per-chunk callback

        Returns:
            Translation result
        """
        ...

    async def translate_text(
        self,
        text: Any,
        model_id: str | None = None,
        on_text: Callable[[str], None] | None = None,
    ) -> TranslationResult:
        """Validate and translate a single text."""
        ...

    async def translate_messages(
        self,
        messages: list[Any],
        model_id: str | None = None,
        on_text: Callable[[str], None] | None = None,
    ) -> TranslationResult:
        """Validate and translate the last message of a transcript."""
        ...
