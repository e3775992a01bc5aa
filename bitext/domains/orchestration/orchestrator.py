"""
Translation Orchestrator - One request from model lookup to typed result.

Resolves the model, builds its adapter, runs the streaming or polling path,
then extracts and normalizes the answer. Errors propagate unchanged; no
partial result is ever returned.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from bitext.domains.extraction import (
    AnswerExtractor,
    StructuredExtractor,
    TranslationResult,
    normalize_vocabulary,
)
from bitext.domains.providers import BackendFactory, ProviderRegistry

from .models import TranslationRequest
from .polling import PollingOrchestrator
from .prompts import SYSTEM_PROMPT
from .stream import StreamAggregator

if TYPE_CHECKING:
    from bitext.config.settings import Settings

logger = logging.getLogger(__name__)

__all__ = ["TranslationOrchestrator"]


class TranslationOrchestrator:
    """
    Entry point for translations.

    Holds no per-request state; concurrent calls are independent.

    Example:
        >>> orchestrator = TranslationOrchestrator.from_settings()
        >>> result = await orchestrator.translate_text("时近半夜，硬卧车厢熄灯。", "gpt-4o")
        >>> result.to_payload()["en"]
        ['It was nearing midnight; the lights were out in the sleeper car.']
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        factory: BackendFactory | None = None,
        extractor: AnswerExtractor | None = None,
        *,
        default_model: str = "coze",
        system_prompt: str = SYSTEM_PROMPT,
        temperature: float = 0.8,
        history_limit: int = 20,
        poll_interval_seconds: float = 2.0,
        poll_max_attempts: int = 15,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            registry: Model registry
            factory: Adapter factory (defaults to one over ``registry``)
            extractor: Answer extractor
            default_model: Model used when a call names none
            system_prompt: Instruction for streaming backends
            temperature: Sampling temperature for streaming backends
            history_limit: Most recent messages sent to streaming backends
            poll_interval_seconds: Wait between polls
            poll_max_attempts: Polls before timing out
            sleep: Awaitable used for the poll wait
        """
        self._registry = registry
        self._factory = factory or BackendFactory(registry)
        self._extractor = extractor or StructuredExtractor()
        self.default_model = default_model
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.history_limit = history_limit
        self.poll_interval_seconds = poll_interval_seconds
        self.poll_max_attempts = poll_max_attempts
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> TranslationOrchestrator:
        """Build an orchestrator from application settings."""
        if settings is None:
            from bitext.config.settings import get_settings

            settings = get_settings()

        registry = ProviderRegistry.from_settings(settings)
        return cls(
            registry,
            BackendFactory(registry, timeout=settings.request_timeout_seconds),
            default_model=settings.default_model,
            temperature=settings.temperature,
            history_limit=settings.history_limit,
            poll_interval_seconds=settings.poll_interval_seconds,
            poll_max_attempts=settings.poll_max_attempts,
        )

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    async def translate(
        self,
        request: TranslationRequest,
        on_text: Callable[[str], None] | None = None,
    ) -> TranslationResult:
        """
        Translate a validated request.

        Args:
            request: Text, model and optional history
            on_text: Called with each streamed chunk (streaming backends only)

        Returns:
            Sentence pairs and vocabulary, or the pending placeholder when
            a polling backend returned no session ids

        Raises:
            UnsupportedModelError: Model not in the registry
            MissingEndpointError: Family has no endpoint
            MissingCredentialError: Family has no credential
            StreamError: Streaming transport failed
            PollTransportError: Submit, poll or fetch failed
            PollingTimeoutError: Chat never completed
            NoAnswerFoundError: Completed chat had no answer
            ExtractionError: Answer could not be parsed
        """
        start_time = time.time()
        descriptor = self._registry.resolve(request.model_id)
        logger.info(
            "Translating %d chars with %s (%s)",
            len(request.source_text),
            descriptor.model_id,
            descriptor.family.value,
        )

        backend = self._factory.create(descriptor)
        poller: PollingOrchestrator | None = None
        try:
            if descriptor.is_streaming:
                raw_answer = await self._aggregate(backend, request, on_text)
            else:
                poller = PollingOrchestrator(
                    backend,
                    interval_seconds=self.poll_interval_seconds,
                    max_attempts=self.poll_max_attempts,
                    sleep=self._sleep,
                )
                outcome = await poller.run(request.source_text)
                raw_answer = outcome.raw_answer
        finally:
            # A cancelled poll hands the backend to its background cancel.
            if poller is None or not poller.closes_backend:
                await backend.close()

        if raw_answer is None:
            return TranslationResult.pending(request.source_text)

        result = self._build_result(raw_answer)
        logger.info(
            "Translation complete: %d sentences, %d words in %.0fms",
            len(result.sentences_target),
            len(result.vocabulary),
            (time.time() - start_time) * 1000,
        )
        return result

    async def translate_text(
        self,
        text: Any,
        model_id: str | None = None,
        on_text: Callable[[str], None] | None = None,
    ) -> TranslationResult:
        """Validate and translate a single text."""
        request = TranslationRequest.parse(text, model_id or self.default_model)
        return await self.translate(request, on_text)

    async def translate_messages(
        self,
        messages: list[Any],
        model_id: str | None = None,
        on_text: Callable[[str], None] | None = None,
    ) -> TranslationResult:
        """Validate and translate the last message of a transcript."""
        request = TranslationRequest.from_messages(messages, model_id or self.default_model)
        return await self.translate(request, on_text)

    async def _aggregate(
        self,
        backend: Any,
        request: TranslationRequest,
        on_text: Callable[[str], None] | None,
    ) -> str:
        aggregator = StreamAggregator(
            backend,
            system_prompt=self.system_prompt,
            temperature=self.temperature,
            history_limit=self.history_limit,
        )
        return await aggregator.aggregate(request.messages(), on_text)

    def _build_result(self, raw_answer: str) -> TranslationResult:
        answer = self._extractor.extract(raw_answer)
        result = TranslationResult(
            sentences_source=answer.zh,
            sentences_target=answer.en,
            vocabulary=normalize_vocabulary(answer.words),
        )

        if not result.is_aligned:
            logger.warning(
                "Misaligned translation: %d source vs %d target sentences",
                len(result.sentences_source),
                len(result.sentences_target),
            )

        return result
