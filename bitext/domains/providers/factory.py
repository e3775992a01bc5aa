"""
Backend Factory - Build the adapter for a resolved model.

Adapter constructors are looked up by backend kind, once per resolution.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from .contracts import PollingBackend, StreamingBackend
from .models import BackendKind, ModelDescriptor

if TYPE_CHECKING:
    from .registry import ProviderRegistry

logger = logging.getLogger(__name__)

__all__ = ["BackendFactory"]

Backend = StreamingBackend | PollingBackend


class BackendFactory:
    """
    Creates backend adapters from model descriptors.

    Example:
        >>> factory = BackendFactory(registry)
        >>> backend = factory.create(registry.resolve("gpt-4o"))
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        timeout: float = 60.0,
        constructors: dict[BackendKind, Callable[[ModelDescriptor], Backend]] | None = None,
    ) -> None:
        """
        Initialize factory.

        Args:
            registry: Registry holding the credentials
            timeout: Network timeout passed to adapters
            constructors: Override adapter constructors per backend kind
        """
        self._registry = registry
        self._timeout = timeout
        self._constructors: dict[BackendKind, Callable[[ModelDescriptor], Backend]] = {
            BackendKind.STREAMING: self._create_streaming,
            BackendKind.POLLING: self._create_polling,
        }
        if constructors:
            self._constructors.update(constructors)

    def create(self, descriptor: ModelDescriptor) -> Backend:
        """Create the adapter for a descriptor."""
        constructor = self._constructors[descriptor.kind]
        logger.debug(
            "Creating %s backend for %s (%s)",
            descriptor.kind.value,
            descriptor.model_id,
            descriptor.family.value,
        )
        return constructor(descriptor)

    def _create_streaming(self, descriptor: ModelDescriptor) -> StreamingBackend:
        from bitext.adapters.llm import LiteLLMClient

        return LiteLLMClient(
            model=descriptor.litellm_model,
            api_key=self._registry.credential(descriptor.credential_ref),
            api_base=descriptor.base_endpoint if descriptor.send_endpoint else None,
            timeout=self._timeout,
        )

    def _create_polling(self, descriptor: ModelDescriptor) -> PollingBackend:
        from bitext.adapters.coze import CozeClient

        return CozeClient(
            api_token=self._registry.credential(descriptor.credential_ref),
            bot_id=self._registry.credential("coze_bot_id"),
            base_url=descriptor.base_endpoint,
            timeout=self._timeout,
        )
