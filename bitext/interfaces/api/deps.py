"""
API Dependencies - Dependency injection for FastAPI routes.

Provides the singleton orchestrator and its registry.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from bitext.config import get_settings
from bitext.domains.orchestration import TranslationOrchestrator
from bitext.domains.providers import ProviderRegistry


@lru_cache
def get_orchestrator() -> TranslationOrchestrator:
    """Get translation orchestrator singleton."""
    return TranslationOrchestrator.from_settings(get_settings())


def get_registry(
    orchestrator: TranslationOrchestrator = Depends(get_orchestrator),
) -> ProviderRegistry:
    """Get the registry the orchestrator resolves against."""
    return orchestrator.registry
