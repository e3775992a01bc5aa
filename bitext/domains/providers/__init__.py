"""
Providers Domain - Model registry and backend adapter selection.

This domain handles:
- Static model → backend family lookup
- Endpoint and credential checks at resolution time
- Choosing the adapter (streaming or submit/poll) for a model
"""

from .contracts import PollingBackend, StreamingBackend
from .factory import BackendFactory
from .models import (
    BackendFamily,
    BackendKind,
    ChatHandle,
    ChatRecord,
    FamilySpec,
    ModelDescriptor,
)
from .registry import DEFAULT_FAMILIES, ProviderRegistry, load_families

__all__ = [
    # Contracts
    "StreamingBackend",
    "PollingBackend",
    # Models
    "BackendFamily",
    "BackendKind",
    "FamilySpec",
    "ModelDescriptor",
    "ChatHandle",
    "ChatRecord",
    # Implementations
    "ProviderRegistry",
    "BackendFactory",
    "DEFAULT_FAMILIES",
    "load_families",
]
