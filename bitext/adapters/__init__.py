"""
Adapters - External service integrations.

All external API calls are wrapped here to isolate domains from third-party changes.
"""

from .coze import CozeClient
from .llm import LiteLLMClient

__all__ = [
    "CozeClient",
    "LiteLLMClient",
]
