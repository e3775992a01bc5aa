"""
LLM Adapter - Streaming access to synchronous chat backends via LiteLLM.

Usage:
    from bitext.adapters.llm import LiteLLMClient

    client = LiteLLMClient("openai/gpt-4o", api_key="sk-...")
    async for chunk in client.stream_text(messages, temperature=0.8):
        ...
"""

from .client import LiteLLMClient

__all__ = ["LiteLLMClient"]
