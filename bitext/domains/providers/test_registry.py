"""
Tests for the provider registry and backend factory.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bitext.adapters.coze import CozeClient
from bitext.adapters.llm import LiteLLMClient
from bitext.config.errors import (
    ErrorCode,
    MissingCredentialError,
    MissingEndpointError,
    UnsupportedModelError,
)
from bitext.config.settings import Settings

from .factory import BackendFactory
from .models import BackendFamily, BackendKind, ChatHandle, FamilySpec
from .registry import DEFAULT_FAMILIES, ProviderRegistry, load_families

CREDENTIALS = {
    "openai_api_key": "sk-openai",
    "anthropic_api_key": "sk-ant",
    "siliconflow_api_key": "sk-sf",
    "coze_api_token": "pat-coze",
    "coze_bot_id": "bot-1",
}


@pytest.fixture
def registry() -> ProviderRegistry:
    return ProviderRegistry(
        load_families(),
        credentials=CREDENTIALS,
        required_settings={BackendKind.POLLING: ("coze_bot_id",)},
    )


# --- Table Tests ---


def test_default_table_families() -> None:
    """Test every family appears once in the built-in table."""
    families = [spec.family for spec in load_families()]
    assert sorted(f.value for f in families) == sorted(f.value for f in BackendFamily)


def test_load_families_from_file(tmp_path: Path) -> None:
    """Test a JSON registry file replaces the built-in table."""
    path = tmp_path / "registry.json"
    path.write_text(
        json.dumps(
            [
                {
                    "family": "DeepSeek",
                    "kind": "streaming",
                    "base_endpoint": "https://llm.internal/v1",
                    "credential": "deepseek_api_key",
                    "litellm_prefix": "deepseek",
                    "models": ["deepseek-chat"],
                }
            ]
        ),
        encoding="utf-8",
    )

    families = load_families(path)

    assert families == [
        FamilySpec(
            family=BackendFamily.DEEPSEEK,
            kind=BackendKind.STREAMING,
            base_endpoint="https://llm.internal/v1",
            credential="deepseek_api_key",
            litellm_prefix="deepseek",
            models=["deepseek-chat"],
        )
    ]


# --- Resolution Tests ---


def test_resolve_streaming_model(registry: ProviderRegistry) -> None:
    descriptor = registry.resolve("gpt-4o")

    assert descriptor.family == BackendFamily.OPENAI
    assert descriptor.kind == BackendKind.STREAMING
    assert descriptor.base_endpoint == "https://api.openai.com/v1"
    assert descriptor.credential_ref == "openai_api_key"
    assert descriptor.litellm_model == "openai/gpt-4o"
    assert descriptor.is_streaming


def test_resolve_model_with_slash(registry: ProviderRegistry) -> None:
    """Test OpenAI-compatible hosts keep the vendor path in the model name."""
    descriptor = registry.resolve("deepseek-ai/DeepSeek-V3")

    assert descriptor.family == BackendFamily.SILICONFLOW
    assert descriptor.litellm_model == "openai/deepseek-ai/DeepSeek-V3"
    assert descriptor.send_endpoint


def test_resolve_polling_model(registry: ProviderRegistry) -> None:
    descriptor = registry.resolve("coze")

    assert descriptor.kind == BackendKind.POLLING
    assert descriptor.base_endpoint == "https://api.coze.cn/v3"
    assert not descriptor.is_streaming


def test_resolve_unsupported_model(registry: ProviderRegistry) -> None:
    with pytest.raises(UnsupportedModelError) as exc_info:
        registry.resolve("gpt-5-turbo")

    error = exc_info.value
    assert error.code == ErrorCode.UNSUPPORTED_MODEL
    assert "gpt-4o" in error.details["available"]


def test_resolve_missing_endpoint() -> None:
    spec = FamilySpec(
        family=BackendFamily.XAI,
        kind=BackendKind.STREAMING,
        credential="xai_api_key",
        models=["grok-2-1212"],
    )
    registry = ProviderRegistry([spec], credentials={"xai_api_key": "key"})

    with pytest.raises(MissingEndpointError) as exc_info:
        registry.resolve("grok-2-1212")

    assert exc_info.value.code == ErrorCode.MISSING_ENDPOINT


def test_resolve_missing_credential(registry: ProviderRegistry) -> None:
    with pytest.raises(MissingCredentialError) as exc_info:
        registry.resolve("grok-2-1212")

    assert exc_info.value.setting == "xai_api_key"
    assert exc_info.value.family == "xAI"


def test_resolve_polling_requires_bot_id() -> None:
    registry = ProviderRegistry(
        load_families(),
        credentials={"coze_api_token": "pat-coze"},
        required_settings={BackendKind.POLLING: ("coze_bot_id",)},
    )

    with pytest.raises(MissingCredentialError) as exc_info:
        registry.resolve("coze")

    assert exc_info.value.setting == "coze_bot_id"


def test_endpoint_override() -> None:
    """Test an override replaces the host and forces sending it."""
    registry = ProviderRegistry(
        load_families(),
        credentials=CREDENTIALS,
        endpoint_overrides={"Anthropic": "https://proxy.example.com/anthropic/"},
    )

    descriptor = registry.resolve("claude-3-5-haiku-latest")

    assert descriptor.base_endpoint == "https://proxy.example.com/anthropic"
    assert descriptor.send_endpoint


def test_vendor_endpoint_not_sent_by_default(registry: ProviderRegistry) -> None:
    assert not registry.resolve("claude-3-5-haiku-latest").send_endpoint


def test_models_grouped_by_family(registry: ProviderRegistry) -> None:
    models = registry.models()

    assert models["Coze"] == ["coze"]
    assert "deepseek-reasoner" in models["DeepSeek"]
    assert len(registry.model_ids()) == sum(len(row["models"]) for row in DEFAULT_FAMILIES)


def test_has_credential(registry: ProviderRegistry) -> None:
    assert registry.has_credential("gpt-4o")
    assert not registry.has_credential("deepseek-chat")
    assert not registry.has_credential("unknown")


def test_from_settings() -> None:
    settings = Settings(
        _env_file=None,
        deepseek_api_key="sk-ds",
        endpoint_overrides={"DeepSeek": "https://ds.example.com/v1"},
    )

    descriptor = ProviderRegistry.from_settings(settings).resolve("deepseek-chat")

    assert descriptor.base_endpoint == "https://ds.example.com/v1"


# --- Factory Tests ---


def test_factory_builds_litellm_client(registry: ProviderRegistry) -> None:
    factory = BackendFactory(registry, timeout=12.0)

    backend = factory.create(registry.resolve("deepseek-ai/DeepSeek-R1"))

    assert isinstance(backend, LiteLLMClient)
    assert backend.model == "openai/deepseek-ai/DeepSeek-R1"
    assert backend.api_base == "https://api.siliconflow.cn/v1"
    assert backend.timeout == 12.0


def test_factory_omits_vendor_endpoint(registry: ProviderRegistry) -> None:
    backend = BackendFactory(registry).create(registry.resolve("claude-3-opus-latest"))

    assert isinstance(backend, LiteLLMClient)
    assert backend.api_base is None


def test_factory_builds_coze_client(registry: ProviderRegistry) -> None:
    backend = BackendFactory(registry).create(registry.resolve("coze"))

    assert isinstance(backend, CozeClient)
    assert backend.bot_id == "bot-1"
    assert backend.base_url == "https://api.coze.cn/v3"


def test_factory_constructor_override(registry: ProviderRegistry) -> None:
    sentinel = object()
    factory = BackendFactory(registry, constructors={BackendKind.POLLING: lambda d: sentinel})

    assert factory.create(registry.resolve("coze")) is sentinel


def test_chat_handle_completeness() -> None:
    assert ChatHandle(conversation_id="c", chat_id="m").is_complete
    assert not ChatHandle(conversation_id="c").is_complete
    assert not ChatHandle(conversation_id="", chat_id="m").is_complete
