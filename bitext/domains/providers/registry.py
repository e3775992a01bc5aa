"""
Provider Registry - Static model → backend family lookup.

The registry is built once from a data table (or a JSON file with the same
shape) and is read-only afterwards, so concurrent lookups need no locking.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from bitext.config.errors import (
    MissingCredentialError,
    MissingEndpointError,
    UnsupportedModelError,
)

from .models import BackendFamily, BackendKind, FamilySpec, ModelDescriptor

if TYPE_CHECKING:
    from bitext.config import Settings

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_FAMILIES", "ProviderRegistry", "load_families"]


DEFAULT_FAMILIES: list[dict] = [
    {
        "family": "OpenAI",
        "kind": "streaming",
        "base_endpoint": "https://api.openai.com/v1",
        "credential": "openai_api_key",
        "litellm_prefix": "openai",
        "models": ["gpt-4o", "gpt-4o-mini", "o1", "o1-mini", "o1-preview", "o3-mini"],
    },
    {
        "family": "DeepSeek",
        "kind": "streaming",
        "base_endpoint": "https://api.deepseek.com/v1",
        "credential": "deepseek_api_key",
        "litellm_prefix": "deepseek",
        "models": ["deepseek-chat", "deepseek-reasoner"],
    },
    {
        "family": "Anthropic",
        "kind": "streaming",
        "base_endpoint": "https://api.anthropic.com/v1",
        "credential": "anthropic_api_key",
        "litellm_prefix": "anthropic",
        "send_endpoint": False,
        "models": [
            "claude-3-7-sonnet-20250219",
            "claude-3-5-sonnet-latest",
            "claude-3-5-haiku-latest",
            "claude-3-opus-latest",
            "claude-3-haiku-20240307",
        ],
    },
    {
        "family": "xAI",
        "kind": "streaming",
        "base_endpoint": "https://api.x.ai/v1",
        "credential": "xai_api_key",
        "litellm_prefix": "xai",
        "models": ["grok-2-1212"],
    },
    {
        "family": "Google",
        "kind": "streaming",
        "base_endpoint": "https://generativelanguage.googleapis.com/v1beta",
        "credential": "google_api_key",
        "litellm_prefix": "gemini",
        "send_endpoint": False,
        "models": [
            "gemini-1.5-pro",
            "gemini-1.5-pro-latest",
            "gemini-1.5-flash",
            "gemini-1.5-flash-latest",
            "gemini-1.0-pro",
        ],
    },
    {
        # OpenAI-compatible API
        "family": "SiliconFlow",
        "kind": "streaming",
        "base_endpoint": "https://api.siliconflow.cn/v1",
        "credential": "siliconflow_api_key",
        "litellm_prefix": "openai",
        "models": [
            "deepseek-ai/DeepSeek-V3",
            "deepseek-ai/DeepSeek-R1",
            "Qwen/Qwen2-VL-72B-Instruct",
            "Qwen/Qwen2.5-72B-Instruct",
        ],
    },
    {
        "family": "Coze",
        "kind": "polling",
        "base_endpoint": "https://api.coze.cn/v3",
        "credential": "coze_api_token",
        "models": ["coze"],
    },
]


def load_families(path: Path | None = None) -> list[FamilySpec]:
    """
    Load the registry table.

    Args:
        path: Optional JSON file containing a list of family rows. The
            built-in table is used when omitted.

    Returns:
        Validated family rows
    """
    if path is None:
        rows = DEFAULT_FAMILIES
    else:
        logger.info("Loading provider registry from %s", path)
        rows = json.loads(Path(path).read_text(encoding="utf-8"))
    return [FamilySpec.model_validate(row) for row in rows]


class ProviderRegistry:
    """
    Read-only model registry.

    Example:
        >>> registry = ProviderRegistry.from_settings(get_settings())
        >>> descriptor = registry.resolve("deepseek-chat")
        >>> descriptor.family
        <BackendFamily.DEEPSEEK: 'DeepSeek'>
    """

    def __init__(
        self,
        families: Iterable[FamilySpec],
        credentials: Mapping[str, str | None] | None = None,
        endpoint_overrides: Mapping[str, str] | None = None,
        required_settings: Mapping[BackendKind, tuple[str, ...]] | None = None,
    ) -> None:
        """
        Initialize registry.

        Args:
            families: Registry rows
            credentials: Credential values keyed by setting name
            endpoint_overrides: Base endpoints keyed by family name
            required_settings: Extra settings each backend kind needs
                (e.g. the Coze bot id)
        """
        self._families: dict[BackendFamily, FamilySpec] = {}
        self._by_model: dict[str, FamilySpec] = {}
        for spec in families:
            self._families[spec.family] = spec
            for model_id in spec.models:
                if model_id in self._by_model:
                    logger.warning(
                        "Model %s listed under %s and %s; keeping %s",
                        model_id,
                        self._by_model[model_id].family.value,
                        spec.family.value,
                        self._by_model[model_id].family.value,
                    )
                    continue
                self._by_model[model_id] = spec

        self._credentials = dict(credentials or {})
        self._endpoint_overrides = dict(endpoint_overrides or {})
        self._required = dict(required_settings or {})

    @classmethod
    def from_settings(cls, settings: Settings) -> ProviderRegistry:
        """Build the registry from application settings."""
        families = load_families(settings.registry_path)
        setting_names = {spec.credential for spec in families} | {"coze_bot_id"}
        return cls(
            families,
            credentials={name: settings.credential(name) for name in setting_names},
            endpoint_overrides=settings.endpoint_overrides,
            required_settings={BackendKind.POLLING: ("coze_bot_id",)},
        )

    def resolve(self, model_id: str) -> ModelDescriptor:
        """
        Resolve a model id to its descriptor.

        Raises:
            UnsupportedModelError: Model is not in any family
            MissingEndpointError: Family has no base endpoint
            MissingCredentialError: Family credential is not configured
        """
        spec = self._by_model.get(model_id)
        if spec is None:
            raise UnsupportedModelError(model_id, {"available": self.model_ids()})

        endpoint = self._endpoint_overrides.get(spec.family.value) or spec.base_endpoint
        if not endpoint:
            raise MissingEndpointError(spec.family.value)

        for setting in (spec.credential, *self._required.get(spec.kind, ())):
            if not self._credentials.get(setting):
                raise MissingCredentialError(spec.family.value, setting)

        return ModelDescriptor(
            model_id=model_id,
            family=spec.family,
            kind=spec.kind,
            base_endpoint=endpoint.rstrip("/"),
            credential_ref=spec.credential,
            litellm_prefix=spec.litellm_prefix,
            send_endpoint=spec.send_endpoint
            or spec.family.value in self._endpoint_overrides,
        )

    def credential(self, name: str) -> str:
        """Return a credential value resolved earlier by ``resolve``."""
        value = self._credentials.get(name)
        if not value:
            raise MissingCredentialError("registry", name)
        return value

    def has_credential(self, model_id: str) -> bool:
        """Whether the model's family credential is configured."""
        spec = self._by_model.get(model_id)
        return bool(spec and self._credentials.get(spec.credential))

    def model_ids(self) -> list[str]:
        """All known model ids in table order."""
        return list(self._by_model)

    def models(self) -> dict[str, list[str]]:
        """Model ids grouped by family name."""
        return {spec.family.value: list(spec.models) for spec in self._families.values()}
