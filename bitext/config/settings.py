"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables and .env files. Vendor credentials use
their conventional unprefixed names; tuning knobs use the BITEXT_ prefix.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Streaming backend credentials
    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    deepseek_api_key: str | None = Field(default=None, validation_alias="DEEPSEEK_API_KEY")
    anthropic_api_key: str | None = Field(default=None, validation_alias="ANTHROPIC_API_KEY")
    xai_api_key: str | None = Field(default=None, validation_alias="XAI_API_KEY")
    google_api_key: str | None = Field(default=None, validation_alias="GOOGLE_API_KEY")
    siliconflow_api_key: str | None = Field(
        default=None, validation_alias="SILICONFLOW_API_KEY"
    )

    # Coze (submit/poll backend)
    coze_api_token: str | None = Field(default=None, validation_alias="COZE_API_TOKEN")
    coze_bot_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("COZE_BOT_ID", "NEXT_PUBLIC_COZE_BOT_ID"),
    )

    # Translation
    default_model: str = "coze"
    temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    history_limit: int = Field(default=20, ge=1)

    # Polling
    poll_interval_seconds: float = Field(default=2.0, gt=0)
    poll_max_attempts: int = Field(default=15, ge=1)
    request_timeout_seconds: float = 60.0

    # Provider registry
    registry_path: Path | None = None
    endpoint_overrides: dict[str, str] = Field(default_factory=dict)

    # Logging
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="BITEXT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def credential(self, name: str) -> str | None:
        """Look up a credential setting by field name, treating blanks as unset."""
        value = getattr(self, name, None)
        if isinstance(value, str) and value.strip():
            return value
        return None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
