"""Application configuration using Pydantic Settings."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal

import structlog
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

CONFIG_FILE_ENV = "SEARCHARR_CONFIG_FILE"


def json_config_settings_source(
    settings: BaseSettings | None = None,
) -> dict[str, Any]:
    """Load settings from the JSON file named by SEARCHARR_CONFIG_FILE.

    This source has lowest priority; .env and environment variables override it.
    A missing or unreadable file yields no values.

    Returns:
        Dictionary with lower-cased setting keys and their JSON values
    """
    path = os.environ.get(CONFIG_FILE_ENV)
    if not path:
        return {}

    settings_file = Path(path)
    if not settings_file.exists():
        return {}

    try:
        with settings_file.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        structlog.get_logger("searcharr.config").warning(
            "Failed to read settings file", path=str(settings_file), error=str(e)
        )
        return {}

    if not isinstance(data, dict):
        return {}
    return {k.lower(): v for k, v in data.items()}


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from (lowest to highest priority):
    1. JSON file named by SEARCHARR_CONFIG_FILE
    2. .env file
    3. Environment variables prefixed with SEARCHARR_
    4. Values passed to Settings()
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SEARCHARR_",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Earlier sources win
        return (  # type: ignore[return-value]
            init_settings,
            env_settings,
            dotenv_settings,
            json_config_settings_source,
        )

    env: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Application environment (development, production, testing)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    logs_dir: Path | None = Field(
        default=None,
        description="Directory for the JSON log file (stdout only when unset)",
    )

    # Indexers
    search_page_size: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Default 'limit' sent with indexer searches",
    )
    extra_api_key_hosts: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Additional Newznab hosts that require an API key (comma-separated in env)",
    )

    @field_validator("extra_api_key_hosts", mode="before")
    @classmethod
    def _split_hosts(cls, value: Any) -> Any:
        # Allow "host1,host2" from the environment
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, list):
            return [
                host.strip() if isinstance(host, str) else host
                for host in value
                if not isinstance(host, str) or host.strip()
            ]
        return value

    @property
    def is_debug(self) -> bool:
        return self.env == "development" or self.log_level == "DEBUG"

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_testing(self) -> bool:
        return self.env == "testing"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings instance.

    The cache is cleared by reload_settings().
    """
    return Settings()


def reload_settings() -> Settings:
    """Reload settings from all sources (JSON, .env, env vars).

    Returns:
        New Settings instance
    """
    get_settings.cache_clear()
    return get_settings()
