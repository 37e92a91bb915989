"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


DEFAULT_BLOCKED_WORDS = "spam,hack,attack,malicious,virus,exploit"


class LLMSettings(BaseSettings):
    """Upstream chat-completion provider configuration.

    The API key is read from ``LLM_API_KEY`` or, for compatibility with
    existing deployments, ``OPENAI_API_KEY``. ``MOCK_API=true`` swaps the
    provider for canned output.
    """

    provider: str = Field(
        "openai",
        description="LLM provider name (openai or mock)",
    )
    model: str = Field(
        "gpt-3.5-turbo",
        description="Chat model name sent upstream",
    )
    api_key: str | None = Field(
        None,
        description="Bearer credential for the upstream API",
        validation_alias=AliasChoices("LLM_API_KEY", "OPENAI_API_KEY"),
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint (defaults to https://api.openai.com/v1)",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Upstream request timeout in seconds",
        gt=0,
    )
    max_tokens: int = Field(
        150,
        description="Upper bound on completion tokens per request",
        ge=1,
    )
    temperature: float = Field(
        0.7,
        description="Sampling temperature sent with every request",
        ge=0.0,
        le=2.0,
    )
    system_prompt: str | None = Field(
        None,
        description="Optional system message prepended to every conversation",
    )
    mock_api: bool = Field(
        False,
        description="Return canned output instead of calling the provider",
        validation_alias=AliasChoices("MOCK_API", "LLM_MOCK_API"),
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
        populate_by_name=True,
    )


class AppSettings(BaseSettings):
    """Admission and request-shaping configuration."""

    debug: bool = Field(
        False,
        description="Log chat_relay at DEBUG regardless of LOG_LEVEL",
    )
    rate_limit_enabled: bool = Field(
        True,
        description="Enable the admission gate on chat endpoints",
    )
    rate_limit_requests: int = Field(
        5,
        description="Maximum requests per client within one window",
        ge=1,
    )
    rate_limit_window_seconds: float = Field(
        60.0,
        description="Per-client window length in seconds",
        gt=0,
    )
    global_rate_limit_requests: int = Field(
        100,
        description="Process-wide ceiling per global reset interval",
        ge=1,
    )
    global_reset_interval_seconds: float = Field(
        60.0,
        description="How often the global counter is reset to zero",
        gt=0,
    )
    sweep_interval_seconds: float = Field(
        60.0,
        description="How often idle client windows are deleted",
        gt=0,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Send a Retry-After header with per-client 429 responses",
    )
    max_context_messages: int = Field(
        6,
        description="Maximum prior turns forwarded upstream with a message",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class ModerationSettings(BaseSettings):
    """Thresholds for the prompt moderation filter."""

    min_length: int = Field(3, ge=1)
    max_length: int = Field(200, ge=1)
    max_repeated_chars: int = Field(
        10,
        description="Longest allowed run of one character",
        ge=1,
    )
    max_urls: int = Field(2, ge=0)
    blocked_words: str = Field(
        DEFAULT_BLOCKED_WORDS,
        description="Comma-separated, case-insensitive blocklist",
    )

    model_config = SettingsConfigDict(
        env_prefix="MODERATION_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="json or plain")
    output: str = Field("stdout", description="stdout or file")
    file_path: str | None = Field(None, description="Log file when output=file")
    max_bytes: int = Field(
        10_485_760,
        description="Rotate file logs at this size (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, ge=0)
    request_id_header: str = Field("X-Request-ID")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Nested groups are created via default_factory so each one reads its own
    prefixed environment variables.
    """

    app_env: str = APP_ENV
    llm: LLMSettings = Field(default_factory=LLMSettings)
    app: AppSettings = Field(default_factory=AppSettings)
    moderation: ModerationSettings = Field(default_factory=ModerationSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


settings = Settings()
