"""Configuration management for the coding assistant server."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Callable

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
DEFAULT_MAX_TOKENS = 4096
DEFAULT_TIMEOUT_SECONDS = 600.0
DEFAULT_API_URL = "https://api.anthropic.com/v1/messages"

SETTING_KEYS = (
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_API_URL",
    "CLAUDE_CODE_WORKSPACE",
    "CLAUDE_CODE_MODEL",
    "CLAUDE_CODE_MAX_TOKENS",
    "CLAUDE_CODE_PATH",
    "CLAUDE_CODE_TIMEOUT_SECONDS",
    "CODEASSIST_LOG_LEVEL",
)


class ConfigError(ValueError):
    """Raised when required settings are missing or invalid."""


class CodeAssistSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True
    )

    api_key: SecretStr = Field(validation_alias="ANTHROPIC_API_KEY")
    api_url: str = Field(default=DEFAULT_API_URL, validation_alias="ANTHROPIC_API_URL")
    workspace: Path = Field(
        default=None, validation_alias="CLAUDE_CODE_WORKSPACE", validate_default=True
    )
    model: str = Field(
        default=DEFAULT_MODEL, validation_alias="CLAUDE_CODE_MODEL", validate_default=True
    )
    max_tokens: int = Field(
        default=DEFAULT_MAX_TOKENS, validation_alias="CLAUDE_CODE_MAX_TOKENS"
    )
    assistant_path: str | None = Field(default=None, validation_alias="CLAUDE_CODE_PATH")
    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS, validation_alias="CLAUDE_CODE_TIMEOUT_SECONDS"
    )
    log_level: str = Field(default="INFO", validation_alias="CODEASSIST_LOG_LEVEL")

    @field_validator("api_key", mode="before")
    @classmethod
    def _require_api_key(cls, value: Any) -> Any:
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        if value is None or not str(value).strip():
            raise ValueError("Anthropic API key is required")
        return str(value).strip()

    @field_validator("api_url", mode="before")
    @classmethod
    def _default_api_url(cls, value: Any) -> str:
        if value is None or not str(value).strip():
            return DEFAULT_API_URL
        return str(value).strip()

    @field_validator("workspace", mode="before")
    @classmethod
    def _default_workspace(cls, value: Any) -> Path:
        if value is None or (isinstance(value, str) and not value.strip()):
            return Path.cwd()
        return Path(str(value)).expanduser()

    @field_validator("model", mode="before")
    @classmethod
    def _default_model(cls, value: Any) -> str:
        if value is None or not str(value).strip():
            return DEFAULT_MODEL
        return str(value).strip()

    @field_validator("max_tokens", mode="before")
    @classmethod
    def _coerce_max_tokens(cls, value: Any) -> int:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_MAX_TOKENS
        try:
            number = float(value)
        except (TypeError, ValueError):
            return DEFAULT_MAX_TOKENS
        if math.isnan(number) or math.isinf(number):
            return DEFAULT_MAX_TOKENS
        return int(number)

    @field_validator("max_tokens")
    @classmethod
    def _validate_max_tokens(cls, value: int) -> int:
        if value < 1:
            raise ValueError("CLAUDE_CODE_MAX_TOKENS must be >= 1")
        return value

    @field_validator("assistant_path", mode="before")
    @classmethod
    def _blank_path_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("timeout_seconds", mode="before")
    @classmethod
    def _default_timeout(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_TIMEOUT_SECONDS
        return value

    @field_validator("timeout_seconds")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if math.isnan(value) or value <= 0:
            raise ValueError("CLAUDE_CODE_TIMEOUT_SECONDS must be > 0")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _default_log_level(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "INFO"
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "CODEASSIST_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized


def load_settings(lookup: Callable[[str], str | None] | None = None) -> CodeAssistSettings:
    """Build validated settings.

    ``lookup`` is consulted first for every known key; anything it does not
    answer falls back to the process environment and the ``.env`` file.
    """

    overrides: dict[str, str] = {}
    if lookup is not None:
        for key in SETTING_KEYS:
            value = lookup(key)
            if value is not None and value != "":
                overrides[key] = value

    try:
        return CodeAssistSettings(**overrides)
    except ValidationError as exc:
        messages = ", ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'settings'}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigError(f"Configuration validation failed: {messages}") from exc


__all__ = [
    "CodeAssistSettings",
    "ConfigError",
    "DEFAULT_API_URL",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_MODEL",
    "DEFAULT_TIMEOUT_SECONDS",
    "load_settings",
]
