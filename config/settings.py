"""Settings management utilities for Prompt Library configuration.

Updates:
  v0.3.1 - 2026-10-19 - Add an env-only remote access token for per-user requests.
  v0.3.0 - 2026-10-12 - Add remote outbox retry and polling configuration.
  v0.2.1 - 2026-10-08 - Ignore remote API keys found in JSON configuration files.
  v0.2.0 - 2026-10-05 - Add remote store endpoint, table, and timeout settings.
  v0.1.0 - 2026-10-01 - Initial settings model with SQLite path and search tuning.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

_DOTENV_FALLBACK_PATH = ".env"

DEFAULT_DB_PATH = Path("data") / "prompt_library.db"
DEFAULT_REMOTE_TABLE = "prompts"
DEFAULT_SEARCH_MIN_SIMILARITY = 0.7

# Canonical field name -> accepted environment keys (prefixed with PROMPT_LIBRARY_).
_ENV_ALIASES: dict[str, list[str]] = {
    "db_path": ["DB_PATH", "DATABASE_PATH", "db_path", "database_path"],
    "remote_url": ["REMOTE_URL", "remote_url", "SUPABASE_URL"],
    "remote_api_key": ["REMOTE_API_KEY", "remote_api_key", "SUPABASE_ANON_KEY"],
    "remote_access_token": [
        "REMOTE_ACCESS_TOKEN",
        "remote_access_token",
        "SUPABASE_ACCESS_TOKEN",
    ],
    "remote_table": ["REMOTE_TABLE", "remote_table"],
    "sync_timeout_seconds": ["SYNC_TIMEOUT_SECONDS", "sync_timeout_seconds"],
    "search_min_similarity": ["SEARCH_MIN_SIMILARITY", "search_min_similarity"],
    "outbox_max_attempts": ["OUTBOX_MAX_ATTEMPTS", "outbox_max_attempts"],
    "outbox_retry_delay_seconds": [
        "OUTBOX_RETRY_DELAY_SECONDS",
        "outbox_retry_delay_seconds",
    ],
    "outbox_poll_interval_seconds": [
        "OUTBOX_POLL_INTERVAL_SECONDS",
        "outbox_poll_interval_seconds",
    ],
}

_JSON_CONFIG_KEYS = (
    "db_path",
    "remote_url",
    "remote_table",
    "sync_timeout_seconds",
    "search_min_similarity",
    "outbox_max_attempts",
    "outbox_retry_delay_seconds",
    "outbox_poll_interval_seconds",
)

_DISALLOWED_SECRET_KEYS = {
    "remote_api_key",
    "REMOTE_API_KEY",
    "SUPABASE_ANON_KEY",
    "remote_access_token",
    "REMOTE_ACCESS_TOKEN",
    "SUPABASE_ACCESS_TOKEN",
}


def _read_dotenv_values() -> dict[str, str]:
    """Load ``.env`` entries into a mapping without mutating ``os.environ``."""
    env_file_override = os.getenv("PROMPT_LIBRARY_ENV_FILE")
    if env_file_override is not None:
        candidate = env_file_override.strip()
        if not candidate:
            return {}
        path = Path(candidate).expanduser()
    else:
        path = Path(_DOTENV_FALLBACK_PATH).expanduser()
    if not path.is_file():
        return {}
    raw_values = dotenv_values(str(path))
    return {str(key): str(value) for key, value in raw_values.items() if value is not None}


class SettingsError(Exception):
    """Raised when Prompt Library configuration cannot be loaded or validated."""


class PromptLibrarySettings(BaseSettings):
    """Application configuration sourced from environment variables or JSON files."""

    db_path: Path = Field(default=DEFAULT_DB_PATH, validate_default=True)
    remote_url: str | None = Field(
        default=None,
        description="Base URL of the PostgREST/Supabase project hosting the prompts table.",
    )
    remote_api_key: str | None = Field(
        default=None,
        description="API key sent as both apikey and bearer token to the remote store.",
        repr=False,
    )
    remote_access_token: str | None = Field(
        default=None,
        description="Signed-in user JWT sent as the bearer token instead of the API key.",
        repr=False,
    )
    remote_table: str = Field(
        default=DEFAULT_REMOTE_TABLE,
        description="Remote table name holding prompt rows.",
    )
    sync_timeout_seconds: float = Field(
        default=15.0,
        description="Upper bound applied to each remote request issued during sync.",
    )
    search_min_similarity: float = Field(
        default=DEFAULT_SEARCH_MIN_SIMILARITY,
        description="Minimum fuzzy score (0-1] a prompt needs to stay in search results.",
    )
    outbox_max_attempts: int = Field(
        default=5,
        description="Delivery attempts before a pending remote operation is dead-lettered.",
    )
    outbox_retry_delay_seconds: float = Field(
        default=2.0,
        description="Base delay for exponential backoff between outbox delivery attempts.",
    )
    outbox_poll_interval_seconds: float = Field(
        default=5.0,
        description="Interval at which the background worker drains the outbox.",
    )

    model_config = cast(
        "SettingsConfigDict",
        {
            "env_prefix": "PROMPT_LIBRARY_",
            "case_sensitive": False,
            "populate_by_name": True,
        },
    )

    @property
    def remote_enabled(self) -> bool:
        """Return ``True`` when enough configuration exists to reach the remote store."""
        return bool(self.remote_url and self.remote_api_key)

    @field_validator("db_path", mode="before")
    def _normalise_path(cls, value: Any) -> Path:
        """Expand user-relative paths and coerce values to Path instances."""
        if value is None:
            raise ValueError("a filesystem path is required")
        path = Path(str(value)).expanduser()
        return path.resolve()

    @field_validator("remote_url", "remote_api_key", "remote_access_token", mode="before")
    def _trim_optional(cls, value: object) -> str | None:
        """Normalise optional strings by stripping whitespace and empty strings."""
        if value is None:
            return None
        stripped = str(value).strip()
        if not stripped:
            return None
        return stripped

    @field_validator("remote_url")
    def _validate_remote_url(cls, value: str | None) -> str | None:
        """Require an http(s) scheme and drop trailing slashes."""
        if value is None:
            return None
        if not value.startswith(("http://", "https://")):
            raise ValueError("remote_url must start with http:// or https://")
        return value.rstrip("/")

    @field_validator("remote_table")
    def _validate_remote_table(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("remote_table must not be empty")
        return stripped

    @field_validator("sync_timeout_seconds", "outbox_poll_interval_seconds")
    def _validate_positive_seconds(cls, value: float) -> float:
        """Ensure timeouts and intervals are positive."""
        if value <= 0:
            raise ValueError("timeouts and intervals must be greater than zero")
        return value

    @field_validator("outbox_retry_delay_seconds")
    def _validate_retry_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("outbox_retry_delay_seconds must not be negative")
        return value

    @field_validator("outbox_max_attempts")
    def _validate_max_attempts(cls, value: int) -> int:
        if value < 1:
            raise ValueError("outbox_max_attempts must be at least 1")
        return value

    @field_validator("search_min_similarity")
    def _validate_similarity(cls, value: float) -> float:
        """Keep the fuzzy threshold inside the (0, 1] range."""
        if not 0 < value <= 1:
            raise ValueError("search_min_similarity must be within (0, 1]")
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        """Define configuration source precedence.

        Order (highest → lowest):
            1. Explicit keyword arguments (e.g. load_settings(db_path="...")).
            2. JSON configuration file (application settings).
            3. Environment variables / aliases, then ``.env`` values.
            4. File secrets.
        """

        def env_with_aliases(_: BaseSettings | None = None) -> dict[str, Any]:
            data: dict[str, Any] = {}
            config_dict = cast("dict[str, Any]", cls.model_config)
            prefix = str(config_dict.get("env_prefix", ""))
            dotenv_data = _read_dotenv_values()

            def _lookup(candidate: str) -> str | None:
                value = os.getenv(candidate)
                if value is None:
                    value = dotenv_data.get(candidate)
                if value is None:
                    return None
                stripped_value = str(value).strip()
                return stripped_value or None

            for field, keys in _ENV_ALIASES.items():
                for key in keys:
                    candidates = [f"{prefix}{key}", f"{prefix}{key.upper()}"]
                    if key.isupper():
                        candidates.append(key)
                    found = next(
                        (val for val in map(_lookup, candidates) if val is not None),
                        None,
                    )
                    if found is not None:
                        data[field] = found
                        break
            return data

        return (
            init_settings,
            cls._json_config_settings_source(settings_cls),
            cast("PydanticBaseSettingsSource", env_with_aliases),
            file_secret_settings,
        )

    @classmethod
    def _json_config_settings_source(
        cls,
        _: type[BaseSettings],
    ) -> PydanticBaseSettingsSource:
        """Return settings extracted from an optional JSON config file."""

        def _loader(_: BaseSettings | None = None) -> dict[str, Any]:
            explicit_path = os.getenv("PROMPT_LIBRARY_CONFIG_JSON")
            candidates: list[Path] = []
            if explicit_path:
                candidates.append(Path(explicit_path).expanduser())
            candidates.append((Path("config") / "config.json").expanduser())

            for path in candidates:
                if not path.exists():
                    if explicit_path and path == candidates[0]:
                        raise SettingsError(f"Configuration file not found: {path}")
                    continue
                try:
                    raw_contents = path.read_text(encoding="utf-8")
                except OSError as exc:  # pragma: no cover - filesystem failure is env-specific
                    raise SettingsError(f"Unable to read configuration file: {path}") from exc
                try:
                    data = json.loads(raw_contents)
                except json.JSONDecodeError as exc:
                    raise SettingsError(f"Invalid JSON in configuration file: {path}") from exc
                if not isinstance(data, dict):
                    message = f"Configuration file {path} must contain a JSON object"
                    raise SettingsError(message)
                mapping_data = cast("Mapping[object, Any]", data)
                data_dict: dict[str, Any] = {str(key): value for key, value in mapping_data.items()}
                removed_secrets = [
                    key
                    for key in _DISALLOWED_SECRET_KEYS
                    if key in data_dict and data_dict.pop(key, None) is not None
                ]
                if removed_secrets:
                    logger.warning(
                        "Ignoring secret key(s) %s in configuration file %s; "
                        "set credentials via environment variables instead.",
                        ", ".join(sorted(removed_secrets)),
                        path,
                    )
                mapped: dict[str, Any] = {}
                if "database_path" in data_dict and "db_path" not in data_dict:
                    mapped["db_path"] = data_dict["database_path"]
                for key in _JSON_CONFIG_KEYS:
                    if key in data_dict:
                        mapped[key] = data_dict[key]
                return mapped
            return {}

        return cast("PydanticBaseSettingsSource", _loader)


def load_settings(**overrides: Any) -> PromptLibrarySettings:
    """Return validated settings, raising SettingsError on failure."""
    try:
        return PromptLibrarySettings(**overrides)
    except SettingsError:
        raise
    except ValidationError as exc:
        raise SettingsError("Invalid Prompt Library configuration") from exc


logger = logging.getLogger("prompt_library.settings")
