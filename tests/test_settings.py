"""Tests for configuration loading and validation logic.

Updates:
  v0.2.0 - 2026-10-12 - Cover outbox settings and secret filtering in JSON files.
  v0.1.0 - 2026-10-01 - Cover JSON/env precedence and validation errors.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest

from config import PromptLibrarySettings, SettingsError, load_settings
from config.settings import DEFAULT_REMOTE_TABLE, DEFAULT_SEARCH_MIN_SIMILARITY

if TYPE_CHECKING:
    from pathlib import Path

    from pytest import LogCaptureFixture, MonkeyPatch

_ENV_KEYS = (
    "PROMPT_LIBRARY_DB_PATH",
    "PROMPT_LIBRARY_DATABASE_PATH",
    "PROMPT_LIBRARY_REMOTE_URL",
    "PROMPT_LIBRARY_REMOTE_API_KEY",
    "PROMPT_LIBRARY_REMOTE_ACCESS_TOKEN",
    "PROMPT_LIBRARY_REMOTE_TABLE",
    "PROMPT_LIBRARY_SYNC_TIMEOUT_SECONDS",
    "PROMPT_LIBRARY_SEARCH_MIN_SIMILARITY",
    "PROMPT_LIBRARY_OUTBOX_MAX_ATTEMPTS",
    "PROMPT_LIBRARY_OUTBOX_RETRY_DELAY_SECONDS",
    "PROMPT_LIBRARY_OUTBOX_POLL_INTERVAL_SECONDS",
    "PROMPT_LIBRARY_CONFIG_JSON",
    "PROMPT_LIBRARY_ENV_FILE",
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "SUPABASE_ACCESS_TOKEN",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults_without_configuration(tmp_path: Path) -> None:
    """Defaults resolve relative to the working directory and disable remote sync."""
    settings = load_settings()

    assert settings.db_path == (tmp_path / "data" / "prompt_library.db").resolve()
    assert settings.remote_table == DEFAULT_REMOTE_TABLE
    assert settings.search_min_similarity == DEFAULT_SEARCH_MIN_SIMILARITY
    assert settings.remote_enabled is False


def test_environment_variables_and_aliases(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Prefixed variables and Supabase aliases populate remote settings."""
    monkeypatch.setenv("PROMPT_LIBRARY_DB_PATH", str(tmp_path / "env.db"))
    monkeypatch.setenv("SUPABASE_URL", "https://project.example.co/")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
    monkeypatch.setenv("SUPABASE_ACCESS_TOKEN", "user-jwt")
    monkeypatch.setenv("PROMPT_LIBRARY_OUTBOX_MAX_ATTEMPTS", "7")

    settings = load_settings()

    assert settings.db_path == (tmp_path / "env.db").resolve()
    assert settings.remote_url == "https://project.example.co"
    assert settings.remote_api_key == "anon-key"
    assert settings.remote_access_token == "user-jwt"
    assert settings.outbox_max_attempts == 7
    assert settings.remote_enabled is True
    assert "anon-key" not in repr(settings)
    assert "user-jwt" not in repr(settings)


def test_json_config_overrides_environment(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """JSON configuration wins over environment values for the same field."""
    config_path = tmp_path / "custom.json"
    config_path.write_text(
        json.dumps({"remote_table": "json_prompts", "database_path": str(tmp_path / "j.db")}),
        encoding="utf-8",
    )
    monkeypatch.setenv("PROMPT_LIBRARY_CONFIG_JSON", str(config_path))
    monkeypatch.setenv("PROMPT_LIBRARY_REMOTE_TABLE", "env_prompts")

    settings = load_settings()

    assert settings.remote_table == "json_prompts"
    assert settings.db_path == (tmp_path / "j.db").resolve()


def test_json_secrets_are_ignored(
    monkeypatch: MonkeyPatch, tmp_path: Path, caplog: LogCaptureFixture
) -> None:
    """API keys inside JSON configuration are dropped with a warning."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(
        json.dumps({"remote_url": "https://x.example.co", "remote_api_key": "leaked"}),
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING, logger="prompt_library.settings"):
        settings = load_settings()

    assert settings.remote_url == "https://x.example.co"
    assert settings.remote_api_key is None
    assert "Ignoring secret key" in caplog.text


def test_dotenv_file_is_read(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Values from the configured .env file are used when the environment is silent."""
    env_file = tmp_path / "local.env"
    env_file.write_text("PROMPT_LIBRARY_SEARCH_MIN_SIMILARITY=0.5\n", encoding="utf-8")
    monkeypatch.setenv("PROMPT_LIBRARY_ENV_FILE", str(env_file))

    assert load_settings().search_min_similarity == 0.5


def test_explicit_overrides_take_precedence(tmp_path: Path) -> None:
    settings = load_settings(db_path=str(tmp_path / "override.db"), sync_timeout_seconds=3)
    assert settings.db_path == (tmp_path / "override.db").resolve()
    assert settings.sync_timeout_seconds == 3


def test_missing_explicit_config_file_raises(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PROMPT_LIBRARY_CONFIG_JSON", str(tmp_path / "absent.json"))
    with pytest.raises(SettingsError):
        load_settings()


def test_invalid_json_config_raises(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    config_path = tmp_path / "broken.json"
    config_path.write_text("{not json", encoding="utf-8")
    monkeypatch.setenv("PROMPT_LIBRARY_CONFIG_JSON", str(config_path))
    with pytest.raises(SettingsError):
        load_settings()


@pytest.mark.parametrize(
    "overrides",
    [
        {"remote_url": "ftp://example.com"},
        {"search_min_similarity": 0},
        {"search_min_similarity": 1.5},
        {"sync_timeout_seconds": 0},
        {"outbox_max_attempts": 0},
        {"remote_table": "  "},
    ],
)
def test_invalid_values_raise_settings_error(overrides: dict[str, object]) -> None:
    with pytest.raises(SettingsError):
        load_settings(**overrides)


def test_settings_class_is_exported() -> None:
    assert isinstance(load_settings(), PromptLibrarySettings)
