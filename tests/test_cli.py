"""Tests for the command-line entry point.

Updates:
  v0.2.1 - 2026-10-19 - Cover built-in choices for add --model.
  v0.2.0 - 2026-10-14 - Cover sync, import, and export commands.
  v0.1.0 - 2026-10-04 - Cover list/add/use commands and exit codes.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

import main as cli_main
from core import build_prompt_library
from core.repository import LocalRepository

if TYPE_CHECKING:
    from pathlib import Path

    from conftest import FakeRemoteStore
    from pytest import CaptureFixture, MonkeyPatch

    from config import PromptLibrarySettings
    from core import LibraryRuntime


@pytest.fixture
def db_path(monkeypatch: MonkeyPatch, tmp_path: Path) -> Path:
    for key in (
        "PROMPT_LIBRARY_CONFIG_JSON",
        "PROMPT_LIBRARY_ENV_FILE",
        "PROMPT_LIBRARY_REMOTE_URL",
        "PROMPT_LIBRARY_REMOTE_API_KEY",
        "PROMPT_LIBRARY_REMOTE_ACCESS_TOKEN",
        "PROMPT_LIBRARY_SEARCH_MIN_SIMILARITY",
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "SUPABASE_ACCESS_TOKEN",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "cli.db"
    monkeypatch.setenv("PROMPT_LIBRARY_DB_PATH", str(path))
    return path


def _stored_ids(db_path: Path) -> list[str]:
    return [prompt.id for prompt in LocalRepository(db_path).load_prompts()]


def test_add_and_list(db_path: Path, capsys: CaptureFixture[str]) -> None:
    assert cli_main.main(["add", "--title", "Debug", "--content", "Find the bug", "--tag", "Go"]) == 0
    assert cli_main.main(["add", "--title", "Essay", "--content", "Write", "--favorite"]) == 0
    capsys.readouterr()

    assert cli_main.main(["list", "--tag", "go"]) == 0
    output = capsys.readouterr().out
    assert "Debug" in output
    assert "Essay" not in output

    assert cli_main.main(["list", "--favorites", "--sort", "alphabetical"]) == 0
    assert "Essay" in capsys.readouterr().out


def test_list_reports_empty_results(db_path: Path, capsys: CaptureFixture[str]) -> None:
    assert cli_main.main(["list", "--search", "nothing here"]) == 0
    assert "No prompts found." in capsys.readouterr().out


def test_add_rejects_invalid_prompt(db_path: Path) -> None:
    assert cli_main.main(["add", "--title", "No body"]) == 4
    assert cli_main.main(["add", "--title", "T", "--content", "c", "--custom-model", "Claude"]) == 4
    assert cli_main.main(["add", "--from-template", "Unknown"]) == 4
    assert _stored_ids(db_path) == []


def test_add_model_must_come_from_catalogue(db_path: Path) -> None:
    with pytest.raises(SystemExit):
        cli_main.main(["add", "--title", "T", "--content", "c", "--model", "MyModel"])
    assert cli_main.main(["add", "--title", "T", "--content", "c", "--model", "Gemini"]) == 0
    (stored,) = LocalRepository(db_path).load_prompts()
    assert stored.ai_model == "Gemini"


def test_prompt_commands(db_path: Path, capsys: CaptureFixture[str]) -> None:
    assert cli_main.main(["add", "--from-template", "Code Review"]) == 0
    (prompt_id,) = _stored_ids(db_path)

    assert cli_main.main(["use", prompt_id]) == 0
    assert "Review the following code" in capsys.readouterr().out
    assert cli_main.main(["favorite", prompt_id]) == 0
    assert cli_main.main(["duplicate", prompt_id]) == 0
    assert len(_stored_ids(db_path)) == 2

    stored = LocalRepository(db_path).load_prompts()
    original = next(prompt for prompt in stored if prompt.id == prompt_id)
    assert original.usage_count == 1
    assert original.is_favorite is True

    assert cli_main.main(["delete", prompt_id]) == 0
    assert prompt_id not in _stored_ids(db_path)
    assert cli_main.main(["use", prompt_id]) == 4


def test_export_and_import(db_path: Path, tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    assert cli_main.main(["add", "--title", "Keep", "--content", "me"]) == 0
    snapshot_path = tmp_path / "exports" / "library.json"
    csv_path = tmp_path / "exports" / "library.csv"

    assert cli_main.main(["export", str(snapshot_path)]) == 0
    assert cli_main.main(["export", str(csv_path)]) == 0
    assert json.loads(snapshot_path.read_text(encoding="utf-8"))["prompts"][0]["title"] == "Keep"
    assert csv_path.read_text(encoding="utf-8").splitlines()[1].startswith("Keep,me,")

    other_db = tmp_path / "other.db"
    monkeypatch.setenv("PROMPT_LIBRARY_DB_PATH", str(other_db))
    assert cli_main.main(["import", str(snapshot_path)]) == 0
    assert _stored_ids(other_db) == _stored_ids(db_path)


def test_import_failures(db_path: Path, tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{nope", encoding="utf-8")
    assert cli_main.main(["import", str(broken)]) == 4
    assert cli_main.main(["import", str(tmp_path / "missing.json")]) == 6


def test_categories_and_templates(db_path: Path, capsys: CaptureFixture[str]) -> None:
    assert cli_main.main(["categories", "--add", "Research", "--color", "#abcdef"]) == 0
    assert "Research" in capsys.readouterr().out
    assert cli_main.main(["categories", "--delete", "missing"]) == 4
    assert cli_main.main(["templates"]) == 0
    assert "Code Review" in capsys.readouterr().out


def test_sync_requires_remote_configuration(db_path: Path) -> None:
    assert cli_main.main(["sync", "--user", "u1"]) == 2


def test_sync_migrates_prompts(
    db_path: Path, monkeypatch: MonkeyPatch, remote: FakeRemoteStore
) -> None:
    def _build(settings: PromptLibrarySettings) -> LibraryRuntime:
        return build_prompt_library(settings, remote=remote, start_worker=False)

    assert cli_main.main(["add", "--title", "Local", "--content", "body"]) == 0
    monkeypatch.setattr(cli_main, "build_prompt_library", _build)

    assert cli_main.main(["sync", "--user", "u1"]) == 0
    assert [prompt.title for prompt in remote.rows["u1"].values()] == ["Local"]
    assert _stored_ids(db_path) == list(remote.rows["u1"])

    remote.fail_with = RuntimeError("offline")
    assert cli_main.main(["sync", "--user", "u1"]) == 6


def test_print_settings(db_path: Path, capsys: CaptureFixture[str]) -> None:
    assert cli_main.main(["--print-settings"]) == 0
    output = capsys.readouterr().out
    assert "Prompt Library configuration summary" in output
    assert "API key: not set" in output


def test_invalid_settings_exit_code(db_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("PROMPT_LIBRARY_SEARCH_MIN_SIMILARITY", "5")
    assert cli_main.main(["list"]) == 2
