"""Shared fixtures for the prompt library test suite.

Updates:
  v0.2.0 - 2026-10-15 - Add in-memory remote store double and fixed clock.
  v0.1.0 - 2026-10-04 - Provide repository and library fixtures over tmp_path.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from core.exceptions import RemoteSyncError
from core.prompt_library import PromptLibrary
from core.repository import LocalRepository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from models.prompt_model import Prompt


class FakeClock:
    """Deterministic clock advancing one minute per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        self.step = timedelta(minutes=1)

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


class FakeRemoteStore:
    """In-memory stand-in for the REST remote store."""

    def __init__(self) -> None:
        self.rows: dict[str, dict[str, Prompt]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None

    def _check(self, operation: str, record: str) -> None:
        self.calls.append((operation, record))
        if self.fail_with is not None:
            raise self.fail_with

    def _bucket(self, user_id: str) -> dict[str, Prompt]:
        return self.rows.setdefault(user_id, {})

    def fetch_prompts(self, user_id: str) -> list[Prompt]:
        self._check("fetch", user_id)
        prompts = list(self._bucket(user_id).values())
        return sorted(prompts, key=lambda prompt: prompt.date_added, reverse=True)

    def create_prompt(self, prompt: Prompt, user_id: str) -> Prompt:
        self._check("create", prompt.id)
        self._bucket(user_id)[prompt.id] = replace(prompt)
        return prompt

    def update_prompt(self, prompt: Prompt, user_id: str) -> Prompt:
        self._check("update", prompt.id)
        self._bucket(user_id)[prompt.id] = replace(prompt)
        return prompt

    def delete_prompt(self, prompt_id: str, user_id: str) -> None:
        self._check("delete", prompt_id)
        self._bucket(user_id).pop(prompt_id, None)

    def upsert_many(self, prompts: Sequence[Prompt], user_id: str) -> list[Prompt]:
        self._check("upsert", user_id)
        bucket = self._bucket(user_id)
        for prompt in prompts:
            bucket[prompt.id] = replace(prompt)
        return list(prompts)


@pytest.fixture
def repository(tmp_path: Path) -> LocalRepository:
    return LocalRepository(tmp_path / "library.db")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def library(repository: LocalRepository, clock: FakeClock) -> PromptLibrary:
    return PromptLibrary(repository, clock=clock)


@pytest.fixture
def remote() -> FakeRemoteStore:
    return FakeRemoteStore()


@pytest.fixture
def offline_error() -> RemoteSyncError:
    return RemoteSyncError("remote store unavailable")
