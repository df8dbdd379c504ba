"""Tests for sign-in migration and sign-out transitions.

Updates:
  v0.2.1 - 2026-10-19 - Cover sign-in abandoned by a failing local mirror.
  v0.2.0 - 2026-10-13 - Cover outbox flush before migration.
  v0.1.0 - 2026-10-09 - Cover successful migration and local-only fallback.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from core.exceptions import RemoteSyncError
from core.outbox import RemoteOutbox
from core.prompt_library import PromptLibrary
from core.repository import LocalRepository, OutboxOperation, RepositoryError
from core.sync import SyncReconciler, SyncState

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from conftest import FakeRemoteStore

    from models.prompt_model import Prompt


def _seed(library: PromptLibrary, count: int) -> list[str]:
    return [
        library.create_prompt(title=f"Prompt {index}", content="body").id
        for index in range(count)
    ]


def _wire(
    repository: LocalRepository, remote: FakeRemoteStore
) -> tuple[PromptLibrary, RemoteOutbox, SyncReconciler]:
    outbox = RemoteOutbox(repository, remote)
    library = PromptLibrary(repository, outbox=outbox)
    return library, outbox, SyncReconciler(library, remote, outbox=outbox)


def test_sign_in_migrates_local_prompts_with_new_ids(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    library, _, reconciler = _wire(repository, remote)
    local_ids = _seed(library, 3)

    assert reconciler.sign_in("u1") is True

    remote_prompts = remote.rows["u1"]
    assert len(remote_prompts) == 3
    assert set(remote_prompts).isdisjoint(local_ids)
    assert {prompt.id for prompt in library.prompts} == set(remote_prompts)
    assert {prompt.id for prompt in repository.load_prompts()} == set(remote_prompts)
    assert reconciler.state is SyncState.SYNCED
    assert reconciler.user_id == "u1"
    assert library.current_user_id == "u1"


def test_failed_sign_in_stays_local_only(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    library, _, reconciler = _wire(repository, remote)
    local_ids = _seed(library, 2)
    remote.fail_with = RemoteSyncError("offline")

    assert reconciler.sign_in("u1") is False

    assert reconciler.state is SyncState.LOCAL_ONLY
    assert reconciler.last_error == "offline"
    assert library.current_user_id is None
    assert sorted(prompt.id for prompt in library.prompts) == sorted(local_ids)


def test_mutations_while_synced_reach_remote(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    library, outbox, reconciler = _wire(repository, remote)
    assert reconciler.sign_in("u1") is True

    created = library.create_prompt(title="New", content="body")
    library.toggle_favorite(created.id)
    outbox.drain("u1")

    assert remote.rows["u1"][created.id].is_favorite is True


def test_sign_out_stops_mirroring_without_moving_data(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    library, outbox, reconciler = _wire(repository, remote)
    _seed(library, 1)
    reconciler.sign_in("u1")

    reconciler.sign_out()
    library.create_prompt(title="Offline", content="body")

    assert reconciler.state is SyncState.LOCAL_ONLY
    assert len(library.prompts) == 2
    assert outbox.pending_count() == 0
    assert len(remote.rows["u1"]) == 1


def test_sign_in_flushes_pending_outbox_first(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    library, outbox, reconciler = _wire(repository, remote)
    repository.enqueue_outbox_entry(
        user_id="u1", operation=OutboxOperation.DELETE, record_id="stale"
    )

    assert reconciler.sign_in("u1") is True

    assert remote.calls[0] == ("delete", "stale")
    assert outbox.pending_count("u1") == 0


def test_sign_in_requires_user_id(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    _, _, reconciler = _wire(repository, remote)
    with pytest.raises(ValueError):
        reconciler.sign_in("  ")


class _MirrorFailingRepository(LocalRepository):
    """Repository whose prompt writes fail once ``fail_saves`` is set."""

    fail_saves = False

    def save_prompts(self, prompts: Iterable[Prompt]) -> None:
        if self.fail_saves:
            raise RepositoryError("disk full")
        super().save_prompts(prompts)


def test_failed_local_mirror_abandons_sign_in(tmp_path: Path, remote: FakeRemoteStore) -> None:
    repository = _MirrorFailingRepository(tmp_path / "mirror.db")
    library, _, reconciler = _wire(repository, remote)
    local_ids = _seed(library, 2)
    repository.fail_saves = True

    assert reconciler.sign_in("u1") is False

    assert reconciler.state is SyncState.LOCAL_ONLY
    assert reconciler.last_error == "disk full"
    assert library.current_user_id is None
    assert sorted(prompt.id for prompt in library.prompts) == sorted(local_ids)
    assert sorted(prompt.id for prompt in repository.load_prompts()) == sorted(local_ids)
