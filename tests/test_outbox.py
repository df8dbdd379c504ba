"""Tests for durable remote delivery through the outbox.

Updates:
  v0.2.0 - 2026-10-13 - Cover per-record ordering behind failed deliveries.
  v0.1.0 - 2026-10-11 - Cover delivery, backoff rescheduling, and dead-lettering.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from core.exceptions import RemoteSyncError
from core.outbox import OutboxWorker, RemoteOutbox
from core.prompt_library import PromptLibrary
from core.repository import OutboxOperation, OutboxStatus
from models.prompt_model import Prompt

if TYPE_CHECKING:
    from conftest import FakeRemoteStore

    from core.repository import LocalRepository


def _prompt(identifier: str, title: str = "Title") -> Prompt:
    return Prompt(
        id=identifier,
        title=title,
        content="body",
        date_added=datetime(2026, 1, 1, tzinfo=UTC),
    )


def _soon() -> datetime:
    return datetime.now(UTC) + timedelta(seconds=1)


def test_drain_delivers_entries_in_queue_order(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    outbox = RemoteOutbox(repository, remote)
    outbox.enqueue_upsert("u1", _prompt("p1"), created=True)
    outbox.enqueue_upsert("u1", _prompt("p1", "Renamed"), created=False)
    outbox.enqueue_delete("u1", "p2")

    result = outbox.drain(now=_soon())

    assert result.delivered == 3
    assert result.failed == 0
    assert remote.calls == [("create", "p1"), ("update", "p1"), ("delete", "p2")]
    assert remote.rows["u1"]["p1"].title == "Renamed"
    assert outbox.pending_count() == 0


def test_failed_delivery_is_rescheduled_with_backoff(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    outbox = RemoteOutbox(repository, remote, max_attempts=3, retry_delay_seconds=10)
    outbox.enqueue_upsert("u1", _prompt("p1"), created=True)
    now = _soon()

    remote.fail_with = RemoteSyncError("offline")
    first = outbox.drain(now=now)
    assert first.rescheduled == 1

    (entry,) = repository.list_outbox_entries()
    assert entry.attempts == 1
    assert entry.last_error == "offline"
    assert entry.next_attempt_at == now + timedelta(seconds=10)

    remote.fail_with = None
    assert outbox.drain(now=now).skipped == 1
    assert outbox.drain(now=now + timedelta(seconds=11)).delivered == 1
    assert "p1" in remote.rows["u1"]


def test_entry_is_dead_lettered_after_max_attempts(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    outbox = RemoteOutbox(repository, remote, max_attempts=2, retry_delay_seconds=0)
    outbox.enqueue_delete("u1", "p1")
    remote.fail_with = RemoteSyncError("offline")

    now = _soon()
    assert outbox.drain(now=now).rescheduled == 1
    assert outbox.drain(now=now).dead_lettered == 1

    assert outbox.pending_count() == 0
    (failed,) = repository.list_outbox_entries(status=OutboxStatus.FAILED)
    assert failed.attempts == 2


def test_unreadable_payload_is_dead_lettered_immediately(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    repository.enqueue_outbox_entry(
        user_id="u1",
        operation=OutboxOperation.UPDATE,
        record_id="p1",
        payload={"id": "p1"},
    )
    result = RemoteOutbox(repository, remote).drain(now=_soon())
    assert result.dead_lettered == 1
    assert remote.calls == []


def test_failed_record_blocks_only_its_own_later_entries(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    class FlakyForP1:
        def __init__(self, inner: FakeRemoteStore) -> None:
            self.inner = inner

        def __getattr__(self, name: str) -> object:
            return getattr(self.inner, name)

        def create_prompt(self, prompt: Prompt, user_id: str) -> Prompt:
            if prompt.id == "p1":
                raise RemoteSyncError("rejected")
            return self.inner.create_prompt(prompt, user_id)

    outbox = RemoteOutbox(repository, FlakyForP1(remote))  # type: ignore[arg-type]
    outbox.enqueue_upsert("u1", _prompt("p1"), created=True)
    outbox.enqueue_upsert("u1", _prompt("p1", "Later"), created=False)
    outbox.enqueue_upsert("u1", _prompt("p2"), created=True)

    result = outbox.drain(now=_soon())

    assert result.rescheduled == 1
    assert result.skipped == 1
    assert result.delivered == 1
    assert remote.calls == [("create", "p2")]
    assert [entry.operation for entry in repository.list_outbox_entries()] == [
        OutboxOperation.CREATE,
        OutboxOperation.UPDATE,
    ]


def test_drain_can_be_scoped_to_one_user(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    outbox = RemoteOutbox(repository, remote)
    outbox.enqueue_delete("u1", "p1")
    outbox.enqueue_delete("u2", "p2")

    assert outbox.drain("u2", now=_soon()).delivered == 1
    assert outbox.pending_count("u1") == 1
    assert outbox.pending_count("u2") == 0


def test_library_queues_deltas_only_while_signed_in(
    repository: LocalRepository, remote: FakeRemoteStore
) -> None:
    outbox = RemoteOutbox(repository, remote)
    library = PromptLibrary(repository, outbox=outbox)

    library.create_prompt(title="Local", content="only")
    assert outbox.pending_count() == 0

    library.set_current_user("u1")
    created = library.create_prompt(title="Synced", content="body")
    library.increment_usage(created.id)
    library.delete_prompt(created.id)

    operations = [entry.operation for entry in repository.list_outbox_entries(user_id="u1")]
    assert operations == [OutboxOperation.CREATE, OutboxOperation.UPDATE, OutboxOperation.DELETE]


def test_worker_drains_when_woken(repository: LocalRepository, remote: FakeRemoteStore) -> None:
    outbox = RemoteOutbox(repository, remote)
    worker = OutboxWorker(outbox, poll_interval_seconds=30)
    try:
        outbox.enqueue_upsert("u1", _prompt("p1"), created=True)
        worker.wake()
        deadline = time.monotonic() + 5
        while outbox.pending_count() and time.monotonic() < deadline:
            time.sleep(0.02)
    finally:
        worker.stop()

    assert outbox.pending_count() == 0
    assert "p1" in remote.rows["u1"]
    assert not worker.is_alive
