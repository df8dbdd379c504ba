"""Durable delivery of record store mutations to the remote store.

Mutations made while a user is signed in are queued in the local SQLite
outbox and delivered independently of the call that produced them. Failed
deliveries are rescheduled with exponential backoff and dead-lettered once
their attempts are exhausted. Entries for the same record are delivered in
queue order: a record whose oldest entry is waiting or failing blocks its
newer entries until the next drain.

Updates:
  v0.2.0 - 2026-10-13 - Preserve per-record ordering across failed deliveries.
  v0.1.1 - 2026-10-12 - Dead-letter entries with unreadable payloads immediately.
  v0.1.0 - 2026-10-11 - Introduce RemoteOutbox and background OutboxWorker.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from models.prompt_model import Prompt

from .repository import OutboxOperation, RepositoryError
from .retry import compute_backoff_delay

if TYPE_CHECKING:
    from .remote import RemoteStore
    from .repository import LocalRepository, OutboxEntry

_MAX_BACKOFF_SECONDS = 300.0


@dataclass(slots=True)
class DrainResult:
    """Counters describing one outbox drain pass."""

    delivered: int = 0
    rescheduled: int = 0
    dead_lettered: int = 0
    skipped: int = 0

    @property
    def failed(self) -> int:
        return self.rescheduled + self.dead_lettered


class _UnreadablePayloadError(ValueError):
    """Raised when a queued entry cannot be turned back into a remote call."""


class RemoteOutbox:
    """Queue remote operations durably and deliver them with retry/backoff."""

    def __init__(
        self,
        repository: LocalRepository,
        remote: RemoteStore,
        *,
        max_attempts: int = 5,
        retry_delay_seconds: float = 2.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._repository = repository
        self._remote = remote
        self._max_attempts = max(1, max_attempts)
        self._retry_delay_seconds = max(0.0, retry_delay_seconds)
        self._logger = logger or logging.getLogger("prompt_library.outbox")
        self._drain_lock = threading.Lock()

    @property
    def remote(self) -> RemoteStore:
        return self._remote

    def enqueue_upsert(self, user_id: str, prompt: Prompt, *, created: bool) -> int:
        """Queue a create or update of *prompt* for *user_id*."""
        operation = OutboxOperation.CREATE if created else OutboxOperation.UPDATE
        return self._repository.enqueue_outbox_entry(
            user_id=user_id,
            operation=operation,
            record_id=prompt.id,
            payload=prompt.to_record(),
        )

    def enqueue_delete(self, user_id: str, prompt_id: str) -> int:
        return self._repository.enqueue_outbox_entry(
            user_id=user_id,
            operation=OutboxOperation.DELETE,
            record_id=prompt_id,
        )

    def pending_count(self, user_id: str | None = None) -> int:
        return self._repository.count_outbox_entries(user_id=user_id)

    def drain(self, user_id: str | None = None, *, now: datetime | None = None) -> DrainResult:
        """Deliver every due entry (optionally only those of *user_id*)."""
        with self._drain_lock:
            return self._drain(user_id, now or datetime.now(UTC))

    def _drain(self, user_id: str | None, now: datetime) -> DrainResult:
        result = DrainResult()
        try:
            entries = self._repository.list_outbox_entries(user_id=user_id)
        except RepositoryError:
            self._logger.exception("Unable to read the remote outbox")
            return result

        blocked: set[tuple[str, str]] = set()
        for entry in entries:
            key = (entry.user_id, entry.record_id)
            if key in blocked or not entry.is_due(now):
                blocked.add(key)
                result.skipped += 1
                continue
            try:
                self._deliver(entry)
            except _UnreadablePayloadError as exc:
                self._dead_letter(entry, entry.attempts + 1, str(exc))
                result.dead_lettered += 1
                continue
            except Exception as exc:  # noqa: BLE001 - any remote failure is retried
                if self._record_failure(entry, exc, now):
                    result.dead_lettered += 1
                else:
                    result.rescheduled += 1
                    blocked.add(key)
                continue
            try:
                self._repository.delete_outbox_entry(entry.id)
            except RepositoryError:
                self._logger.exception(
                    "Delivered outbox entry could not be removed",
                    extra={"outbox_id": entry.id, "prompt_id": entry.record_id},
                )
                return result
            result.delivered += 1
            self._logger.debug(
                "Delivered remote %s",
                entry.operation.value,
                extra={"outbox_id": entry.id, "prompt_id": entry.record_id},
            )
        return result

    def _deliver(self, entry: OutboxEntry) -> None:
        if entry.operation is OutboxOperation.DELETE:
            self._remote.delete_prompt(entry.record_id, entry.user_id)
            return
        if entry.payload is None:
            raise _UnreadablePayloadError("queued upsert has no payload")
        try:
            prompt = Prompt.from_record(entry.payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise _UnreadablePayloadError(f"queued payload is invalid: {exc}") from exc
        if entry.operation is OutboxOperation.CREATE:
            self._remote.create_prompt(prompt, entry.user_id)
        else:
            self._remote.update_prompt(prompt, entry.user_id)

    def _record_failure(self, entry: OutboxEntry, exc: Exception, now: datetime) -> bool:
        """Reschedule or dead-letter *entry*; return ``True`` when it was dead-lettered."""
        attempts = entry.attempts + 1
        if attempts >= self._max_attempts:
            self._dead_letter(entry, attempts, str(exc))
            return True
        delay = compute_backoff_delay(
            attempts,
            base=self._retry_delay_seconds,
            maximum=_MAX_BACKOFF_SECONDS,
        )
        self._logger.warning(
            "Remote %s failed; retrying in %.1fs",
            entry.operation.value,
            delay,
            extra={"outbox_id": entry.id, "prompt_id": entry.record_id, "attempt": attempts},
        )
        try:
            self._repository.reschedule_outbox_entry(
                entry.id,
                attempts=attempts,
                next_attempt_at=now + timedelta(seconds=delay),
                error=str(exc),
            )
        except RepositoryError:
            self._logger.exception("Unable to reschedule outbox entry", extra={"outbox_id": entry.id})
        return False

    def _dead_letter(self, entry: OutboxEntry, attempts: int, error: str) -> None:
        self._logger.error(
            "Giving up on remote %s after %d attempt(s): %s",
            entry.operation.value,
            attempts,
            error,
            extra={"outbox_id": entry.id, "prompt_id": entry.record_id},
        )
        try:
            self._repository.mark_outbox_entry_failed(entry.id, attempts=attempts, error=error)
        except RepositoryError:
            self._logger.exception("Unable to dead-letter outbox entry", extra={"outbox_id": entry.id})


class OutboxWorker:
    """Background thread that drains the outbox periodically or when woken."""

    def __init__(
        self,
        outbox: RemoteOutbox,
        *,
        poll_interval_seconds: float = 5.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._outbox = outbox
        self._poll_interval = max(0.05, poll_interval_seconds)
        self._logger = logger or logging.getLogger("prompt_library.outbox_worker")
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name="prompt-outbox-sync", daemon=True)
        self._thread.start()

    @property
    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def wake(self) -> None:
        """Ask the worker to drain now instead of waiting for the next poll."""
        self._wake_event.set()

    def stop(self, timeout: float = 2.0) -> None:
        """Signal the background thread to stop and wait for it to exit."""
        self._stop_event.set()
        self._wake_event.set()
        self._thread.join(timeout=timeout)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self._wake_event.wait(timeout=self._poll_interval)
            self._wake_event.clear()
            if self._stop_event.is_set():
                return
            try:
                result = self._outbox.drain()
            except Exception:  # noqa: BLE001 - keep the worker alive
                self._logger.exception("Unexpected outbox drain failure")
                continue
            if result.delivered or result.failed:
                self._logger.info(
                    "Outbox drain finished",
                    extra={
                        "delivered": result.delivered,
                        "rescheduled": result.rescheduled,
                        "dead_lettered": result.dead_lettered,
                    },
                )


__all__ = ["DrainResult", "OutboxWorker", "RemoteOutbox"]
