"""Durable queue of remote operations awaiting delivery.

Updates:
  v0.1.1 - 2026-10-12 - Keep dead-lettered entries for inspection instead of deleting them.
  v0.1.0 - 2026-10-11 - Introduce sync_outbox table and CRUD helpers.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from .base import (
    RepositoryError,
    RepositoryNotFoundError,
    connect as _connect,
    json_dumps as _json_dumps,
    json_loads_optional as _json_loads_optional,
    parse_optional_datetime as _parse_optional_datetime,
    utc_now as _utc_now,
)

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path


class OutboxOperation(str, Enum):
    """Remote mutations that can be queued."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class OutboxStatus(str, Enum):
    PENDING = "pending"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class OutboxEntry:
    """One queued remote operation."""

    id: int
    user_id: str
    operation: OutboxOperation
    record_id: str
    payload: dict[str, Any] | None
    attempts: int
    status: OutboxStatus
    last_error: str | None
    next_attempt_at: datetime
    queued_at: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> OutboxEntry:
        payload = _json_loads_optional(row["payload"])
        queued_at = _parse_optional_datetime(row["queued_at"]) or _utc_now()
        return cls(
            id=int(row["id"]),
            user_id=str(row["user_id"]),
            operation=OutboxOperation(row["operation"]),
            record_id=str(row["record_id"]),
            payload=payload if isinstance(payload, dict) else None,
            attempts=int(row["attempts"] or 0),
            status=OutboxStatus(row["status"]),
            last_error=row["last_error"],
            next_attempt_at=_parse_optional_datetime(row["next_attempt_at"]) or queued_at,
            queued_at=queued_at,
        )

    def is_due(self, now: datetime) -> bool:
        return self.status is OutboxStatus.PENDING and self.next_attempt_at <= now


class OutboxStoreMixin:
    """Persistence helpers for the remote outbox."""

    _db_path: Path

    _OUTBOX_SCHEMA: ClassVar[str] = """
        CREATE TABLE IF NOT EXISTS sync_outbox (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            operation TEXT NOT NULL,
            record_id TEXT NOT NULL,
            payload TEXT,
            attempts INTEGER NOT NULL DEFAULT 0,
            status TEXT NOT NULL DEFAULT 'pending',
            last_error TEXT,
            next_attempt_at TEXT NOT NULL,
            queued_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_sync_outbox_user_status
            ON sync_outbox(user_id, status);
    """

    def enqueue_outbox_entry(
        self,
        *,
        user_id: str,
        operation: OutboxOperation,
        record_id: str,
        payload: Mapping[str, Any] | None = None,
    ) -> int:
        """Persist a pending remote operation and return its identifier."""
        now = _utc_now().isoformat()
        try:
            with _connect(self._db_path) as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO sync_outbox (
                        user_id, operation, record_id, payload, next_attempt_at, queued_at
                    ) VALUES (?, ?, ?, ?, ?, ?);
                    """,
                    (
                        user_id,
                        operation.value,
                        record_id,
                        _json_dumps(dict(payload) if payload is not None else None),
                        now,
                        now,
                    ),
                )
                entry_id = cursor.lastrowid
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to enqueue remote operation") from exc
        if entry_id is None:  # pragma: no cover - sqlite always reports rowid on insert
            raise RepositoryError("Outbox insert did not return an identifier")
        return int(entry_id)

    def list_outbox_entries(
        self,
        *,
        user_id: str | None = None,
        status: OutboxStatus | None = OutboxStatus.PENDING,
    ) -> list[OutboxEntry]:
        """Return outbox entries in queue order, optionally filtered."""
        clauses: list[str] = []
        params: list[Any] = []
        if user_id is not None:
            clauses.append("user_id = ?")
            params.append(user_id)
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        try:
            with _connect(self._db_path) as conn:
                rows = conn.execute(
                    f"SELECT * FROM sync_outbox{where} ORDER BY id ASC;", params
                ).fetchall()
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to list outbox entries") from exc
        return [OutboxEntry.from_row(row) for row in rows]

    def count_outbox_entries(
        self,
        *,
        user_id: str | None = None,
        status: OutboxStatus | None = OutboxStatus.PENDING,
    ) -> int:
        return len(self.list_outbox_entries(user_id=user_id, status=status))

    def delete_outbox_entry(self, entry_id: int) -> None:
        """Remove a delivered entry."""
        try:
            with _connect(self._db_path) as conn:
                cursor = conn.execute("DELETE FROM sync_outbox WHERE id = ?;", (entry_id,))
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to delete outbox entry {entry_id}") from exc
        if cursor.rowcount == 0:
            raise RepositoryNotFoundError(f"Outbox entry {entry_id} not found")

    def reschedule_outbox_entry(
        self,
        entry_id: int,
        *,
        attempts: int,
        next_attempt_at: datetime,
        error: str,
    ) -> None:
        """Record a failed delivery and schedule the next attempt."""
        self._update_outbox_entry(
            entry_id,
            attempts=attempts,
            status=OutboxStatus.PENDING,
            next_attempt_at=next_attempt_at,
            error=error,
        )

    def mark_outbox_entry_failed(self, entry_id: int, *, attempts: int, error: str) -> None:
        """Dead-letter an entry that exhausted its delivery attempts."""
        self._update_outbox_entry(
            entry_id,
            attempts=attempts,
            status=OutboxStatus.FAILED,
            next_attempt_at=_utc_now(),
            error=error,
        )

    def _update_outbox_entry(
        self,
        entry_id: int,
        *,
        attempts: int,
        status: OutboxStatus,
        next_attempt_at: datetime,
        error: str,
    ) -> None:
        try:
            with _connect(self._db_path) as conn:
                conn.execute(
                    """
                    UPDATE sync_outbox
                    SET attempts = ?, status = ?, next_attempt_at = ?, last_error = ?
                    WHERE id = ?;
                    """,
                    (attempts, status.value, next_attempt_at.isoformat(), error, entry_id),
                )
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to update outbox entry {entry_id}") from exc


__all__ = [
    "OutboxEntry",
    "OutboxOperation",
    "OutboxStatus",
    "OutboxStoreMixin",
]
