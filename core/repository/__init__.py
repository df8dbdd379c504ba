"""SQLite-backed repository for local prompt library storage.

Updates:
  v0.2.0 - 2026-10-11 - Compose the remote outbox mixin alongside collection storage.
  v0.1.0 - 2026-10-01 - Local repository built from collection store mixin.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from .base import (
    RepositoryError,
    RepositoryNotFoundError,
    connect as _connect,
    ensure_directory as _ensure_directory,
)
from .kv_store import CATEGORIES_KEY, PROMPTS_KEY, SETTINGS_KEY, CollectionStoreMixin
from .outbox import OutboxEntry, OutboxOperation, OutboxStatus, OutboxStoreMixin


class LocalRepository(CollectionStoreMixin, OutboxStoreMixin):
    """Compose repository mixins for SQLite-backed storage."""

    def __init__(self, db_path: str | Path) -> None:
        """Initialise repository storage and ensure the schema exists."""
        self._db_path = Path(db_path)
        try:
            _ensure_directory(self._db_path)
            with _connect(self._db_path) as conn:
                conn.executescript(self._KV_SCHEMA + self._OUTBOX_SCHEMA)
        except (OSError, sqlite3.Error) as exc:
            raise RepositoryError(f"Failed to initialise SQLite storage at {self._db_path}") from exc

    @property
    def db_path(self) -> Path:
        return self._db_path


__all__ = [
    "CATEGORIES_KEY",
    "LocalRepository",
    "OutboxEntry",
    "OutboxOperation",
    "OutboxStatus",
    "PROMPTS_KEY",
    "RepositoryError",
    "RepositoryNotFoundError",
    "SETTINGS_KEY",
]
