"""Shared repository helpers and error hierarchy.

Updates:
  v0.2.0 - 2026-10-10 - Close connections after each unit of work.
  v0.1.0 - 2026-10-01 - Extract logger, helpers, and exceptions for the local store.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from ..exceptions import PersistenceError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger("prompt_library.repository")


class RepositoryError(PersistenceError):
    """Base exception for SQLite repository failures."""


class RepositoryNotFoundError(RepositoryError):
    """Raised when a requested record cannot be located."""


def ensure_directory(path: Path) -> None:
    """Ensure the directory for the SQLite database exists."""
    path.parent.mkdir(parents=True, exist_ok=True)


@contextmanager
def connect(db_path: Path) -> Iterator[sqlite3.Connection]:
    """Yield a configured SQLite connection, committing on success and always closing."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA journal_mode = WAL;")
        conn.execute("PRAGMA synchronous = NORMAL;")
        yield conn
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


def utc_now() -> datetime:
    """Return an aware UTC timestamp."""
    return datetime.now(UTC)


def json_dumps(value: Any | None) -> str | None:
    """Serialize arbitrary values to JSON strings (or None)."""
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def json_loads_optional(value: str | None) -> Any | None:
    """Deserialize JSON strings, returning ``None`` for empty or corrupted payloads."""
    if value is None or value in ("", "null"):
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        logger.warning("Discarding corrupted JSON payload from local storage")
        return None


def parse_optional_datetime(value: Any) -> datetime | None:
    """Return a timezone-aware datetime parsed from SQLite rows when possible."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed
    return None


__all__ = [
    "RepositoryError",
    "RepositoryNotFoundError",
    "connect",
    "ensure_directory",
    "json_dumps",
    "json_loads_optional",
    "logger",
    "parse_optional_datetime",
    "utc_now",
]
