"""Key/value persistence for the prompt, category, and settings collections.

Each collection is stored as one JSON document keyed by a stable name so the
layout matches the export snapshot sections.

Updates:
  v0.2.0 - 2026-10-06 - Skip malformed prompt records instead of dropping the collection.
  v0.1.0 - 2026-10-01 - Extract collection load/save helpers into mixin.
"""

from __future__ import annotations

import json
import sqlite3
from typing import TYPE_CHECKING, Any, ClassVar, cast

from models.category_model import Category, default_categories
from models.preferences import AppSettings
from models.prompt_model import Prompt

from .base import (
    RepositoryError,
    connect as _connect,
    json_loads_optional as _json_loads_optional,
    logger,
    utc_now as _utc_now,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

PROMPTS_KEY = "prompt-library-prompts"
CATEGORIES_KEY = "prompt-library-categories"
SETTINGS_KEY = "prompt-library-settings"


class CollectionStoreMixin:
    """Load and save whole collections as JSON documents."""

    _db_path: Path

    _KV_SCHEMA: ClassVar[str] = """
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
    """

    # Raw access --------------------------------------------------------- #

    def read_value(self, key: str) -> str | None:
        """Return the stored JSON text for *key*, or ``None`` when absent."""
        try:
            with _connect(self._db_path) as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?;", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to read '{key}' from local storage") from exc
        if row is None:
            return None
        return cast("str", row["value"])

    def write_value(self, key: str, value: str) -> None:
        """Insert or replace the JSON text stored under *key*."""
        try:
            with _connect(self._db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at;
                    """,
                    (key, value, _utc_now().isoformat()),
                )
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to write '{key}' to local storage") from exc

    def has_value(self, key: str) -> bool:
        return self.read_value(key) is not None

    def _load_document(self, key: str) -> Any | None:
        return _json_loads_optional(self.read_value(key))

    def _save_document(self, key: str, document: Any) -> None:
        self.write_value(key, json.dumps(document, ensure_ascii=False))

    # Prompts ------------------------------------------------------------ #

    def load_prompts(self) -> list[Prompt]:
        """Return stored prompts; malformed entries are skipped with a warning."""
        document = self._load_document(PROMPTS_KEY)
        if document is None:
            return []
        if not isinstance(document, list):
            logger.warning("Stored prompts are not a list; falling back to empty collection")
            return []
        prompts: list[Prompt] = []
        for entry in cast("list[Any]", document):
            if not isinstance(entry, dict):
                logger.warning("Skipping non-object prompt entry in local storage")
                continue
            try:
                prompts.append(Prompt.from_record(cast("Mapping[str, Any]", entry)))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(
                    "Skipping malformed prompt entry in local storage",
                    extra={"prompt_id": entry.get("id"), "error": str(exc)},
                )
        return prompts

    def save_prompts(self, prompts: Iterable[Prompt]) -> None:
        self._save_document(PROMPTS_KEY, [prompt.to_record() for prompt in prompts])

    # Categories --------------------------------------------------------- #

    def load_categories(self) -> list[Category]:
        """Return stored categories, or the seeded defaults when none are usable."""
        document = self._load_document(CATEGORIES_KEY)
        if not isinstance(document, list):
            return default_categories()
        try:
            return [
                Category.from_record(cast("Mapping[str, Any]", entry))
                for entry in cast("list[Any]", document)
            ]
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Stored categories are malformed; using defaults: %s", exc)
            return default_categories()

    def save_categories(self, categories: Iterable[Category]) -> None:
        self._save_document(CATEGORIES_KEY, [category.to_record() for category in categories])

    # Settings ----------------------------------------------------------- #

    def load_settings(self) -> AppSettings:
        document = self._load_document(SETTINGS_KEY)
        if not isinstance(document, dict):
            return AppSettings()
        return AppSettings.from_record(cast("Mapping[str, Any]", document))

    def save_settings(self, settings: AppSettings) -> None:
        self._save_document(SETTINGS_KEY, settings.to_record())


__all__ = [
    "CATEGORIES_KEY",
    "CollectionStoreMixin",
    "PROMPTS_KEY",
    "SETTINGS_KEY",
]
