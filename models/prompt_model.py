"""Prompt data model definitions.

Updates: v0.3.1 - 2026-10-19 - Require text notes and keep timestamps at millisecond precision.
Updates: v0.3.0 - 2026-10-09 - Add remote row mapping for the per-user prompts table.
Updates: v0.2.1 - 2026-10-06 - Normalise tags to lower-case with stable de-duplication.
Updates: v0.2.0 - 2026-10-04 - Add AI model catalogue and custom model helpers.
Updates: v0.1.0 - 2026-10-01 - Initial Prompt schema with serialization helpers.
"""
from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

AI_MODELS: tuple[str, ...] = (
    "ChatGPT",
    "Claude",
    "Gemini",
    "Midjourney",
    "DALL-E",
    "Stable Diffusion",
    "MagicPatterns",
    "Vercel",
    "Lovable",
    "Cursor",
    "Replit",
    "Aura",
    "Anything",
    "Builder",
    "Ideogram",
    "Krea",
    "FLORA",
    "Other",
)
DEFAULT_AI_MODEL = "ChatGPT"
_BUILTIN_MODELS_BY_KEY = {model.lower(): model for model in AI_MODELS}
_BUILTIN_MODEL_KEYS = frozenset(_BUILTIN_MODELS_BY_KEY)


def _utc_now() -> datetime:
    """Return an aware UTC timestamp."""
    return datetime.now(UTC)


def new_prompt_id() -> str:
    """Return a fresh opaque prompt identifier."""
    return str(uuid.uuid4())


def is_builtin_model(value: str | None) -> bool:
    """Return ``True`` when *value* names a built-in model (case-insensitive)."""
    if value is None:
        return False
    return value.strip().lower() in _BUILTIN_MODEL_KEYS


def builtin_model_name(value: str | None) -> str | None:
    """Return the catalogue spelling of a built-in model, or ``None`` for anything else."""
    if value is None:
        return None
    return _BUILTIN_MODELS_BY_KEY.get(value.strip().lower())


def parse_timestamp(value: Any) -> datetime:
    """Parse ISO-8601 strings (with optional ``Z`` suffix) into aware datetimes."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_optional_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    return parse_timestamp(value)


def format_timestamp(value: datetime) -> str:
    """Serialise datetimes as ISO-8601 strings with millisecond precision."""
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision so stored timestamps survive serialisation."""
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def normalise_tags(values: Iterable[Any] | None) -> list[str]:
    """Return trimmed, lower-cased tags without duplicates, keeping first-seen order."""
    if values is None:
        return []
    if isinstance(values, str):
        values = values.split(",")
    tags: list[str] = []
    seen: set[str] = set()
    for raw in values:
        text = str(raw).strip().lower()
        if not text or text in seen:
            continue
        seen.add(text)
        tags.append(text)
    return tags


def _clean_optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"prompt field '{key}' must be a string")
    return value


@dataclass(slots=True)
class Prompt:
    """Dataclass representation of a prompt entry."""

    id: str
    title: str
    content: str
    category: str = ""
    tags: list[str] = field(default_factory=list)
    ai_model: str = DEFAULT_AI_MODEL
    source_url: str | None = None
    notes: str | None = None
    is_favorite: bool = False
    usage_count: int = 0
    last_used: datetime | None = None
    date_added: datetime = field(default_factory=_utc_now)
    collection_id: str | None = None
    is_template: bool | None = None

    def __post_init__(self) -> None:
        """Normalise field values and reject non-text notes."""
        self.tags = normalise_tags(self.tags)
        if self.notes is not None and not isinstance(self.notes, str):
            raise ValueError("prompt field 'notes' must be a string")
        self.ai_model = (self.ai_model or "").strip() or DEFAULT_AI_MODEL
        self.source_url = _clean_optional_text(self.source_url)
        self.collection_id = _clean_optional_text(self.collection_id)
        self.date_added = truncate_to_millis(self.date_added)
        if self.last_used is not None:
            self.last_used = truncate_to_millis(self.last_used)
        if self.usage_count < 0:
            raise ValueError("usage_count cannot be negative")

    @property
    def has_custom_model(self) -> bool:
        """Return ``True`` when the prompt targets a model outside the built-in list."""
        return not is_builtin_model(self.ai_model)

    def to_record(self) -> dict[str, Any]:
        """Return the camelCase mapping used for local storage and snapshots."""
        record: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "tags": list(self.tags),
            "aiModel": self.ai_model,
            "isFavorite": self.is_favorite,
            "usageCount": self.usage_count,
            "dateAdded": format_timestamp(self.date_added),
        }
        if self.source_url is not None:
            record["sourceUrl"] = self.source_url
        if self.notes is not None:
            record["notes"] = self.notes
        if self.last_used is not None:
            record["lastUsed"] = format_timestamp(self.last_used)
        if self.collection_id is not None:
            record["collectionId"] = self.collection_id
        if self.is_template is not None:
            record["isTemplate"] = self.is_template
        return record

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> Prompt:
        """Create a Prompt from a camelCase record, raising ``ValueError`` on bad shapes."""
        identifier = data.get("id")
        if not isinstance(identifier, str) or not identifier.strip():
            raise ValueError("prompt records require a non-empty string id")
        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise ValueError("prompt field 'tags' must be a list")
        return cls(
            id=identifier,
            title=_require_text(data, "title"),
            content=_require_text(data, "content"),
            category=str(data.get("category") or ""),
            tags=tags,
            ai_model=str(data.get("aiModel") or DEFAULT_AI_MODEL),
            source_url=data.get("sourceUrl"),
            notes=data.get("notes"),
            is_favorite=bool(data.get("isFavorite", False)),
            usage_count=int(data.get("usageCount") or 0),
            last_used=parse_optional_timestamp(data.get("lastUsed")),
            date_added=parse_timestamp(data.get("dateAdded")),
            collection_id=data.get("collectionId"),
            is_template=data.get("isTemplate"),
        )

    def to_remote_row(self, user_id: str) -> dict[str, Any]:
        """Return the snake_case row stored in the remote prompts table."""
        return {
            "id": self.id,
            "user_id": user_id,
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "tags": list(self.tags),
            "source_url": self.source_url,
            "ai_model": self.ai_model,
            "notes": self.notes,
            "is_favorite": self.is_favorite,
            "usage_count": self.usage_count,
            "last_used": format_timestamp(self.last_used) if self.last_used else None,
            "collection_id": self.collection_id,
            "is_template": self.is_template,
            "created_at": format_timestamp(self.date_added),
        }

    @classmethod
    def from_remote_row(cls, row: Mapping[str, Any]) -> Prompt:
        """Hydrate a Prompt from a remote table row."""
        return cls(
            id=str(row["id"]),
            title=str(row.get("title") or ""),
            content=str(row.get("content") or ""),
            category=str(row.get("category") or ""),
            tags=list(row.get("tags") or []),
            ai_model=str(row.get("ai_model") or DEFAULT_AI_MODEL),
            source_url=row.get("source_url"),
            notes=row.get("notes"),
            is_favorite=bool(row.get("is_favorite", False)),
            usage_count=int(row.get("usage_count") or 0),
            last_used=parse_optional_timestamp(row.get("last_used")),
            date_added=(
                parse_timestamp(row["created_at"]) if row.get("created_at") else _utc_now()
            ),
            collection_id=row.get("collection_id"),
            is_template=row.get("is_template"),
        )


__all__ = [
    "AI_MODELS",
    "DEFAULT_AI_MODEL",
    "Prompt",
    "builtin_model_name",
    "format_timestamp",
    "is_builtin_model",
    "new_prompt_id",
    "normalise_tags",
    "parse_optional_timestamp",
    "parse_timestamp",
    "truncate_to_millis",
]
