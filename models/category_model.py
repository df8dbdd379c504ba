"""Category metadata models and helpers.

Updates: v0.2.1 - 2026-10-19 - Reject non-text colours and icons.
Updates: v0.2.0 - 2026-10-07 - Validate icons against the shared icon catalogue.
Updates: v0.1.0 - 2026-10-01 - Introduce Category dataclass and default categories.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional

_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

CATEGORY_ICONS: tuple[str, ...] = (
    "briefcase", "code", "lightbulb", "rocket", "target", "zap", "heart", "star",
    "flame", "trophy", "crown", "sparkles", "message", "mail", "phone", "globe",
    "book", "file", "database", "server", "cloud", "lock", "shield", "key",
    "cart", "dollar", "trending", "pie", "bar", "activity", "users", "user",
    "smile", "coffee", "music", "camera", "image", "calendar", "clock", "bell",
    "check", "settings", "wrench", "package", "box", "layers", "grid", "folder",
    "tag", "bookmark", "flag", "home", "building", "map", "laptop",
)
DEFAULT_CATEGORY_ICON = "folder"


def normalise_color(value: Optional[str]) -> Optional[str]:
    """Return a lower-cased hex colour or ``None``; raise ``ValueError`` when malformed."""

    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"category colour must be text: {value!r}")
    text = value.strip()
    if not text:
        return None
    if not _COLOR_PATTERN.match(text):
        raise ValueError(f"invalid category colour: {value!r}")
    return text.lower()


def normalise_icon(value: Optional[str]) -> Optional[str]:
    """Return a known icon name or ``None``; raise ``ValueError`` for unknown icons."""

    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"category icon must be text: {value!r}")
    text = value.strip().lower()
    if not text:
        return None
    if text not in CATEGORY_ICONS:
        raise ValueError(f"unknown category icon: {value!r}")
    return text


@dataclass(slots=True)
class Category:
    """Structured representation of a prompt category."""

    id: str
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None

    def __post_init__(self) -> None:
        """Normalise text fields and validate colour and icon."""

        if not str(self.id).strip():
            raise ValueError("category id cannot be empty")
        name = self.name.strip()
        if not name:
            raise ValueError("category name cannot be empty")
        self.name = name
        self.color = normalise_color(self.color)
        self.icon = normalise_icon(self.icon)

    def to_record(self) -> dict[str, Any]:
        """Serialize the category into a plain dictionary."""

        record: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.color is not None:
            record["color"] = self.color
        if self.icon is not None:
            record["icon"] = self.icon
        return record

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> "Category":
        """Hydrate a Category from a mapping."""

        identifier = data.get("id")
        name = data.get("name")
        if not isinstance(identifier, str) or not isinstance(name, str):
            raise ValueError("category records require string id and name")
        return cls(
            id=identifier,
            name=name,
            color=data.get("color"),
            icon=data.get("icon"),
        )

    @classmethod
    def create(
        cls,
        name: str,
        *,
        color: Optional[str] = None,
        icon: Optional[str] = DEFAULT_CATEGORY_ICON,
    ) -> "Category":
        """Create a user category with a fresh identifier."""

        return cls(id=str(uuid.uuid4()), name=name, color=color, icon=icon)


def default_categories() -> list[Category]:
    """Return the categories seeded when nothing has been persisted yet."""

    return [
        Category(id="writing", name="Writing", color="#3B82F6"),
        Category(id="code", name="Code", color="#10B981"),
        Category(id="image", name="Image Generation", color="#8B5CF6"),
        Category(id="analysis", name="Analysis", color="#F59E0B"),
        Category(id="creative", name="Creative", color="#EC4899"),
        Category(id="productivity", name="Productivity", color="#6366F1"),
        Category(id="other", name="Other", color="#6B7280"),
    ]


__all__ = [
    "CATEGORY_ICONS",
    "Category",
    "DEFAULT_CATEGORY_ICON",
    "default_categories",
    "normalise_color",
    "normalise_icon",
]
