"""Application preference model (view mode, sort order, theme).

Updates: v0.1.1 - 2026-10-06 - Fall back per field when persisted values are unknown.
Updates: v0.1.0 - 2026-10-01 - Introduce AppSettings dataclass and option enums.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Mapping

E = TypeVar("E", bound=Enum)


class ViewMode(str, Enum):
    """Layouts available for the prompt list."""

    GRID = "grid"
    LIST = "list"


class SortOption(str, Enum):
    """Sort keys supported by the prompt view."""

    DATE_ADDED = "dateAdded"
    ALPHABETICAL = "alphabetical"
    LAST_USED = "lastUsed"
    FAVORITES = "favorites"
    MOST_USED = "mostUsed"


class ThemeMode(str, Enum):
    """Colour scheme preference."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


def _coerce_enum(enum_cls: type[E], value: Any, default: E) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return default


@dataclass(slots=True)
class AppSettings:
    """User preferences persisted alongside prompts and categories."""

    view_mode: ViewMode = ViewMode.GRID
    sort_by: SortOption = SortOption.DATE_ADDED
    theme: ThemeMode = ThemeMode.SYSTEM

    def to_record(self) -> dict[str, str]:
        return {
            "viewMode": self.view_mode.value,
            "sortBy": self.sort_by.value,
            "theme": self.theme.value,
        }

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> AppSettings:
        """Hydrate settings; unknown values fall back to each field's default."""
        return cls(
            view_mode=_coerce_enum(ViewMode, data.get("viewMode"), ViewMode.GRID),
            sort_by=_coerce_enum(SortOption, data.get("sortBy"), SortOption.DATE_ADDED),
            theme=_coerce_enum(ThemeMode, data.get("theme"), ThemeMode.SYSTEM),
        )


__all__ = ["AppSettings", "SortOption", "ThemeMode", "ViewMode"]
