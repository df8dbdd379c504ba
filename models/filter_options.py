"""Transient filter state applied to the prompt view.

Updates: v0.1.0 - 2026-10-02 - Introduce PromptFilters value object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def _as_frozenset(values: Iterable[str] | None, *, lower: bool = False) -> frozenset[str]:
    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    cleaned = (str(value).strip() for value in values)
    if lower:
        return frozenset(value.lower() for value in cleaned if value)
    return frozenset(value for value in cleaned if value)


@dataclass(slots=True, frozen=True)
class PromptFilters:
    """Immutable filter selection; empty sets mean "no constraint"."""

    categories: frozenset[str] = field(default_factory=frozenset)
    tags: frozenset[str] = field(default_factory=frozenset)
    ai_models: frozenset[str] = field(default_factory=frozenset)
    favorites_only: bool = False
    search_query: str = ""

    @classmethod
    def build(
        cls,
        *,
        categories: Iterable[str] | None = None,
        tags: Iterable[str] | None = None,
        ai_models: Iterable[str] | None = None,
        favorites_only: bool = False,
        search_query: str | None = None,
    ) -> PromptFilters:
        """Create filters from loose iterables, trimming blanks and lower-casing tags."""
        return cls(
            categories=_as_frozenset(categories),
            tags=_as_frozenset(tags, lower=True),
            ai_models=_as_frozenset(ai_models),
            favorites_only=bool(favorites_only),
            search_query=(search_query or "").strip(),
        )

    def merge(self, **changes: object) -> PromptFilters:
        """Return a copy with the provided fields replaced."""
        current: dict[str, object] = {
            "categories": self.categories,
            "tags": self.tags,
            "ai_models": self.ai_models,
            "favorites_only": self.favorites_only,
            "search_query": self.search_query,
        }
        unknown = set(changes) - set(current)
        if unknown:
            raise TypeError(f"unknown filter field(s): {', '.join(sorted(unknown))}")
        current.update(changes)
        return PromptFilters.build(**current)  # type: ignore[arg-type]

    @property
    def is_active(self) -> bool:
        return bool(
            self.categories
            or self.tags
            or self.ai_models
            or self.favorites_only
            or self.search_query
        )


__all__ = ["PromptFilters"]
