"""Category management helpers for the record store.

Updates:
  v0.1.0 - 2026-10-03 - Extract category APIs into mixin.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

from models.category_model import DEFAULT_CATEGORY_ICON, Category

from ..exceptions import CategoryNotFoundError, PromptValidationError

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ["CategorySupport"]

_UPDATABLE_FIELDS = frozenset({"name", "color", "icon"})


class CategorySupport:
    """Mixin exposing category CRUD helpers.

    Categories are local-only and deleting one never rewrites prompts that
    still reference it by name.
    """

    _categories: list[Category]
    _persist_categories: Callable[[], None]

    def list_categories(self) -> list[Category]:
        return list(self._categories)

    def get_category(self, category_id: str) -> Category:
        return self._categories[self._category_index(category_id)]

    def _category_index(self, category_id: str) -> int:
        for index, category in enumerate(self._categories):
            if category.id == category_id:
                return index
        raise CategoryNotFoundError(f"Category {category_id} not found")

    def create_category(
        self,
        name: str,
        *,
        color: str | None = None,
        icon: str | None = DEFAULT_CATEGORY_ICON,
    ) -> Category:
        """Create a new category entry."""
        try:
            category = Category.create(name, color=color, icon=icon)
        except ValueError as exc:
            raise PromptValidationError(str(exc)) from exc
        self._categories.append(category)
        self._persist_categories()
        return category

    def update_category(self, category_id: str, **changes: Any) -> Category:
        """Update name, colour, or icon of an existing category."""
        index = self._category_index(category_id)
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise PromptValidationError(
                f"Unknown category field(s): {', '.join(sorted(unknown))}"
            )
        try:
            updated = replace(self._categories[index], **changes)
        except ValueError as exc:
            raise PromptValidationError(str(exc)) from exc
        self._categories[index] = updated
        self._persist_categories()
        return updated

    def delete_category(self, category_id: str) -> Category:
        """Remove a category and return it."""
        removed = self._categories.pop(self._category_index(category_id))
        self._persist_categories()
        return removed
