"""View mode, sort order, and theme preferences for the record store.

Updates:
  v0.1.0 - 2026-10-04 - Extract preference setters into mixin.
"""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import TYPE_CHECKING, TypeVar

from models.preferences import AppSettings, SortOption, ThemeMode, ViewMode

from ..exceptions import PromptValidationError

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ["PreferencesMixin"]

E = TypeVar("E", bound=Enum)


def _coerce(enum_cls: type[E], value: E | str) -> E:
    try:
        return enum_cls(value)
    except ValueError as exc:
        choices = ", ".join(str(member.value) for member in enum_cls)
        raise PromptValidationError(f"Invalid value {value!r}; expected one of: {choices}") from exc


class PreferencesMixin:
    _settings: AppSettings
    _persist_settings: Callable[[], None]

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def set_view_mode(self, view_mode: ViewMode | str) -> AppSettings:
        return self._update_settings(view_mode=_coerce(ViewMode, view_mode))

    def set_sort_by(self, sort_by: SortOption | str) -> AppSettings:
        return self._update_settings(sort_by=_coerce(SortOption, sort_by))

    def set_theme(self, theme: ThemeMode | str) -> AppSettings:
        return self._update_settings(theme=_coerce(ThemeMode, theme))

    def _update_settings(self, **changes: object) -> AppSettings:
        self._settings = replace(self._settings, **changes)  # type: ignore[arg-type]
        self._persist_settings()
        return self._settings
