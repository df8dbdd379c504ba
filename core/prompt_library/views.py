"""Filter state and derived views for the record store.

Updates:
  v0.2.0 - 2026-10-09 - Accept a pluggable search scorer and similarity threshold.
  v0.1.0 - 2026-10-04 - Extract filter state and view helpers into mixin.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from models.filter_options import PromptFilters

from ..custom_models import custom_models_in_use
from ..exceptions import PromptValidationError
from ..filtering import build_view

if TYPE_CHECKING:
    from models.preferences import AppSettings
    from models.prompt_model import Prompt

    from ..filtering import SearchScorer

__all__ = ["PromptViewMixin"]


class PromptViewMixin:
    """Own the transient filter selection and expose the ordered prompt view."""

    _prompts: list[Prompt]
    _settings: AppSettings
    _filters: PromptFilters
    _scorer: SearchScorer | None
    _min_similarity: float

    @property
    def filters(self) -> PromptFilters:
        return self._filters

    def set_filters(self, **changes: Any) -> PromptFilters:
        """Replace the named filter fields, keeping the others."""
        try:
            self._filters = self._filters.merge(**changes)
        except TypeError as exc:
            raise PromptValidationError(str(exc)) from exc
        return self._filters

    def reset_filters(self) -> PromptFilters:
        self._filters = PromptFilters()
        return self._filters

    def get_filtered_prompts(self) -> list[Prompt]:
        """Return prompts passing the current filters, ordered by the sort preference."""
        return build_view(
            self._prompts,
            self._filters,
            self._settings.sort_by,
            scorer=self._scorer,
            min_similarity=self._min_similarity,
        )

    def all_tags(self) -> list[str]:
        return sorted({tag for prompt in self._prompts for tag in prompt.tags})

    def all_ai_models(self) -> list[str]:
        return sorted({prompt.ai_model for prompt in self._prompts}, key=str.casefold)

    def custom_ai_models(self) -> list[str]:
        return custom_models_in_use(self._prompts)
