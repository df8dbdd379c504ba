"""Data models for Prompt Library.

Updates: v0.3.0 - 2026-10-06 - Export AppSettings preference enums.
Updates: v0.2.0 - 2026-10-02 - Export PromptFilters value object.
Updates: v0.1.0 - 2026-10-01 - Export Prompt and Category dataclasses.
"""

from .category_model import Category, default_categories
from .filter_options import PromptFilters
from .preferences import AppSettings, SortOption, ThemeMode, ViewMode
from .prompt_model import AI_MODELS, Prompt

__all__ = [
    "AI_MODELS",
    "AppSettings",
    "Category",
    "Prompt",
    "PromptFilters",
    "SortOption",
    "ThemeMode",
    "ViewMode",
    "default_categories",
]
