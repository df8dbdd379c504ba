"""Configuration helpers for Prompt Library.

Updates: v0.2.0 - 2026-10-05 - Expose remote store defaults.
Updates: v0.1.0 - 2026-10-01 - Expose settings loader and configuration error types.
"""

from .settings import (
    DEFAULT_DB_PATH,
    DEFAULT_REMOTE_TABLE,
    DEFAULT_SEARCH_MIN_SIMILARITY,
    PromptLibrarySettings,
    SettingsError,
    load_settings,
)

__all__ = [
    "DEFAULT_DB_PATH",
    "DEFAULT_REMOTE_TABLE",
    "DEFAULT_SEARCH_MIN_SIMILARITY",
    "PromptLibrarySettings",
    "SettingsError",
    "load_settings",
]
