"""Printable summaries for Prompt Library configuration.

Updates:
  v0.1.0 - 2026-10-14 - Summarise storage, remote sync, search, and outbox settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .utils import describe_path, mask_secret

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from config import PromptLibrarySettings


def print_settings_summary(settings: PromptLibrarySettings) -> None:
    """Emit a readable summary of the resolved configuration."""
    lines = [
        "Prompt Library configuration summary",
        "------------------------------------",
        f"Database path: {describe_path(settings.db_path, allow_missing_file=True)}",
        "",
        "Remote sync",
        f"  Enabled: {'yes' if settings.remote_enabled else 'no'}",
        f"  URL: {settings.remote_url or 'not set'}",
        f"  API key: {mask_secret(settings.remote_api_key)}",
        f"  Access token: {mask_secret(settings.remote_access_token)}",
        f"  Table: {settings.remote_table}",
        f"  Request timeout: {settings.sync_timeout_seconds:g}s",
        "",
        "Search",
        f"  Minimum similarity: {settings.search_min_similarity:g}",
        "",
        "Outbox",
        f"  Max attempts: {settings.outbox_max_attempts}",
        f"  Retry delay: {settings.outbox_retry_delay_seconds:g}s",
        f"  Poll interval: {settings.outbox_poll_interval_seconds:g}s",
    ]
    print("\n".join(lines))


__all__ = ["print_settings_summary"]
