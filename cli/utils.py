"""Shared CLI utility functions for Prompt Library commands.

Updates:
  v0.2.0 - 2026-10-14 - Add prompt row formatting and export format detection.
  v0.1.0 - 2026-10-04 - Extract stdout logging, masking, and path helpers.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from logging import Logger

    from models.prompt_model import Prompt


def print_and_log(logger: Logger, level: int, message: str) -> None:
    """Log *message* at *level* and mirror it to stdout."""
    logger.log(level, message)
    print(message)


def mask_secret(value: str | None) -> str:
    """Return an obfuscated representation of secret configuration values."""
    if not value:
        return "not set"
    secret = value.strip()
    if len(secret) <= 6:
        return "set (****)"
    prefix = secret[:4]
    suffix = secret[-4:]
    return f"set ({prefix}...{suffix})"


def describe_path(path_value: object, *, allow_missing_file: bool = False) -> str:
    """Return a human-friendly description of a file path's suitability."""
    try:
        path = Path(path_value) if path_value is not None else None
    except TypeError:
        path = None
    if path is None:
        return "not set"

    resolved = path.expanduser()
    if resolved.exists():
        if resolved.is_dir():
            return f"{resolved} (exists but is a directory)"
        return f"{resolved} (exists)"

    message = f"{resolved} (missing)"
    if allow_missing_file:
        message = f"{resolved} (missing - created on demand)"
    parent = resolved.parent
    if not parent.exists():
        message += f", parent missing: {parent}"
    return message


def resolve_export_format(path: Path, explicit_format: str | None) -> str:
    """Return an export format slug based on *path* or *explicit_format*."""
    if explicit_format:
        return explicit_format.lower()
    if path.suffix.lower() == ".csv":
        return "csv"
    return "json"


def format_prompt_row(prompt: Prompt) -> str:
    """Return a single-line listing entry for *prompt*."""
    marker = "*" if prompt.is_favorite else " "
    category = prompt.category or "-"
    tags = ", ".join(prompt.tags) if prompt.tags else "-"
    return (
        f"{marker} {prompt.id}  {prompt.title}  "
        f"[{category}] ({prompt.ai_model}) tags: {tags}  uses: {prompt.usage_count}"
    )
