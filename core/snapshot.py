"""JSON snapshot export/import and CSV export for the local prompt library.

Updates:
  v0.3.0 - 2026-10-19 - Leave snapshot writes to the record store.
  v0.2.0 - 2026-10-12 - Validate every section before writing so imports are all-or-nothing.
  v0.1.1 - 2026-10-08 - Add CSV export with minimal quoting.
  v0.1.0 - 2026-10-03 - Initial snapshot export/import helpers.
"""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from models.category_model import Category
from models.preferences import AppSettings
from models.prompt_model import Prompt, format_timestamp

from .exceptions import ImportParseError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

SNAPSHOT_VERSION = "1.0"

CSV_HEADERS: tuple[str, ...] = (
    "Title",
    "Content",
    "Category",
    "Tags",
    "AI Model",
    "Source URL",
    "Notes",
    "Favorite",
    "Date Added",
)


@dataclass(slots=True, frozen=True)
class ParsedSnapshot:
    """Validated snapshot sections; ``None`` marks a section absent from the payload."""

    prompts: list[Prompt] | None
    categories: list[Category] | None
    settings: AppSettings | None


def build_snapshot_document(
    prompts: Iterable[Prompt],
    categories: Iterable[Category],
    settings: AppSettings,
    *,
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    """Return the snapshot mapping for the provided collections."""
    return {
        "prompts": [prompt.to_record() for prompt in prompts],
        "categories": [category.to_record() for category in categories],
        "settings": settings.to_record(),
        "exportedAt": format_timestamp(exported_at or datetime.now(UTC)),
        "version": SNAPSHOT_VERSION,
    }


def _parse_prompts(section: Any) -> list[Prompt]:
    if not isinstance(section, list):
        raise ImportParseError("'prompts' must be a list")
    prompts: list[Prompt] = []
    seen_ids: set[str] = set()
    for index, entry in enumerate(cast("list[Any]", section)):
        if not isinstance(entry, dict):
            raise ImportParseError(f"prompt #{index} is not an object")
        try:
            prompt = Prompt.from_record(cast("Mapping[str, Any]", entry))
        except (KeyError, TypeError, ValueError) as exc:
            raise ImportParseError(f"prompt #{index} is invalid: {exc}") from exc
        if prompt.id in seen_ids:
            raise ImportParseError(f"duplicate prompt id {prompt.id!r}")
        seen_ids.add(prompt.id)
        prompts.append(prompt)
    return prompts


def _parse_categories(section: Any) -> list[Category]:
    if not isinstance(section, list):
        raise ImportParseError("'categories' must be a list")
    categories: list[Category] = []
    for index, entry in enumerate(cast("list[Any]", section)):
        if not isinstance(entry, dict):
            raise ImportParseError(f"category #{index} is not an object")
        try:
            categories.append(Category.from_record(cast("Mapping[str, Any]", entry)))
        except (TypeError, ValueError) as exc:
            raise ImportParseError(f"category #{index} is invalid: {exc}") from exc
    return categories


def parse_snapshot(text: str) -> ParsedSnapshot:
    """Parse and validate snapshot *text*; raise ``ImportParseError`` on any problem."""
    try:
        document = json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ImportParseError("snapshot is not valid JSON") from exc
    if not isinstance(document, dict):
        raise ImportParseError("snapshot must be a JSON object")
    data = cast("dict[str, Any]", document)

    prompts = _parse_prompts(data["prompts"]) if "prompts" in data else None
    categories = _parse_categories(data["categories"]) if "categories" in data else None
    settings: AppSettings | None = None
    if "settings" in data:
        if not isinstance(data["settings"], dict):
            raise ImportParseError("'settings' must be an object")
        settings = AppSettings.from_record(cast("Mapping[str, Any]", data["settings"]))
    return ParsedSnapshot(prompts=prompts, categories=categories, settings=settings)


def export_prompts_to_csv(prompts: Iterable[Prompt]) -> str:
    """Return prompts as CSV text with one row per prompt and ``\\n`` line endings."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for prompt in prompts:
        writer.writerow(
            (
                prompt.title,
                prompt.content,
                prompt.category,
                "; ".join(prompt.tags),
                prompt.ai_model,
                prompt.source_url or "",
                prompt.notes or "",
                "Yes" if prompt.is_favorite else "No",
                prompt.date_added.astimezone(UTC).date().isoformat(),
            )
        )
    return buffer.getvalue().removesuffix("\n")


__all__ = [
    "CSV_HEADERS",
    "ParsedSnapshot",
    "SNAPSHOT_VERSION",
    "build_snapshot_document",
    "export_prompts_to_csv",
    "parse_snapshot",
]
