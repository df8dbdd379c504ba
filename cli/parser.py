"""Argument parser for the Prompt Library CLI.

Updates:
  v0.2.1 - 2026-10-19 - Limit add --model to the built-in catalogue.
  v0.2.0 - 2026-10-14 - Add sync, import, and export sub-commands.
  v0.1.0 - 2026-10-04 - Initial list/add/favorite/use/delete sub-commands.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

from models.preferences import SortOption
from models.prompt_model import AI_MODELS

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from collections.abc import Sequence


def build_parser() -> argparse.ArgumentParser:
    """Return the configured argument parser."""
    parser = argparse.ArgumentParser(description="Prompt Library command-line interface")
    parser.add_argument(
        "--logging-config",
        type=Path,
        default=None,
        help="Path to logging configuration file (INI format)",
    )
    parser.add_argument(
        "--print-settings",
        action="store_true",
        help="Print resolved settings and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr when no logging configuration is found.",
    )

    subparsers = parser.add_subparsers(dest="command")

    list_parser = subparsers.add_parser("list", help="List prompts matching optional filters.")
    list_parser.add_argument(
        "--category",
        action="append",
        default=[],
        help="Only include prompts in this category (repeatable).",
    )
    list_parser.add_argument(
        "--tag",
        action="append",
        default=[],
        help="Only include prompts carrying this tag (repeatable).",
    )
    list_parser.add_argument(
        "--model",
        action="append",
        default=[],
        help="Only include prompts targeting this AI model (repeatable).",
    )
    list_parser.add_argument(
        "--favorites",
        action="store_true",
        help="Only include favourite prompts.",
    )
    list_parser.add_argument("--search", default="", help="Fuzzy search query.")
    list_parser.add_argument(
        "--sort",
        choices=[option.value for option in SortOption],
        default=None,
        help="Sort order; saved as the new preference.",
    )

    add_parser = subparsers.add_parser("add", help="Create a new prompt.")
    source = add_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--title", help="Prompt title.")
    source.add_argument(
        "--from-template",
        metavar="TITLE",
        help="Create the prompt from a built-in template.",
    )
    add_parser.add_argument("--content", help="Prompt body text.")
    add_parser.add_argument(
        "--content-file",
        type=Path,
        help="Read the prompt body from a UTF-8 text file.",
    )
    add_parser.add_argument("--category", default="", help="Category name.")
    add_parser.add_argument("--tag", action="append", default=[], help="Tag (repeatable).")
    add_parser.add_argument(
        "--model",
        default=None,
        choices=AI_MODELS,
        help="Built-in AI model name.",
    )
    add_parser.add_argument(
        "--custom-model",
        default=None,
        help="Custom AI model name not present in the built-in list.",
    )
    add_parser.add_argument("--source-url", default=None, help="Where the prompt came from.")
    add_parser.add_argument("--notes", default=None, help="Free-form notes.")
    add_parser.add_argument("--favorite", action="store_true", help="Mark as favourite.")

    for name, help_text in (
        ("favorite", "Toggle the favourite flag of a prompt."),
        ("use", "Record one use of a prompt and print its content."),
        ("delete", "Delete a prompt."),
        ("duplicate", "Copy a prompt under a new id."),
    ):
        command_parser = subparsers.add_parser(name, help=help_text)
        command_parser.add_argument("prompt_id", help="Identifier of the prompt.")

    export_parser = subparsers.add_parser(
        "export",
        help="Export the library as a JSON snapshot or prompts as CSV.",
    )
    export_parser.add_argument("path", type=Path, help="Destination file path (.json or .csv)")
    export_parser.add_argument(
        "--format",
        choices=("json", "csv"),
        default=None,
        help="Explicit output format (defaults based on file extension).",
    )

    import_parser = subparsers.add_parser(
        "import",
        help="Replace library sections with those present in a JSON snapshot.",
    )
    import_parser.add_argument("path", type=Path, help="Snapshot file to import.")

    categories_parser = subparsers.add_parser("categories", help="List or edit categories.")
    categories_parser.add_argument("--add", metavar="NAME", help="Create a category.")
    categories_parser.add_argument("--color", default=None, help="Hex colour for --add.")
    categories_parser.add_argument("--icon", default="folder", help="Icon name for --add.")
    categories_parser.add_argument("--delete", metavar="ID", help="Delete a category by id.")

    subparsers.add_parser("templates", help="List built-in prompt templates.")

    sync_parser = subparsers.add_parser(
        "sync",
        help="Migrate local prompts to the remote store and flush queued changes.",
    )
    sync_parser.add_argument("--user", required=True, help="Remote user identifier.")

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments."""
    return build_parser().parse_args(argv)


__all__ = ["build_parser", "parse_args"]
