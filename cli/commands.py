"""CLI command handlers for the Prompt Library.

Updates:
  v0.2.0 - 2026-10-14 - Add sync, import, export, and category commands.
  v0.1.0 - 2026-10-04 - Initial prompt listing and mutation commands.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core import PromptLibraryError, RecordNotFoundError
from core.exceptions import PromptValidationError
from prompt_templates import PROMPT_TEMPLATES

from .utils import format_prompt_row, print_and_log, resolve_export_format

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from core.factory import LibraryRuntime
else:  # pragma: no cover - runtime placeholders for type-only imports
    LibraryRuntime = object

CommandHandler = Callable[[LibraryRuntime, argparse.Namespace, logging.Logger], int]

EXIT_OK = 0
EXIT_SETTINGS = 2
EXIT_INIT = 3
EXIT_INVALID = 4
EXIT_IO = 6


@dataclass(frozen=True)
class CommandSpec:
    """Metadata for dispatching CLI command handlers."""

    handler: CommandHandler
    requires_library: bool = True


def run_list(runtime: LibraryRuntime, args: argparse.Namespace, logger: logging.Logger) -> int:
    """Print prompts passing the requested filters."""
    library = runtime.library
    try:
        if args.sort:
            library.set_sort_by(args.sort)
        library.set_filters(
            categories=args.category,
            tags=args.tag,
            ai_models=args.model,
            favorites_only=args.favorites,
            search_query=args.search,
        )
    except PromptValidationError as exc:
        print_and_log(logger, logging.ERROR, f"Invalid filter: {exc}")
        return EXIT_INVALID
    prompts = library.get_filtered_prompts()
    if not prompts:
        print("No prompts found.")
        return EXIT_OK
    for prompt in prompts:
        print(format_prompt_row(prompt))
    logger.debug("Listed %d prompt(s)", len(prompts))
    return EXIT_OK


def run_add(runtime: LibraryRuntime, args: argparse.Namespace, logger: logging.Logger) -> int:
    """Create a prompt from arguments or a built-in template."""
    library = runtime.library
    if args.from_template:
        try:
            prompt = library.create_from_template(args.from_template)
        except RecordNotFoundError as exc:
            print_and_log(logger, logging.ERROR, str(exc))
            return EXIT_INVALID
        print(f"Created prompt {prompt.id} from template '{prompt.title}'.")
        return EXIT_OK

    content = args.content
    if args.content_file is not None:
        try:
            content = args.content_file.read_text(encoding="utf-8")
        except OSError as exc:
            print_and_log(logger, logging.ERROR, f"Unable to read {args.content_file}: {exc}")
            return EXIT_IO
    options: dict[str, object] = {
        "title": args.title,
        "content": content or "",
        "category": args.category,
        "tags": args.tag,
        "custom_ai_model": args.custom_model,
        "source_url": args.source_url,
        "notes": args.notes,
        "is_favorite": args.favorite,
    }
    if args.model:
        options["ai_model"] = args.model
    try:
        prompt = library.create_prompt(**options)
    except PromptValidationError as exc:
        print_and_log(logger, logging.ERROR, f"Invalid prompt: {exc}")
        return EXIT_INVALID
    print(f"Created prompt {prompt.id}.")
    return EXIT_OK


def _prompt_command(
    action: Callable[[LibraryRuntime, str], str],
) -> CommandHandler:
    def _handler(
        runtime: LibraryRuntime,
        args: argparse.Namespace,
        logger: logging.Logger,
    ) -> int:
        try:
            message = action(runtime, args.prompt_id)
        except RecordNotFoundError as exc:
            print_and_log(logger, logging.ERROR, str(exc))
            return EXIT_INVALID
        print(message)
        return EXIT_OK

    _handler.__doc__ = action.__doc__
    return _handler


def _toggle_favorite(runtime: LibraryRuntime, prompt_id: str) -> str:
    """Flip the favourite flag of a prompt."""
    prompt = runtime.library.toggle_favorite(prompt_id)
    state = "added to" if prompt.is_favorite else "removed from"
    return f"'{prompt.title}' {state} favourites."


def _use_prompt(runtime: LibraryRuntime, prompt_id: str) -> str:
    """Record a use and return the prompt body."""
    return runtime.library.increment_usage(prompt_id).content


def _delete_prompt(runtime: LibraryRuntime, prompt_id: str) -> str:
    """Delete a prompt."""
    removed = runtime.library.delete_prompt(prompt_id)
    return f"Deleted prompt '{removed.title}'."


def _duplicate_prompt(runtime: LibraryRuntime, prompt_id: str) -> str:
    """Copy a prompt."""
    copy = runtime.library.duplicate_prompt(prompt_id)
    return f"Created prompt {copy.id} ('{copy.title}')."


run_favorite = _prompt_command(_toggle_favorite)
run_use = _prompt_command(_use_prompt)
run_delete = _prompt_command(_delete_prompt)
run_duplicate = _prompt_command(_duplicate_prompt)


def run_export(runtime: LibraryRuntime, args: argparse.Namespace, logger: logging.Logger) -> int:
    """Write a JSON snapshot or a CSV listing to disk."""
    library = runtime.library
    export_format = resolve_export_format(args.path, args.format)
    if export_format == "csv":
        payload = library.export_csv()
    else:
        payload = library.export_snapshot()
    destination = args.path.expanduser()
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(payload, encoding="utf-8")
    except OSError as exc:
        print_and_log(logger, logging.ERROR, f"Failed to export library: {exc}")
        return EXIT_IO
    print_and_log(
        logger,
        logging.INFO,
        f"Exported {len(library.prompts)} prompt(s) as {export_format.upper()} to {destination}",
    )
    return EXIT_OK


def run_import(runtime: LibraryRuntime, args: argparse.Namespace, logger: logging.Logger) -> int:
    """Load a JSON snapshot, replacing the sections it contains."""
    try:
        text = args.path.expanduser().read_text(encoding="utf-8")
    except OSError as exc:
        print_and_log(logger, logging.ERROR, f"Unable to read {args.path}: {exc}")
        return EXIT_IO
    if not runtime.library.import_snapshot(text):
        print_and_log(logger, logging.ERROR, f"{args.path} is not a valid library snapshot.")
        return EXIT_INVALID
    print_and_log(logger, logging.INFO, f"Imported snapshot from {args.path}")
    return EXIT_OK


def run_categories(
    runtime: LibraryRuntime,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    """List categories, optionally creating or deleting one first."""
    library = runtime.library
    try:
        if args.add:
            category = library.create_category(args.add, color=args.color, icon=args.icon)
            print(f"Created category {category.id} ('{category.name}').")
        if args.delete:
            removed = library.delete_category(args.delete)
            print(f"Deleted category '{removed.name}'.")
    except (PromptValidationError, RecordNotFoundError) as exc:
        print_and_log(logger, logging.ERROR, str(exc))
        return EXIT_INVALID
    for category in library.list_categories():
        print(f"{category.id}  {category.name}  {category.color}  {category.icon}")
    return EXIT_OK


def run_templates(
    runtime: LibraryRuntime | None,
    args: argparse.Namespace,
    logger: logging.Logger,
) -> int:
    """List built-in templates."""
    for template in PROMPT_TEMPLATES:
        tags = ", ".join(template.tags)
        print(f"{template.title}  [{template.category}] ({template.ai_model}) tags: {tags}")
    return EXIT_OK


def run_sync(runtime: LibraryRuntime, args: argparse.Namespace, logger: logging.Logger) -> int:
    """Sign in as ``--user``, migrate local prompts, and flush queued changes."""
    reconciler = runtime.reconciler
    if reconciler is None:
        print_and_log(
            logger,
            logging.ERROR,
            "Remote sync is not configured; set PROMPT_LIBRARY_REMOTE_URL and "
            "PROMPT_LIBRARY_REMOTE_API_KEY.",
        )
        return EXIT_SETTINGS
    try:
        if not reconciler.sign_in(args.user):
            print_and_log(
                logger,
                logging.ERROR,
                f"Sync failed; library left local-only: {reconciler.last_error}",
            )
            return EXIT_IO
        outbox = runtime.library.outbox
        pending = 0
        if outbox is not None:
            outbox.drain(args.user)
            pending = outbox.pending_count(args.user)
    except (PromptLibraryError, ValueError) as exc:
        print_and_log(logger, logging.ERROR, f"Sync failed: {exc}")
        return EXIT_IO
    print_and_log(
        logger,
        logging.INFO,
        f"Synced {len(runtime.library.prompts)} prompt(s) for {args.user}; "
        f"{pending} change(s) still queued.",
    )
    reconciler.sign_out()
    return EXIT_OK


COMMAND_SPECS: dict[str | None, CommandSpec] = {
    "list": CommandSpec(run_list),
    "add": CommandSpec(run_add),
    "favorite": CommandSpec(run_favorite),
    "use": CommandSpec(run_use),
    "delete": CommandSpec(run_delete),
    "duplicate": CommandSpec(run_duplicate),
    "export": CommandSpec(run_export),
    "import": CommandSpec(run_import),
    "categories": CommandSpec(run_categories),
    "templates": CommandSpec(run_templates, requires_library=False),
    "sync": CommandSpec(run_sync),
}


__all__ = [
    "COMMAND_SPECS",
    "CommandSpec",
    "EXIT_INIT",
    "EXIT_INVALID",
    "EXIT_IO",
    "EXIT_OK",
    "EXIT_SETTINGS",
]
