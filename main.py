"""Application entry point for the Prompt Library CLI.

Updates:
  v0.2.0 - 2026-10-14 - Dispatch through LibraryRuntime so sync commands reach the reconciler.
  v0.1.0 - 2026-10-04 - Wire settings, logging, and CLI commands.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cli.commands import COMMAND_SPECS, EXIT_INIT, EXIT_OK, EXIT_SETTINGS
from cli.parser import build_parser, parse_args
from cli.runtime import setup_logging
from cli.settings_summary import print_settings_summary
from config import SettingsError, load_settings
from core import LibraryBuildError, build_prompt_library

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from collections.abc import Sequence

    from config import PromptLibrarySettings
    from core import LibraryRuntime


def _initialise_runtime(
    settings: PromptLibrarySettings,
    logger: logging.Logger,
) -> LibraryRuntime | None:
    try:
        return build_prompt_library(settings)
    except LibraryBuildError as exc:
        logger.error("Failed to initialise prompt library: %s", exc)
        return None


def main(argv: Sequence[str] | None = None) -> int:
    """Entrypoint that wires settings, services, and CLI commands."""
    args = parse_args(argv)
    setup_logging(args.logging_config, verbose=args.verbose)

    logger = logging.getLogger("prompt_library.main")
    try:
        settings = load_settings()
    except SettingsError as exc:
        logger.error("Failed to load settings: %s", exc)
        print(f"Failed to load settings: {exc}")
        return EXIT_SETTINGS

    if args.print_settings:
        print_settings_summary(settings)
        return EXIT_OK

    spec = COMMAND_SPECS.get(getattr(args, "command", None))
    if spec is None:
        build_parser().print_help()
        return EXIT_OK

    if not spec.requires_library:
        return spec.handler(None, args, logger)

    runtime = _initialise_runtime(settings, logger)
    if runtime is None:
        return EXIT_INIT
    try:
        return spec.handler(runtime, args, logger)
    finally:
        runtime.close()


if __name__ == "__main__":
    raise SystemExit(main())
