"""Runtime boot helpers for the Prompt Library CLI.

Updates:
  v0.2.0 - 2026-10-14 - Report unreadable logging configuration files before falling back.
  v0.1.0 - 2026-10-04 - Extract logging configuration helpers.
"""

from __future__ import annotations

import logging
import logging.config
import sys
from pathlib import Path

DEFAULT_LOGGING_CONFIG = Path("config/logging.conf")
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(logging_conf_path: Path | None, *, verbose: bool = False) -> None:
    """Configure logging using *logging_conf_path* when available."""
    path = logging_conf_path or DEFAULT_LOGGING_CONFIG
    if path.exists():
        try:
            logging.config.fileConfig(path, disable_existing_loggers=False)
            return
        except (OSError, ValueError, KeyError, RuntimeError) as exc:
            print(f"Ignoring logging configuration {path}: {exc}", file=sys.stderr)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
    )
