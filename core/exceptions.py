"""Common exception classes for core package.

This module centralises the exception hierarchy shared by the record store,
the persistence and remote adapters, and the sync reconciler.

All exceptions ultimately inherit from :class:`PromptLibraryError`, allowing
callers to catch a single base class for any library-related failure while
still distinguishing individual error categories when needed.

Updates:
  v0.3.0 - 2026-10-12 - Add ImportParseError for snapshot validation failures.
  v0.2.0 - 2026-10-07 - Add CustomModelError for custom AI model validation.
  v0.1.0 - 2026-10-01 - Created module with store, persistence, and remote errors.
"""

from __future__ import annotations


class PromptLibraryError(Exception):
    """Base exception for Prompt Library failures."""


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class PromptValidationError(PromptLibraryError, ValueError):
    """Raised when a prompt or category payload fails validation."""


class CustomModelError(PromptValidationError):
    """Raised when a custom AI model name collides with an existing one."""


# ---------------------------------------------------------------------------
# Lookup errors
# ---------------------------------------------------------------------------


class RecordNotFoundError(PromptLibraryError):
    """Raised when a record cannot be located in the live collections."""


class PromptNotFoundError(RecordNotFoundError):
    """Raised when a prompt cannot be located in the live collection."""


class CategoryNotFoundError(RecordNotFoundError):
    """Raised when a requested category does not exist."""


# ---------------------------------------------------------------------------
# Adapter errors
# ---------------------------------------------------------------------------


class PersistenceError(PromptLibraryError):
    """Raised when interactions with local storage fail."""


class RemoteSyncError(PromptLibraryError):
    """Raised when the remote store rejects a request or cannot be reached."""


class ImportParseError(PromptLibraryError):
    """Raised when a snapshot document cannot be parsed or has the wrong shape."""


__all__ = [
    "CategoryNotFoundError",
    "CustomModelError",
    "ImportParseError",
    "PersistenceError",
    "PromptLibraryError",
    "PromptNotFoundError",
    "PromptValidationError",
    "RecordNotFoundError",
    "RemoteSyncError",
]
