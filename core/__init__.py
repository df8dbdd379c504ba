"""Core service layer for Prompt Library.

Updates:
  v0.3.0 - 2026-10-13 - Export sync reconciler, outbox, and factory helpers.
  v0.2.0 - 2026-10-09 - Export filter pipeline and remote store.
  v0.1.0 - 2026-10-03 - Surface LocalRepository and the PromptLibrary API.
"""

from .exceptions import (
    CategoryNotFoundError,
    CustomModelError,
    ImportParseError,
    PersistenceError,
    PromptLibraryError,
    PromptNotFoundError,
    PromptValidationError,
    RecordNotFoundError,
    RemoteSyncError,
)
from .factory import LibraryBuildError, LibraryRuntime, build_prompt_library
from .filtering import SearchScorer, SequenceMatcherScorer, build_view
from .outbox import OutboxWorker, RemoteOutbox
from .prompt_library import PromptLibrary
from .remote import RemoteStore, RestRemoteStore
from .repository import LocalRepository, RepositoryError
from .snapshot import build_snapshot_document, export_prompts_to_csv, parse_snapshot
from .sync import SyncReconciler, SyncState

__all__ = [
    "CategoryNotFoundError",
    "CustomModelError",
    "ImportParseError",
    "LibraryBuildError",
    "LibraryRuntime",
    "LocalRepository",
    "OutboxWorker",
    "PersistenceError",
    "PromptLibrary",
    "PromptLibraryError",
    "PromptNotFoundError",
    "PromptValidationError",
    "RecordNotFoundError",
    "RemoteOutbox",
    "RemoteStore",
    "RemoteSyncError",
    "RepositoryError",
    "RestRemoteStore",
    "SearchScorer",
    "SequenceMatcherScorer",
    "SyncReconciler",
    "SyncState",
    "build_prompt_library",
    "build_snapshot_document",
    "build_view",
    "export_prompts_to_csv",
    "parse_snapshot",
]
