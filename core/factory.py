"""Factories for constructing PromptLibrary instances from validated settings.

Updates:
  v0.2.1 - 2026-10-19 - Send the configured user access token as bearer.
  v0.2.0 - 2026-10-13 - Start the outbox worker and build the reconciler when remote sync is configured.
  v0.1.0 - 2026-10-05 - Initial factory wiring repository and record store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .outbox import OutboxWorker, RemoteOutbox
from .prompt_library import PromptLibrary
from .remote import RestRemoteStore
from .repository import LocalRepository, RepositoryError
from .sync import SyncReconciler

if TYPE_CHECKING:  # pragma: no cover - typing only
    from config import PromptLibrarySettings

    from .remote import RemoteStore

factory_logger = logging.getLogger("prompt_library.factory")


class LibraryBuildError(RuntimeError):
    """Raised when the prompt library cannot be initialised."""


@dataclass(slots=True)
class LibraryRuntime:
    """Objects wired together for one process or session."""

    library: PromptLibrary
    reconciler: SyncReconciler | None = None
    remote: RemoteStore | None = None

    def close(self) -> None:
        self.library.close()
        close_remote = getattr(self.remote, "close", None)
        if callable(close_remote):
            close_remote()


def build_remote_store(settings: PromptLibrarySettings) -> RestRemoteStore | None:
    """Return a REST remote store when URL and API key are configured."""
    url = settings.remote_url
    api_key = settings.remote_api_key
    if not url or not api_key:
        return None
    return RestRemoteStore(
        url,
        api_key,
        table=settings.remote_table,
        timeout=settings.sync_timeout_seconds,
        access_token=settings.remote_access_token,
    )


def build_prompt_library(
    settings: PromptLibrarySettings,
    *,
    remote: RemoteStore | None = None,
    start_worker: bool = True,
) -> LibraryRuntime:
    """Return a wired runtime for *settings*.

    Args:
      settings: Validated configuration.
      remote: Optional remote store overriding the configured REST client.
      start_worker: Launch the background outbox worker when remote sync is available.

    Raises:
      LibraryBuildError: When the local repository cannot be opened.
    """
    try:
        repository = LocalRepository(settings.db_path)
    except RepositoryError as exc:
        raise LibraryBuildError(f"Unable to open local storage at {settings.db_path}") from exc

    remote_store = remote if remote is not None else build_remote_store(settings)
    if remote_store is None:
        factory_logger.info("Remote sync not configured; running local-only")
        library = PromptLibrary(repository, min_similarity=settings.search_min_similarity)
        return LibraryRuntime(library=library)

    outbox = RemoteOutbox(
        repository,
        remote_store,
        max_attempts=settings.outbox_max_attempts,
        retry_delay_seconds=settings.outbox_retry_delay_seconds,
    )
    worker = (
        OutboxWorker(outbox, poll_interval_seconds=settings.outbox_poll_interval_seconds)
        if start_worker
        else None
    )
    library = PromptLibrary(
        repository,
        outbox=outbox,
        worker=worker,
        min_similarity=settings.search_min_similarity,
    )
    reconciler = SyncReconciler(library, remote_store, outbox=outbox)
    return LibraryRuntime(library=library, reconciler=reconciler, remote=remote_store)


__all__ = [
    "LibraryBuildError",
    "LibraryRuntime",
    "build_prompt_library",
    "build_remote_store",
]
