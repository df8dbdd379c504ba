"""Local persistence and remote propagation helpers for the record store.

Updates:
  v0.2.0 - 2026-10-11 - Route remote deltas through the durable outbox.
  v0.1.0 - 2026-10-03 - Extract save-and-log helpers into mixin.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..repository import RepositoryError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from models.category_model import Category
    from models.preferences import AppSettings
    from models.prompt_model import Prompt

    from ..outbox import OutboxWorker, RemoteOutbox
    from ..repository import LocalRepository

logger = logging.getLogger("prompt_library.store")

__all__ = ["LibraryStorageMixin"]


class LibraryStorageMixin:
    """Write-through helpers shared by every mutation mixin.

    Local writes happen before a mutation returns; failures are logged and the
    in-memory state stays authoritative. Remote deltas are queued only while a
    user is signed in and never affect local state.
    """

    _repository: LocalRepository
    _outbox: RemoteOutbox | None
    _worker: OutboxWorker | None
    _current_user_id: str | None
    _prompts: list[Prompt]
    _categories: list[Category]
    _settings: AppSettings

    def _persist_prompts(self) -> None:
        try:
            self._repository.save_prompts(self._prompts)
        except RepositoryError:
            logger.error("Unable to persist prompts locally", exc_info=True)

    def _persist_categories(self) -> None:
        try:
            self._repository.save_categories(self._categories)
        except RepositoryError:
            logger.error("Unable to persist categories locally", exc_info=True)

    def _persist_settings(self) -> None:
        try:
            self._repository.save_settings(self._settings)
        except RepositoryError:
            logger.error("Unable to persist settings locally", exc_info=True)

    def _propagate_upsert(self, prompt: Prompt, *, created: bool) -> None:
        user_id = self._current_user_id
        if user_id is None or self._outbox is None:
            return
        try:
            self._outbox.enqueue_upsert(user_id, prompt, created=created)
        except RepositoryError:
            logger.warning(
                "Unable to queue remote %s",
                "create" if created else "update",
                exc_info=True,
                extra={"prompt_id": prompt.id},
            )
            return
        self._wake_worker()

    def _propagate_delete(self, prompt_id: str) -> None:
        user_id = self._current_user_id
        if user_id is None or self._outbox is None:
            return
        try:
            self._outbox.enqueue_delete(user_id, prompt_id)
        except RepositoryError:
            logger.warning(
                "Unable to queue remote delete",
                exc_info=True,
                extra={"prompt_id": prompt_id},
            )
            return
        self._wake_worker()

    def _wake_worker(self) -> None:
        if self._worker is not None:
            self._worker.wake()
