"""Record store service object for the prompt library.

``PromptLibrary`` owns the in-memory prompts, categories, settings, and the
transient filter selection. Every mutation updates memory first, writes the
affected collection to the local repository before returning, and, while a
user is signed in, queues the single-record delta in the remote outbox.

Instances are explicit service objects: create one per process or test and
pass it to whatever hosts it.

Updates:
  v0.3.1 - 2026-10-19 - Let replace_prompts surface local write failures.
  v0.3.0 - 2026-10-12 - Delegate snapshot import/export and CSV export.
  v0.2.0 - 2026-10-11 - Track the signed-in user and queue remote deltas in the outbox.
  v0.1.0 - 2026-10-03 - Compose lifecycle, category, preference, and view mixins.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from config.settings import DEFAULT_SEARCH_MIN_SIMILARITY
from models.category_model import Category, default_categories
from models.filter_options import PromptFilters
from models.preferences import AppSettings

from ..exceptions import ImportParseError
from ..repository import RepositoryError
from ..snapshot import (
    build_snapshot_document,
    export_prompts_to_csv,
    parse_snapshot,
)
from .categories import CategorySupport
from .lifecycle import PromptLifecycleMixin
from .preferences import PreferencesMixin
from .storage import LibraryStorageMixin
from .views import PromptViewMixin

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from models.prompt_model import Prompt

    from ..filtering import SearchScorer
    from ..outbox import OutboxWorker, RemoteOutbox
    from ..repository import LocalRepository

logger = logging.getLogger("prompt_library.store")

__all__ = ["PromptLibrary"]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class PromptLibrary(
    PromptLifecycleMixin,
    CategorySupport,
    PreferencesMixin,
    PromptViewMixin,
    LibraryStorageMixin,
):
    """In-memory authoritative store of prompts, categories, and settings."""

    def __init__(
        self,
        repository: LocalRepository,
        *,
        outbox: RemoteOutbox | None = None,
        worker: OutboxWorker | None = None,
        scorer: SearchScorer | None = None,
        min_similarity: float = DEFAULT_SEARCH_MIN_SIMILARITY,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._repository = repository
        self._outbox = outbox
        self._worker = worker
        self._scorer = scorer
        self._min_similarity = min_similarity
        self._clock = clock or _utc_now
        self._current_user_id: str | None = None
        self._filters = PromptFilters()
        self._prompts: list[Prompt] = []
        self._categories: list[Category] = []
        self._settings = AppSettings()
        self.reload()

    # Wiring ------------------------------------------------------------- #

    @property
    def repository(self) -> LocalRepository:
        return self._repository

    @property
    def outbox(self) -> RemoteOutbox | None:
        return self._outbox

    @property
    def current_user_id(self) -> str | None:
        """Return the signed-in user whose remote store receives mutations."""
        return self._current_user_id

    def set_current_user(self, user_id: str | None) -> None:
        self._current_user_id = user_id

    def close(self) -> None:
        """Stop the background outbox worker, if one is attached."""
        if self._worker is not None:
            self._worker.stop()
            self._worker = None

    # Loading ------------------------------------------------------------ #

    def reload(self) -> None:
        """Replace every in-memory collection with what local storage holds."""
        self.reload_prompts()
        try:
            self._categories = self._repository.load_categories()
        except RepositoryError:
            logger.warning("Unable to load categories; using defaults", exc_info=True)
            self._categories = default_categories()
        try:
            self._settings = self._repository.load_settings()
        except RepositoryError:
            logger.warning("Unable to load settings; using defaults", exc_info=True)
            self._settings = AppSettings()

    def reload_prompts(self) -> list[Prompt]:
        try:
            self._prompts = self._repository.load_prompts()
        except RepositoryError:
            logger.warning("Unable to load prompts; starting empty", exc_info=True)
            self._prompts = []
        return list(self._prompts)

    def replace_prompts(self, prompts: Iterable[Prompt]) -> None:
        """Mirror *prompts* to local storage, then swap them in without remote deltas.

        Raises:
          RepositoryError: When local storage cannot be overwritten. Memory is
            left unchanged in that case.
        """
        replacement = list(prompts)
        self._repository.save_prompts(replacement)
        self._prompts = replacement

    # Import / export ---------------------------------------------------- #

    def export_snapshot(self) -> str:
        """Return the current collections as an indented JSON snapshot."""
        document = build_snapshot_document(
            self._prompts,
            self._categories,
            self._settings,
            exported_at=self._clock(),
        )
        return json.dumps(document, indent=2, ensure_ascii=False)

    def import_snapshot(self, text: str) -> bool:
        """Overwrite the sections present in *text*; return ``False`` when it is malformed."""
        try:
            parsed = parse_snapshot(text)
        except ImportParseError as exc:
            logger.warning("Rejected snapshot import: %s", exc)
            return False
        if parsed.prompts is not None:
            self._prompts = list(parsed.prompts)
            self._persist_prompts()
        if parsed.categories is not None:
            self._categories = list(parsed.categories)
            self._persist_categories()
        if parsed.settings is not None:
            self._settings = parsed.settings
            self._persist_settings()
        return True

    def export_csv(self, prompts: Iterable[Prompt] | None = None) -> str:
        """Return *prompts* (default: every prompt) as CSV text."""
        return export_prompts_to_csv(self._prompts if prompts is None else prompts)
