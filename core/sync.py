"""Local-only / synced state machine for the prompt library.

Signing in migrates the local collection to the user's remote store once and
then treats the remote collection as authoritative; signing out only stops
remote mirroring. A failed migration never leaves the library empty: the
prompts in local storage are reloaded and the library stays local-only.

Updates:
  v0.2.1 - 2026-10-19 - Abandon sign-in when the remote collection cannot be mirrored locally.
  v0.2.0 - 2026-10-13 - Flush the user's pending outbox before migrating.
  v0.1.1 - 2026-10-10 - Add explicit SYNCING state and last_error reporting.
  v0.1.0 - 2026-10-09 - Initial sign-in migration and sign-out transitions.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from enum import Enum
from typing import TYPE_CHECKING

from models.prompt_model import new_prompt_id

if TYPE_CHECKING:
    from .outbox import RemoteOutbox
    from .prompt_library import PromptLibrary
    from .remote import RemoteStore

logger = logging.getLogger("prompt_library.sync")


class SyncState(str, Enum):
    """Reconciler states."""

    LOCAL_ONLY = "local-only"
    SYNCING = "syncing"
    SYNCED = "synced"


class SyncReconciler:
    """Drive sign-in migration and sign-out for a :class:`PromptLibrary`."""

    def __init__(
        self,
        library: PromptLibrary,
        remote: RemoteStore,
        *,
        outbox: RemoteOutbox | None = None,
    ) -> None:
        self._library = library
        self._remote = remote
        self._outbox = outbox
        self._state = SyncState.LOCAL_ONLY
        self._last_error: str | None = None
        self._lock = threading.Lock()

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def last_error(self) -> str | None:
        """Return the message of the most recent failed sign-in, if any."""
        return self._last_error

    @property
    def user_id(self) -> str | None:
        return self._library.current_user_id

    def sign_in(self, user_id: str) -> bool:
        """Migrate local prompts to *user_id*'s remote store and switch to synced mode.

        Returns ``True`` on success. On any failure the library reloads its
        prompts from local storage, stays local-only, and ``False`` is returned.
        """
        if not user_id.strip():
            raise ValueError("user_id must not be empty")
        with self._lock:
            if self._state is SyncState.SYNCED and self._library.current_user_id == user_id:
                return True
            self._state = SyncState.SYNCING
            self._library.set_current_user(None)
            logger.info("Starting sign-in reconciliation", extra={"user_id": user_id})
            try:
                self._migrate(user_id)
            except Exception as exc:  # noqa: BLE001 - any failure aborts the transition
                self._last_error = str(exc) or exc.__class__.__name__
                logger.warning(
                    "Sign-in reconciliation failed; staying local-only",
                    exc_info=True,
                    extra={"user_id": user_id},
                )
                self._library.reload_prompts()
                self._state = SyncState.LOCAL_ONLY
                return False
            self._last_error = None
            self._library.set_current_user(user_id)
            self._state = SyncState.SYNCED
            logger.info(
                "Sign-in reconciliation finished",
                extra={"user_id": user_id, "count": len(self._library.prompts)},
            )
            return True

    def _migrate(self, user_id: str) -> None:
        if self._outbox is not None:
            result = self._outbox.drain(user_id)
            if result.failed:
                logger.info(
                    "Some queued remote operations are still pending",
                    extra={"user_id": user_id, "pending": result.failed},
                )
        local_prompts = self._library.repository.load_prompts()
        migrated = [replace(prompt, id=new_prompt_id()) for prompt in local_prompts]
        self._remote.upsert_many(migrated, user_id)
        remote_prompts = self._remote.fetch_prompts(user_id)
        self._library.replace_prompts(remote_prompts)

    def sign_out(self) -> None:
        """Return to local-only mode without moving any data."""
        with self._lock:
            previous = self._library.current_user_id
            self._library.set_current_user(None)
            self._state = SyncState.LOCAL_ONLY
        if previous is not None:
            logger.info("Signed out; remote mirroring stopped", extra={"user_id": previous})


__all__ = ["SyncReconciler", "SyncState"]
