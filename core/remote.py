"""Remote per-user prompt store backed by a PostgREST (Supabase) table.

Updates:
  v0.2.0 - 2026-10-11 - Retry transient failures and surface every error as RemoteSyncError.
  v0.1.1 - 2026-10-09 - Add batch upsert keyed by prompt id.
  v0.1.0 - 2026-10-08 - Initial REST client with fetch/create/update/delete.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, cast

import httpx

from models.prompt_model import Prompt

from .exceptions import RemoteSyncError
from .retry import is_retryable_httpx_error, retry

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from types import TracebackType

logger = logging.getLogger("prompt_library.remote")


class RemoteStore(Protocol):
    """CRUD contract the record store and reconciler rely on."""

    def fetch_prompts(self, user_id: str) -> list[Prompt]:  # pragma: no cover - Protocol
        """Return every prompt owned by *user_id*, newest first."""
        ...

    def create_prompt(self, prompt: Prompt, user_id: str) -> Prompt:  # pragma: no cover
        ...

    def update_prompt(self, prompt: Prompt, user_id: str) -> Prompt:  # pragma: no cover
        ...

    def delete_prompt(self, prompt_id: str, user_id: str) -> None:  # pragma: no cover
        ...

    def upsert_many(
        self, prompts: Sequence[Prompt], user_id: str
    ) -> list[Prompt]:  # pragma: no cover - Protocol
        """Insert or replace *prompts* keyed by id."""
        ...


class RestRemoteStore:
    """httpx client for the ``/rest/v1/<table>`` endpoint of a Supabase project."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        table: str = "prompts",
        timeout: float = 15.0,
        access_token: str | None = None,
        max_attempts: int = 3,
        retry_base_delay_seconds: float = 0.5,
        client: httpx.Client | None = None,
    ) -> None:
        if not base_url.strip():
            raise ValueError("Remote base URL must not be empty.")
        if not api_key.strip():
            raise ValueError("Remote API key must not be empty.")
        self._endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self._max_attempts = max_attempts
        self._retry_base_delay = retry_base_delay_seconds
        headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if client is None:
            self._client = httpx.Client(headers=headers, timeout=timeout)
        else:
            client.headers.update(headers)
            client.timeout = httpx.Timeout(timeout)
            self._client = client

    # Lifecycle ---------------------------------------------------------- #

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RestRemoteStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    # Request plumbing --------------------------------------------------- #

    def _send(self, description: str, request: Callable[[], httpx.Response]) -> httpx.Response:
        def _send_request() -> httpx.Response:
            response = request()
            response.raise_for_status()
            return response

        try:
            return retry(
                _send_request,
                max_attempts=self._max_attempts,
                base_delay_seconds=self._retry_base_delay,
                should_retry=is_retryable_httpx_error,
            )
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise RemoteSyncError(f"Remote store rejected {description} (HTTP {status})") from exc
        except httpx.HTTPError as exc:
            raise RemoteSyncError(f"Unable to reach remote store for {description}: {exc}") from exc

    @staticmethod
    def _rows(response: httpx.Response, description: str) -> list[Mapping[str, Any]]:
        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteSyncError(f"Remote store returned invalid JSON for {description}") from exc
        if not isinstance(data, list):
            raise RemoteSyncError(f"Remote store returned an unexpected payload for {description}")
        return [cast("Mapping[str, Any]", row) for row in data if isinstance(row, dict)]

    @staticmethod
    def _prompts(rows: Sequence[Mapping[str, Any]], description: str) -> list[Prompt]:
        try:
            return [Prompt.from_remote_row(row) for row in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise RemoteSyncError(f"Remote store returned a malformed row for {description}") from exc

    # RemoteStore API ---------------------------------------------------- #

    def fetch_prompts(self, user_id: str) -> list[Prompt]:
        """Return every prompt owned by *user_id*, newest first."""
        response = self._send(
            "fetch",
            lambda: self._client.get(
                self._endpoint,
                params={
                    "select": "*",
                    "user_id": f"eq.{user_id}",
                    "order": "created_at.desc",
                },
            ),
        )
        prompts = self._prompts(self._rows(response, "fetch"), "fetch")
        logger.debug("Fetched remote prompts", extra={"count": len(prompts)})
        return prompts

    def create_prompt(self, prompt: Prompt, user_id: str) -> Prompt:
        response = self._send(
            "create",
            lambda: self._client.post(
                self._endpoint,
                json=prompt.to_remote_row(user_id),
                headers={"Prefer": "return=representation"},
            ),
        )
        created = self._prompts(self._rows(response, "create"), "create")
        return created[0] if created else prompt

    def update_prompt(self, prompt: Prompt, user_id: str) -> Prompt:
        row = prompt.to_remote_row(user_id)
        row.pop("id", None)
        row.pop("created_at", None)
        response = self._send(
            "update",
            lambda: self._client.patch(
                self._endpoint,
                params={"id": f"eq.{prompt.id}", "user_id": f"eq.{user_id}"},
                json=row,
                headers={"Prefer": "return=representation"},
            ),
        )
        updated = self._prompts(self._rows(response, "update"), "update")
        return updated[0] if updated else prompt

    def delete_prompt(self, prompt_id: str, user_id: str) -> None:
        self._send(
            "delete",
            lambda: self._client.delete(
                self._endpoint,
                params={"id": f"eq.{prompt_id}", "user_id": f"eq.{user_id}"},
            ),
        )

    def upsert_many(self, prompts: Sequence[Prompt], user_id: str) -> list[Prompt]:
        """Insert or replace *prompts* in one request keyed by id."""
        if not prompts:
            return []
        rows = [prompt.to_remote_row(user_id) for prompt in prompts]
        response = self._send(
            "upsert",
            lambda: self._client.post(
                self._endpoint,
                params={"on_conflict": "id"},
                json=rows,
                headers={"Prefer": "resolution=merge-duplicates,return=representation"},
            ),
        )
        return self._prompts(self._rows(response, "upsert"), "upsert")


__all__ = ["RemoteStore", "RestRemoteStore"]
