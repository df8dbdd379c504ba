"""Tests for the REST remote store client.

Updates:
  v0.2.0 - 2026-10-11 - Cover retries and error mapping.
  v0.1.0 - 2026-10-08 - Cover request shapes for fetch/create/update/delete/upsert.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx
import pytest

from core.exceptions import RemoteSyncError
from core.remote import RestRemoteStore
from models.prompt_model import Prompt

if TYPE_CHECKING:
    from collections.abc import Callable

_BASE_URL = "https://project.example.co"
_ENDPOINT = f"{_BASE_URL}/rest/v1/prompts"


def _prompt(identifier: str = "p1") -> Prompt:
    return Prompt(
        id=identifier,
        title="Title",
        content="Body",
        tags=["a"],
        date_added=datetime(2026, 1, 1, tzinfo=UTC),
    )


def _store(
    handler: Callable[[httpx.Request], httpx.Response], **kwargs: object
) -> RestRemoteStore:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    options: dict[str, object] = {"retry_base_delay_seconds": 0}
    options.update(kwargs)
    return RestRemoteStore(_BASE_URL + "/", "anon-key", client=client, **options)  # type: ignore[arg-type]


def test_fetch_prompts_filters_by_user_and_orders_newest_first() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[_prompt().to_remote_row("u1")])

    with _store(handler) as store:
        prompts = store.fetch_prompts("u1")

    assert [prompt.id for prompt in prompts] == ["p1"]
    request = seen[0]
    assert request.method == "GET"
    assert str(request.url).startswith(_ENDPOINT)
    assert request.url.params["user_id"] == "eq.u1"
    assert request.url.params["order"] == "created_at.desc"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer anon-key"


def test_create_posts_snake_case_row() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        assert request.headers["Prefer"] == "return=representation"
        return httpx.Response(201, json=[json.loads(request.content)])

    created = _store(handler).create_prompt(_prompt(), "u1")

    assert created.id == "p1"
    assert bodies[0]["user_id"] == "u1"
    assert bodies[0]["ai_model"] == "ChatGPT"
    assert bodies[0]["created_at"] == "2026-01-01T00:00:00.000Z"


def test_update_patches_by_id_without_identity_columns() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    result = _store(handler).update_prompt(_prompt(), "u1")

    request = seen[0]
    body = json.loads(request.content)
    assert request.method == "PATCH"
    assert request.url.params["id"] == "eq.p1"
    assert request.url.params["user_id"] == "eq.u1"
    assert "id" not in body
    assert "created_at" not in body
    assert result.id == "p1"


def test_delete_targets_single_row() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    _store(handler).delete_prompt("p1", "u1")

    assert seen[0].method == "DELETE"
    assert seen[0].url.params["id"] == "eq.p1"


def test_upsert_many_merges_on_id() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json=json.loads(request.content))

    store = _store(handler)
    assert store.upsert_many([], "u1") == []
    result = store.upsert_many([_prompt("a"), _prompt("b")], "u1")

    assert len(seen) == 1
    assert seen[0].url.params["on_conflict"] == "id"
    assert "merge-duplicates" in seen[0].headers["Prefer"]
    assert [prompt.id for prompt in result] == ["a", "b"]


def test_client_errors_are_not_retried() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(400, json={"message": "bad"})

    with pytest.raises(RemoteSyncError):
        _store(handler, max_attempts=3).fetch_prompts("u1")
    assert calls == 1


def test_server_errors_are_retried_then_succeed() -> None:
    responses = iter([httpx.Response(503), httpx.Response(200, json=[])])

    def handler(request: httpx.Request) -> httpx.Response:
        return next(responses)

    assert _store(handler, max_attempts=2).fetch_prompts("u1") == []


def test_transport_errors_surface_as_remote_sync_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RemoteSyncError):
        _store(handler, max_attempts=1).delete_prompt("p1", "u1")


def test_malformed_payload_is_rejected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"not": "a list"})

    with pytest.raises(RemoteSyncError):
        _store(handler).fetch_prompts("u1")


def test_blank_credentials_are_rejected() -> None:
    with pytest.raises(ValueError):
        RestRemoteStore(_BASE_URL, " ")
