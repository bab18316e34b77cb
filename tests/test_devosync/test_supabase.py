"""Unit tests for devosync.sync.supabase.SupabaseRestClient (httpx MockTransport)."""

import asyncio
import json
from typing import Callable

import httpx
import pytest

from devosync.config import SyncConfig
from devosync.errors import ErrorKind, RemoteStoreError
from devosync.sync.base import RemoteStore
from devosync.sync.supabase import SupabaseRestClient

_URL = "https://example.supabase.co"


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> SupabaseRestClient:
    return SupabaseRestClient(_URL, api_key="anon-key", transport=httpx.MockTransport(handler))


async def _insert(client: SupabaseRestClient, row: dict) -> dict:
    async with client:
        return await client.insert("devotionals", row)


# ---------------------------------------------------------------------------
# ping()
# ---------------------------------------------------------------------------


class TestPing:
    def test_ok(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        assert asyncio.run(_client(handler).ping()) is True
        assert seen[0].method == "HEAD"
        assert seen[0].url.path == "/rest/v1/"
        assert seen[0].headers["apikey"] == "anon-key"

    def test_error_status_is_false(self):
        assert asyncio.run(_client(lambda r: httpx.Response(503)).ping()) is False

    def test_transport_error_propagates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Name or service not known", request=request)

        with pytest.raises(httpx.ConnectError):
            asyncio.run(_client(handler).ping())


# ---------------------------------------------------------------------------
# insert()
# ---------------------------------------------------------------------------


class TestInsert:
    def test_returns_created_row(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            body = json.loads(request.content)
            return httpx.Response(201, json=[{"id": "uuid-1", **body}])

        row = asyncio.run(_insert(_client(handler), {"title": "T"}))
        assert row == {"id": "uuid-1", "title": "T"}
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/rest/v1/devotionals"
        assert seen[0].headers["Prefer"] == "return=representation"
        assert seen[0].headers["Authorization"] == "Bearer anon-key"

    def test_single_object_response(self):
        handler = lambda r: httpx.Response(201, json={"id": "uuid-2"})  # noqa: E731
        assert asyncio.run(_insert(_client(handler), {"title": "T"})) == {"id": "uuid-2"}

    def test_empty_response_raises(self):
        handler = lambda r: httpx.Response(201, json=[])  # noqa: E731
        with pytest.raises(RemoteStoreError):
            asyncio.run(_insert(_client(handler), {"title": "T"}))

    def test_malformed_success_body_raises_typed_error(self):
        handler = lambda r: httpx.Response(201, text="<html>ok</html>")  # noqa: E731
        with pytest.raises(RemoteStoreError) as info:
            asyncio.run(_insert(_client(handler), {"title": "T"}))
        assert info.value.status == 201
        assert info.value.kind is ErrorKind.UNKNOWN
        assert "succeeded" in str(info.value)
        assert isinstance(info.value.__cause__, ValueError)

    def test_unique_violation_is_conflict(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                409,
                json={
                    "code": "23505",
                    "message": 'duplicate key value violates unique constraint "devotionals_pkey"',
                },
            )

        with pytest.raises(RemoteStoreError) as info:
            asyncio.run(_insert(_client(handler), {"title": "T"}))
        assert info.value.kind is ErrorKind.CONFLICT
        assert info.value.status == 409
        assert info.value.code == "23505"
        assert "duplicate key" in str(info.value)
        assert info.value.retryable is False

    def test_rls_violation_is_permission(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                403,
                json={"code": "42501", "message": "new row violates row-level security policy"},
            )

        with pytest.raises(RemoteStoreError) as info:
            asyncio.run(_insert(_client(handler), {"title": "T"}))
        assert info.value.kind is ErrorKind.PERMISSION

    def test_gateway_error_is_network(self):
        handler = lambda r: httpx.Response(503, text="upstream down")  # noqa: E731
        with pytest.raises(RemoteStoreError) as info:
            asyncio.run(_insert(_client(handler), {"title": "T"}))
        assert info.value.kind is ErrorKind.NETWORK
        assert info.value.retryable is True

    def test_transport_error_is_network(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(RemoteStoreError) as info:
            asyncio.run(_insert(_client(handler), {"title": "T"}))
        assert info.value.kind is ErrorKind.NETWORK
        assert isinstance(info.value.__cause__, httpx.ConnectError)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_env_fallback(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DEVOSYNC_SUPABASE_URL", "https://env.supabase.co/")
        client = SupabaseRestClient()
        assert client.base_url == "https://env.supabase.co"

    def test_kwargs_take_precedence(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DEVOSYNC_SUPABASE_URL", "https://env.supabase.co")
        assert SupabaseRestClient(_URL).base_url == _URL

    def test_from_config(self):
        client = SupabaseRestClient.from_config(SyncConfig(supabase_url=_URL, supabase_key="k"))
        assert client.base_url == _URL

    def test_satisfies_protocol(self):
        assert isinstance(SupabaseRestClient(_URL), RemoteStore)
