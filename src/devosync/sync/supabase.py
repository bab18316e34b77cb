"""Supabase (PostgREST) remote store.

A thin async HTTP client over the backend's REST endpoint.  Only the two
calls the sync core needs are implemented:

HEAD /rest/v1/          – connectivity probe
POST /rest/v1/{table}   – insert one row, ``Prefer: return=representation``

Failed inserts raise :class:`~devosync.errors.RemoteStoreError` with an
:class:`~devosync.errors.ErrorKind` derived from the HTTP status and the
PostgREST error ``code``; transport failures (DNS, refused connection,
timeouts) raise it with ``kind=NETWORK``.

Environment variables (all optional; direct kwargs take precedence):
    DEVOSYNC_SUPABASE_URL   – project URL (e.g. https://abc.supabase.co)
    DEVOSYNC_SUPABASE_KEY   – anon or service-role API key
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import httpx

from devosync.errors import ErrorKind, RemoteStoreError, kind_for_status

if TYPE_CHECKING:
    from devosync.config import SyncConfig

logger = logging.getLogger(__name__)

_REST_PATH = "/rest/v1"


class SupabaseRestClient:
    """Remote store backed by a Supabase project's REST API."""

    def __init__(
        self,
        url: str | None = None,
        *,
        api_key: str | None = None,
        timeout: float = 10.0,
        probe_timeout: float = 3.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (url or os.getenv("DEVOSYNC_SUPABASE_URL", "")).rstrip("/")
        self._key = api_key or os.getenv("DEVOSYNC_SUPABASE_KEY", "")
        self._probe_timeout = probe_timeout
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "apikey": self._key,
                "Authorization": f"Bearer {self._key}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: "SyncConfig",
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "SupabaseRestClient":
        return cls(
            config.supabase_url or None,
            api_key=config.supabase_key or None,
            timeout=config.request_timeout,
            probe_timeout=config.probe_timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # RemoteStore
    # ------------------------------------------------------------------

    async def ping(self) -> bool:
        r = await self._client.head(f"{_REST_PATH}/", timeout=self._probe_timeout)
        logger.debug("[SUPABASE] ping -> %s", r.status_code)
        return r.is_success

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        try:
            r = await self._client.post(
                f"{_REST_PATH}/{table}",
                json=row,
                headers={"Prefer": "return=representation"},
            )
        except httpx.TransportError as exc:
            raise RemoteStoreError(
                str(exc) or exc.__class__.__name__,
                kind=ErrorKind.NETWORK,
            ) from exc

        if r.is_error:
            raise _error_from_response(r)

        try:
            data = r.json()
        except ValueError as exc:
            raise RemoteStoreError(
                f"Insert into {table} succeeded (HTTP {r.status_code}) but the response body is not JSON",
                status=r.status_code,
            ) from exc
        if isinstance(data, list):
            if not data:
                raise RemoteStoreError(f"Insert into {table} returned no rows", status=r.status_code)
            return data[0]
        return data

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "SupabaseRestClient":
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()


def _error_from_response(r: httpx.Response) -> RemoteStoreError:
    """Build a typed error from a PostgREST error response."""
    message = r.reason_phrase or f"HTTP {r.status_code}"
    code: str | None = None
    try:
        body = r.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or message
        code = body.get("code")
    return RemoteStoreError(
        message,
        kind=kind_for_status(r.status_code, code),
        status=r.status_code,
        code=code,
    )
