"""Error types and the network / non-network failure classifier.

Only failures that retrying can plausibly fix are queued for a later
sync.  :func:`classify_error` decides which bucket an exception falls in:

- typed errors from :mod:`devosync.sync.supabase` carry their
  :class:`ErrorKind` directly (derived from HTTP status and PostgREST code);
- ``httpx`` transport errors and OS-level connection errors are ``NETWORK``;
- anything else falls back to matching its message against
  :data:`NETWORK_ERROR_MARKERS` (errors raised by collaborators we don't own).
"""

from __future__ import annotations

from enum import Enum

import httpx


class DevosyncError(Exception):
    """Base class for all devosync errors."""


class ConfigError(DevosyncError):
    """Invalid or unknown configuration values."""


class ErrorKind(str, Enum):
    NETWORK = "network"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    PERMISSION = "permission"
    UNKNOWN = "unknown"


#: Lower-cased substrings that mark an untyped error as a transport failure.
NETWORK_ERROR_MARKERS: tuple[str, ...] = (
    "failed to fetch",
    "network error",
    "networkerror",
    "err_name_not_resolved",
    "connection refused",
    "name or service not known",
)

_TRANSIENT_STATUSES = frozenset({408, 429, 502, 503, 504})


class RemoteStoreError(DevosyncError):
    """A rejected or failed request against the remote store."""

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        status: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status = status
        self.code = code

    @property
    def retryable(self) -> bool:
        return self.kind is ErrorKind.NETWORK

    def __repr__(self) -> str:
        return f"RemoteStoreError({self.message!r}, kind={self.kind.value}, status={self.status}, code={self.code})"


def kind_for_code(code: str | None) -> ErrorKind | None:
    """Map a PostgreSQL / PostgREST error code to a kind, or ``None``."""
    if not code:
        return None
    if code == "23505":
        return ErrorKind.CONFLICT
    if code == "42501":
        return ErrorKind.PERMISSION
    if code.startswith("23"):
        return ErrorKind.VALIDATION
    return None


def kind_for_status(status: int, code: str | None = None) -> ErrorKind:
    """Map an HTTP status (and optional backend error code) to an :class:`ErrorKind`."""
    by_code = kind_for_code(code)
    if by_code is not None:
        return by_code
    if status in _TRANSIENT_STATUSES:
        return ErrorKind.NETWORK
    if status in (400, 404, 422):
        return ErrorKind.VALIDATION
    if status in (401, 403):
        return ErrorKind.PERMISSION
    if status == 409:
        return ErrorKind.CONFLICT
    return ErrorKind.UNKNOWN


def classify_error(exc: BaseException) -> ErrorKind:
    """Return the :class:`ErrorKind` of *exc*."""
    if isinstance(exc, RemoteStoreError):
        return exc.kind
    if isinstance(exc, (httpx.TransportError, ConnectionError, TimeoutError)):
        return ErrorKind.NETWORK
    message = str(exc).lower()
    if any(marker in message for marker in NETWORK_ERROR_MARKERS):
        return ErrorKind.NETWORK
    return ErrorKind.UNKNOWN


def is_network_error(exc: BaseException) -> bool:
    return classify_error(exc) is ErrorKind.NETWORK
