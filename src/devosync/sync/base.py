"""Remote store protocol."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RemoteStore(Protocol):
    """What the sync core needs from the hosted backend.

    Implementations (the Supabase REST client, test doubles, …) must satisfy
    this protocol so the orchestrator never depends on a concrete client.
    """

    async def ping(self) -> bool:
        """Cheap round-trip; ``True`` when the store answered successfully.

        May raise on transport failure; the prober folds that into ``False``.
        """
        ...

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert *row* into *table* and return the created row.

        The returned row carries the store-assigned ``id``.  Failures raise
        :class:`~devosync.errors.RemoteStoreError` (or a transport error).
        """
        ...
