"""PendingQueue: durable local queue of devotionals awaiting sync.

The whole collection lives as one JSON array under a fixed key of a
:class:`~devosync.storage.KeyValueStore`.  Every mutation is a single
synchronous read-modify-write of that array.

Reads fail open: a missing, unreadable, unparsable or wrongly-shaped value
is an empty queue, and a malformed entry is skipped.  The queue is read on startup, so
a corrupted value must never take the app down.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import polars as pl

from devosync.models import DevotionalDraft, PendingDevotional
from devosync.notify import LoggingNotifier, NoticeKind, Notifier
from devosync.storage import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_KEY = "offline_devotionals"
SAVED_OFFLINE_MESSAGE = "Devotional saved offline. It will sync when a connection is available."

_FRAME_SCHEMA = {"id": pl.Utf8, "title": pl.Utf8, "date": pl.Utf8, "created_at": pl.Utf8}


class PendingQueue:
    """Append-only local collection of :class:`PendingDevotional` records."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = DEFAULT_KEY,
        notifier: Notifier | None = None,
    ) -> None:
        self.store = store
        self.key = key
        self.notifier = notifier or LoggingNotifier()

    # ------------------------------------------------------------------
    # Raw persistence
    # ------------------------------------------------------------------

    def _read(self) -> list[dict[str, Any]]:
        try:
            raw = self.store.get(self.key)
        except Exception as exc:  # noqa: BLE001
            logger.warning("[QUEUE] Could not read queue under %r, treating as empty: %s", self.key, exc)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as exc:
            logger.warning("[QUEUE] Unreadable queue under %r, treating as empty: %s", self.key, exc)
            return []
        if not isinstance(data, list):
            logger.warning("[QUEUE] Queue under %r is not a list, treating as empty", self.key)
            return []
        return [entry for entry in data if isinstance(entry, dict)]

    def _write(self, entries: list[dict[str, Any]]) -> None:
        self.store.set(self.key, json.dumps(entries, ensure_ascii=False))

    # ------------------------------------------------------------------
    # Queue operations
    # ------------------------------------------------------------------

    def enqueue(self, draft: DevotionalDraft) -> PendingDevotional:
        """Persist *draft* as a new pending item and return it."""
        item = PendingDevotional.from_draft(draft)
        entries = self._read()
        entries.append(item.to_dict())
        self._write(entries)
        logger.info("[QUEUE] Saved %s offline (%d pending)", item.id, len(entries))
        self.notifier.notify(SAVED_OFFLINE_MESSAGE, NoticeKind.SUCCESS)
        return item

    def list(self) -> list[PendingDevotional]:
        items: list[PendingDevotional] = []
        for entry in self._read():
            try:
                items.append(PendingDevotional.from_dict(entry))
            except (KeyError, TypeError) as exc:
                logger.warning("[QUEUE] Skipping malformed entry %r: %s", entry.get("id"), exc)
        return items

    def remove(self, item_id: str) -> None:
        """Drop the item with *item_id*; no-op when it isn't queued."""
        entries = self._read()
        remaining = [e for e in entries if e.get("id") != item_id]
        if len(remaining) != len(entries):
            self._write(remaining)
            logger.debug("[QUEUE] Removed %s", item_id)

    def has_pending(self) -> bool:
        return any(item.is_pending for item in self.list())

    def pending_count(self) -> int:
        return sum(1 for item in self.list() if item.is_pending)

    def clear(self) -> None:
        """Discard every queued item."""
        self.store.delete(self.key)
        logger.info("[QUEUE] Cleared %r", self.key)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def to_frame(self) -> pl.DataFrame:
        """Pending items as a Polars DataFrame (``id, title, date, created_at``)."""
        rows = [
            {"id": i.id, "title": i.title, "date": i.date, "created_at": i.created_at}
            for i in self.list()
        ]
        return pl.DataFrame(rows, schema=_FRAME_SCHEMA)

    def __len__(self) -> int:
        return len(self.list())
