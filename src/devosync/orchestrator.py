"""SyncOrchestrator: save-or-queue and queue draining.

Item lifecycle::

    [draft] --probe--> reachable   --write ok------------> [synced]
                                   --write fails, network-> [queued]
                                   --write fails, other---> rejected (not queued)
                       unreachable -------------------------> [queued]

    [queued] --drain (startup | reconnect | manual)-->
             write ok   -> removed from queue, [synced]
             write fails-> stays [queued] until the next drain

There is no terminal "failed" state for queued items: a drain skips an item
it can't write and moves on, and the next drain tries it again.  An item that
was written but could not be removed locally counts as synced and is written
again by the next drain.
"""

from __future__ import annotations

import logging

from devosync.config import SyncConfig
from devosync.errors import ErrorKind, classify_error
from devosync.events import DEVOTIONALS_SYNCED, EventBus
from devosync.models import DevotionalDraft, PendingDevotional, SaveResult, SyncResult
from devosync.notify import LoggingNotifier, NoticeKind, Notifier
from devosync.prober import ConnectivityProber
from devosync.queue import PendingQueue
from devosync.writer import DevotionalWriter

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Single entry point for persisting devotionals and reconciling the queue."""

    def __init__(
        self,
        queue: PendingQueue,
        prober: ConnectivityProber,
        writer: DevotionalWriter,
        *,
        notifier: Notifier | None = None,
        events: EventBus | None = None,
        config: SyncConfig | None = None,
    ) -> None:
        self.queue = queue
        self.prober = prober
        self.writer = writer
        self.notifier = notifier or LoggingNotifier()
        self.events = events
        self.config = config or SyncConfig()
        self._draining = False

    @property
    def draining(self) -> bool:
        """``True`` while a :meth:`sync_all` is in flight."""
        return self._draining

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    async def save(self, draft: DevotionalDraft) -> SaveResult:
        """Write *draft* remotely, or queue it locally when the store is unreachable.

        Never raises.  ``success=False`` means the store rejected the
        devotional on its merits; it is not queued.
        """
        try:
            if not await self.prober.probe(self.config.save_probe_attempts):
                logger.info("[SYNC] Remote store unreachable, saving offline")
                return SaveResult(success=True, data=self.queue.enqueue(draft), is_offline=True)

            try:
                row = await self.writer.write_one(draft)
            except Exception as exc:  # noqa: BLE001
                kind = classify_error(exc)
                if kind is ErrorKind.NETWORK:
                    logger.info("[SYNC] Network failure while saving, saving offline: %s", exc)
                    return SaveResult(success=True, data=self.queue.enqueue(draft), is_offline=True)
                logger.error("[SYNC] Remote store rejected devotional (%s): %s", kind.value, exc)
                self.notifier.notify(f"Could not save devotional: {exc}", NoticeKind.ERROR)
                return SaveResult(success=False, data=None, is_offline=False)

            self.notifier.notify("Devotional saved.", NoticeKind.SUCCESS)
            return SaveResult(success=True, data=row, is_offline=False)
        except Exception as exc:  # noqa: BLE001
            # Local storage failures end up here
            logger.error("[SYNC] Unexpected error while saving devotional: %s", exc)
            self.notifier.notify(f"Could not save devotional: {exc}", NoticeKind.ERROR)
            return SaveResult(success=False, data=None, is_offline=False)

    # ------------------------------------------------------------------
    # Drain
    # ------------------------------------------------------------------

    async def sync_one(self, item: PendingDevotional) -> bool:
        """Write one queued item; on success drop it from the queue."""
        try:
            created = await self.writer.write_one(item.draft())
        except Exception as exc:  # noqa: BLE001
            logger.warning("[SYNC] Could not sync %s, keeping it queued: %s", item.id, exc)
            return False
        try:
            self.queue.remove(item.id)
        except Exception as exc:  # noqa: BLE001
            # The row exists remotely; the next drain will write it again
            logger.error(
                "[SYNC] Synced %s as remote row %s but could not remove it from the queue: %s",
                item.id,
                created.get("id"),
                exc,
            )
            return True
        logger.info("[SYNC] Synced %s as remote row %s", item.id, created.get("id"))
        return True

    async def sync_all(self) -> SyncResult:
        """Drain the queue sequentially.

        Returns ``SyncResult(0, 0)`` without doing anything when another
        drain is already in flight.
        """
        if self._draining:
            logger.info("[SYNC] Drain already in progress, skipping")
            return SyncResult.empty()

        self._draining = True
        try:
            result = await self._drain()
        finally:
            self._draining = False
        if self.events is not None:
            self.events.emit(DEVOTIONALS_SYNCED)
        return result

    async def _drain(self) -> SyncResult:
        pending = [item for item in self.queue.list() if item.is_pending]
        if not pending:
            return SyncResult.empty()

        if not await self.prober.probe(self.config.sync_probe_attempts):
            logger.info("[SYNC] Remote store unreachable, %d devotional(s) stay queued", len(pending))
            return SyncResult(success=0, failed=len(pending))

        self.notifier.notify(f"Syncing {len(pending)} devotional(s)...", NoticeKind.LOADING)
        result = SyncResult()
        for item in pending:
            if await self.sync_one(item):
                result.success += 1
            else:
                result.failed += 1

        logger.info(
            "[SYNC] Drain finished: %d of %d synced, %d failed",
            result.success,
            result.total,
            result.failed,
        )
        if result.success:
            self.notifier.notify(f"{result.success} devotional(s) synced.", NoticeKind.SUCCESS)
        if result.failed:
            self.notifier.notify(f"{result.failed} devotional(s) could not be synced.", NoticeKind.ERROR)
        return result
