"""SyncBridge: drain the queue on startup and whenever the connection returns."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from devosync.config import SyncConfig
from devosync.events import ONLINE, EventBus
from devosync.models import SyncResult
from devosync.notify import NoticeKind
from devosync.orchestrator import SyncOrchestrator
from devosync.prober import ConnectivityProber
from devosync.queue import PendingQueue

logger = logging.getLogger(__name__)

RECONNECT_MESSAGE = "Connection restored. Syncing pending devotionals..."


class SyncBridge:
    """Wires connectivity signals to :meth:`SyncOrchestrator.sync_all`."""

    def __init__(
        self,
        orchestrator: SyncOrchestrator,
        queue: PendingQueue,
        prober: ConnectivityProber,
        events: EventBus,
        *,
        config: SyncConfig | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.queue = queue
        self.prober = prober
        self.events = events
        self.config = config or SyncConfig()
        self._scheduled: set[asyncio.Task[SyncResult]] = set()

    async def startup(self) -> SyncResult | None:
        """Drain once if there is pending work and the store is reachable."""
        if not self.queue.has_pending():
            return None
        if not await self.prober.probe(self.config.startup_probe_attempts):
            logger.info("[BRIDGE] Pending devotionals found but remote store unreachable at startup")
            return None
        logger.info("[BRIDGE] Syncing pending devotionals at startup")
        return await self.orchestrator.sync_all()

    def install(self) -> Callable[[], None]:
        """Listen for :data:`~devosync.events.ONLINE`; returns the teardown function.

        Must be called from inside a running event loop.
        """
        unsubscribe = self.events.subscribe(ONLINE, self._on_online)

        def teardown() -> None:
            unsubscribe()
            for task in list(self._scheduled):
                task.cancel()
            self._scheduled.clear()

        return teardown

    def _on_online(self) -> None:
        if not self.queue.has_pending():
            return
        self.orchestrator.notifier.notify(RECONNECT_MESSAGE, NoticeKind.INFO)
        task = asyncio.get_running_loop().create_task(self._delayed_sync())
        self._scheduled.add(task)
        task.add_done_callback(self._on_drain_done)

    def _on_drain_done(self, task: asyncio.Task[SyncResult]) -> None:
        self._scheduled.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("[BRIDGE] Reconnect sync failed: %s", exc)

    async def _delayed_sync(self) -> SyncResult:
        # Let the connection settle before the burst of writes
        await asyncio.sleep(self.config.reconnect_delay)
        return await self.orchestrator.sync_all()

    @property
    def scheduled(self) -> int:
        return len(self._scheduled)

    async def wait_idle(self) -> None:
        """Wait for every scheduled reconnect drain to finish."""
        while pending := [t for t in self._scheduled if not t.done()]:
            await asyncio.gather(*pending, return_exceptions=True)
