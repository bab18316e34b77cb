"""SyncSession: build every component from one :class:`SyncConfig`.

Usage::

    config = SyncConfig.from_env(queue_path="~/.devosync/queue.duckdb")
    async with SyncSession.create(config) as session:
        result = await session.orchestrator.save(DevotionalDraft(title="T", text="body"))
        print(session.queue.pending_count())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from devosync.bridge import SyncBridge
from devosync.config import SyncConfig
from devosync.events import ConnectivityWatcher, EventBus
from devosync.models import SyncResult
from devosync.notify import LoggingNotifier, Notifier
from devosync.orchestrator import SyncOrchestrator
from devosync.prober import ConnectivityProber
from devosync.queue import PendingQueue
from devosync.storage import DuckDBStore, KeyValueStore
from devosync.sync.base import RemoteStore
from devosync.sync.supabase import SupabaseRestClient
from devosync.writer import DevotionalWriter

logger = logging.getLogger(__name__)


@dataclass
class SyncSession:
    config: SyncConfig
    store: KeyValueStore
    remote: RemoteStore
    notifier: Notifier
    events: EventBus
    queue: PendingQueue
    prober: ConnectivityProber
    writer: DevotionalWriter
    orchestrator: SyncOrchestrator
    bridge: SyncBridge
    watcher: ConnectivityWatcher
    _teardown: Callable[[], None] | None = field(default=None, repr=False)

    @classmethod
    def create(
        cls,
        config: SyncConfig,
        *,
        remote: RemoteStore | None = None,
        store: KeyValueStore | None = None,
        notifier: Notifier | None = None,
    ) -> "SyncSession":
        """Wire a session; *remote*, *store* and *notifier* override the defaults."""
        notifier = notifier or LoggingNotifier()
        if store is None:
            queue_file = config.queue_file
            store = DuckDBStore(queue_file if queue_file is not None else ":memory:")
        if remote is None:
            remote = SupabaseRestClient.from_config(config)

        events = EventBus()
        queue = PendingQueue(store, key=config.storage_key, notifier=notifier)
        prober = ConnectivityProber(remote, retry_pause=config.probe_retry_pause)
        writer = DevotionalWriter(
            remote,
            table=config.table,
            default_theme=config.default_theme,
            empty_content_placeholder=config.empty_content_placeholder,
        )
        orchestrator = SyncOrchestrator(
            queue, prober, writer, notifier=notifier, events=events, config=config
        )
        bridge = SyncBridge(orchestrator, queue, prober, events, config=config)
        watcher = ConnectivityWatcher(prober, events, interval=config.watch_interval)
        return cls(
            config=config,
            store=store,
            remote=remote,
            notifier=notifier,
            events=events,
            queue=queue,
            prober=prober,
            writer=writer,
            orchestrator=orchestrator,
            bridge=bridge,
            watcher=watcher,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self, *, watch: bool = False) -> SyncResult | None:
        """Install the reconnect listener and run the startup drain.

        With ``watch=True`` the connectivity watcher also starts polling.
        """
        if self._teardown is None:
            self._teardown = self.bridge.install()
        if watch:
            self.watcher.start()
        logger.info("[SESSION] Started (%d pending, watch=%s)", self.queue.pending_count(), watch)
        return await self.bridge.startup()

    async def aclose(self) -> None:
        await self.watcher.stop()
        if self._teardown is not None:
            self._teardown()
            self._teardown = None
        aclose = getattr(self.remote, "aclose", None)
        if aclose is not None:
            await aclose()
        close = getattr(self.store, "close", None)
        if close is not None:
            close()

    async def __aenter__(self) -> "SyncSession":
        await self.start()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()
