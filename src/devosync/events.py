"""Process-local events and the connectivity watcher.

Two named events flow through an :class:`EventBus`:

- :data:`ONLINE` – the remote store became reachable again (fired by
  :class:`ConnectivityWatcher`, or by the host application if it has its
  own connectivity signal).
- :data:`DEVOTIONALS_SYNCED` – a drain finished; listeners re-read the
  queue themselves, the event carries no payload.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from devosync.prober import ConnectivityProber

logger = logging.getLogger(__name__)

ONLINE = "online"
DEVOTIONALS_SYNCED = "devotionals-synced"

Listener = Callable[[], None]


class EventBus:
    """Minimal synchronous publish/subscribe keyed by event name."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def subscribe(self, name: str, listener: Listener) -> Callable[[], None]:
        """Register *listener* for *name*; returns a function that unregisters it."""
        self._listeners.setdefault(name, []).append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(name, listener)

        return unsubscribe

    def unsubscribe(self, name: str, listener: Listener) -> None:
        listeners = self._listeners.get(name, [])
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, name: str) -> None:
        for listener in list(self._listeners.get(name, [])):
            try:
                listener()
            except Exception as exc:  # noqa: BLE001
                # One broken listener must not starve the others
                logger.warning("[EVENTS] Listener for %r failed: %s", name, exc)

    def listener_count(self, name: str) -> int:
        return len(self._listeners.get(name, []))


class ConnectivityWatcher:
    """Polls the prober and emits :data:`ONLINE` on every offline→online edge."""

    def __init__(
        self,
        prober: ConnectivityProber,
        events: EventBus,
        *,
        interval: float = 15.0,
    ) -> None:
        self.prober = prober
        self.events = events
        self.interval = interval
        self.online: bool | None = None
        self._task: asyncio.Task[None] | None = None

    async def check(self) -> bool:
        """Probe once, emit :data:`ONLINE` if we just came back, and return the state."""
        reachable = await self.prober.probe()
        if reachable and self.online is False:
            logger.info("[WATCH] Connection restored")
            self.events.emit(ONLINE)
        self.online = reachable
        return reachable

    async def run(self) -> None:
        while True:
            await self.check()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self.run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
