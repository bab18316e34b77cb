"""Shared fixtures for the devosync tests."""

from __future__ import annotations

import pytest
from fakes import FakeProber, FakeRemote

from devosync.config import SyncConfig
from devosync.events import EventBus
from devosync.notify import CollectingNotifier
from devosync.orchestrator import SyncOrchestrator
from devosync.queue import PendingQueue
from devosync.storage import MemoryStore
from devosync.writer import DevotionalWriter


@pytest.fixture()
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def queue(store: MemoryStore, notifier: CollectingNotifier) -> PendingQueue:
    return PendingQueue(store, notifier=notifier)


@pytest.fixture()
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture()
def prober() -> FakeProber:
    return FakeProber(reachable=True)


@pytest.fixture()
def events() -> EventBus:
    return EventBus()


@pytest.fixture()
def config() -> SyncConfig:
    return SyncConfig(probe_retry_pause=0, reconnect_delay=0)


@pytest.fixture()
def orchestrator(
    queue: PendingQueue,
    prober: FakeProber,
    remote: FakeRemote,
    notifier: CollectingNotifier,
    events: EventBus,
    config: SyncConfig,
) -> SyncOrchestrator:
    return SyncOrchestrator(
        queue,
        prober,  # type: ignore[arg-type]
        DevotionalWriter(remote),
        notifier=notifier,
        events=events,
        config=config,
    )
