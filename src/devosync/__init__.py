"""devosync: offline-first devotional persistence and synchronization."""

from devosync.bridge import SyncBridge
from devosync.config import SyncConfig
from devosync.errors import ConfigError, DevosyncError, ErrorKind, RemoteStoreError, classify_error
from devosync.events import DEVOTIONALS_SYNCED, ONLINE, ConnectivityWatcher, EventBus
from devosync.models import DevotionalDraft, PendingDevotional, SaveResult, SyncResult
from devosync.notify import CollectingNotifier, LoggingNotifier, NoticeKind
from devosync.orchestrator import SyncOrchestrator
from devosync.prober import ConnectivityProber
from devosync.queue import PendingQueue
from devosync.session import SyncSession
from devosync.storage import DuckDBStore, MemoryStore
from devosync.writer import DevotionalWriter

__all__ = [
    "SyncConfig",
    "SyncSession",
    "SyncOrchestrator",
    "SyncBridge",
    "PendingQueue",
    "ConnectivityProber",
    "ConnectivityWatcher",
    "DevotionalWriter",
    "DevotionalDraft",
    "PendingDevotional",
    "SaveResult",
    "SyncResult",
    "EventBus",
    "ONLINE",
    "DEVOTIONALS_SYNCED",
    "NoticeKind",
    "LoggingNotifier",
    "CollectingNotifier",
    "MemoryStore",
    "DuckDBStore",
    "DevosyncError",
    "ConfigError",
    "RemoteStoreError",
    "ErrorKind",
    "classify_error",
]
