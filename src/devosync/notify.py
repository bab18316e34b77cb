"""User-visible notices emitted by the queue, orchestrator and bridge.

How a notice is shown (toast, status bar, log line) is up to the caller;
devosync only decides *when* to emit one and what tone it has.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class NoticeKind(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    LOADING = "loading"
    ERROR = "error"


@runtime_checkable
class Notifier(Protocol):
    def notify(self, message: str, kind: NoticeKind = NoticeKind.INFO) -> None: ...


class LoggingNotifier:
    """Default notifier: writes notices to the ``devosync.notify`` logger."""

    def notify(self, message: str, kind: NoticeKind = NoticeKind.INFO) -> None:
        if kind is NoticeKind.ERROR:
            logger.error("[NOTICE] %s", message)
        else:
            logger.info("[NOTICE] %s: %s", kind.value, message)


class CollectingNotifier:
    """Keeps every notice in memory, newest last."""

    def __init__(self) -> None:
        self.notices: list[tuple[NoticeKind, str]] = []

    def notify(self, message: str, kind: NoticeKind = NoticeKind.INFO) -> None:
        self.notices.append((kind, message))

    def messages(self, kind: NoticeKind | None = None) -> list[str]:
        return [m for k, m in self.notices if kind is None or k is kind]

    def clear(self) -> None:
        self.notices.clear()
