"""Connectivity probe against the remote store."""

from __future__ import annotations

import asyncio
import logging

from devosync.sync.base import RemoteStore

logger = logging.getLogger(__name__)


class ConnectivityProber:
    """Answers "can we reach the remote store right now?".

    Each call is a fresh point-in-time check; results are never cached.
    """

    def __init__(self, remote: RemoteStore, *, retry_pause: float = 1.0) -> None:
        self.remote = remote
        self.retry_pause = retry_pause

    async def probe(self, max_attempts: int = 1) -> bool:
        """Ping up to *max_attempts* times; ``False`` only once all attempts fail."""
        attempts = max(1, max_attempts)
        for attempt in range(1, attempts + 1):
            try:
                if await self.remote.ping():
                    return True
                logger.warning("[PROBE] Remote store answered with an error (attempt %d/%d)", attempt, attempts)
            except Exception as exc:  # noqa: BLE001
                logger.warning("[PROBE] Connectivity check failed (attempt %d/%d): %s", attempt, attempts, exc)
            if attempt < attempts and self.retry_pause > 0:
                await asyncio.sleep(self.retry_pause)
        logger.info("[PROBE] Remote store unreachable after %d attempt(s)", attempts)
        return False
