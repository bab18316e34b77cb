"""Single-row writer translating devotional drafts to the remote schema."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any

from devosync.models import DevotionalDraft
from devosync.sync.base import RemoteStore

logger = logging.getLogger(__name__)


class DevotionalWriter:
    """Creates exactly one ``devotionals`` row per call.

    The local id is never sent: the remote store assigns its own.
    Errors from the store propagate unchanged; classifying them is the
    caller's job.
    """

    def __init__(
        self,
        remote: RemoteStore,
        *,
        table: str = "devotionals",
        default_theme: str = "reflexão",
        empty_content_placeholder: str = "Sem conteúdo",
    ) -> None:
        self.remote = remote
        self.table = table
        self.default_theme = default_theme
        self.empty_content_placeholder = empty_content_placeholder

    def to_remote_row(self, draft: DevotionalDraft, now: datetime | None = None) -> dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        stamp = now.isoformat()
        return {
            "title": (draft.title or "").strip(),
            "content": (draft.text or "").strip() or self.empty_content_placeholder,
            "scripture": (draft.scripture or "").strip(),
            "author_id": draft.user_id,
            "date": draft.date or date.today().isoformat(),
            "theme": self.default_theme,
            "is_generated": False,
            "references": [],
            "image_url": draft.image_src or "",
            "transmission_link": draft.transmission_link or "",
            "created_at": stamp,
            "updated_at": stamp,
        }

    async def write_one(self, draft: DevotionalDraft) -> dict[str, Any]:
        """Insert *draft* and return the created remote row."""
        row = self.to_remote_row(draft)
        created = await self.remote.insert(self.table, row)
        logger.debug("[WRITER] Created %s row %s", self.table, created.get("id"))
        return created
