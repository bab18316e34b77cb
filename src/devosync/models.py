"""Devotional drafts, queued devotionals, and operation results."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from typing import Any

#: Marks ids generated on this device that the remote store has never seen.
OFFLINE_ID_PREFIX = "offline_"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_offline_id() -> str:
    return f"{OFFLINE_ID_PREFIX}{uuid.uuid4()}"


@dataclass
class DevotionalDraft:
    """The content fields a user fills in when writing a devotional."""

    title: str
    text: str
    date: str | None = None  # ISO calendar date, e.g. "2024-01-01"
    scripture: str | None = None
    image_src: str | None = None
    transmission_link: str | None = None
    user_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DevotionalDraft":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class PendingDevotional:
    """A devotional persisted locally that has not reached the remote store yet."""

    id: str
    title: str
    text: str
    created_at: str
    updated_at: str
    date: str | None = None
    scripture: str | None = None
    image_src: str | None = None
    transmission_link: str | None = None
    user_id: str | None = None
    is_pending: bool = True

    @classmethod
    def from_draft(cls, draft: DevotionalDraft) -> "PendingDevotional":
        now = utc_now_iso()
        return cls(
            id=new_offline_id(),
            created_at=now,
            updated_at=now,
            is_pending=True,
            **draft.to_dict(),
        )

    def draft(self) -> DevotionalDraft:
        """Content fields only; drops the id, pending flag, and timestamps."""
        return DevotionalDraft(
            title=self.title,
            text=self.text,
            date=self.date,
            scripture=self.scripture,
            image_src=self.image_src,
            transmission_link=self.transmission_link,
            user_id=self.user_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PendingDevotional":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class SaveResult:
    success: bool
    #: Remote row on a direct save, the queued item when offline, else ``None``.
    data: dict[str, Any] | PendingDevotional | None
    is_offline: bool


@dataclass
class SyncResult:
    success: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.success + self.failed

    @classmethod
    def empty(cls) -> "SyncResult":
        return cls(0, 0)
