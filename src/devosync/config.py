"""Session configuration.

A :class:`SyncConfig` is built once when a session starts and handed to
every component that needs it; nothing in devosync reads configuration
from module-level state.

Sources, in increasing precedence:

1. dataclass defaults
2. ``DEVOSYNC_*`` environment variables (:meth:`SyncConfig.from_env`)
3. explicit keyword overrides

or a TOML file::

    [devosync]
    supabase_url = "https://abc.supabase.co"
    supabase_key = "..."
    queue_path   = "~/.local/share/devosync/queue.duckdb"
    reconnect_delay = 2.0
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from devosync.errors import ConfigError

_ENV_VARS = {
    "supabase_url": "DEVOSYNC_SUPABASE_URL",
    "supabase_key": "DEVOSYNC_SUPABASE_KEY",
    "table": "DEVOSYNC_TABLE",
    "queue_path": "DEVOSYNC_QUEUE_PATH",
}


@dataclass(frozen=True)
class SyncConfig:
    supabase_url: str = ""
    supabase_key: str = ""
    table: str = "devotionals"
    storage_key: str = "offline_devotionals"
    queue_path: str = ":memory:"

    request_timeout: float = 10.0
    probe_timeout: float = 3.0
    probe_retry_pause: float = 1.0

    save_probe_attempts: int = 2
    sync_probe_attempts: int = 1
    startup_probe_attempts: int = 1

    reconnect_delay: float = 2.0
    watch_interval: float = 15.0

    default_theme: str = "reflexão"
    empty_content_placeholder: str = "Sem conteúdo"

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncConfig":
        """Build a config from *data*, rejecting keys that aren't config fields."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_env(cls, **overrides: Any) -> "SyncConfig":
        values: dict[str, Any] = {}
        for name, var in _ENV_VARS.items():
            value = os.getenv(var)
            if value:
                values[name] = value
        values.update(overrides)
        return cls.from_dict(values)

    @classmethod
    def from_toml(cls, path: Path | str) -> "SyncConfig":
        """Load a ``[devosync]`` table (or a flat top-level table) from *path*."""
        with open(path, "rb") as fh:
            try:
                data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
        section = data.get("devosync", data)
        if not isinstance(section, dict):
            raise ConfigError(f"[devosync] in {path} must be a table")
        return cls.from_dict(section)

    def with_overrides(self, **overrides: Any) -> "SyncConfig":
        try:
            return replace(self, **overrides)
        except TypeError as exc:
            raise ConfigError(str(exc)) from exc

    @property
    def queue_file(self) -> Path | None:
        """Expanded path of the queue database, or ``None`` when in-memory."""
        if self.queue_path == ":memory:":
            return None
        return Path(self.queue_path).expanduser()
