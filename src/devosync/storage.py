"""Synchronous string key-value stores backing the pending queue.

The queue serialises its whole collection to one string under one key, so
the stores only need ``get`` / ``set`` / ``delete``.  Reads and writes are
synchronous: a mutating queue operation reads, modifies and writes without
yielding to the event loop in between.

Two implementations:

- :class:`MemoryStore` – a dict; used by tests and throwaway sessions.
- :class:`DuckDBStore` – a DuckDB table, durable across restarts when given
  a file path.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

import duckdb


@runtime_checkable
class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None:
        """Return the value stored under *key*, or ``None``."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove *key*; no-op when absent."""
        ...


class MemoryStore:
    """Dict-backed store; contents vanish with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class DuckDBStore:
    """Key-value store in a single DuckDB table."""

    _TABLE = "kv_store"

    def __init__(self, db_path: Path | str = ":memory:") -> None:
        self._db_path = str(db_path)
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn: duckdb.DuckDBPyConnection = duckdb.connect(self._db_path)
        self._ensure_schema()

    def _ensure_schema(self) -> None:
        self.conn.execute(f"""
            CREATE TABLE IF NOT EXISTS {self._TABLE} (
                key        VARCHAR PRIMARY KEY,
                value      TEXT NOT NULL,
                updated_at TIMESTAMPTZ DEFAULT now()
            );
        """)

    # ------------------------------------------------------------------
    # KeyValueStore
    # ------------------------------------------------------------------

    def get(self, key: str) -> str | None:
        row = self.conn.execute(
            f"SELECT value FROM {self._TABLE} WHERE key = ?",
            [key],
        ).fetchone()
        return None if row is None else row[0]

    def set(self, key: str, value: str) -> None:
        self.conn.execute(
            f"""
            INSERT INTO {self._TABLE} (key, value, updated_at)
            VALUES (?, ?, now())
            ON CONFLICT (key) DO UPDATE SET
                value      = excluded.value,
                updated_at = now();
            """,
            [key, value],
        )

    def delete(self, key: str) -> None:
        self.conn.execute(f"DELETE FROM {self._TABLE} WHERE key = ?", [key])

    def keys(self) -> list[str]:
        rows = self.conn.execute(f"SELECT key FROM {self._TABLE} ORDER BY key").fetchall()
        return [r[0] for r in rows]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "DuckDBStore":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
