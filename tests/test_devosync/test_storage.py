"""Unit tests for devosync.storage."""

from pathlib import Path

from fakes import make_draft

from devosync.notify import CollectingNotifier
from devosync.queue import PendingQueue
from devosync.storage import DuckDBStore, KeyValueStore, MemoryStore

# ---------------------------------------------------------------------------
# MemoryStore
# ---------------------------------------------------------------------------


class TestMemoryStore:
    def test_get_missing(self):
        assert MemoryStore().get("k") is None

    def test_set_get_delete(self):
        s = MemoryStore()
        s.set("k", "v")
        assert s.get("k") == "v"
        s.delete("k")
        assert s.get("k") is None

    def test_delete_missing_is_noop(self):
        MemoryStore().delete("k")

    def test_satisfies_protocol(self):
        assert isinstance(MemoryStore(), KeyValueStore)


# ---------------------------------------------------------------------------
# DuckDBStore
# ---------------------------------------------------------------------------


class TestDuckDBStore:
    def test_in_memory_roundtrip(self):
        with DuckDBStore() as s:
            s.set("k", "v1")
            s.set("k", "v2")
            assert s.get("k") == "v2"
            assert s.keys() == ["k"]

    def test_delete(self):
        with DuckDBStore() as s:
            s.set("k", "v")
            s.delete("k")
            s.delete("k")
            assert s.get("k") is None

    def test_satisfies_protocol(self):
        with DuckDBStore() as s:
            assert isinstance(s, KeyValueStore)

    def test_survives_reopen(self, tmp_path: Path):
        path = tmp_path / "nested" / "queue.duckdb"
        with DuckDBStore(path) as s:
            s.set("offline_devotionals", "[]")
        with DuckDBStore(path) as s:
            assert s.get("offline_devotionals") == "[]"

    def test_queue_survives_reopen(self, tmp_path: Path):
        path = tmp_path / "queue.duckdb"
        with DuckDBStore(path) as s:
            item = PendingQueue(s, notifier=CollectingNotifier()).enqueue(make_draft("kept"))
        with DuckDBStore(path) as s:
            items = PendingQueue(s, notifier=CollectingNotifier()).list()
        assert [i.id for i in items] == [item.id]
        assert items[0].title == "kept"
