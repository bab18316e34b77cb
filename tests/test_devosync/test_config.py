"""Unit tests for devosync.config.SyncConfig."""

import textwrap
from pathlib import Path

import pytest

from devosync.config import SyncConfig
from devosync.errors import ConfigError


class TestDefaults:
    def test_defaults(self):
        config = SyncConfig()
        assert config.table == "devotionals"
        assert config.storage_key == "offline_devotionals"
        assert config.save_probe_attempts == 2
        assert config.sync_probe_attempts == 1
        assert config.reconnect_delay == 2.0
        assert config.queue_file is None

    def test_queue_file_expands_user(self):
        config = SyncConfig(queue_path="~/q.duckdb")
        assert config.queue_file == Path("~/q.duckdb").expanduser()


class TestFromDict:
    def test_rejects_unknown_keys(self):
        with pytest.raises(ConfigError, match="bogus"):
            SyncConfig.from_dict({"bogus": 1, "table": "x"})

    def test_accepts_known_keys(self):
        assert SyncConfig.from_dict({"table": "posts"}).table == "posts"


class TestFromEnv:
    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DEVOSYNC_SUPABASE_URL", "https://env.supabase.co")
        monkeypatch.setenv("DEVOSYNC_TABLE", "posts")
        config = SyncConfig.from_env()
        assert config.supabase_url == "https://env.supabase.co"
        assert config.table == "posts"

    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DEVOSYNC_TABLE", "posts")
        assert SyncConfig.from_env(table="devotionals").table == "devotionals"

    def test_empty_env_is_ignored(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DEVOSYNC_TABLE", "")
        assert SyncConfig.from_env().table == "devotionals"


class TestFromToml:
    def test_devosync_table(self, tmp_path: Path):
        path = tmp_path / "devosync.toml"
        path.write_text(
            textwrap.dedent("""\
                [devosync]
                supabase_url = "https://abc.supabase.co"
                reconnect_delay = 0.5
                save_probe_attempts = 3
            """),
            encoding="utf-8",
        )
        config = SyncConfig.from_toml(path)
        assert config.supabase_url == "https://abc.supabase.co"
        assert config.reconnect_delay == 0.5
        assert config.save_probe_attempts == 3

    def test_flat_table(self, tmp_path: Path):
        path = tmp_path / "flat.toml"
        path.write_text('table = "posts"\n', encoding="utf-8")
        assert SyncConfig.from_toml(path).table == "posts"

    def test_unknown_key_raises(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("[devosync]\nretries = 3\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            SyncConfig.from_toml(path)

    def test_invalid_toml_raises(self, tmp_path: Path):
        path = tmp_path / "broken.toml"
        path.write_text("[devosync\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            SyncConfig.from_toml(path)


class TestWithOverrides:
    def test_returns_new_config(self):
        base = SyncConfig()
        changed = base.with_overrides(table="posts")
        assert changed.table == "posts"
        assert base.table == "devotionals"

    def test_unknown_override_raises(self):
        with pytest.raises(ConfigError):
            SyncConfig().with_overrides(nope=1)
