"""
Unit tests for the key/value store backings.
"""

import json
from unittest.mock import Mock, patch

import pytest
import redis

from hybrid_dashboard.core.config import Settings
from hybrid_dashboard.database.kv_store import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
    create_kv_store,
)


class TestInMemoryKeyValueStore:
    """Test dict-backed store"""

    def test_get_set_remove(self):
        store = InMemoryKeyValueStore()

        assert store.get("a") is None
        assert store.set("a", "1") is True
        assert store.get("a") == "1"
        assert store.remove("a") is True
        assert store.remove("a") is False
        assert store.get("a") is None

    def test_initial_data_copied(self):
        initial = {"a": "1"}
        store = InMemoryKeyValueStore(initial)
        store.set("b", "2")

        assert initial == {"a": "1"}
        assert sorted(store.keys()) == ["a", "b"]

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryKeyValueStore(), KeyValueStore)


class TestFileKeyValueStore:
    """Test JSON-file-backed store"""

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "kv.json"
        FileKeyValueStore(path).set("smartmenu_hybrid_cache_version", "3")

        reopened = FileKeyValueStore(path)

        assert reopened.get("smartmenu_hybrid_cache_version") == "3"
        assert json.loads(path.read_text()) == {"smartmenu_hybrid_cache_version": "3"}

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "kv.json"

        assert FileKeyValueStore(path).set("k", "v") is True
        assert path.exists()

    def test_remove(self, tmp_path):
        path = tmp_path / "kv.json"
        store = FileKeyValueStore(path)
        store.set("k", "v")

        assert store.remove("k") is True
        assert store.remove("k") is False
        assert FileKeyValueStore(path).get("k") is None

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "kv.json"
        path.write_text("{broken", encoding="utf-8")

        store = FileKeyValueStore(path)

        assert store.get("anything") is None
        assert store.set("k", "v") is True
        assert json.loads(path.read_text()) == {"k": "v"}

    def test_non_map_file_starts_empty(self, tmp_path):
        path = tmp_path / "kv.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        assert FileKeyValueStore(path).get("0") is None

    def test_non_string_values_dropped(self, tmp_path):
        path = tmp_path / "kv.json"
        path.write_text(json.dumps({"a": "1", "b": 2}), encoding="utf-8")

        store = FileKeyValueStore(path)

        assert store.get("a") == "1"
        assert store.get("b") is None

    def test_failed_write_rolls_back(self, tmp_path):
        """A write that cannot reach disk changes nothing and leaves no temp file"""
        path = tmp_path / "kv.json"
        store = FileKeyValueStore(path)
        store.set("k", "old")

        with patch(
            "hybrid_dashboard.database.kv_store.os.replace",
            side_effect=OSError("disk full"),
        ):
            assert store.set("k", "new") is False
            assert store.remove("k") is False

        assert store.get("k") == "old"
        assert json.loads(path.read_text()) == {"k": "old"}
        assert [p.name for p in tmp_path.iterdir()] == ["kv.json"]

    def test_no_temp_files_left(self, tmp_path):
        store = FileKeyValueStore(tmp_path / "kv.json")
        store.set("a", "1")
        store.set("b", "2")

        assert [p.name for p in tmp_path.iterdir()] == ["kv.json"]


class TestRedisKeyValueStore:
    """Test Redis-backed store with a mocked client"""

    @pytest.fixture
    def mock_client(self):
        return Mock()

    def test_get_set_remove(self, mock_client):
        mock_client.get.return_value = "42"
        mock_client.delete.return_value = 1
        store = RedisKeyValueStore(mock_client)

        assert store.get("k") == "42"
        assert store.set("k", "43") is True
        mock_client.set.assert_called_once_with("k", "43")
        assert store.remove("k") is True

    def test_get_missing(self, mock_client):
        mock_client.get.return_value = None

        assert RedisKeyValueStore(mock_client).get("k") is None

    def test_get_bytes_decoded(self, mock_client):
        mock_client.get.return_value = b"1700000000000"

        assert RedisKeyValueStore(mock_client).get("k") == "1700000000000"

    def test_errors_never_raise(self, mock_client):
        mock_client.get.side_effect = redis.ConnectionError("refused")
        mock_client.set.side_effect = redis.ConnectionError("refused")
        mock_client.delete.side_effect = redis.ConnectionError("refused")
        store = RedisKeyValueStore(mock_client)

        assert store.get("k") is None
        assert store.set("k", "v") is False
        assert store.remove("k") is False

    def test_health_check(self, mock_client):
        store = RedisKeyValueStore(mock_client)
        assert store.health_check() == {"connected": True}

        mock_client.ping.side_effect = redis.ConnectionError("refused")
        status = store.health_check()
        assert status["connected"] is False
        assert "refused" in status["error"]


class TestCreateKvStore:
    """Test backing selection from settings"""

    def test_memory(self):
        store = create_kv_store(Settings(kv_backend="memory"))

        assert isinstance(store, InMemoryKeyValueStore)

    def test_file(self, tmp_path):
        store = create_kv_store(
            Settings(kv_backend="file", kv_file_path=str(tmp_path / "kv.json"))
        )

        assert isinstance(store, FileKeyValueStore)

    def test_redis(self):
        with patch("hybrid_dashboard.database.kv_store.redis.Redis.from_url") as from_url:
            store = create_kv_store(
                Settings(kv_backend="redis", redis_url="redis://cache:6379/2")
            )

        from_url.assert_called_once_with("redis://cache:6379/2", decode_responses=True)
        assert isinstance(store, RedisKeyValueStore)
