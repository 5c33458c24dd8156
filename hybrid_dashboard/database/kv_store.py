"""
Process-local key/value persistence for the hybrid settings cache.

Every backing honours the same contract: synchronous get/set/remove over
string values that never raises. Missing or corrupt state is reported as
None and persistence failures are logged, so the cache above it can treat
storage as best-effort.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import redis
import structlog

from ..core.config import Settings

logger = structlog.get_logger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Synchronous string key/value store that never raises."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> bool: ...

    def remove(self, key: str) -> bool: ...


class InMemoryKeyValueStore:
    """Dict-backed store; state lives as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True

    def remove(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data)


class FileKeyValueStore:
    """
    JSON-file-backed store that survives process restarts.

    The whole map is loaded once and rewritten atomically (temp file +
    os.replace) on every mutation. An unreadable file starts an empty map.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._data: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("kv_file_load_failed", path=str(self._path), error=str(e))
            return {}

        if not isinstance(raw, dict):
            logger.warning("kv_file_not_a_map", path=str(self._path))
            return {}

        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _flush(self, data: dict[str, str]) -> bool:
        """Write data to disk; on failure no temp file is left behind."""
        tmp_path: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp_path, self._path)
            return True
        except OSError as e:
            logger.warning("kv_file_flush_failed", path=str(self._path), error=str(e))
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            return False

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        # Memory only changes once the disk write succeeded
        data = {**self._data, key: value}
        if not self._flush(data):
            return False
        self._data = data
        return True

    def remove(self, key: str) -> bool:
        if key not in self._data:
            return False
        data = {k: v for k, v in self._data.items() if k != key}
        if not self._flush(data):
            return False
        self._data = data
        return True


class RedisKeyValueStore:
    """Redis-backed store using the synchronous client."""

    def __init__(self, client: Any) -> None:
        """
        Args:
            client: redis.Redis instance created with decode_responses=True
        """
        self._client = client

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisKeyValueStore":
        """Build a store with a client connected lazily to redis_url."""
        return cls(redis.Redis.from_url(redis_url, decode_responses=True))

    def get(self, key: str) -> str | None:
        try:
            value = self._client.get(key)
        except redis.RedisError as e:
            logger.error("Redis get operation failed", key=key, error=str(e))
            return None
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        return str(value)

    def set(self, key: str, value: str) -> bool:
        try:
            self._client.set(key, value)
            return True
        except redis.RedisError as e:
            logger.error("Redis set operation failed", key=key, error=str(e))
            return False

    def remove(self, key: str) -> bool:
        try:
            return int(self._client.delete(key)) > 0
        except redis.RedisError as e:
            logger.error("Redis delete operation failed", key=key, error=str(e))
            return False

    def health_check(self) -> dict[str, bool | str]:
        """Check Redis connection health."""
        try:
            self._client.ping()
            return {"connected": True}
        except redis.RedisError as e:
            logger.error("Redis health check failed", error=str(e))
            return {"connected": False, "error": str(e)}


def create_kv_store(settings: Settings) -> KeyValueStore:
    """Build the key/value backing selected by settings.kv_backend."""
    if settings.kv_backend == "memory":
        store: KeyValueStore = InMemoryKeyValueStore()
    elif settings.kv_backend == "redis":
        store = RedisKeyValueStore.from_url(settings.redis_url)
    else:
        store = FileKeyValueStore(settings.kv_file_path)

    logger.info("kv_store_created", backend=settings.kv_backend)
    return store
