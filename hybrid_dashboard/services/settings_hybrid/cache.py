"""
Cache store for the hybrid settings view.

Provides a thin abstraction over a KeyValueStore with:
- JSON serialization of the merged payload
- TTL and version validation on read
- Corruption treated as a cache miss
- Best-effort writes (failures logged, never raised)

The store holds no copy of the timestamp or version on the instance: every
call goes through the KeyValueStore, so any number of stores built over the
same backing agree on the cache state.
"""

import json

import structlog
from pydantic import ValidationError as PydanticValidationError

from ...core.exceptions import SerializationError
from ...core.utils import Clock, now_ms
from ...database.kv_store import KeyValueStore
from .keys import CacheKeys
from .types import CacheEntry, CacheStats, MergedResult

logger = structlog.get_logger(__name__)

DEFAULT_TTL_MS = 5 * 60 * 1000


class CacheStore:
    """
    Read/write/invalidate operations over the single CacheEntry.

    Args:
        kv_store: Backing key/value persistence
        ttl_ms: Maximum entry age in milliseconds
        namespace: Prefix of the four persisted keys
        clock: Millisecond clock (injectable for tests)
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        ttl_ms: int = DEFAULT_TTL_MS,
        namespace: str = CacheKeys.DEFAULT_NAMESPACE,
        clock: Clock = now_ms,
    ):
        self._kv = kv_store
        self.ttl_ms = ttl_ms
        self.namespace = namespace
        self._clock = clock

    # =========================================================================
    # Persisted scalars
    # =========================================================================

    def current_version(self) -> str:
        """Current global cache version ("1" when never bumped or cleared)."""
        raw = self._kv.get(CacheKeys.cache_version(self.namespace))
        if raw is None:
            return CacheKeys.DEFAULT_VERSION
        if not (raw.isascii() and raw.isdigit()):
            logger.warning("cache_version_unreadable", value=raw)
            return CacheKeys.DEFAULT_VERSION
        return raw

    def last_fetch(self) -> int:
        """Timestamp of the last write, 0 when absent or invalidated."""
        raw = self._kv.get(CacheKeys.last_fetch(self.namespace))
        if raw is None:
            return 0
        try:
            return max(int(raw), 0)
        except ValueError:
            logger.warning("cache_timestamp_unreadable", value=raw)
            return 0

    # =========================================================================
    # Entry operations
    # =========================================================================

    def read(self) -> CacheEntry | None:
        """
        Return the cached entry if it is still usable.

        Returns None when nothing was written, the entry was invalidated or
        orphaned by a version bump, the TTL elapsed, or the stored payload
        cannot be decoded.
        """
        last_fetch = self.last_fetch()
        if last_fetch <= 0:
            logger.debug("cache_miss", reason="empty")
            return None

        version = self.current_version()
        try:
            payload = self._load_payload()
        except SerializationError as e:
            logger.warning("cache_get_error", error=e.message, **e.context)
            return None

        entry = CacheEntry(
            last_fetch_timestamp=last_fetch, cache_version=version, payload=payload
        )
        now = self._clock()
        if not entry.is_valid(version, now, self.ttl_ms):
            logger.debug("cache_miss", reason="expired", cache_age=entry.age_ms(now))
            return None

        logger.debug("cache_hit", cache_age=entry.age_ms(now), cache_version=version)
        return entry

    def write(
        self, payload: MergedResult, expected_version: str | None = None
    ) -> CacheEntry:
        """
        Store payload stamped with now() and the current version.

        Persistence is best-effort: failures are logged and the returned entry
        still describes what the caller is about to serve.

        Args:
            payload: Merged result to persist
            expected_version: Version current when the fetch started. If the
                version moved since (a mutation landed mid-fetch), the payload
                is not persisted so the next read refetches.
        """
        current_version = self.current_version()
        entry = CacheEntry(
            last_fetch_timestamp=self._clock(),
            cache_version=expected_version or current_version,
            payload=payload,
        )

        if expected_version is not None and expected_version != current_version:
            logger.warning(
                "cache_set_skipped",
                reason="version_changed",
                expected_version=expected_version,
                cache_version=current_version,
            )
            return entry

        try:
            entities_json = json.dumps(payload.entities_json())
            metrics_json = json.dumps(payload.metrics_json())
        except (TypeError, ValueError) as e:
            logger.warning("cache_set_error", error=str(e))
            return entry

        # Timestamp goes last so a partial write never reads back as valid
        stored = (
            self._kv.set(CacheKeys.entities(self.namespace), entities_json)
            and self._kv.set(CacheKeys.metrics(self.namespace), metrics_json)
            and self._kv.set(CacheKeys.cache_version(self.namespace), entry.cache_version)
            and self._kv.set(
                CacheKeys.last_fetch(self.namespace), str(entry.last_fetch_timestamp)
            )
        )
        if stored:
            logger.debug(
                "cache_set",
                entity_count=len(payload.entities),
                metric_count=len(payload.metrics),
                cache_version=entry.cache_version,
            )
        else:
            logger.warning("cache_set_error", error="key/value store rejected write")
        return entry

    def invalidate(self) -> None:
        """Reset the fetch timestamp so the next read misses; version untouched."""
        self._kv.set(CacheKeys.last_fetch(self.namespace), "0")
        logger.debug("cache_invalidated")

    def bump_version(self) -> str:
        """
        Increment and persist the global version.

        The current entry was stamped with the old version, so it is orphaned
        until the next write.
        """
        new_version = str(int(self.current_version()) + 1)
        self._kv.set(CacheKeys.cache_version(self.namespace), new_version)
        self._kv.set(CacheKeys.last_fetch(self.namespace), "0")
        logger.debug("cache_version_bumped", cache_version=new_version)
        return new_version

    def clear(self) -> None:
        """Remove all persisted keys; the version reverts to its default."""
        for key in CacheKeys.all(self.namespace):
            self._kv.remove(key)
        logger.info("cache_cleared", namespace=self.namespace)

    def stats(self) -> CacheStats:
        """Monitoring snapshot: last fetch, version and age in ms."""
        last_fetch = self.last_fetch()
        cache_age = self._clock() - last_fetch if last_fetch > 0 else 0
        return CacheStats(
            last_fetch=last_fetch,
            cache_version=self.current_version(),
            cache_age=cache_age,
        )

    # =========================================================================
    # Decoding
    # =========================================================================

    def _load_payload(self) -> MergedResult:
        raw_entities = self._kv.get(CacheKeys.entities(self.namespace))
        raw_metrics = self._kv.get(CacheKeys.metrics(self.namespace))
        if raw_entities is None or raw_metrics is None:
            raise SerializationError("Cached payload is incomplete")

        try:
            entities = json.loads(raw_entities)
            metrics = json.loads(raw_metrics)
        except ValueError as e:
            raise SerializationError("Cached payload is not valid JSON") from e

        if not isinstance(entities, list) or not isinstance(metrics, list):
            raise SerializationError("Cached payload is not a pair of arrays")

        try:
            return MergedResult.from_dict({"entities": entities, "metrics": metrics})
        except PydanticValidationError as e:
            raise SerializationError(
                "Cached payload failed validation", error_count=e.error_count()
            ) from e
