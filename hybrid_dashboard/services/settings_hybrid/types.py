"""
Data types for the hybrid settings cache.

Dict output uses the camelCase keys the dashboard UI consumes.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from ...models import EntitySettings, QuarterlyMetric

T = TypeVar("T")


class Recommendation(str, Enum):
    """Outcome of the source latency comparison."""

    PRIMARY_ONLY = "Use primary API only"
    ANALYTICS_ONLY = "Use analytics API only"
    HYBRID = "Use hybrid approach"

    @classmethod
    def from_latencies(cls, a_time_ms: int, b_time_ms: int) -> "Recommendation":
        """A source wins outright only when it takes under half the other's time."""
        if a_time_ms < b_time_ms * 0.5:
            return cls.PRIMARY_ONLY
        if b_time_ms < a_time_ms * 0.5:
            return cls.ANALYTICS_ONLY
        return cls.HYBRID


@dataclass(frozen=True)
class MergedResult:
    """Entities from the primary API and metrics from the warehouse."""

    entities: tuple[EntitySettings, ...] = ()
    metrics: tuple[QuarterlyMetric, ...] = ()

    @classmethod
    def create(
        cls,
        entities: Iterable[EntitySettings] = (),
        metrics: Iterable[QuarterlyMetric] = (),
    ) -> "MergedResult":
        return cls(entities=tuple(entities), metrics=tuple(metrics))

    @property
    def is_empty(self) -> bool:
        return not self.entities and not self.metrics

    def entities_json(self) -> list[dict[str, Any]]:
        return [e.model_dump(mode="json", by_alias=True) for e in self.entities]

    def metrics_json(self) -> list[dict[str, Any]]:
        return [m.model_dump(mode="json", by_alias=True) for m in self.metrics]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"entities": self.entities_json(), "metrics": self.metrics_json()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MergedResult":
        """Create from dictionary."""
        return cls.create(
            entities=[EntitySettings.model_validate(e) for e in data["entities"]],
            metrics=[QuarterlyMetric.model_validate(m) for m in data["metrics"]],
        )


@dataclass(frozen=True)
class CacheEntry:
    """The single cached view: payload stamped with fetch time and version."""

    last_fetch_timestamp: int  # epoch ms
    cache_version: str
    payload: MergedResult

    def age_ms(self, now: int) -> int:
        return now - self.last_fetch_timestamp

    def is_valid(self, current_version: str, now: int, ttl_ms: int) -> bool:
        """Usable without refetch: fetched, same version, younger than TTL."""
        return (
            self.last_fetch_timestamp > 0
            and self.cache_version == current_version
            and self.age_ms(now) < ttl_ms
        )


@dataclass
class FetchOutcome(Generic[T]):
    """Result of one source fetch within one orchestrator pass."""

    succeeded: bool
    data: list[T] = field(default_factory=list)
    latency_ms: int = 0
    error: BaseException | None = None

    @classmethod
    def ok(cls, data: list[T], latency_ms: int) -> "FetchOutcome[T]":
        return cls(succeeded=True, data=data, latency_ms=latency_ms)

    @classmethod
    def failed(cls, error: BaseException, latency_ms: int) -> "FetchOutcome[T]":
        return cls(succeeded=False, data=[], latency_ms=latency_ms, error=error)


@dataclass(frozen=True)
class PerformanceMetrics:
    """Per-source timings for one get_settings() call."""

    a_time_ms: int = 0
    b_time_ms: int = 0
    total_time_ms: int = 0
    cache_hit: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "aTimeMs": self.a_time_ms,
            "bTimeMs": self.b_time_ms,
            "totalTimeMs": self.total_time_ms,
            "cacheHit": self.cache_hit,
        }


@dataclass(frozen=True)
class CacheInfo:
    """Cache state reported alongside a result."""

    last_fetch: int
    cache_version: str
    has_changes: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "lastFetch": self.last_fetch,
            "cacheVersion": self.cache_version,
            "hasChanges": self.has_changes,
        }


@dataclass(frozen=True)
class HybridSettingsResult:
    """What get_settings() hands to the dashboard."""

    payload: MergedResult
    performance_metrics: PerformanceMetrics
    cache_info: CacheInfo

    @property
    def entities(self) -> tuple[EntitySettings, ...]:
        return self.payload.entities

    @property
    def metrics(self) -> tuple[QuarterlyMetric, ...]:
        return self.payload.metrics

    @property
    def cache_hit(self) -> bool:
        return self.performance_metrics.cache_hit

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": self.payload.entities_json(),
            "metrics": self.payload.metrics_json(),
            "performanceMetrics": self.performance_metrics.to_dict(),
            "cacheInfo": self.cache_info.to_dict(),
        }


@dataclass(frozen=True)
class CacheStats:
    """Cache monitoring snapshot."""

    last_fetch: int
    cache_version: str
    cache_age: int  # ms, 0 when nothing is cached

    def to_dict(self) -> dict[str, Any]:
        return {
            "lastFetch": self.last_fetch,
            "cacheVersion": self.cache_version,
            "cacheAge": self.cache_age,
        }


@dataclass(frozen=True)
class PerformanceComparison:
    """Direct, uncached timing of both sources."""

    a_time_ms: int
    b_time_ms: int
    recommendation: Recommendation

    def to_dict(self) -> dict[str, Any]:
        return {
            "aTimeMs": self.a_time_ms,
            "bTimeMs": self.b_time_ms,
            "recommendation": self.recommendation.value,
        }
