"""
Read-path observability for the hybrid settings service.

Wraps get_settings() to record hit/miss counters and P50/P95/P99 read
latencies in memory, and to log each completed read (slow reads at warning
level). The orchestrator itself stays free of this bookkeeping.
"""

import functools
import statistics
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

import structlog

from .types import HybridSettingsResult

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[HybridSettingsResult]])


@dataclass
class ReadPathMetrics:
    """Cache efficiency and latency samples for get_settings()."""

    # Store last 1000 read times for percentile calculation
    response_times: list[float] = field(default_factory=list)
    max_samples: int = 1000
    hits: int = 0
    misses: int = 0
    failures: int = 0

    def add_sample(self, response_time_ms: float, cache_hit: bool) -> None:
        """Record one completed read, keeping only recent samples."""
        if cache_hit:
            self.hits += 1
        else:
            self.misses += 1
        self.response_times.append(response_time_ms)
        if len(self.response_times) > self.max_samples:
            self.response_times = self.response_times[-self.max_samples :]

    def snapshot(self) -> dict[str, Any]:
        """Counters plus P50/P95/P99 over the retained samples."""
        total = self.hits + self.misses
        result: dict[str, Any] = {
            "hits": self.hits,
            "misses": self.misses,
            "failures": self.failures,
            "hit_ratio_percent": round(self.hits / total * 100, 2) if total else 0.0,
        }

        if not self.response_times:
            result.update({"p50": None, "p95": None, "p99": None, "count": 0})
            return result

        sorted_times = sorted(self.response_times)
        result.update(
            {
                "p50": self._percentile(sorted_times, 50),
                "p95": self._percentile(sorted_times, 95),
                "p99": self._percentile(sorted_times, 99),
                "count": len(sorted_times),
                "min": sorted_times[0],
                "max": sorted_times[-1],
                "avg": statistics.mean(sorted_times),
            }
        )
        return result

    @staticmethod
    def _percentile(sorted_data: list[float], percentile: int) -> float:
        """Linear-interpolated percentile of already sorted data."""
        if not sorted_data:
            return 0.0
        index = (len(sorted_data) - 1) * percentile / 100
        lower = int(index)
        upper = lower + 1
        if upper >= len(sorted_data):
            return sorted_data[-1]
        weight = index - lower
        return sorted_data[lower] * (1 - weight) + sorted_data[upper] * weight


def observed_read(func: F) -> F:
    """
    Decorate a service's get_settings() with metrics and a completion log.

    The instance must expose ``read_metrics`` (ReadPathMetrics) and
    ``slow_read_threshold_ms`` (float).
    """

    @functools.wraps(func)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> HybridSettingsResult:
        start = time.perf_counter()
        try:
            result = await func(self, *args, **kwargs)
        except Exception as e:
            self.read_metrics.failures += 1
            logger.error(
                "settings_read_failed", error=str(e), error_type=type(e).__name__
            )
            raise

        read_time_ms = (time.perf_counter() - start) * 1000
        self.read_metrics.add_sample(read_time_ms, result.cache_hit)

        is_slow = read_time_ms > self.slow_read_threshold_ms
        log_method = logger.warning if is_slow else logger.info
        log_method(
            "settings_read_completed",
            cache_hit=result.cache_hit,
            entity_count=len(result.entities),
            metric_count=len(result.metrics),
            a_time_ms=result.performance_metrics.a_time_ms,
            b_time_ms=result.performance_metrics.b_time_ms,
            read_time_ms=round(read_time_ms, 2),
            cache_version=result.cache_info.cache_version,
            slow=is_slow,
        )
        return result

    return wrapper  # type: ignore[return-value]
