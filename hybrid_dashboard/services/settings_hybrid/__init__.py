"""
Hybrid settings cache - one cached view over two GraphQL sources.

Usage:
    from hybrid_dashboard.services.settings_hybrid import HybridSettingsService

    service = HybridSettingsService.from_settings(settings, kv_store)

    result = await service.get_settings()          # cached for the TTL
    service.invalidate_on_mutation("w1", {"name"})  # next read refetches
    comparison = await service.compare_performance()

Persisted keys:
    {namespace}_last_fetch, {namespace}_cache_version,
    {namespace}_entities, {namespace}_metrics
"""

from .cache import CacheStore
from .fetchers import AnalyticsMetricsFetcher, PrimarySettingsFetcher, SourceFetcher
from .invalidation import InvalidationController
from .keys import CacheKeys
from .manager import HybridSettingsService
from .observability import ReadPathMetrics, observed_read
from .performance import PerformanceComparator
from .types import (
    CacheEntry,
    CacheInfo,
    CacheStats,
    FetchOutcome,
    HybridSettingsResult,
    MergedResult,
    PerformanceComparison,
    PerformanceMetrics,
    Recommendation,
)

__all__ = [
    "HybridSettingsService",
    "CacheStore",
    "CacheKeys",
    "SourceFetcher",
    "PrimarySettingsFetcher",
    "AnalyticsMetricsFetcher",
    "InvalidationController",
    "PerformanceComparator",
    "ReadPathMetrics",
    "observed_read",
    "CacheEntry",
    "CacheInfo",
    "CacheStats",
    "FetchOutcome",
    "HybridSettingsResult",
    "MergedResult",
    "PerformanceComparison",
    "PerformanceMetrics",
    "Recommendation",
]
