"""
Hybrid SmartMenu settings service.

Combines the primary API (per-widget settings) with the analytics warehouse
(quarterly aggregates) behind one freshness-bounded cache:

- Cache hit: served straight from the CacheStore, no network I/O
- Cache miss: both sources fetched concurrently with asyncio.gather
- One failed source degrades to an empty collection for that side only
- Mutations elsewhere invalidate the whole cache via a version bump

Concurrent misses are not de-duplicated: two callers racing on a stale cache
each fetch both sources and each write the result.
"""

import asyncio
import time
from collections.abc import Iterable

import httpx
import structlog

from ...core.config import Settings
from ...core.exceptions import ConfigurationError
from ...core.utils import Clock, elapsed_ms, now_ms
from ...database.kv_store import KeyValueStore
from ...models import MutableField, SettingsMutation
from ..graphql import GraphQLClient
from .cache import CacheStore
from .fetchers import AnalyticsMetricsFetcher, PrimarySettingsFetcher, SourceFetcher
from .invalidation import InvalidationController
from .observability import ReadPathMetrics, observed_read
from .performance import PerformanceComparator
from .types import (
    CacheInfo,
    CacheStats,
    FetchOutcome,
    HybridSettingsResult,
    MergedResult,
    PerformanceComparison,
    PerformanceMetrics,
)

logger = structlog.get_logger(__name__)


class HybridSettingsService:
    """
    Orchestrates cache reads, dual-source fetches and invalidation.

    Args:
        cache: CacheStore over the injected KeyValueStore
        primary_fetcher: SourceFetcher A (entity settings)
        analytics_fetcher: SourceFetcher B (quarterly metrics)
        slow_read_threshold_ms: Reads slower than this are logged as warnings
        clients: GraphQL clients owned by this service, closed by close()
    """

    def __init__(
        self,
        cache: CacheStore,
        primary_fetcher: SourceFetcher | None,
        analytics_fetcher: SourceFetcher | None,
        slow_read_threshold_ms: float = 500.0,
        clients: list[GraphQLClient] | None = None,
    ):
        if primary_fetcher is None or analytics_fetcher is None:
            raise ConfigurationError(
                "Both source fetchers are required",
                primary_configured=primary_fetcher is not None,
                analytics_configured=analytics_fetcher is not None,
            )

        self._cache = cache
        self._primary = primary_fetcher
        self._analytics = analytics_fetcher
        self._invalidation = InvalidationController(cache)
        self._comparator = PerformanceComparator(primary_fetcher, analytics_fetcher)
        self._clients = clients or []

        self.read_metrics = ReadPathMetrics()
        self.slow_read_threshold_ms = slow_read_threshold_ms

        logger.info(
            "hybrid_settings_service_initialized",
            namespace=cache.namespace,
            ttl_ms=cache.ttl_ms,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        kv_store: KeyValueStore,
        http_client: httpx.AsyncClient | None = None,
        clock: Clock = now_ms,
    ) -> "HybridSettingsService":
        """
        Wire clients, fetchers and cache from application settings.

        Raises:
            ConfigurationError: An upstream URL is not configured
        """
        if not settings.primary_api_url:
            raise ConfigurationError("PRIMARY_API_URL is not configured")
        if not settings.analytics_api_url:
            raise ConfigurationError("ANALYTICS_API_URL is not configured")

        primary_client = GraphQLClient(
            settings.primary_api_url,
            service=PrimarySettingsFetcher.service,
            label=PrimarySettingsFetcher.label,
            token=settings.primary_api_token,
            timeout=settings.request_timeout_seconds,
            client=http_client,
        )
        analytics_client = GraphQLClient(
            settings.analytics_api_url,
            service=AnalyticsMetricsFetcher.service,
            label=AnalyticsMetricsFetcher.label,
            token=settings.analytics_api_token,
            timeout=settings.request_timeout_seconds,
            client=http_client,
        )
        cache = CacheStore(
            kv_store,
            ttl_ms=settings.cache_ttl_ms,
            namespace=settings.cache_namespace,
            clock=clock,
        )
        return cls(
            cache,
            PrimarySettingsFetcher(primary_client),
            AnalyticsMetricsFetcher(analytics_client),
            slow_read_threshold_ms=settings.slow_read_threshold_ms,
            clients=[primary_client, analytics_client],
        )

    async def close(self) -> None:
        """Close owned GraphQL clients."""
        for client in self._clients:
            await client.close()

    # =========================================================================
    # Read path
    # =========================================================================

    @observed_read
    async def get_settings(self) -> HybridSettingsResult:
        """
        Return the merged view, from cache when fresh.

        Never raises because of upstream failure: a failed source contributes
        an empty collection and the merge is still cached and returned.

        Raises:
            ConfigurationError: A fetcher has no client
        """
        start = time.perf_counter()

        entry = self._cache.read()
        if entry is not None:
            return HybridSettingsResult(
                payload=entry.payload,
                performance_metrics=PerformanceMetrics(cache_hit=True),
                cache_info=CacheInfo(
                    last_fetch=entry.last_fetch_timestamp,
                    cache_version=entry.cache_version,
                    has_changes=False,
                ),
            )

        # A mutation landing while the fetch is in flight bumps the version
        fetch_version = self._cache.current_version()
        primary_outcome, analytics_outcome = await self._fetch_both()

        merged = MergedResult.create(
            entities=primary_outcome.data, metrics=analytics_outcome.data
        )
        written = self._cache.write(merged, expected_version=fetch_version)

        return HybridSettingsResult(
            payload=merged,
            performance_metrics=PerformanceMetrics(
                a_time_ms=primary_outcome.latency_ms,
                b_time_ms=analytics_outcome.latency_ms,
                total_time_ms=elapsed_ms(start),
                cache_hit=False,
            ),
            cache_info=CacheInfo(
                last_fetch=written.last_fetch_timestamp,
                cache_version=written.cache_version,
                has_changes=True,
            ),
        )

    async def _fetch_both(self) -> tuple[FetchOutcome, FetchOutcome]:
        """Start both fetches back-to-back and wait for both to settle."""
        results = await asyncio.gather(
            self._settle(self._primary),
            self._settle(self._analytics),
            return_exceptions=True,
        )

        # Only ConfigurationError escapes _settle; surface it once both settled
        for result in results:
            if isinstance(result, BaseException):
                raise result

        primary_outcome, analytics_outcome = results
        return primary_outcome, analytics_outcome  # type: ignore[return-value]

    async def _settle(self, fetcher: SourceFetcher) -> FetchOutcome:
        """Run one fetch, turning any source failure into a failed outcome."""
        start = time.perf_counter()
        try:
            return await fetcher.fetch()
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(
                "source_fetch_failed",
                service=fetcher.service,
                error=str(e),
                error_type=type(e).__name__,
            )
            return FetchOutcome.failed(e, elapsed_ms(start))

    # =========================================================================
    # Invalidation & cache management
    # =========================================================================

    def invalidate_on_mutation(
        self,
        entity_id: str,
        changed_fields: Iterable[str | MutableField],
    ) -> SettingsMutation:
        """Force the next get_settings() to refetch after an upstream mutation."""
        return self._invalidation.invalidate_on_mutation(entity_id, changed_fields)

    async def update_and_refresh(
        self,
        entity_id: str,
        changed_fields: Iterable[str | MutableField],
    ) -> HybridSettingsResult:
        """Invalidate for a mutation and immediately refetch the merged view."""
        self.invalidate_on_mutation(entity_id, changed_fields)
        return await self.get_settings()

    def clear_cache(self) -> None:
        """Drop every persisted cache key and reset the version."""
        self._cache.clear()

    def get_cache_stats(self) -> CacheStats:
        """Last fetch time, cache version and age for monitoring."""
        return self._cache.stats()

    # =========================================================================
    # Diagnostics
    # =========================================================================

    async def compare_performance(self) -> PerformanceComparison:
        """Time both sources directly, bypassing the cache; errors propagate."""
        return await self._comparator.compare()
