"""
Diagnostic latency comparison between the two upstream sources.

Unlike the read path, this is strict: the cache is bypassed and any upstream
failure propagates, since the point is to measure real source health.
"""

import structlog

from ...core.exceptions import AppError
from .fetchers import SourceFetcher
from .types import PerformanceComparison, Recommendation

logger = structlog.get_logger(__name__)


class PerformanceComparator:
    """Times each fetcher independently and recommends a fetch strategy."""

    def __init__(self, primary: SourceFetcher, analytics: SourceFetcher):
        self._primary = primary
        self._analytics = analytics

    async def compare(self) -> PerformanceComparison:
        """
        Fetch from each source in turn, without touching the cache.

        Sources are timed one after the other so neither measurement absorbs
        the other's load.

        Raises:
            NetworkError, UpstreamSchemaError, ConfigurationError: from either fetcher
        """
        try:
            primary_outcome = await self._primary.fetch()
            analytics_outcome = await self._analytics.fetch()
        except AppError as e:
            logger.error(
                "performance_comparison_failed",
                error=e.message,
                error_type=e.error_type,
            )
            raise

        comparison = PerformanceComparison(
            a_time_ms=primary_outcome.latency_ms,
            b_time_ms=analytics_outcome.latency_ms,
            recommendation=Recommendation.from_latencies(
                primary_outcome.latency_ms, analytics_outcome.latency_ms
            ),
        )

        logger.info(
            "performance_comparison",
            a_time_ms=comparison.a_time_ms,
            b_time_ms=comparison.b_time_ms,
            recommendation=comparison.recommendation.value,
        )
        return comparison
