"""
Shared fixtures for the hybrid settings tests.
"""

import asyncio

import pytest

from hybrid_dashboard.database.kv_store import InMemoryKeyValueStore
from hybrid_dashboard.models import EntitySettings, QuarterlyMetric
from hybrid_dashboard.services.settings_hybrid import (
    CacheStore,
    FetchOutcome,
    HybridSettingsService,
)

T0 = 1_700_000_000_000  # Fixed epoch-ms start for the fake clock
TTL_MS = 300_000


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: int = T0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeFetcher:
    """
    Stand-in SourceFetcher.

    Returns ``items`` or raises ``error``. With a ``gate`` the fetch blocks
    after signalling ``started`` until the gate is set.
    """

    def __init__(
        self,
        service: str,
        items: list | None = None,
        error: Exception | None = None,
        latency_ms: int = 10,
        gate: asyncio.Event | None = None,
    ):
        self.service = service
        self.label = service
        self.items = items or []
        self.error = error
        self.latency_ms = latency_ms
        self.gate = gate
        self.started = asyncio.Event()
        self.calls = 0

    async def fetch(self) -> FetchOutcome:
        self.calls += 1
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return FetchOutcome.ok(list(self.items), self.latency_ms)


def make_entities(count: int) -> list[EntitySettings]:
    return [
        EntitySettings(
            id=f"widget-{i}",
            name=f"Restaurant {i}",
            slug=f"restaurant-{i}",
            createdAt="2025-01-01T00:00:00Z",
            updatedAt="2025-06-01T00:00:00Z",
            numberOfLocations=i + 1,
            displayImages=True,
            layout="card",
            isOrderButtonEnabled=bool(i % 2),
            isByoEnabled=False,
            supportedAllergens=["peanut", "gluten"],
        )
        for i in range(count)
    ]


def make_metrics(count: int) -> list[QuarterlyMetric]:
    return [
        QuarterlyMetric.model_validate(
            {
                "quarter": f"2025-0{1 + 3 * i}-01T00:00:00Z",
                "year": 2025,
                "quarterLabel": f"Q{i + 1} 2025",
                "orders": {"count": 1000 * (i + 1), "qoqGrowth": 100, "qoqGrowthPercent": 11.1},
                "activeSmartMenus": {"count": 10 + i, "qoqGrowth": 1, "qoqGrowthPercent": 10.0},
                "totalRevenue": {"amount": 2500.5, "qoqGrowth": 0, "qoqGrowthPercent": 0},
            }
        )
        for i in range(count)
    ]


@pytest.fixture
def clock():
    """Fake millisecond clock starting at T0."""
    return FakeClock()


@pytest.fixture
def kv_store():
    """Empty in-memory key/value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def cache(kv_store, clock):
    """CacheStore with a 5 minute TTL over the in-memory store."""
    return CacheStore(kv_store, ttl_ms=TTL_MS, clock=clock)


@pytest.fixture
def primary_fetcher():
    """Primary source returning 5 entities."""
    return FakeFetcher("primary_api", items=make_entities(5), latency_ms=120)


@pytest.fixture
def analytics_fetcher():
    """Analytics source returning 3 quarterly metrics."""
    return FakeFetcher("analytics_api", items=make_metrics(3), latency_ms=80)


@pytest.fixture
def service(cache, primary_fetcher, analytics_fetcher):
    """HybridSettingsService over fake fetchers and the fake clock."""
    return HybridSettingsService(cache, primary_fetcher, analytics_fetcher)
