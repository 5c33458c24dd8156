"""
Quarterly analytics bucket from the data warehouse.

Buckets are already aggregated upstream (counts plus quarter-over-quarter
growth) and are append-only from the cache's point of view.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class MetricWithGrowth(BaseModel):
    """Count with its QoQ delta and percentage."""

    model_config = _CAMEL

    count: int = 0
    qoq_growth: float = 0
    qoq_growth_percent: float = 0


class RevenueMetric(BaseModel):
    """Revenue amount with its QoQ delta and percentage."""

    model_config = _CAMEL

    amount: float = 0
    qoq_growth: float = 0
    qoq_growth_percent: float = 0


class QuarterlyMetric(BaseModel):
    """One analytics bucket, keyed by ``(year, quarter)``."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    quarter: str
    year: int
    quarter_label: str = ""
    brands: MetricWithGrowth = MetricWithGrowth()
    locations: MetricWithGrowth = MetricWithGrowth()
    orders: MetricWithGrowth = MetricWithGrowth()
    active_smart_menus: MetricWithGrowth = MetricWithGrowth()
    total_revenue: RevenueMetric | None = None

    @property
    def key(self) -> tuple[int, str]:
        return (self.year, self.quarter)
