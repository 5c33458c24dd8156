"""
Pydantic models for the two upstream sources and for mutation reports.
"""

from .entity_settings import EntityAnalytics, EntitySettings
from .mutation import MutableField, SettingsMutation
from .quarterly_metric import MetricWithGrowth, QuarterlyMetric, RevenueMetric

__all__ = [
    "EntityAnalytics",
    "EntitySettings",
    "MetricWithGrowth",
    "MutableField",
    "QuarterlyMetric",
    "RevenueMetric",
    "SettingsMutation",
]
