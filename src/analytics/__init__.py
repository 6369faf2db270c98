"""Analytics over classified company news."""

from .aggregator import (
    AnalyticsAggregator,
    ClassificationStats,
    DistributionEntry,
    ESGDistribution,
    Overview,
    TimelineEntry,
    TrendPoint,
)

__all__ = [
    "AnalyticsAggregator",
    "ClassificationStats",
    "DistributionEntry",
    "ESGDistribution",
    "Overview",
    "TimelineEntry",
    "TrendPoint",
]
