"""Schemas for analytics results."""

from .analytics import (
    AnalyticsResult,
    BrowserCount,
    BrowserMetrics,
    DateRange,
    DeviceMetrics,
    GeographyMetrics,
    ImpressionMetrics,
    OverviewMetrics,
    PageImpression,
    PageViewStats,
    ReferrerCount,
    ReferrerMetrics,
    TimelineMetrics,
    VisitorMetrics,
)

__all__ = [
    "AnalyticsResult",
    "OverviewMetrics",
    "DateRange",
    "VisitorMetrics",
    "ImpressionMetrics",
    "PageImpression",
    "PageViewStats",
    "ReferrerMetrics",
    "ReferrerCount",
    "DeviceMetrics",
    "BrowserMetrics",
    "BrowserCount",
    "GeographyMetrics",
    "TimelineMetrics",
]
