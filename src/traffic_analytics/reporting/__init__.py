"""Reporting and analytics module."""

from .metrics import MetricsAggregator

__all__ = [
    "MetricsAggregator",
]
