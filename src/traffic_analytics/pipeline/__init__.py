"""Analytics pipeline module."""

from .analytics_pipeline import AnalyticsReconstructor, process_logs, setup_logging

__all__ = [
    "AnalyticsReconstructor",
    "process_logs",
    "setup_logging",
]
