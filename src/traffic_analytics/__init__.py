"""Bot-filtered web analytics reconstruction from access logs."""

from .classification import BotClassifier, LogPartitioner, PatternCatalog, classify
from .pipeline import AnalyticsReconstructor, process_logs
from .schemas import AnalyticsResult
from .sessions import SessionReconstructor
from .utils import create_fingerprint

__version__ = "0.1.0"

__all__ = [
    "AnalyticsReconstructor",
    "AnalyticsResult",
    "BotClassifier",
    "LogPartitioner",
    "PatternCatalog",
    "SessionReconstructor",
    "classify",
    "create_fingerprint",
    "process_logs",
]
