"""Bot classification and log partitioning."""

from .catalog import DEFAULT_CATALOG, BehavioralThresholds, PatternCatalog
from .classifier import (
    NOT_A_BOT,
    BehaviorScore,
    BehaviorSummary,
    BotClassifier,
    BotRequest,
    ClassificationVerdict,
    DetectionMethod,
    analyze_behavior,
    classify,
    is_bot_ip,
    is_bot_user_agent,
)
from .partition import (
    BOT_DETECTION_KEY,
    LogPartitioner,
    PartitionResult,
    PartitionStats,
)

__all__ = [
    # Catalog
    "PatternCatalog",
    "BehavioralThresholds",
    "DEFAULT_CATALOG",
    # Classifier
    "BotClassifier",
    "BotRequest",
    "BehaviorSummary",
    "BehaviorScore",
    "ClassificationVerdict",
    "DetectionMethod",
    "NOT_A_BOT",
    "classify",
    "is_bot_user_agent",
    "is_bot_ip",
    "analyze_behavior",
    # Partitioning
    "LogPartitioner",
    "PartitionResult",
    "PartitionStats",
    "BOT_DETECTION_KEY",
]
