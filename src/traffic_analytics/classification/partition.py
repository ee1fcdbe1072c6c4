"""
Partition log entries into legitimate and bot traffic.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Sequence

from ..ingestion.schema import get_field
from ..utils.stats import percentage
from .classifier import (
    BehaviorSummary,
    BotClassifier,
    BotRequest,
    ClassificationVerdict,
)

logger = logging.getLogger(__name__)

# Key under which bot entries carry their verdict
BOT_DETECTION_KEY = "bot_detection"


@dataclass
class PartitionStats:
    """Aggregate filtering statistics."""

    bot_percentage: float = 0.0
    detection_methods: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "bot_percentage": self.bot_percentage,
            "detection_methods": dict(self.detection_methods),
        }


@dataclass
class PartitionResult:
    """Result of splitting a batch into legitimate and bot entries."""

    total: int
    legitimate: list[Mapping[str, Any]] = field(default_factory=list)
    bots: list[dict[str, Any]] = field(default_factory=list)
    stats: PartitionStats = field(default_factory=PartitionStats)
    skipped: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "total": self.total,
            "legitimate": [dict(e) for e in self.legitimate],
            "bots": [dict(e) for e in self.bots],
            "stats": self.stats.to_dict(),
            "skipped": self.skipped,
        }


class LogPartitioner:
    """
    Splits a batch of log entries using a BotClassifier.

    The split is stable: each output list keeps input order. Legitimate
    entries are passed through as-is; bot entries are shallow copies
    annotated with their verdict under ``bot_detection``.
    """

    def __init__(self, classifier: Optional[BotClassifier] = None):
        self.classifier = classifier or BotClassifier()

    def partition(self, entries: Sequence[Mapping[str, Any]]) -> PartitionResult:
        """
        Partition entries into legitimate and bot subsets.

        Records that are not mappings are skipped and counted in
        ``skipped``; they take no part in ``total`` or the percentages.

        Args:
            entries: LogEntry mappings

        Returns:
            PartitionResult; bot_percentage is 0.0 for an empty batch
        """
        result = PartitionResult(total=0)
        methods: dict[str, int] = {}

        for entry in entries:
            if not isinstance(entry, Mapping):
                result.skipped += 1
                continue

            result.total += 1
            verdict = self.classify_entry(entry)

            if verdict.is_bot:
                result.bots.append({**entry, BOT_DETECTION_KEY: verdict.to_dict()})
                method = verdict.method.value if verdict.method else "unknown"
                methods[method] = methods.get(method, 0) + 1
            else:
                result.legitimate.append(entry)

        if result.skipped:
            logger.warning(f"Skipped {result.skipped:,} records that are not objects")

        result.stats = PartitionStats(
            bot_percentage=percentage(len(result.bots), result.total),
            detection_methods=methods,
        )

        logger.info(
            f"Partitioned {result.total:,} entries: "
            f"{len(result.legitimate):,} legitimate, {len(result.bots):,} bots "
            f"({result.stats.bot_percentage}%)"
        )
        return result

    def classify_entry(self, entry: Mapping[str, Any]) -> ClassificationVerdict:
        """
        Classify one log entry.

        A session summary that cannot be scored is dropped, so the entry is
        judged on its user-agent and IP alone.
        """
        request = BotRequest(
            user_agent=get_field(entry, "user_agent"),
            ip=get_field(entry, "ip"),
        )

        session = get_field(entry, "session")
        if isinstance(session, Mapping):
            try:
                with_session = replace(
                    request, session=BehaviorSummary.from_dict(session)
                )
                return self.classifier.classify(with_session)
            except (TypeError, ValueError, AttributeError) as e:
                logger.debug(f"Ignoring unusable session summary: {e}")

        return self.classifier.classify(request)
