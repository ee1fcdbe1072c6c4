"""
Analytics reconstruction pipeline.

Rebuilds web-analytics metrics from raw access-log entries:

1. Partition: classify every entry and drop bot traffic
2. Sessions: group legitimate entries into per-visitor sessions
3. Metrics: visitors, impressions, pages, referrers, devices, browsers,
   geography and timeline breakdowns

Each call is independent; nothing is shared between runs except the
read-only pattern catalog.
"""

import logging
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar

from ..classification.catalog import PatternCatalog
from ..classification.classifier import BotClassifier
from ..classification.partition import LogPartitioner, PartitionResult
from ..config.settings import Settings
from ..reporting.metrics import MetricsAggregator
from ..schemas.analytics import AnalyticsResult, OverviewMetrics
from ..sessions.reconstructor import SessionReconstructor

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """Configure root logging for CLI scripts."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


class AnalyticsReconstructor:
    """
    Reconstructs analytics from a batch of log entries.

    Without a partitioner every entry is treated as legitimate.

    Usage:
        reconstructor = AnalyticsReconstructor(LogPartitioner())
        result = reconstructor.process_logs(entries)
        result.visitors.recommended
    """

    def __init__(
        self,
        partitioner: Optional[LogPartitioner] = None,
        session_reconstructor: Optional[SessionReconstructor] = None,
        aggregator: Optional[MetricsAggregator] = None,
    ):
        self.partitioner = partitioner
        self.session_reconstructor = session_reconstructor or SessionReconstructor()
        self.aggregator = aggregator or MetricsAggregator()

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalyticsReconstructor":
        """Build a reconstructor configured by Settings."""
        partitioner = None
        if settings.filter_bots:
            partitioner = LogPartitioner(BotClassifier(settings.build_catalog()))

        return cls(
            partitioner=partitioner,
            aggregator=MetricsAggregator(
                top_pages_limit=settings.top_pages_limit,
                top_referrers_limit=settings.top_referrers_limit,
                top_browsers_limit=settings.top_browsers_limit,
                top_locations_limit=settings.top_locations_limit,
            ),
        )

    def partition(self, entries: Sequence[Mapping[str, Any]]) -> PartitionResult:
        """Split entries, or pass them all through when no partitioner is set."""
        if self.partitioner is None:
            records = [e for e in entries if isinstance(e, Mapping)]
            return PartitionResult(
                total=len(records),
                legitimate=records,
                skipped=len(entries) - len(records),
            )
        return self.partitioner.partition(entries)

    def process_logs(self, entries: Sequence[Mapping[str, Any]]) -> AnalyticsResult:
        """
        Process log entries into an AnalyticsResult.

        A stage that fails is logged, recorded in ``result.errors`` and
        left at its empty default; no exception escapes.

        Args:
            entries: LogEntry mappings, already loaded

        Returns:
            AnalyticsResult
        """
        result = AnalyticsResult()
        entries = list(entries)

        logger.info(f"Processing {len(entries):,} log entries")

        # Step 1: Partition
        logger.info("[1/3] Filtering bot traffic...")
        partitioned = self._run_stage(
            result,
            "partition",
            lambda: self.partition(entries),
            None,
        )
        if partitioned is None:
            return result
        legitimate = partitioned.legitimate

        # Step 2: Sessions
        logger.info("[2/3] Reconstructing sessions...")
        reconstruction = self._run_stage(
            result,
            "sessions",
            lambda: self.session_reconstructor.reconstruct(legitimate),
            None,
        )
        if reconstruction is not None:
            result.sessions = reconstruction.stats

        # Step 3: Metrics
        logger.info("[3/3] Aggregating metrics...")
        agg = self.aggregator
        frame = self._run_stage(
            result, "frame", lambda: agg.build_frame(legitimate), None
        )

        result.overview = OverviewMetrics(
            total_requests=len(legitimate),
            total_bots=len(partitioned.bots),
            bot_percentage=partitioned.stats.bot_percentage,
        )

        if frame is not None:
            result.overview.date_range = self._run_stage(
                result, "date_range", lambda: agg.get_date_range(frame), None
            )
            result.visitors = self._run_stage(
                result,
                "visitors",
                lambda: agg.calculate_visitors(frame),
                result.visitors,
            )
            result.impressions = self._run_stage(
                result,
                "impressions",
                lambda: agg.calculate_impressions(frame),
                result.impressions,
            )
            result.pages = self._run_stage(
                result, "pages", lambda: agg.calculate_page_views(frame), []
            )
            result.referrers = self._run_stage(
                result,
                "referrers",
                lambda: agg.calculate_referrers(frame),
                result.referrers,
            )
            result.devices = self._run_stage(
                result,
                "devices",
                lambda: agg.calculate_devices(frame),
                result.devices,
            )
            result.browsers = self._run_stage(
                result,
                "browsers",
                lambda: agg.calculate_browsers(frame),
                result.browsers,
            )
            result.geography = self._run_stage(
                result,
                "geography",
                lambda: agg.calculate_geography(frame),
                result.geography,
            )
            result.timeline = self._run_stage(
                result,
                "timeline",
                lambda: agg.calculate_timeline(frame),
                result.timeline,
            )

        if result.errors:
            logger.error(f"Analytics completed with errors: {result.errors}")
        else:
            logger.info(
                f"Analytics complete: {result.visitors.recommended:,} visitors, "
                f"{result.impressions.total:,} impressions, "
                f"{result.sessions.total:,} sessions"
            )

        return result

    @staticmethod
    def _run_stage(
        result: AnalyticsResult,
        name: str,
        func: Callable[[], T],
        default: T,
    ) -> T:
        """Run one stage, converting a failure into its default value."""
        try:
            return func()
        except Exception as e:
            logger.exception(f"Stage '{name}' failed: {e}")
            result.errors.append(f"{name}: {e}")
            return default


def process_logs(
    entries: Sequence[Mapping[str, Any]],
    filter_bots: bool = True,
    catalog: Optional[PatternCatalog] = None,
) -> AnalyticsResult:
    """
    Reconstruct analytics for a batch of log entries.

    Args:
        entries: LogEntry mappings
        filter_bots: If False, treat every entry as legitimate
        catalog: Bot signatures (default: built-in catalog)

    Returns:
        AnalyticsResult
    """
    partitioner = LogPartitioner(BotClassifier(catalog)) if filter_bots else None
    return AnalyticsReconstructor(partitioner=partitioner).process_logs(entries)
