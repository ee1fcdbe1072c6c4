"""
Visitor session reconstruction.

Groups legitimate log entries by visitor fingerprint and splits each
visitor's time-ordered events into sessions wherever the gap between
consecutive events exceeds the session timeout.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import pandas as pd

from ..config.constants import SESSION_TIMEOUT_MS
from ..ingestion.schema import get_field
from ..utils.fingerprint import create_fingerprint
from ..utils.stats import format_duration, mean, percentage
from ..utils.timestamps import parse_timestamp, to_iso
from ..utils.url_utils import normalize_path

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """A contiguous run of one visitor's events."""

    visitor_id: str
    start_time: pd.Timestamp
    end_time: pd.Timestamp
    page_count: int
    paths: list[str] = field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        """Duration of session in milliseconds."""
        return (self.end_time - self.start_time).total_seconds() * 1000

    @property
    def is_bounce(self) -> bool:
        """A bounce is a single-page session."""
        return self.page_count == 1

    def to_dict(self) -> dict:
        return {
            "visitor_id": self.visitor_id,
            "start_time": to_iso(self.start_time),
            "end_time": to_iso(self.end_time),
            "duration_ms": self.duration_ms,
            "page_count": self.page_count,
            "paths": list(self.paths),
        }


@dataclass
class SessionStats:
    """Aggregate statistics across sessions."""

    total: int = 0
    avg_duration_ms: float = 0.0
    avg_duration_formatted: str = "0s"
    avg_pages_per_session: float = 0.0
    bounce_rate: float = 0.0


@dataclass
class SessionReconstruction:
    """Sessions grouped by visitor, plus aggregate stats."""

    sessions_by_visitor: dict[str, list[Session]] = field(default_factory=dict)
    stats: SessionStats = field(default_factory=SessionStats)
    skipped_entries: int = 0

    @property
    def sessions(self) -> list[Session]:
        """All sessions, visitor by visitor."""
        return [s for group in self.sessions_by_visitor.values() for s in group]


def compute_session_stats(sessions: Sequence[Session]) -> SessionStats:
    """
    Compute summary statistics for a list of sessions.

    Args:
        sessions: Session objects

    Returns:
        SessionStats; all averages and rates are 0 for no sessions
    """
    if not sessions:
        return SessionStats()

    durations = [s.duration_ms for s in sessions]
    page_counts = [s.page_count for s in sessions]
    avg_duration = mean(durations)

    return SessionStats(
        total=len(sessions),
        avg_duration_ms=avg_duration,
        avg_duration_formatted=format_duration(avg_duration),
        avg_pages_per_session=round(mean(page_counts), 2),
        bounce_rate=percentage(sum(1 for s in sessions if s.is_bounce), len(sessions)),
    )


class SessionReconstructor:
    """
    Rebuilds visitor sessions from log entries.

    Usage:
        reconstructor = SessionReconstructor()
        result = reconstructor.reconstruct(legitimate_entries)
        result.stats.bounce_rate
    """

    def __init__(self, timeout_ms: int = SESSION_TIMEOUT_MS):
        """
        Initialize the reconstructor.

        Args:
            timeout_ms: Largest gap between events of one session
        """
        self.timeout_ms = timeout_ms

    def _to_dataframe(
        self, entries: Sequence[Mapping[str, Any]]
    ) -> tuple[pd.DataFrame, int]:
        """Build a frame of (visitor_id, timestamp, path), dropping bad timestamps."""
        rows = []
        skipped = 0

        for order, entry in enumerate(entries):
            timestamp = parse_timestamp(get_field(entry, "timestamp"))
            if timestamp is None:
                skipped += 1
                continue
            rows.append(
                {
                    "visitor_id": create_fingerprint(
                        get_field(entry, "ip"), get_field(entry, "user_agent")
                    ),
                    "timestamp": timestamp,
                    "path": normalize_path(get_field(entry, "path")),
                    "order": order,
                }
            )

        return pd.DataFrame(rows), skipped

    def reconstruct(
        self, entries: Sequence[Mapping[str, Any]]
    ) -> SessionReconstruction:
        """
        Group entries into per-visitor sessions.

        Events are sorted by timestamp within each visitor; a new session
        starts when the gap to the previous event is strictly greater than
        the timeout. Entries without a parseable timestamp are skipped.

        Args:
            entries: Legitimate LogEntry mappings

        Returns:
            SessionReconstruction with sessions and aggregate stats
        """
        df, skipped = self._to_dataframe(entries)
        if skipped:
            logger.debug(f"Skipped {skipped} entries without a valid timestamp")

        if df.empty:
            return SessionReconstruction(skipped_entries=skipped)

        df = df.sort_values(["visitor_id", "timestamp", "order"]).reset_index(
            drop=True
        )

        # Mark session boundaries: first event of a visitor or gap > timeout
        timeout = pd.Timedelta(milliseconds=self.timeout_ms)
        gaps = df.groupby("visitor_id", sort=False)["timestamp"].diff()
        df["session_no"] = (gaps.isna() | (gaps > timeout)).cumsum()

        sessions_by_visitor: dict[str, list[Session]] = {}
        for (visitor_id, _), group in df.groupby(
            ["visitor_id", "session_no"], sort=False
        ):
            session = Session(
                visitor_id=visitor_id,
                start_time=group["timestamp"].iloc[0],
                end_time=group["timestamp"].iloc[-1],
                page_count=len(group),
                paths=group["path"].tolist(),
            )
            sessions_by_visitor.setdefault(visitor_id, []).append(session)

        result = SessionReconstruction(
            sessions_by_visitor=sessions_by_visitor,
            stats=compute_session_stats(
                [s for group in sessions_by_visitor.values() for s in group]
            ),
            skipped_entries=skipped,
        )

        logger.info(
            f"Reconstructed {result.stats.total:,} sessions "
            f"for {len(sessions_by_visitor):,} visitors"
        )
        return result
