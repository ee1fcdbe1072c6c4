"""
Unit tests for visitor session reconstruction.

Tests the 30-minute inactivity timeout that splits each visitor's
events into sessions, and the aggregate session statistics.
"""

from datetime import datetime, timedelta, timezone

import pandas as pd
import pytest

from traffic_analytics.config.constants import SESSION_TIMEOUT_MS
from traffic_analytics.sessions.reconstructor import (
    Session,
    SessionReconstructor,
    compute_session_stats,
)
from traffic_analytics.utils.fingerprint import create_fingerprint

BASE_TIME = datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)


def _iso(offset: timedelta) -> str:
    return (BASE_TIME + offset).isoformat()


@pytest.fixture
def reconstructor() -> SessionReconstructor:
    return SessionReconstructor()


class TestSessionTimeoutConstant:
    """Tests for the SESSION_TIMEOUT_MS constant."""

    def test_timeout_is_30_minutes(self):
        """Sessions should time out after 30 minutes of inactivity."""
        assert SESSION_TIMEOUT_MS == 30 * 60 * 1000


class TestReconstruct:
    """Tests for SessionReconstructor.reconstruct."""

    def test_gap_over_timeout_splits_session(self, reconstructor, make_entry):
        """Events at 0, 10 and 45 minutes should form two sessions."""
        entries = [
            make_entry(timestamp=_iso(timedelta(minutes=0)), path="/"),
            make_entry(timestamp=_iso(timedelta(minutes=10)), path="/about"),
            make_entry(timestamp=_iso(timedelta(minutes=45)), path="/contact"),
        ]

        result = reconstructor.reconstruct(entries)
        sessions = result.sessions

        assert len(sessions) == 2
        assert sessions[0].page_count == 2
        assert sessions[0].duration_ms == 10 * 60 * 1000
        assert sessions[0].paths == ["/", "/about"]
        assert sessions[1].page_count == 1
        assert sessions[1].duration_ms == 0
        assert result.stats.total == 2
        assert result.stats.bounce_rate == 50.0

    def test_single_event_is_bounce(self, reconstructor, make_entry):
        """One event should give one zero-length, one-page session."""
        result = reconstructor.reconstruct([make_entry()])

        assert len(result.sessions) == 1
        assert result.sessions[0].duration_ms == 0
        assert result.sessions[0].page_count == 1
        assert result.stats.bounce_rate == 100.0

    def test_gap_equal_to_timeout_stays_in_session(self, reconstructor, make_entry):
        """Only a gap strictly greater than the timeout splits."""
        entries = [
            make_entry(timestamp=_iso(timedelta(0))),
            make_entry(timestamp=_iso(timedelta(minutes=30))),
        ]
        assert len(reconstructor.reconstruct(entries).sessions) == 1

    def test_gap_just_over_timeout_splits(self, reconstructor, make_entry):
        """A gap of 30 minutes and 1 millisecond should split."""
        entries = [
            make_entry(timestamp=_iso(timedelta(0))),
            make_entry(timestamp=_iso(timedelta(minutes=30, milliseconds=1))),
        ]
        assert len(reconstructor.reconstruct(entries).sessions) == 2

    def test_identical_timestamps_share_session(self, reconstructor, make_entry):
        """Repeated page loads at the same instant should not split."""
        entries = [make_entry(), make_entry(), make_entry()]
        result = reconstructor.reconstruct(entries)

        assert len(result.sessions) == 1
        assert result.sessions[0].page_count == 3

    def test_unordered_input_is_sorted(self, reconstructor, make_entry):
        """Events should be ordered by timestamp before splitting."""
        entries = [
            make_entry(timestamp=_iso(timedelta(minutes=20)), path="/c"),
            make_entry(timestamp=_iso(timedelta(minutes=0)), path="/a"),
            make_entry(timestamp=_iso(timedelta(minutes=10)), path="/b"),
        ]

        result = reconstructor.reconstruct(entries)

        assert len(result.sessions) == 1
        assert result.sessions[0].paths == ["/a", "/b", "/c"]
        assert result.sessions[0].duration_ms == 20 * 60 * 1000

    def test_visitors_are_grouped_by_fingerprint(
        self, reconstructor, make_entry, chrome_ua, firefox_ua
    ):
        """Interleaved events of two visitors should not merge."""
        entries = [
            make_entry(timestamp=_iso(timedelta(minutes=0)), userAgent=chrome_ua),
            make_entry(timestamp=_iso(timedelta(minutes=1)), userAgent=firefox_ua),
            make_entry(timestamp=_iso(timedelta(minutes=2)), userAgent=chrome_ua),
        ]

        result = reconstructor.reconstruct(entries)
        chrome_id = create_fingerprint("192.168.1.1", chrome_ua)
        firefox_id = create_fingerprint("192.168.1.1", firefox_ua)

        assert set(result.sessions_by_visitor) == {chrome_id, firefox_id}
        assert result.sessions_by_visitor[chrome_id][0].page_count == 2
        assert result.sessions_by_visitor[firefox_id][0].page_count == 1
        assert result.stats.total == 2

    def test_mixed_timezone_offsets(self, reconstructor, make_entry):
        """Timestamps should be compared as absolute instants."""
        entries = [
            make_entry(timestamp="2024-01-15T10:00:00+00:00"),
            make_entry(timestamp="2024-01-15T12:10:00+02:00"),
        ]

        result = reconstructor.reconstruct(entries)

        assert len(result.sessions) == 1
        assert result.sessions[0].duration_ms == 10 * 60 * 1000

    def test_bad_timestamps_are_skipped(self, reconstructor, make_entry):
        """Unparseable timestamps should be skipped, not fail the batch."""
        entries = [
            make_entry(),
            make_entry(timestamp="not-a-date"),
            make_entry(timestamp=None),
        ]

        result = reconstructor.reconstruct(entries)

        assert result.skipped_entries == 2
        assert len(result.sessions) == 1

    def test_empty_input(self, reconstructor):
        """No entries should give zeroed stats."""
        result = reconstructor.reconstruct([])

        assert result.sessions == []
        assert result.stats.total == 0
        assert result.stats.avg_duration_ms == 0.0
        assert result.stats.bounce_rate == 0.0

    def test_custom_timeout(self, make_entry):
        """A shorter timeout should split sooner."""
        entries = [
            make_entry(timestamp=_iso(timedelta(0))),
            make_entry(timestamp=_iso(timedelta(minutes=6))),
        ]
        result = SessionReconstructor(timeout_ms=5 * 60 * 1000).reconstruct(entries)
        assert len(result.sessions) == 2


class TestComputeSessionStats:
    """Tests for compute_session_stats."""

    def _session(self, page_count: int, minutes: int = 0) -> Session:
        start = pd.Timestamp("2024-01-15T10:00:00Z")
        return Session(
            visitor_id="visitor",
            start_time=start,
            end_time=start + pd.Timedelta(minutes=minutes),
            page_count=page_count,
        )

    def test_bounce_rate(self):
        """Page counts [1, 1, 3] should give a 66.67% bounce rate."""
        stats = compute_session_stats(
            [self._session(1), self._session(1), self._session(3, minutes=6)]
        )

        assert stats.total == 3
        assert stats.bounce_rate == 66.67
        assert stats.avg_pages_per_session == 1.67
        assert stats.avg_duration_ms == 2 * 60 * 1000
        assert stats.avg_duration_formatted == "2m 0s"

    def test_no_sessions(self):
        """An empty list should give zero averages, not NaN."""
        stats = compute_session_stats([])

        assert stats.total == 0
        assert stats.avg_duration_ms == 0.0
        assert stats.avg_pages_per_session == 0.0
        assert stats.bounce_rate == 0.0

    def test_session_to_dict(self):
        """Session.to_dict should render ISO timestamps."""
        data = self._session(2, minutes=5).to_dict()

        assert data["start_time"] == "2024-01-15T10:00:00.000Z"
        assert data["end_time"] == "2024-01-15T10:05:00.000Z"
        assert data["duration_ms"] == 300000
        assert data["page_count"] == 2
