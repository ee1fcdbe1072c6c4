"""
Unit tests for splitting log entries into legitimate and bot traffic.
"""

import pytest

from traffic_analytics.classification.classifier import BotClassifier, DetectionMethod
from traffic_analytics.classification.partition import (
    BOT_DETECTION_KEY,
    LogPartitioner,
)


@pytest.fixture
def partitioner() -> LogPartitioner:
    return LogPartitioner()


@pytest.fixture
def mixed_entries(make_entry) -> list[dict]:
    return [
        make_entry(path="/"),
        make_entry(timestamp="2024-01-15T10:01:00Z", path="/about"),
        make_entry(
            timestamp="2024-01-15T10:02:00Z",
            userAgent="Googlebot/2.1",
            ip="66.249.64.1",
            path="/sitemap.xml",
        ),
    ]


class TestPartition:
    """Tests for LogPartitioner.partition."""

    def test_splits_bots_from_humans(self, partitioner, mixed_entries):
        """Googlebot should be separated from browser traffic."""
        result = partitioner.partition(mixed_entries)

        assert result.total == 3
        assert len(result.legitimate) == 2
        assert len(result.bots) == 1
        assert result.bots[0][BOT_DETECTION_KEY]["method"] == "user-agent"
        assert result.stats.detection_methods == {"user-agent": 1}
        assert result.stats.bot_percentage == 33.33

    def test_every_entry_lands_in_exactly_one_subset(self, partitioner, mixed_entries):
        """legitimate + bots should account for every input entry."""
        result = partitioner.partition(mixed_entries)
        assert len(result.legitimate) + len(result.bots) == len(mixed_entries)

    def test_stable_order_and_passthrough(self, partitioner, make_entry):
        """Legitimate entries should keep input order and identity."""
        entries = [
            make_entry(path="/one"),
            make_entry(userAgent="curl/8.0", path="/bot-one"),
            make_entry(path="/two"),
            make_entry(userAgent=None, path="/bot-two"),
            make_entry(path="/three"),
        ]

        result = partitioner.partition(entries)

        assert [e["path"] for e in result.legitimate] == ["/one", "/two", "/three"]
        assert result.legitimate[0] is entries[0]
        assert [e["path"] for e in result.bots] == ["/bot-one", "/bot-two"]

    def test_bot_entries_keep_original_fields(self, partitioner, mixed_entries):
        """Bot copies should add a verdict without touching input entries."""
        original = dict(mixed_entries[2])

        result = partitioner.partition(mixed_entries)
        bot = result.bots[0]

        assert {k: v for k, v in bot.items() if k != BOT_DETECTION_KEY} == original
        assert bot[BOT_DETECTION_KEY]["confidence"] == 95
        assert bot[BOT_DETECTION_KEY]["reasons"]
        assert BOT_DETECTION_KEY not in mixed_entries[2]

    def test_counts_each_detection_method(self, partitioner, make_entry):
        """detection_methods should tally bots per method."""
        entries = [
            make_entry(userAgent="Googlebot/2.1"),
            make_entry(userAgent="bingbot/2.0"),
            make_entry(ip="66.249.66.1"),
            make_entry(
                ip="10.0.0.1",
                session={"requestsPerMinute": 500, "duration": 100},
            ),
            make_entry(),
        ]

        result = partitioner.partition(entries)

        assert result.stats.detection_methods == {
            "user-agent": 2,
            "ip-range": 1,
            "behavioral": 1,
        }
        assert result.stats.bot_percentage == 80.0

    def test_empty_input(self, partitioner):
        """An empty batch should give 0% rather than NaN."""
        result = partitioner.partition([])

        assert result.total == 0
        assert result.legitimate == []
        assert result.bots == []
        assert result.stats.bot_percentage == 0.0
        assert result.stats.detection_methods == {}

    def test_to_dict(self, partitioner, mixed_entries):
        """to_dict should expose counts and stats for reporting."""
        data = partitioner.partition(mixed_entries).to_dict()

        assert data["total"] == 3
        assert len(data["legitimate"]) == 2
        assert data["stats"] == {
            "bot_percentage": 33.33,
            "detection_methods": {"user-agent": 1},
        }


class TestMalformedRecords:
    """One bad record should never sink the rest of the batch."""

    def test_non_mapping_headers(self, partitioner, mixed_entries, make_entry):
        """A string headers value should be treated as no headers."""
        entries = mixed_entries + [make_entry(session={"headers": "x"})]

        result = partitioner.partition(entries)

        assert result.total == 4
        assert len(result.legitimate) == 3
        assert result.legitimate[-1] is entries[-1]

    def test_numeric_strings_are_coerced(self, partitioner, make_entry):
        """A numeric string rate should still count toward the score."""
        entry = make_entry(session={"requestsPerMinute": "150"})

        verdict = partitioner.classify_entry(entry)

        assert verdict.method == DetectionMethod.BEHAVIORAL
        assert "Excessive request rate" in verdict.reasons

    def test_non_numeric_metrics_ignored(self, partitioner, make_entry):
        """Garbage metrics should not trigger their indicators or raise."""
        entry = make_entry(
            session={
                "requestsPerMinute": "lots",
                "duration": [1],
                "errorRate": {},
                "requestCount": "many",
                "hasJavaScript": True,
                "headers": {"acceptLanguage": "en"},
            }
        )

        assert partitioner.classify_entry(entry).is_bot is False

    def test_non_mapping_records_skipped(self, partitioner, make_entry):
        """Records that are not objects should be counted as skipped."""
        result = partitioner.partition([make_entry(), "junk", None])

        assert result.total == 1
        assert result.skipped == 2
        assert len(result.legitimate) == 1
        assert result.stats.bot_percentage == 0.0

    def test_failing_session_score_falls_back(self, make_entry):
        """A session that cannot be scored should be judged on UA and IP."""

        class SessionRejectingClassifier(BotClassifier):
            def check_behavior(self, request):
                if request.session is not None:
                    raise TypeError("unscorable session")
                return None

        partitioner = LogPartitioner(SessionRejectingClassifier())
        entries = [
            make_entry(session={"requestsPerMinute": 500}),
            make_entry(userAgent="Googlebot/2.1", session={"duration": 1}),
            make_entry(),
        ]

        result = partitioner.partition(entries)

        assert result.total == 3
        assert len(result.legitimate) == 2
        assert result.stats.detection_methods == {"user-agent": 1}
