"""
Shared fixtures for integration tests.

Provides:
- Sample log entry generator with a seeded mix of human and bot traffic
- Pipeline fixtures
"""

import random
from datetime import datetime, timedelta, timezone

import pytest

from traffic_analytics.classification import LogPartitioner
from traffic_analytics.pipeline import AnalyticsReconstructor
from traffic_analytics.utils.user_agent import legitimate_user_agents

# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

BOT_USER_AGENTS = [
    "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)",
    "Mozilla/5.0 (compatible; bingbot/2.0; +http://www.bing.com/bingbot.htm)",
    "curl/8.4.0",
    "python-requests/2.31.0",
]

PATHS = ["/", "/blog", "/blog/post-1", "/about", "/pricing?plan=pro"]
REFERERS = [None, "https://www.google.com/", "https://news.ycombinator.com/item"]
LOCATIONS = [("US", "New York"), ("DE", "Berlin"), ("NL", "Amsterdam"), (None, None)]


def generate_sample_entries(
    num_visitors: int = 20,
    bot_entries: int = 10,
    start: datetime = datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc),
    seed: int = 42,
) -> list[dict]:
    """
    Generate sample access-log entries for testing.

    Args:
        num_visitors: Number of human visitors
        bot_entries: Number of entries from bot user-agents
        start: Earliest timestamp
        seed: Random seed for reproducibility (default: 42)

    Returns:
        List of LogEntry dictionaries, in timestamp order
    """
    rng = random.Random(seed)
    user_agents = legitimate_user_agents()
    entries = []

    for visitor in range(num_visitors):
        ip = f"10.0.{visitor // 250}.{visitor % 250 + 1}"
        user_agent = rng.choice(user_agents)
        country, city = rng.choice(LOCATIONS)
        ts = start + timedelta(minutes=rng.randint(0, 48 * 60))

        for _ in range(rng.randint(1, 6)):
            entry = {
                "timestamp": ts.isoformat().replace("+00:00", "Z"),
                "ip": ip,
                "userAgent": user_agent,
                "path": rng.choice(PATHS),
            }
            referer = rng.choice(REFERERS)
            if referer:
                entry["referer"] = referer
            if country:
                entry["country"] = country
                entry["city"] = city
            entries.append(entry)
            ts += timedelta(minutes=rng.choice([1, 2, 5, 45]))

    for _ in range(bot_entries):
        ts = start + timedelta(minutes=rng.randint(0, 48 * 60))
        entries.append(
            {
                "timestamp": ts.isoformat().replace("+00:00", "Z"),
                "ip": f"66.249.66.{rng.randint(1, 254)}",
                "userAgent": rng.choice(BOT_USER_AGENTS),
                "path": rng.choice(PATHS),
            }
        )

    entries.sort(key=lambda e: e["timestamp"])
    return entries


@pytest.fixture
def sample_entries() -> list[dict]:
    """Seeded mix of human and bot entries."""
    return generate_sample_entries()


# =============================================================================
# PIPELINE FIXTURES
# =============================================================================


@pytest.fixture
def reconstructor() -> AnalyticsReconstructor:
    """Analytics reconstructor with default bot filtering."""
    return AnalyticsReconstructor(partitioner=LogPartitioner())
