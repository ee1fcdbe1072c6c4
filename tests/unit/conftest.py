"""
Pytest configuration and shared fixtures for unit tests.
"""

import pytest

CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
FIREFOX_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0"
)
IPHONE_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1"
)
GOOGLEBOT_UA = "Googlebot/2.1 (+http://www.google.com/bot.html)"


@pytest.fixture
def chrome_ua() -> str:
    return CHROME_UA


@pytest.fixture
def firefox_ua() -> str:
    return FIREFOX_UA


@pytest.fixture
def iphone_ua() -> str:
    return IPHONE_UA


@pytest.fixture
def make_entry():
    """Factory for LogEntry dictionaries with sensible defaults."""

    def _make_entry(**overrides) -> dict:
        entry = {
            "timestamp": "2024-01-15T10:00:00Z",
            "ip": "192.168.1.1",
            "userAgent": CHROME_UA,
            "path": "/",
        }
        entry.update(overrides)
        return entry

    return _make_entry
