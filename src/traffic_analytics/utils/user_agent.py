"""
Device and browser detection from user-agent strings.

Categories are decided by ordered substring tests; the first matching
category wins.
"""

import re
from typing import Optional

# Device categories, in priority order
_DEVICE_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("mobile", re.compile(r"mobile|android|iphone|ipod|blackberry|iemobile", re.I)),
    ("tablet", re.compile(r"tablet|ipad", re.I)),
    ("desktop", re.compile(r"mozilla|chrome|safari|firefox|opera|edge", re.I)),
]

# Browser families, in priority order (Edge and Opera UAs also contain "Chrome")
_BROWSER_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("Edge", re.compile(r"edg", re.I)),
    ("Opera", re.compile(r"opera|opr/", re.I)),
    ("Chrome", re.compile(r"chrome", re.I)),
    ("Firefox", re.compile(r"firefox", re.I)),
    ("Safari", re.compile(r"safari", re.I)),
    ("Internet Explorer", re.compile(r"msie|trident", re.I)),
]

DEVICE_TYPES = ["mobile", "tablet", "desktop", "unknown"]


def detect_device(user_agent: Optional[str]) -> str:
    """
    Classify the device type of a user-agent.

    Args:
        user_agent: The HTTP User-Agent header value

    Returns:
        One of 'mobile', 'tablet', 'desktop', 'unknown'

    Examples:
        >>> detect_device("Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X)")
        'mobile'
        >>> detect_device("Mozilla/5.0 (iPad; CPU OS 17_1 like Mac OS X)")
        'tablet'
        >>> detect_device("")
        'unknown'
    """
    if not user_agent:
        return "unknown"

    for device, pattern in _DEVICE_PATTERNS:
        if pattern.search(user_agent):
            return device
    return "unknown"


def detect_browser(user_agent: Optional[str]) -> str:
    """
    Classify the browser family of a user-agent.

    Args:
        user_agent: The HTTP User-Agent header value

    Returns:
        Browser name, or 'Unknown'
    """
    if not user_agent:
        return "Unknown"

    for browser, pattern in _BROWSER_PATTERNS:
        if pattern.search(user_agent):
            return browser
    return "Unknown"


def legitimate_user_agents() -> list[str]:
    """Common human browser user-agents, for tests and sample data."""
    return [
        # Chrome
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        # Firefox
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:121.0) Gecko/20100101 Firefox/121.0",
        # Safari
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15",
        # Edge
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.0.0",
        # Mobile
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1",
        "Mozilla/5.0 (Linux; Android 14) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.6099.43 Mobile Safari/537.36",
    ]
