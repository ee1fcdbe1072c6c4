"""
URL utility functions.

Helpers for normalizing request paths and extracting referrer hosts
from access-log entries.
"""

import logging
from typing import Optional
from urllib.parse import urljoin, urlsplit

from ..config.constants import DIRECT_REFERRER

logger = logging.getLogger(__name__)

# Base used to resolve relative paths; only the path component is kept
_PLACEHOLDER_BASE = "http://placeholder.invalid"


def normalize_path(url: Optional[str]) -> str:
    """
    Normalize a request path or URL to its path component.

    Strips scheme, host, query string and fragment. Empty, missing or
    unparseable input maps to "/".

    Args:
        url: Path or full URL (e.g., "/blog?page=2", "https://example.com/about")

    Returns:
        Path component (e.g., "/blog", "/about")

    Examples:
        >>> normalize_path("/search?q=fonts")
        '/search'
        >>> normalize_path("https://example.com/about#team")
        '/about'
        >>> normalize_path(None)
        '/'
    """
    if not url or not isinstance(url, str):
        return "/"

    try:
        path = urlsplit(urljoin(_PLACEHOLDER_BASE, url.strip())).path
    except ValueError as e:
        logger.debug(f"Unparseable path {url!r}: {e}")
        return "/"

    return path or "/"


def extract_referrer_host(referrer: Optional[str]) -> str:
    """
    Extract the hostname from a referrer URL.

    Args:
        referrer: Referer header value

    Returns:
        Lower-cased hostname, or "Direct" when the referrer is missing
        or has no parseable host

    Examples:
        >>> extract_referrer_host("https://www.google.com/search?q=x")
        'www.google.com'
        >>> extract_referrer_host(None)
        'Direct'
        >>> extract_referrer_host("not a url")
        'Direct'
    """
    if not referrer or not isinstance(referrer, str) or referrer == DIRECT_REFERRER:
        return DIRECT_REFERRER

    try:
        hostname = urlsplit(referrer.strip()).hostname
    except ValueError as e:
        logger.debug(f"Unparseable referrer {referrer!r}: {e}")
        return DIRECT_REFERRER

    return hostname or DIRECT_REFERRER
