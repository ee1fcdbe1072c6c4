"""
Visitor fingerprinting.

Derives a stable pseudonymous visitor identifier from IP + user-agent.
"""

import hashlib
from typing import Optional

from ..config.constants import UNKNOWN_IDENTITY


def create_fingerprint(ip: Optional[str], user_agent: Optional[str]) -> str:
    """
    Create a visitor fingerprint from IP address and user-agent.

    The digest is an MD5 hex string of ``"{ip}|{user_agent}"``, with
    ``"unknown"`` substituted for a missing or empty field. No salt is
    applied, so the same inputs give the same fingerprint across runs.

    Args:
        ip: Client IP address
        user_agent: The HTTP User-Agent header value

    Returns:
        32-character hex digest

    Examples:
        >>> create_fingerprint(None, None) == create_fingerprint("", "")
        True
    """
    combined = f"{ip or UNKNOWN_IDENTITY}|{user_agent or UNKNOWN_IDENTITY}"
    return hashlib.md5(combined.encode("utf-8"), usedforsecurity=False).hexdigest()
