"""Utility functions for traffic analytics."""

from .fingerprint import create_fingerprint
from .stats import format_duration, mean, percentage, safe_ratio
from .timestamps import parse_timestamp, to_iso
from .url_utils import extract_referrer_host, normalize_path
from .user_agent import detect_browser, detect_device, legitimate_user_agents

__all__ = [
    # Visitor identity
    "create_fingerprint",
    # Ratios
    "safe_ratio",
    "percentage",
    "mean",
    "format_duration",
    # Timestamps
    "parse_timestamp",
    "to_iso",
    # URL utilities
    "normalize_path",
    "extract_referrer_host",
    # User-agent utilities
    "detect_device",
    "detect_browser",
    "legitimate_user_agents",
]
