"""
Timestamp parsing for log entries.
"""

import logging
from typing import Any, Optional

import pandas as pd

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse an ISO-8601 timestamp as an absolute UTC instant.

    Naive timestamps are taken as UTC. Malformed or missing values return
    None instead of raising, so one bad record never aborts a batch.

    Args:
        value: Timestamp string (e.g., "2024-01-15T10:00:00Z")

    Returns:
        Timezone-aware pandas Timestamp in UTC, or None
    """
    if value is None or value == "":
        return None

    try:
        parsed = pd.to_datetime(value, utc=True)
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Unparseable timestamp {value!r}: {e}")
        return None

    if not isinstance(parsed, pd.Timestamp) or pd.isna(parsed):
        return None
    return parsed


def to_iso(ts: pd.Timestamp) -> str:
    """Render a UTC timestamp as an ISO-8601 string with a Z suffix."""
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"
