"""
Zero-safe ratio helpers.

Every ratio, percentage and average in the analytics output goes through
these functions, so an empty denominator always yields 0.0.
"""

from typing import Iterable, Union

import numpy as np

Number = Union[int, float]


def safe_ratio(numerator: Number, denominator: Number) -> float:
    """Return numerator / denominator, or 0.0 when the denominator is zero."""
    if not denominator:
        return 0.0
    return float(numerator) / float(denominator)


def percentage(part: Number, whole: Number, digits: int = 2) -> float:
    """
    Percentage of part in whole, rounded.

    Examples:
        >>> percentage(2, 3)
        66.67
        >>> percentage(1, 0)
        0.0
    """
    return round(safe_ratio(part, whole) * 100, digits)


def mean(values: Iterable[Number]) -> float:
    """Arithmetic mean, 0.0 for an empty collection."""
    values = list(values)
    if not values:
        return 0.0
    return float(np.mean(values))


def format_duration(ms: Number) -> str:
    """
    Format a duration in milliseconds for display.

    Examples:
        >>> format_duration(3_900_000)
        '1h 5m'
        >>> format_duration(150_000)
        '2m 30s'
        >>> format_duration(45_000)
        '45s'
    """
    seconds = int(ms // 1000)
    minutes = seconds // 60
    hours = minutes // 60

    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"
