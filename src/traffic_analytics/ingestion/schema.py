"""
Field access for LogEntry records.

Log entries arrive as JSON-decoded mappings. Loaders emit camelCase keys
(``userAgent``, ``referer``), but snake_case aliases are accepted too.
"""

from typing import Any, Mapping, Optional

# Logical field -> accepted keys, checked in order; first non-empty value wins
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "timestamp": ("timestamp",),
    "ip": ("ip",),
    "user_agent": ("userAgent", "user_agent"),
    "path": ("path", "url"),
    "referrer": ("referer", "referrer"),
    "country": ("country",),
    "city": ("city",),
    "session": ("session",),
}


def get_field(entry: Mapping[str, Any], name: str) -> Optional[Any]:
    """
    Get a logical field from a log entry.

    Args:
        entry: LogEntry mapping
        name: Logical field name (key of FIELD_ALIASES)

    Returns:
        The first non-empty value among the field's aliases, or None

    Examples:
        >>> get_field({"url": "/about"}, "path")
        '/about'
        >>> get_field({"path": "", "url": "/about"}, "path")
        '/about'
    """
    for key in FIELD_ALIASES.get(name, (name,)):
        value = entry.get(key)
        if value not in (None, ""):
            return value
    return None
