"""
Log ingestion module.

Loads LogEntry records from JSON/NDJSON files and resolves their fields.
"""

from .exceptions import IngestionError, ParseError, RecordTypeError
from .loader import LogEntryLoader, load_log_entries
from .schema import FIELD_ALIASES, get_field

__all__ = [
    # Exceptions
    "IngestionError",
    "ParseError",
    "RecordTypeError",
    # Loading
    "LogEntryLoader",
    "load_log_entries",
    # Field access
    "FIELD_ALIASES",
    "get_field",
]
