"""
Log entry loader for JSON and NDJSON files.

Accepts:
- JSON array of entry objects
- JSON object wrapping the array under "entries" or "logs"
- NDJSON (one JSON object per line)

Supports gzip-compressed files.
"""

import gzip
import json
import logging
from pathlib import Path
from typing import IO, Any, Iterator, Union

from .exceptions import ParseError, RecordTypeError

logger = logging.getLogger(__name__)

# Keys under which a wrapping object may hold the entry array
_WRAPPER_KEYS = ("entries", "logs")

_NDJSON_SUFFIXES = {".ndjson", ".jsonl"}

_GZIP_MAGIC = b"\x1f\x8b"


def _open_log_file(path: Path) -> IO[str]:
    """Open a log file as UTF-8 text, gunzipping on the gzip magic bytes."""
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")

    with open(path, "rb") as f:
        compressed = f.read(2) == _GZIP_MAGIC

    if compressed:
        return gzip.open(path, "rt", encoding="utf-8")
    return open(path, "r", encoding="utf-8")


class LogEntryLoader:
    """
    Loads LogEntry mappings from disk.

    Usage:
        loader = LogEntryLoader()
        entries = loader.load(Path("access-logs.json"))
    """

    def __init__(self, strict_validation: bool = False):
        """
        Initialize loader.

        Args:
            strict_validation: If True, raise on records that are not objects
                instead of skipping them
        """
        self.strict_validation = strict_validation

    def load(self, file_path: Union[str, Path]) -> list[dict[str, Any]]:
        """
        Load all entries from a file.

        Args:
            file_path: Path to a .json, .ndjson or .jsonl file (optionally .gz)

        Returns:
            List of entry dictionaries

        Raises:
            FileNotFoundError: If file doesn't exist
            ParseError: If the file is not valid JSON/NDJSON
        """
        path = Path(file_path)
        suffixes = {s.lower() for s in path.suffixes}

        with _open_log_file(path) as f:
            if suffixes & _NDJSON_SUFFIXES:
                entries = list(self._iter_ndjson(f))
            else:
                entries = list(self._iter_json(f))

        logger.info(f"Loaded {len(entries):,} log entries from {path}")
        return entries

    def _iter_json(self, file_handle) -> Iterator[dict[str, Any]]:
        try:
            data = json.load(file_handle)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON file: {e}") from e

        if isinstance(data, dict):
            for key in _WRAPPER_KEYS:
                if isinstance(data.get(key), list):
                    data = data[key]
                    break
            else:
                data = [data]

        if not isinstance(data, list):
            raise ParseError(
                f"Expected JSON object or array, got {type(data).__name__}"
            )

        for idx, obj in enumerate(data):
            record = self._check_record(obj, idx + 1)
            if record is not None:
                yield record

    def _iter_ndjson(self, file_handle) -> Iterator[dict[str, Any]]:
        for line_number, line in enumerate(file_handle, start=1):
            line = line.strip()
            if not line:
                continue

            try:
                obj = json.loads(line)
            except json.JSONDecodeError as e:
                if self.strict_validation:
                    raise ParseError(
                        f"Invalid JSON: {e}",
                        line_number=line_number,
                        line_content=line,
                    )
                logger.debug(f"Skipping invalid JSON at line {line_number}: {e}")
                continue

            record = self._check_record(obj, line_number)
            if record is not None:
                yield record

    def _check_record(self, obj: Any, record_number: int):
        """Return the record if it is an object, else skip or raise."""
        if isinstance(obj, dict):
            return obj

        error = RecordTypeError(record_number, type(obj).__name__)
        if self.strict_validation:
            raise error
        logger.debug(f"Skipping record {record_number}: {error}")
        return None


def load_log_entries(
    file_path: Union[str, Path], strict_validation: bool = False
) -> list[dict[str, Any]]:
    """Load log entries from a JSON/NDJSON file."""
    return LogEntryLoader(strict_validation=strict_validation).load(file_path)
