"""
Exceptions raised while loading access-log files.
"""


class IngestionError(Exception):
    """Base class for log loading errors."""

    pass


class ParseError(IngestionError):
    """
    Raised when a log file cannot be decoded.

    Attributes:
        message: What went wrong
        line_number: Line or record number, when known
        line_content: Offending line, when known
    """

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        line_content: str | None = None,
    ):
        self.message = message
        self.line_number = line_number
        self.line_content = line_content
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.line_number is None:
            return self.message
        if not self.line_content:
            return f"{self.message} (line {self.line_number})"
        snippet = self.line_content
        if len(snippet) > 80:
            snippet = snippet[:80] + "..."
        return f"{self.message} (line {self.line_number}: {snippet!r})"


class RecordTypeError(ParseError):
    """
    Raised when a decoded record is not a JSON object.

    Attributes:
        type_name: JSON type that was found instead
    """

    def __init__(self, record_number: int, type_name: str):
        self.type_name = type_name
        super().__init__(
            f"Record is a {type_name}, expected a JSON object",
            line_number=record_number,
        )
