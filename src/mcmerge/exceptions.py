from pathlib import Path


class McMergeError(Exception):
    """Base exception for all expected mcmerge errors."""

    message: str
    exit_code: int

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class HistoryFormatError(McMergeError):
    """A history file could not be decoded."""

    path: str
    line_number: int

    def __init__(self, reason: str, path: str | Path = "<stream>", line_number: int = 0):
        location = f"{path}:{line_number}" if line_number else str(path)
        super().__init__(f"{location}: {reason}")
        self.reason = reason
        self.path = str(path)
        self.line_number = line_number


class MalformedHeaderError(HistoryFormatError):
    """Header line does not split into kind, timestamp and line count."""


class TruncatedRecordError(HistoryFormatError):
    """Stream ended before all declared continuation lines were read."""


class UnsortedHistoryError(McMergeError):
    """Merge input was not in chronological order."""


class StoreError(McMergeError):
    """Store path missing, of the wrong kind, or overlapping with the output."""


class InvalidInputError(McMergeError):
    """User input validation errors."""


class ConfigurationError(McMergeError):
    """Configuration related errors (env vars)."""
