"""Exception types raised while building a usage index."""

from __future__ import annotations


class UsageIndexError(Exception):
    """Base exception for fatal usage index errors"""


class InputNotFound(UsageIndexError):
    """Report file or examples root is missing or unreadable"""


class MalformedReport(UsageIndexError):
    """API report has no function block or a record header is unparsable"""

    def __init__(self, message: str, line_number: int | None = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class FileUnreadable(UsageIndexError):
    """A single example file could not be read; callers skip it"""


class OutputUnwritable(UsageIndexError):
    """Usage index output file could not be written"""
