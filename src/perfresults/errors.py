"""Exceptions raised by perfresults.

Every message names the offending path or value so a failure can be traced
back to its input without re-running anything.
"""

from __future__ import annotations


class PerfResultsError(Exception):
    """Base exception for perfresults errors."""

    pass


class NotFoundError(PerfResultsError):
    """Raised when a required file or directory does not exist."""

    pass


class FormatError(PerfResultsError):
    """Raised when content exists but violates a structural invariant."""

    pass


class MalformedDocumentError(FormatError):
    """Raised when a statistics document lacks a required node or field."""

    pass


class ParseError(PerfResultsError):
    """Raised when content is not well-formed in its declared format."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class QueryError(PerfResultsError):
    """Raised when the results warehouse cannot be queried."""

    pass
