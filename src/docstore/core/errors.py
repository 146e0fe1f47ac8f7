"""Exception hierarchy for the document store.

Defines all custom exceptions used throughout the implementation.
"""

from __future__ import annotations

from typing import Any


class DocStoreError(Exception):
    """Base exception for all document store errors."""
    pass


class StorageIOError(DocStoreError):
    """Raised when the log file cannot be read or written."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class DeserializeError(DocStoreError):
    """Raised when a log line cannot be parsed into a record.

    Carries the file path, the 1-based line number and the offending line.
    """

    def __init__(self, message: str, path: str, line_number: int, line: str):
        super().__init__(f"{message} ({path}:{line_number}: {line!r})")
        self.path = path
        self.line_number = line_number
        self.line = line


class SerializeError(DocStoreError):
    """Raised when a record cannot be encoded for storage."""
    pass


class InvalidQueryError(DocStoreError):
    """Raised when a query, criterion or find option has no valid shape."""

    def __init__(self, message: str, fragment: Any = None):
        super().__init__(f"{message}: {fragment!r}")
        self.fragment = fragment
