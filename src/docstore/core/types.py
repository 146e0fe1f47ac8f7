"""Common type definitions for the document store.

Defines the record shape and the physical log entry used across components.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

# Values a record field may hold (exactly what the JSON codec round-trips)
Value = Union[str, int, float, bool, None, list, dict]
Record = dict[str, Value]
FieldName = str


class _Missing:
    """Marker for a field that is absent on a record."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class Tag(str, Enum):
    """One-character marker at the start of every log line."""

    EXISTING = "E"
    DELETED = "D"


@dataclass(frozen=True)
class LogEntry:
    """One physical line of the log: a tag plus the record payload."""

    tag: Tag
    record: Record

    @property
    def live(self) -> bool:
        return self.tag is Tag.EXISTING
