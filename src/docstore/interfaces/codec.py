"""Protocol definition for record payload encoding."""

from __future__ import annotations

from typing import Protocol

from ..core.types import Record


class RecordCodec(Protocol):
    """Serialize/deserialize pair for the payload that follows a log tag."""

    def encode(self, record: Record) -> str:
        """Return a single-line text payload for ``record``.

        Raises:
            SerializeError: If the record cannot be represented
        """
        ...

    def decode(self, payload: str) -> Record:
        """Parse a payload back into a record.

        Raises:
            ValueError: If the payload is not a valid record
        """
        ...
