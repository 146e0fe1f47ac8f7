"""JSON payload codec for log lines."""

from __future__ import annotations

import json
from collections.abc import Mapping

from ..core.errors import SerializeError
from ..core.types import Record


class JsonRecordCodec:
    """Compact single-line JSON encoding of records.

    JSON escapes newlines inside strings, so every payload fits on one line.
    """

    def encode(self, record: Record) -> str:
        if not isinstance(record, Mapping):
            raise SerializeError(f"record must be a mapping, got {type(record).__name__}")
        try:
            return json.dumps(dict(record), ensure_ascii=False, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as e:
            raise SerializeError(f"Failed to serialize record: {e}") from e

    def decode(self, payload: str) -> Record:
        try:
            record = json.loads(payload)
        except RecursionError as e:
            raise ValueError("payload is nested too deeply") from e
        if not isinstance(record, dict):
            raise ValueError(f"payload is a JSON {type(record).__name__}, not an object")
        return record
