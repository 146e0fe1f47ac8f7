"""Log store: tagged record lines on top of a line log.

Each line is a one-character tag (``E`` live, ``D`` tombstone) immediately
followed by the encoded record.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from ..core.errors import DeserializeError
from ..core.types import LogEntry, Record, Tag

if TYPE_CHECKING:
    from ..interfaces.codec import RecordCodec
    from ..interfaces.linelog import LineLog

logger = logging.getLogger(__name__)

_TAGS = {tag.value: tag for tag in Tag}


class LogStore:
    """Owns the on-disk representation of the record log.

    Args:
        log: Line-oriented resource holding the log
        codec: Payload serializer

    Public API:
        - iter_entries(): Every entry, tombstones included
        - read_all(): Live records in file order
        - append(record): Append one live entry
        - rewrite(entries): Replace the whole log
        - compact(): Physically drop tombstones

    Invariants:
        - Entry order is file order
        - A scan either returns every live record or raises
    """

    def __init__(self, log: LineLog, codec: RecordCodec):
        self.log = log
        self.codec = codec

    @property
    def path(self) -> str:
        return self.log.path

    def format_entry(self, entry: LogEntry) -> str:
        return f"{entry.tag.value}{self.codec.encode(entry.record)}"

    def parse_line(self, line: str, line_number: int) -> LogEntry:
        """Parse one raw line into a LogEntry.

        Raises:
            DeserializeError: On an unknown tag or an undecodable payload
        """
        tag = _TAGS.get(line[:1])
        if tag is None:
            raise DeserializeError("Unknown entry tag", self.path, line_number, line)
        try:
            record = self.codec.decode(line[1:])
        except ValueError as e:
            raise DeserializeError(f"Invalid record payload: {e}", self.path, line_number, line) from e
        return LogEntry(tag, record)

    def iter_entries(self) -> Iterator[LogEntry]:
        """Yield every entry in file order, skipping blank lines."""
        for line_number, line in enumerate(self.log.iter_lines(), start=1):
            if not line.strip():
                continue
            yield self.parse_line(line, line_number)

    def read_all(self) -> list[Record]:
        """Return all live records in file order.

        The result is built completely before returning, so a bad line
        anywhere aborts the scan with no partial result.
        """
        records = [entry.record for entry in self.iter_entries() if entry.live]
        logger.debug(f"Read {len(records)} live records from {self.path}")
        return records

    def append(self, record: Record) -> None:
        """Append ``record`` as a live entry."""
        self.log.append_line(self.format_entry(LogEntry(Tag.EXISTING, record)))

    def rewrite(self, entries: Iterable[LogEntry]) -> int:
        """Replace the log with ``entries``; returns the number written."""
        # Encode everything first so a serialize failure leaves the log intact
        lines = [self.format_entry(entry) for entry in entries]
        self.log.replace_lines(lines)
        return len(lines)

    def compact(self) -> int:
        """Rewrite the log without tombstones; returns lines dropped."""
        entries = list(self.iter_entries())
        live = [entry for entry in entries if entry.live]
        self.rewrite(live)
        dropped = len(entries) - len(live)
        logger.info(f"Compacted {self.path}: dropped {dropped} tombstones, kept {len(live)}")
        return dropped
