"""Document store implementation - main public API.

Composes the log store with the read pipeline.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from ..components.codec import JsonRecordCodec
from ..components.linelog import FileLineLog
from ..components.log_store import LogStore
from ..components.pipeline import Filter, FindOptions, run_pipeline
from .config import StoreConfig
from .types import LogEntry, Record, Tag

if TYPE_CHECKING:
    from ..components.query import Query
    from ..interfaces.codec import RecordCodec
    from ..interfaces.linelog import LineLog

logger = logging.getLogger(__name__)


def identity_key(value: Any) -> Any:
    """Hashable key under which strictly-equal identifiers collide.

    Containers are keyed element by element, so ``[1]`` and ``[1.0]`` share
    a key just as ``1`` and ``1.0`` do.
    """
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, (int, float)):
        return ("number", value)
    if isinstance(value, str):
        return ("str", value)
    if value is None:
        return ("null",)
    if isinstance(value, Mapping):
        return ("object", frozenset((name, identity_key(item)) for name, item in value.items()))
    if isinstance(value, (list, tuple)):
        return ("list", tuple(identity_key(item) for item in value))
    return ("other", repr(value))


def plan_delete(records: Sequence[Record], query: Query | Mapping[str, Any] | None, config: StoreConfig) -> tuple[list[LogEntry], int]:
    """Tag every live record for the rewrite that implements ``delete``.

    A record is tombstoned if it matches ``query`` or shares its identifier
    with a record that does. Returns the entries and the tombstone count.
    """
    matched = Filter(records, query, config.full_text_fields).get()
    matched_refs = {id(record) for record in matched}
    matched_ids = {
        identity_key(record[config.id_field]) for record in matched if config.id_field in record
    }

    entries: list[LogEntry] = []
    deleted = 0
    for record in records:
        doomed = id(record) in matched_refs or (
            config.id_field in record and identity_key(record[config.id_field]) in matched_ids
        )
        if doomed:
            deleted += 1
        entries.append(LogEntry(Tag.DELETED if doomed else Tag.EXISTING, record))
    return entries, deleted


class SimpleDocumentStore:
    """Embedded document store backed by a tagged append-only log.

    Args:
        config: Store configuration
        log: Line resource to use instead of the configured file
        codec: Payload codec to use instead of JSON

    Public API:
        - find(query, options): Filter, then sort, then project
        - find_one(query, options): First result or None
        - count(query): Number of matching live records
        - read_all(): All live records
        - insert(record): Append a live record
        - delete(query): Tombstone matching records via full rewrite
        - compact(): Drop tombstone lines

    Invariants:
        - No state beyond configuration; every call re-scans the log
        - Writers are serialized by a lock
    """

    def __init__(self, config: StoreConfig, log: LineLog | None = None, codec: RecordCodec | None = None):
        self.config = config
        self._lock = threading.Lock()

        if log is None:
            log = FileLineLog(
                config.path,
                encoding=config.encoding,
                fsync=config.fsync_writes,
                atomic_replace=config.atomic_rewrite,
            )
        self._log_store = LogStore(log, codec or JsonRecordCodec())

        if config.create_if_missing:
            log.ensure_exists()

        logger.info(f"Initialized document store at {config.path}")

    @property
    def log_store(self) -> LogStore:
        return self._log_store

    def read_all(self) -> list[Record]:
        """Return every live record in log order."""
        return self._log_store.read_all()

    def find(self, query: Query | Mapping[str, Any] | None = None, options: FindOptions | Mapping[str, Any] | None = None) -> list[Record]:
        """Return live records matching ``query``.

        With a projection the result holds partial records.
        """
        return run_pipeline(self.read_all(), query, options, self.config.full_text_fields)

    def find_one(self, query: Query | Mapping[str, Any] | None = None, options: FindOptions | Mapping[str, Any] | None = None) -> Record | None:
        results = self.find(query, options)
        return results[0] if results else None

    def count(self, query: Query | Mapping[str, Any] | None = None) -> int:
        return len(self.find(query))

    def insert(self, record: Record) -> None:
        """Append ``record`` as a live entry. Identifiers are not de-duplicated."""
        with self._lock:
            self._log_store.append(record)

    def delete(self, query: Query | Mapping[str, Any] | None) -> int:
        """Tombstone every live record matching ``query``.

        Rewrites the whole log: matches become ``D`` lines, other live records
        stay ``E``, and previously tombstoned lines are dropped.

        Returns:
            Number of records tombstoned
        """
        with self._lock:
            records = self._log_store.read_all()
            entries, deleted = plan_delete(records, query, self.config)
            self._log_store.rewrite(entries)

        logger.info(f"Deleted {deleted} of {len(records)} records from {self.config.path}")
        return deleted

    def compact(self) -> int:
        """Physically remove tombstone lines; returns how many were dropped."""
        with self._lock:
            return self._log_store.compact()

    def close(self) -> None:
        """Close store. The log holds no open handles between calls."""
        logger.info(f"Closing document store at {self.config.path}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
