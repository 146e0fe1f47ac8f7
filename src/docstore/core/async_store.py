"""Async document store.

Runs every operation as a coroutine; blocking file I/O is pushed to a worker
thread and mutating calls are serialized by a single asyncio lock.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .store import SimpleDocumentStore

if TYPE_CHECKING:
    from ..components.pipeline import FindOptions
    from ..components.query import Query
    from ..interfaces.codec import RecordCodec
    from ..interfaces.linelog import LineLog
    from .config import StoreConfig
    from .types import Record

logger = logging.getLogger(__name__)


class AsyncDocumentStore:
    """Document store with an asyncio API.

    Wraps SimpleDocumentStore to add:
    - Coroutine versions of every public operation
    - Single-writer discipline: insert/delete/compact never interleave

    Reads are not gated; with atomic rewrites they observe either the log
    before or after a concurrent delete, never a partial file.

    Args:
        config: Store configuration
        log: Optional replacement line resource
        codec: Optional replacement payload codec
    """

    def __init__(self, config: StoreConfig, log: LineLog | None = None, codec: RecordCodec | None = None):
        self.config = config
        self._store = SimpleDocumentStore(config, log=log, codec=codec)
        self._write_lock = asyncio.Lock()

        logger.info(f"Initialized AsyncDocumentStore at {config.path}")

    async def read_all(self) -> list[Record]:
        return await asyncio.to_thread(self._store.read_all)

    async def find(self, query: Query | Mapping[str, Any] | None = None, options: FindOptions | Mapping[str, Any] | None = None) -> list[Record]:
        """Return live records matching ``query``, sorted/projected per ``options``."""
        return await asyncio.to_thread(self._store.find, query, options)

    async def find_one(self, query: Query | Mapping[str, Any] | None = None, options: FindOptions | Mapping[str, Any] | None = None) -> Record | None:
        return await asyncio.to_thread(self._store.find_one, query, options)

    async def count(self, query: Query | Mapping[str, Any] | None = None) -> int:
        return await asyncio.to_thread(self._store.count, query)

    async def insert(self, record: Record) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self._store.insert, record)

    async def delete(self, query: Query | Mapping[str, Any] | None) -> int:
        """Tombstone matching records; returns how many were tombstoned."""
        async with self._write_lock:
            return await asyncio.to_thread(self._store.delete, query)

    async def compact(self) -> int:
        async with self._write_lock:
            return await asyncio.to_thread(self._store.compact)

    async def close(self) -> None:
        """Wait for in-flight writes, then close the underlying store."""
        async with self._write_lock:
            self._store.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
