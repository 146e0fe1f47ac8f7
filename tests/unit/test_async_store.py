"""Unit tests for AsyncDocumentStore."""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

import pytest

from docstore.core.async_store import AsyncDocumentStore
from docstore.core.config import StoreConfig
from docstore.core.errors import DeserializeError


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config(temp_dir):
    """Create a test configuration."""
    return StoreConfig(path=str(temp_dir / "db.log"), full_text_fields=("name",), fsync_writes=False)


def test_async_insert_find_delete(config):
    """Test the basic async round trip."""

    async def scenario():
        async with AsyncDocumentStore(config) as store:
            await store.insert({"id": 1, "name": "a b c"})
            await store.insert({"id": 2, "name": "a"})

            found = await store.find({"$text": "a b"})
            deleted = await store.delete({"id": {"$eq": 1}})
            remaining = await store.read_all()
            return found, deleted, remaining

    found, deleted, remaining = asyncio.run(scenario())

    assert found == [{"id": 1, "name": "a b c"}]
    assert deleted == 1
    assert remaining == [{"id": 2, "name": "a"}]


def test_concurrent_writes_are_serialized(config):
    """Test that overlapping inserts and deletes never lose records."""

    async def scenario():
        store = AsyncDocumentStore(config)
        await asyncio.gather(*(store.insert({"id": i, "even": i % 2 == 0}) for i in range(40)))
        await asyncio.gather(
            store.delete({"even": {"$eq": True}}),
            *(store.insert({"id": i, "even": False}) for i in range(40, 50)),
        )
        records = await store.read_all()
        await store.close()
        return records

    records = asyncio.run(scenario())

    assert sorted(r["id"] for r in records) == list(range(1, 40, 2)) + list(range(40, 50))


def test_async_helpers(config):
    """Test find_one, count and compact."""

    async def scenario():
        store = AsyncDocumentStore(config)
        for i in range(5):
            await store.insert({"id": i, "name": f"n{i}"})
        await store.delete({"id": {"$in": [0, 1]}})
        return (
            await store.find_one({}, {"sort": {"id": -1}}),
            await store.count({"id": {"$gt": 2}}),
            await store.compact(),
        )

    first, count, dropped = asyncio.run(scenario())

    assert first == {"id": 4, "name": "n4"}
    assert count == 2
    assert dropped == 2


def test_async_errors_propagate(config):
    """Test that failures reject the awaiting caller."""
    Path(config.path).write_text('E{"id":1}\nEnot json\n')

    async def scenario():
        store = AsyncDocumentStore(config)
        return await store.find({})

    with pytest.raises(DeserializeError):
        asyncio.run(scenario())
