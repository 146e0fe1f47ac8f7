"""docstore - embedded document store over a tagged append-only log."""

from .core.config import StoreConfig
from .core.errors import (
    DocStoreError,
    StorageIOError,
    DeserializeError,
    SerializeError,
    InvalidQueryError,
)
from .core.types import MISSING, LogEntry, Record, Tag, Value
from .core.store import SimpleDocumentStore
from .core.async_store import AsyncDocumentStore
from .components.evaluator import matches
from .components.pipeline import FindOptions, SortOrder
from .components.query import And, Condition, Eq, Gt, In, Lt, Or, Text, parse_query

__all__ = [
    "StoreConfig",
    "DocStoreError",
    "StorageIOError",
    "DeserializeError",
    "SerializeError",
    "InvalidQueryError",
    "MISSING",
    "LogEntry",
    "Record",
    "Tag",
    "Value",
    "SimpleDocumentStore",
    "AsyncDocumentStore",
    "matches",
    "FindOptions",
    "SortOrder",
    "And",
    "Or",
    "Text",
    "Condition",
    "Gt",
    "Lt",
    "Eq",
    "In",
    "parse_query",
]
