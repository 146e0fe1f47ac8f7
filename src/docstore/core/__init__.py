"""Document store core package."""

from .async_store import AsyncDocumentStore
from .store import SimpleDocumentStore

__all__ = ["SimpleDocumentStore", "AsyncDocumentStore"]
