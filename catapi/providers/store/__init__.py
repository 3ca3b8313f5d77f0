"""Catalog store providers (in-memory and SQLite)."""

from catapi.providers.store.memory_store import MemoryCatalogStore
from catapi.providers.store.sqlite_store import SQLiteCatalogStore

__all__ = ["MemoryCatalogStore", "SQLiteCatalogStore"]
