# ABOUTME: Public API for the Lexora metadata cache layer.
# ABOUTME: Exports the BookCache, storage backends, and connection management.

from lexora.cache.book_cache import CACHE_PREFIX, DEFAULT_TTL_MS, BookCache, CacheStats
from lexora.cache.connection import DEFAULT_CACHE_PATH, open_cache
from lexora.cache.mapping import CacheCorruptionError, CacheEntry
from lexora.cache.store import CacheStorageError, KeyValueStore, MemoryStore, SqliteStore

__all__ = [
    "CACHE_PREFIX",
    "DEFAULT_CACHE_PATH",
    "DEFAULT_TTL_MS",
    "BookCache",
    "CacheCorruptionError",
    "CacheEntry",
    "CacheStats",
    "CacheStorageError",
    "KeyValueStore",
    "MemoryStore",
    "SqliteStore",
    "open_cache",
]
