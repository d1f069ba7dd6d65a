# ABOUTME: Key/value storage backends for the metadata cache.
# ABOUTME: Defines the KeyValueStore protocol with in-memory and SQLite implementations.

import sqlite3
from typing import Protocol, runtime_checkable


class CacheStorageError(Exception):
    """Raised when the underlying store cannot read or write a value."""


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal string key/value storage the cache is built on.

    Backends are swappable: the cache only ever calls these four methods.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self, prefix: str = "") -> list[str]: ...


class MemoryStore:
    """Dict-backed store, optionally limited to a maximum number of entries.

    Once the quota is reached, writing a new key raises CacheStorageError;
    overwriting an existing key is always allowed.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        self._data: dict[str, str] = {}
        self._max_entries = max_entries

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if (
            self._max_entries is not None
            and key not in self._data
            and len(self._data) >= self._max_entries
        ):
            raise CacheStorageError(f"quota exceeded ({self._max_entries} entries)")
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return [k for k in self._data if k.startswith(prefix)]

    def __len__(self) -> int:
        return len(self._data)


class SqliteStore:
    """Store backed by the cache_entries table of an open_cache() connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, key: str) -> str | None:
        try:
            row = self._conn.execute(
                "SELECT value FROM cache_entries WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise CacheStorageError(f"Failed to read {key}: {exc}") from exc
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            self._conn.execute(
                "INSERT INTO cache_entries (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = strftime('%Y-%m-%dT%H:%M:%S', 'now')",
                (key, value),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise CacheStorageError(f"Failed to write {key}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._conn.execute("DELETE FROM cache_entries WHERE key = ?", (key,))
            self._conn.commit()
        except sqlite3.Error as exc:
            raise CacheStorageError(f"Failed to delete {key}: {exc}") from exc

    def keys(self, prefix: str = "") -> list[str]:
        try:
            rows = self._conn.execute(
                "SELECT key FROM cache_entries WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            ).fetchall()
        except sqlite3.Error as exc:
            raise CacheStorageError(f"Failed to list keys: {exc}") from exc
        return [row[0] for row in rows]
