# ABOUTME: Persistent metadata cache keyed by canonical ISBN with age-based expiry.
# ABOUTME: Best-effort: storage and corruption problems become cache misses, never errors.

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from lexora.cache.mapping import CacheCorruptionError, CacheEntry, decode_entry, encode_entry
from lexora.cache.store import CacheStorageError, KeyValueStore
from lexora.metadata.isbn import require_isbn
from lexora.metadata.types import BookMetadata, SourceTag

logger = logging.getLogger(__name__)

CACHE_PREFIX = "lexora_book_"
DEFAULT_TTL_MS = 7 * 24 * 60 * 60 * 1000  # 7 days


def epoch_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass
class CacheStats:
    """Aggregate view of the cache contents.

    Corrupt entries count toward count and size but not toward the oldest timestamp.
    """

    count: int
    total_size_bytes: int
    oldest_entry_ms: int | None


class BookCache:
    """Maps canonical ISBNs to cached BookMetadata snapshots.

    Keys are namespaced with a prefix so the cache can share a store with
    unrelated data. A TTL of 0 (or less) means entries never expire.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        prefix: str = CACHE_PREFIX,
        clock: Callable[[], int] = epoch_ms,
    ) -> None:
        self._store = store
        self._prefix = prefix
        self._clock = clock

    def get(self, isbn: str, ttl_ms: int = DEFAULT_TTL_MS) -> BookMetadata | None:
        """Return cached metadata tagged as a cache hit, or None.

        Expired and corrupt entries are deleted as soon as a read finds them.

        Raises:
            InvalidIsbnError: If isbn is not a canonical ISBN.
        """
        key = self._key(isbn)
        try:
            raw = self._store.get(key)
        except CacheStorageError as exc:
            logger.warning("Cache read failed for %s: %s", isbn, exc)
            return None
        if raw is None:
            return None

        try:
            entry = decode_entry(raw)
        except CacheCorruptionError as exc:
            logger.warning("Discarding corrupt cache entry for %s: %s", isbn, exc)
            self._discard(key)
            return None

        age_ms = self._clock() - entry.stored_at_ms
        if ttl_ms > 0 and age_ms > ttl_ms:
            logger.info("Cache entry for %s expired (age %d min)", isbn, age_ms // 60_000)
            self._discard(key)
            return None

        logger.info(
            "Cache hit for %s (source=%s, age %d min)",
            isbn,
            entry.metadata.source.value,
            age_ms // 60_000,
        )
        return entry.metadata.with_source(SourceTag.CACHE)

    def set(self, isbn: str, metadata: BookMetadata) -> None:
        """Store freshly fetched metadata. Write failures are logged, not raised.

        Metadata already tagged as a cache hit is never written back.

        Raises:
            InvalidIsbnError: If isbn is not a canonical ISBN.
        """
        clean_isbn = require_isbn(isbn)
        key = f"{self._prefix}{clean_isbn}"
        if metadata.source is SourceTag.CACHE:
            logger.warning("Refusing to re-cache metadata served from cache for %s", isbn)
            return

        entry = CacheEntry(isbn=clean_isbn, metadata=metadata, stored_at_ms=self._clock())
        try:
            self._store.set(key, encode_entry(entry))
        except CacheStorageError as exc:
            logger.warning("Cache write failed for %s: %s", isbn, exc)
            return
        logger.info("Cached %r for %s", metadata.title, isbn)

    def clear_expired(self, ttl_ms: int = DEFAULT_TTL_MS) -> int:
        """Delete entries older than ttl_ms, and any corrupt entries.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        cleared = 0
        for key in self._keys():
            raw = self._read(key)
            if raw is None:
                continue
            try:
                entry = decode_entry(raw)
            except CacheCorruptionError:
                cleared += self._discard(key)
                continue
            if ttl_ms > 0 and now - entry.stored_at_ms > ttl_ms:
                cleared += self._discard(key)

        if cleared:
            logger.info("Cleared %d expired cache entries", cleared)
        return cleared

    def clear_all(self) -> int:
        """Delete every entry under this cache's prefix.

        Returns:
            Number of entries removed.
        """
        cleared = sum(self._discard(key) for key in self._keys())
        logger.info("Cleared all book cache entries (%d)", cleared)
        return cleared

    def stats(self) -> CacheStats:
        """Count entries, total payload size, and the oldest valid entry. Read-only."""
        count = 0
        total_size = 0
        oldest: int | None = None

        for key in self._keys():
            raw = self._read(key)
            if raw is None:
                continue
            count += 1
            total_size += len(raw.encode("utf-8"))
            try:
                stored_at = decode_entry(raw).stored_at_ms
            except CacheCorruptionError:
                continue
            if oldest is None or stored_at < oldest:
                oldest = stored_at

        return CacheStats(count=count, total_size_bytes=total_size, oldest_entry_ms=oldest)

    def _key(self, isbn: str) -> str:
        return f"{self._prefix}{require_isbn(isbn)}"

    def _keys(self) -> list[str]:
        try:
            return self._store.keys(self._prefix)
        except CacheStorageError as exc:
            logger.warning("Cache scan failed: %s", exc)
            return []

    def _read(self, key: str) -> str | None:
        try:
            return self._store.get(key)
        except CacheStorageError as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)
            return None

    def _discard(self, key: str) -> int:
        """Delete one key; returns 1 on success and 0 if the store refused."""
        try:
            self._store.delete(key)
        except CacheStorageError as exc:
            logger.warning("Cache delete failed for %s: %s", key, exc)
            return 0
        return 1
