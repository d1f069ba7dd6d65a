# ABOUTME: Resolution orchestrator: normalize, check cache, probe providers in order, write back.
# ABOUTME: Always returns BookMetadata or None; bad input and provider outages never raise.

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from lexora.cache.book_cache import DEFAULT_TTL_MS, BookCache
from lexora.metadata.http import MetadataFetchError
from lexora.metadata.isbn import is_valid_isbn, normalize_isbn
from lexora.metadata.provider import MetadataProvider, TitleSearchProvider
from lexora.metadata.types import BookMetadata

logger = logging.getLogger(__name__)

# Barcode scanners often report the same code several times in quick succession.
DEBOUNCE_WINDOW_MS = 300


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class ResolutionOutcome(str, Enum):
    """How the most recent resolve() call ended."""

    DEBOUNCED = "debounced"
    INVALID = "invalid"
    CACHE_HIT = "cache-hit"
    PROVIDER_HIT = "provider-hit"
    EXHAUSTED = "exhausted"


@dataclass
class DebounceGuard:
    """Rejects calls that arrive within window_ms of the last admitted call.

    Rejected calls do not move the window; only admitted calls are stamped.
    """

    window_ms: int = DEBOUNCE_WINDOW_MS
    last_call_at_ms: int | None = None

    def admit(self, now_ms: int) -> bool:
        if self.last_call_at_ms is not None and now_ms - self.last_call_at_ms < self.window_ms:
            return False
        self.last_call_at_ms = now_ms
        return True


class BookResolver:
    """Resolves scanned or typed ISBNs into BookMetadata.

    Providers are probed strictly one after another in the order given, so a
    lookup costs at most one provider call chain at a time and the primary
    provider always gets the first chance. Each resolver owns its own
    debounce state, so independent resolvers never suppress each other.
    """

    def __init__(
        self,
        providers: Sequence[MetadataProvider],
        cache: BookCache,
        *,
        ttl_ms: int = DEFAULT_TTL_MS,
        debounce: DebounceGuard | None = None,
        clock: Callable[[], int] = monotonic_ms,
    ) -> None:
        self._providers = list(providers)
        self._cache = cache
        self._ttl_ms = ttl_ms
        self._debounce = debounce or DebounceGuard()
        self._clock = clock
        self.last_outcome: ResolutionOutcome | None = None
        self.last_provider: str | None = None

    @property
    def providers(self) -> list[MetadataProvider]:
        return list(self._providers)

    def resolve(self, raw: str | int) -> BookMetadata | None:
        """Look up metadata for raw identifier text.

        Returns None when the call is debounced, the identifier is invalid,
        or no provider has a record. Successful provider results are written
        to the cache; cache hits come back tagged SourceTag.CACHE.
        """
        if not self._debounce.admit(self._clock()):
            logger.debug("Debounced rapid lookup of %r", raw)
            return self._finish(ResolutionOutcome.DEBOUNCED, None)

        isbn = normalize_isbn(raw)
        if not is_valid_isbn(isbn):
            logger.warning("Invalid ISBN format: %r", raw)
            return self._finish(ResolutionOutcome.INVALID, None)

        logger.info("Starting book lookup for %r (normalized %s)", raw, isbn)

        cached = self._cache.get(isbn, self._ttl_ms)
        if cached is not None:
            return self._finish(ResolutionOutcome.CACHE_HIT, cached)

        for provider in self._providers:
            metadata = self._probe(provider, isbn)
            if metadata is not None:
                self._cache.set(isbn, metadata)
                return self._finish(ResolutionOutcome.PROVIDER_HIT, metadata, provider.name)

        logger.info("Book not found in any source: %s", isbn)
        return self._finish(ResolutionOutcome.EXHAUSTED, None)

    def resolve_title(self, title: str) -> BookMetadata | None:
        """Search title-capable providers in order and return the first hit.

        Title results are neither read from nor written to the cache, which
        is keyed by ISBN only.
        """
        for provider in self._providers:
            if not isinstance(provider, TitleSearchProvider):
                continue
            try:
                metadata = provider.fetch_by_title(title)
            except MetadataFetchError as exc:
                logger.warning(
                    "Provider %s failed title search for %r: %s", provider.name, title, exc
                )
                continue
            if metadata is not None:
                return self._finish(ResolutionOutcome.PROVIDER_HIT, metadata, provider.name)

        logger.info("No provider found a match for title %r", title)
        return self._finish(ResolutionOutcome.EXHAUSTED, None)

    def _probe(self, provider: MetadataProvider, isbn: str) -> BookMetadata | None:
        try:
            return provider.fetch_by_isbn(isbn)
        except MetadataFetchError as exc:
            logger.warning("Provider %s failed for %s: %s", provider.name, isbn, exc)
            return None

    def _finish(
        self,
        outcome: ResolutionOutcome,
        metadata: BookMetadata | None,
        provider: str | None = None,
    ) -> BookMetadata | None:
        self.last_outcome = outcome
        self.last_provider = provider
        logger.debug("Resolution finished: %s (provider=%s)", outcome.value, provider)
        return metadata
