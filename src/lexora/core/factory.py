# ABOUTME: Wiring for the default resolver: Google Books, then Open Library, over a SQLite cache.
# ABOUTME: Used by the CLI; tests build resolvers directly with fakes.

from pathlib import Path

import httpx

from lexora.cache.book_cache import BookCache
from lexora.cache.connection import DEFAULT_CACHE_PATH, open_cache
from lexora.cache.store import MemoryStore, SqliteStore
from lexora.core.resolver import BookResolver
from lexora.metadata.googlebooks import GoogleBooksProvider
from lexora.metadata.http import LexoraHttpClient
from lexora.metadata.openlibrary import OpenLibraryProvider
from lexora.metadata.provider import MetadataProvider

MEMORY_CACHE = ":memory:"


def build_cache(cache_path: Path | str | None = None) -> BookCache:
    """Create a BookCache on disk, or in memory when cache_path is ":memory:"."""
    if str(cache_path) == MEMORY_CACHE:
        return BookCache(MemoryStore())
    conn = open_cache(Path(cache_path) if cache_path else DEFAULT_CACHE_PATH)
    return BookCache(SqliteStore(conn))


def build_providers(
    api_key: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> list[MetadataProvider]:
    """The default providers in priority order: Google Books first, Open Library second."""
    http_client = LexoraHttpClient(transport=transport)
    return [
        GoogleBooksProvider(http_client=http_client, api_key=api_key),
        OpenLibraryProvider(http_client=http_client),
    ]


def build_default_resolver(
    cache_path: Path | str | None = None,
    api_key: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> BookResolver:
    """Create a resolver with the default providers and cache."""
    return BookResolver(build_providers(api_key, transport), build_cache(cache_path))
