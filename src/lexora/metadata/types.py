# ABOUTME: Core metadata data structures for bibliographic lookup results.
# ABOUTME: BookMetadata is the interchange format between providers, cache, and callers.

from dataclasses import dataclass, replace
from enum import Enum


class SourceTag(str, Enum):
    """Where a BookMetadata instance came from."""

    GOOGLE_ISBN = "google-isbn"
    GOOGLE_TITLE = "google-title"
    OPENLIBRARY = "openlibrary"
    CACHE = "cache"


@dataclass(frozen=True)
class BookMetadata:
    """Structured metadata for a single book, ready to pre-fill a catalog form.

    Every field is always present. Providers fill fields they cannot supply
    with explicit placeholders ("" or None) rather than leaving them out, so
    callers never have to guess whether a field was forgotten or unavailable.
    Instances are immutable; use with_source() to re-tag a cached copy.
    """

    title: str
    authors: str
    publisher: str
    published_date: str
    source: SourceTag
    thumbnail: str | None = None
    description: str = ""
    isbn: str | None = None
    page_count: int | None = None
    categories: str = ""

    def with_source(self, source: SourceTag) -> "BookMetadata":
        """Return a copy carrying a different source tag."""
        return replace(self, source=source)

    @property
    def author_list(self) -> list[str]:
        """Split the joined author string back into individual names."""
        return [a.strip() for a in self.authors.split(",") if a.strip()]

    @property
    def has_thumbnail(self) -> bool:
        return bool(self.thumbnail)
