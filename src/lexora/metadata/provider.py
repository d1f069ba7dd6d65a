# ABOUTME: MetadataProvider protocols defining the contract for metadata sources.
# ABOUTME: Any external metadata API (Google Books, Open Library, etc.) implements these.

from typing import Protocol, runtime_checkable

from lexora.metadata.types import BookMetadata


@runtime_checkable
class MetadataProvider(Protocol):
    """Protocol for identifier-based metadata lookup services.

    Implementations accept a canonical ISBN and return None when the provider
    has nothing usable. They must not raise for network or parsing failures.
    """

    @property
    def name(self) -> str: ...

    def fetch_by_isbn(self, isbn: str) -> BookMetadata | None: ...


@runtime_checkable
class TitleSearchProvider(MetadataProvider, Protocol):
    """A provider that can also search by free-text title."""

    def fetch_by_title(self, title: str) -> BookMetadata | None: ...
