# ABOUTME: Metadata package for bibliographic lookup: ISBNs, providers, scoring, and HTTP.
# ABOUTME: Exports the BookMetadata dataclass and provider protocols used throughout Lexora.

from lexora.metadata.isbn import InvalidIsbnError, is_valid_isbn, normalize_isbn, require_isbn
from lexora.metadata.provider import MetadataProvider, TitleSearchProvider
from lexora.metadata.types import BookMetadata, SourceTag

__all__ = [
    "BookMetadata",
    "InvalidIsbnError",
    "MetadataProvider",
    "SourceTag",
    "TitleSearchProvider",
    "is_valid_isbn",
    "normalize_isbn",
    "require_isbn",
]
