# ABOUTME: Converts between BookMetadata, CacheEntry, and the JSON payload stored in the cache.
# ABOUTME: Any payload that cannot be decoded faithfully is reported as CacheCorruptionError.

import json
from dataclasses import dataclass
from typing import Any

from lexora.metadata.types import BookMetadata, SourceTag


class CacheCorruptionError(Exception):
    """Raised when a stored cache payload cannot be decoded."""


@dataclass
class CacheEntry:
    """A cached metadata snapshot and when it was stored (epoch milliseconds)."""

    isbn: str
    metadata: BookMetadata
    stored_at_ms: int


_STRING_FIELDS = ("title", "authors", "publisher", "published_date", "description", "categories")


def metadata_to_dict(metadata: BookMetadata) -> dict[str, Any]:
    """Convert a BookMetadata instance to a JSON-ready dict."""
    return {
        "title": metadata.title,
        "authors": metadata.authors,
        "publisher": metadata.publisher,
        "published_date": metadata.published_date,
        "thumbnail": metadata.thumbnail,
        "description": metadata.description,
        "isbn": metadata.isbn,
        "page_count": metadata.page_count,
        "categories": metadata.categories,
        "source": metadata.source.value,
    }


def dict_to_metadata(data: Any) -> BookMetadata:
    """Rebuild BookMetadata from a decoded dict, validating every field.

    Raises:
        CacheCorruptionError: If a field is missing or has the wrong type.
    """
    if not isinstance(data, dict):
        raise CacheCorruptionError("metadata is not an object")
    for name in _STRING_FIELDS:
        if not isinstance(data.get(name), str):
            raise CacheCorruptionError(f"metadata field {name!r} is missing or not a string")
    for name in ("thumbnail", "isbn"):
        if data.get(name) is not None and not isinstance(data[name], str):
            raise CacheCorruptionError(f"metadata field {name!r} is not a string")
    page_count = data.get("page_count")
    if page_count is not None and (isinstance(page_count, bool) or not isinstance(page_count, int)):
        raise CacheCorruptionError("metadata field 'page_count' is not an integer")
    try:
        source = SourceTag(data.get("source"))
    except ValueError as exc:
        raise CacheCorruptionError(f"unknown source tag {data.get('source')!r}") from exc

    return BookMetadata(
        title=data["title"],
        authors=data["authors"],
        publisher=data["publisher"],
        published_date=data["published_date"],
        thumbnail=data.get("thumbnail"),
        description=data["description"],
        isbn=data.get("isbn"),
        page_count=page_count,
        categories=data["categories"],
        source=source,
    )


def encode_entry(entry: CacheEntry) -> str:
    """Serialize a CacheEntry to its stored JSON form."""
    return json.dumps(
        {
            "identifier": entry.isbn,
            "metadata": metadata_to_dict(entry.metadata),
            "stored_at": entry.stored_at_ms,
        }
    )


def decode_entry(raw: str) -> CacheEntry:
    """Parse a stored JSON payload back into a CacheEntry.

    Raises:
        CacheCorruptionError: For invalid JSON or a payload of the wrong shape.
    """
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise CacheCorruptionError(f"invalid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise CacheCorruptionError("payload is not an object")
    identifier = payload.get("identifier")
    stored_at = payload.get("stored_at")
    if not isinstance(identifier, str):
        raise CacheCorruptionError("payload 'identifier' is missing or not a string")
    if isinstance(stored_at, bool) or not isinstance(stored_at, int):
        raise CacheCorruptionError("payload 'stored_at' is missing or not an integer")

    return CacheEntry(
        isbn=identifier,
        metadata=dict_to_metadata(payload.get("metadata")),
        stored_at_ms=stored_at,
    )
