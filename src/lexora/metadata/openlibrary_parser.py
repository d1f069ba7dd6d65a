# ABOUTME: Parsing functions for Open Library Books API JSON responses.
# ABOUTME: Converts the jscmd=data record for one bibkey into a BookMetadata instance.

from typing import Any

from lexora.metadata.http import MetadataParseError
from lexora.metadata.types import BookMetadata, SourceTag

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_AUTHOR = "Unknown Author"
UNKNOWN_PUBLISHER = "Unknown Publisher"

_MAX_CATEGORIES = 3
_COVER_SIZES = ("large", "medium", "small")


def bibkey_for(isbn: str) -> str:
    """The Books API bibkey for an ISBN, e.g. 'ISBN:9780134685991'."""
    return f"ISBN:{isbn}"


def find_book_data(data: Any, isbn: str) -> dict[str, Any] | None:
    """Pull the record for one ISBN out of a Books API response.

    The API answers an unknown ISBN with an empty object rather than a 404,
    so a missing bibkey means "no record".

    Raises:
        MetadataParseError: If the payload is not a JSON object.
    """
    if not isinstance(data, dict):
        raise MetadataParseError(f"Expected a JSON object, got {type(data).__name__}")
    record = data.get(bibkey_for(isbn))
    return record if isinstance(record, dict) and record else None


def _names(entries: Any, limit: int | None = None) -> str:
    """Join the 'name' of each {name: ...} entry. Open Library uses this shape everywhere."""
    if not isinstance(entries, list):
        return ""
    names = [str(e["name"]) for e in entries if isinstance(e, dict) and e.get("name")]
    if limit is not None:
        names = names[:limit]
    return ", ".join(names)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _cover(record: dict[str, Any]) -> str | None:
    cover = record.get("cover")
    if not isinstance(cover, dict):
        return None
    for size in _COVER_SIZES:
        url = _text(cover.get(size))
        if url:
            return url
    return None


def parse_notes(notes: Any) -> str:
    """Extract notes text, which may be a plain string or {"type": ..., "value": ...}."""
    if isinstance(notes, str):
        return notes
    if isinstance(notes, dict):
        return _text(notes.get("value"))
    return ""


def parse_book_data(record: dict[str, Any], isbn: str) -> BookMetadata:
    """Map an Open Library jscmd=data record onto BookMetadata.

    Missing or mistyped fields become explicit placeholders.
    """
    pages = record.get("number_of_pages")

    return BookMetadata(
        title=_text(record.get("title")) or UNKNOWN_TITLE,
        authors=_names(record.get("authors")) or UNKNOWN_AUTHOR,
        publisher=_names(record.get("publishers")) or UNKNOWN_PUBLISHER,
        published_date=_text(record.get("publish_date")),
        thumbnail=_cover(record),
        description=parse_notes(record.get("notes")),
        isbn=isbn,
        page_count=(
            pages if isinstance(pages, int) and not isinstance(pages, bool) and pages > 0 else None
        ),
        categories=_names(record.get("subjects"), limit=_MAX_CATEGORIES),
        source=SourceTag.OPENLIBRARY,
    )
