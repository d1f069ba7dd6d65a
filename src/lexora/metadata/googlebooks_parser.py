# ABOUTME: Parsing functions for Google Books API JSON responses.
# ABOUTME: Converts volume records into BookMetadata and scorer-facing CandidateFields.

from typing import Any

from lexora.metadata.http import MetadataParseError
from lexora.metadata.isbn import is_valid_isbn, normalize_isbn
from lexora.metadata.scoring import CandidateFields
from lexora.metadata.types import BookMetadata, SourceTag

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_AUTHOR = "Unknown Author"
UNKNOWN_PUBLISHER = "Unknown Publisher"

# Preferred order when echoing a volume's own identifier.
_ISBN_TYPES = ("ISBN_13", "ISBN_10")


def parse_volumes_response(data: Any) -> list[dict[str, Any]]:
    """Extract the list of volume records from a /volumes response.

    A response with no "items" key means zero results, not an error.

    Raises:
        MetadataParseError: If the payload is not shaped like a volumes response.
    """
    if not isinstance(data, dict):
        raise MetadataParseError(f"Expected a JSON object, got {type(data).__name__}")
    items = data.get("items") or []
    if not isinstance(items, list):
        raise MetadataParseError("Google Books 'items' is not a list")
    return [item for item in items if isinstance(item, dict)]


def _volume_info(item: dict[str, Any]) -> dict[str, Any]:
    info = item.get("volumeInfo")
    return info if isinstance(info, dict) else {}


def _text(value: Any) -> str:
    """The value if it is a string, else "". Google occasionally sends numbers or nulls."""
    return value if isinstance(value, str) else ""


def _thumbnail(info: dict[str, Any]) -> str | None:
    links = info.get("imageLinks")
    if not isinstance(links, dict):
        return None
    return _text(links.get("thumbnail")) or _text(links.get("smallThumbnail")) or None


def _joined(values: Any) -> str:
    if not isinstance(values, list):
        return ""
    return ", ".join(str(v) for v in values if v)


def _identifier_entries(item: dict[str, Any]) -> list[dict[str, Any]]:
    entries = _volume_info(item).get("industryIdentifiers")
    if not isinstance(entries, list):
        return []
    return [e for e in entries if isinstance(e, dict)]


def volume_identifiers(item: dict[str, Any]) -> list[str]:
    """All identifier strings listed under industryIdentifiers, in listed order."""
    return [str(e.get("identifier", "")) for e in _identifier_entries(item)]


def volume_isbn(item: dict[str, Any]) -> str | None:
    """The volume's own ISBN-13 (else ISBN-10) in canonical form, if it has a valid one."""
    entries = _identifier_entries(item)
    for isbn_type in _ISBN_TYPES:
        for entry in entries:
            if entry.get("type") != isbn_type:
                continue
            identifier = normalize_isbn(str(entry.get("identifier", "")))
            if is_valid_isbn(identifier):
                return identifier
    return None


def candidate_fields(item: dict[str, Any]) -> CandidateFields:
    """Project a volume record onto the fields the scorer considers."""
    info = _volume_info(item)
    authors = info.get("authors")
    return CandidateFields(
        title=_text(info.get("title")),
        identifiers=volume_identifiers(item),
        has_cover=_thumbnail(info) is not None,
        description=_text(info.get("description")),
        authors=[str(a) for a in authors if a] if isinstance(authors, list) else [],
        publisher=_text(info.get("publisher")),
        published_date=_text(info.get("publishedDate")),
    )


def parse_volume(item: dict[str, Any], source: SourceTag, isbn: str | None) -> BookMetadata:
    """Map a single Google Books volume record onto BookMetadata.

    Missing or mistyped fields become explicit placeholders so the result is
    always complete.
    """
    info = _volume_info(item)
    page_count = info.get("pageCount")

    return BookMetadata(
        title=_text(info.get("title")) or UNKNOWN_TITLE,
        authors=_joined(info.get("authors")) or UNKNOWN_AUTHOR,
        publisher=_text(info.get("publisher")) or UNKNOWN_PUBLISHER,
        published_date=_text(info.get("publishedDate")),
        thumbnail=_thumbnail(info),
        description=_text(info.get("description")),
        isbn=isbn,
        page_count=(
            page_count
            if isinstance(page_count, int) and not isinstance(page_count, bool) and page_count > 0
            else None
        ),
        categories=_joined(info.get("categories")),
        source=source,
    )
