# ABOUTME: Open Library metadata provider implementation.
# ABOUTME: Looks up a single edition by ISBN through the openlibrary.org Books API.

import logging
from typing import Any

from lexora.metadata.http import (
    DEFAULT_RETRY_POLICY,
    HttpClient,
    MetadataFetchError,
    MetadataParseError,
    NotFoundError,
)
from lexora.metadata.isbn import InvalidIsbnError, require_isbn
from lexora.metadata.openlibrary_parser import bibkey_for, find_book_data, parse_book_data
from lexora.metadata.types import BookMetadata

logger = logging.getLogger(__name__)

_BOOKS_URL = "https://openlibrary.org/api/books"

# Open Library asks API clients to identify themselves.
_USER_AGENT = "Lexora-Library/2.0 (Educational; Production)"


class OpenLibraryProvider:
    """Metadata provider backed by the Open Library Books API.

    The API returns at most one record per bibkey, so no candidate scoring
    is involved.
    """

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return "openlibrary"

    def fetch_by_isbn(self, isbn: str) -> BookMetadata | None:
        """Look up an edition by ISBN. Returns None when nothing usable is found."""
        try:
            clean_isbn = require_isbn(isbn)
            data = self._http.get(
                _BOOKS_URL,
                params={"bibkeys": bibkey_for(clean_isbn), "format": "json", "jscmd": "data"},
                headers={"User-Agent": _USER_AGENT},
                policy=DEFAULT_RETRY_POLICY,
            )
            metadata = _to_metadata(find_book_data(data, clean_isbn), clean_isbn)
        except NotFoundError:
            logger.info("Open Library has no record for ISBN %s", isbn)
            return None
        except (MetadataFetchError, InvalidIsbnError) as exc:
            logger.warning("Open Library lookup failed for %s: %s", isbn, exc)
            return None

        if metadata is None:
            logger.info("Open Library returned no results for ISBN %s", clean_isbn)
            return None

        logger.info("Open Library found %r for ISBN %s", metadata.title, clean_isbn)
        return metadata


def _to_metadata(record: dict[str, Any] | None, isbn: str) -> BookMetadata | None:
    """Map the bibkey record, if any.

    Raises:
        MetadataParseError: If the record has an unexpected shape.
    """
    if record is None:
        return None
    try:
        return parse_book_data(record, isbn)
    except (AttributeError, TypeError, ValueError) as exc:
        raise MetadataParseError(f"Unexpected Open Library record shape: {exc}") from exc
