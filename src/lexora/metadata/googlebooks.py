# ABOUTME: Google Books metadata provider implementation.
# ABOUTME: Looks up volumes by ISBN or title and picks the best of several candidates.

import logging
from typing import Any

from lexora.metadata.googlebooks_parser import (
    candidate_fields,
    parse_volume,
    parse_volumes_response,
    volume_isbn,
)
from lexora.metadata.http import (
    DEFAULT_RETRY_POLICY,
    HttpClient,
    MetadataFetchError,
    MetadataParseError,
    NotFoundError,
)
from lexora.metadata.isbn import InvalidIsbnError, require_isbn
from lexora.metadata.scoring import select_best
from lexora.metadata.types import BookMetadata, SourceTag

logger = logging.getLogger(__name__)

_VOLUMES_URL = "https://www.googleapis.com/books/v1/volumes"
_TITLE_RESULT_LIMIT = 5
MIN_TITLE_LENGTH = 3


class GoogleBooksProvider:
    """Metadata provider backed by the Google Books volumes API.

    Supports ISBN lookup (scored against the requested ISBN) and title search
    (scored by word overlap with the requested title). The API key is
    optional; without it requests run against the anonymous quota.
    """

    def __init__(self, http_client: HttpClient, api_key: str | None = None) -> None:
        self._http = http_client
        self._api_key = api_key

    @property
    def name(self) -> str:
        return "googlebooks"

    def fetch_by_isbn(self, isbn: str) -> BookMetadata | None:
        """Look up a volume by ISBN. Returns None when nothing usable is found."""
        try:
            clean_isbn = require_isbn(isbn)
            items = self._query({"q": f"isbn:{clean_isbn}"})
            metadata = self._best(items, SourceTag.GOOGLE_ISBN, target_isbn=clean_isbn)
        except NotFoundError:
            logger.info("Google Books has no record for ISBN %s", isbn)
            return None
        except (MetadataFetchError, InvalidIsbnError) as exc:
            logger.warning("Google Books ISBN lookup failed for %s: %s", isbn, exc)
            return None

        if metadata is None:
            logger.info("Google Books returned no results for ISBN %s", clean_isbn)
            return None

        logger.info("Google Books found %r for ISBN %s", metadata.title, clean_isbn)
        return metadata

    def fetch_by_title(self, title: str) -> BookMetadata | None:
        """Search volumes by title. Titles under three characters are not searched."""
        title = (title or "").strip()
        if len(title) < MIN_TITLE_LENGTH:
            return None

        try:
            items = self._query({"q": f"intitle:{title}", "maxResults": str(_TITLE_RESULT_LIMIT)})
            metadata = self._best(items, SourceTag.GOOGLE_TITLE, query_title=title)
        except NotFoundError:
            logger.info("Google Books has no record for title %r", title)
            return None
        except MetadataFetchError as exc:
            logger.warning("Google Books title search failed for %r: %s", title, exc)
            return None

        if metadata is None:
            logger.info("Google Books returned no results for title %r", title)
            return None

        logger.info("Google Books found %r for title %r", metadata.title, title)
        return metadata

    def _query(self, params: dict[str, str]) -> list[dict[str, Any]]:
        if self._api_key:
            params = {**params, "key": self._api_key}
        data = self._http.get(_VOLUMES_URL, params=params, policy=DEFAULT_RETRY_POLICY)
        return parse_volumes_response(data)

    def _best(
        self,
        items: list[dict[str, Any]],
        source: SourceTag,
        *,
        target_isbn: str | None = None,
        query_title: str | None = None,
    ) -> BookMetadata | None:
        """Score the volumes and map the winner onto BookMetadata.

        ISBN lookups echo the requested ISBN; title searches echo the
        winning volume's own ISBN, if it has one.

        Raises:
            MetadataParseError: If a volume record has an unexpected shape.
        """
        try:
            best = select_best(
                items, target_isbn, extract=candidate_fields, query_title=query_title
            )
            if best is None:
                return None
            isbn = target_isbn if target_isbn else volume_isbn(best)
            return parse_volume(best, source, isbn=isbn)
        except (AttributeError, TypeError, ValueError) as exc:
            raise MetadataParseError(f"Unexpected Google Books record shape: {exc}") from exc
