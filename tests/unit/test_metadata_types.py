# ABOUTME: Unit tests for the BookMetadata dataclass and SourceTag enum.
# ABOUTME: Validates immutability, re-tagging, and convenience properties.

import dataclasses

import pytest

from lexora.metadata.types import BookMetadata, SourceTag


class TestBookMetadata:
    """Tests for BookMetadata."""

    def test_optional_fields_have_explicit_defaults(self) -> None:
        """Only the core fields are required; the rest default to empty values."""
        meta = BookMetadata(
            title="Dune",
            authors="Frank Herbert",
            publisher="Chilton",
            published_date="1965",
            source=SourceTag.OPENLIBRARY,
        )
        assert meta.thumbnail is None
        assert meta.description == ""
        assert meta.isbn is None
        assert meta.page_count is None
        assert meta.categories == ""

    def test_is_immutable(self, sample_metadata: BookMetadata) -> None:
        """Fields cannot be reassigned after construction."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample_metadata.title = "Changed"  # type: ignore[misc]

    def test_with_source_replaces_only_source(self, sample_metadata: BookMetadata) -> None:
        """with_source() returns a copy that differs only in its tag."""
        cached = sample_metadata.with_source(SourceTag.CACHE)
        assert cached.source is SourceTag.CACHE
        assert sample_metadata.source is SourceTag.GOOGLE_ISBN
        assert dataclasses.replace(cached, source=SourceTag.GOOGLE_ISBN) == sample_metadata

    def test_author_list_splits_joined_names(self) -> None:
        """author_list splits the joined author string."""
        meta = BookMetadata(
            title="Refactoring",
            authors="Martin Fowler, Kent Beck",
            publisher="",
            published_date="",
            source=SourceTag.GOOGLE_TITLE,
        )
        assert meta.author_list == ["Martin Fowler", "Kent Beck"]

    def test_has_thumbnail(self, sample_metadata: BookMetadata) -> None:
        assert sample_metadata.has_thumbnail
        assert not dataclasses.replace(sample_metadata, thumbnail=None).has_thumbnail


class TestSourceTag:
    """Tests for SourceTag values."""

    def test_values_are_stable_strings(self) -> None:
        """Tag values are persisted in the cache, so they must not change."""
        assert [t.value for t in SourceTag] == [
            "google-isbn",
            "google-title",
            "openlibrary",
            "cache",
        ]
