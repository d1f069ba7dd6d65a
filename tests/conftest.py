# ABOUTME: Shared pytest fixtures for Lexora tests.
# ABOUTME: Provides fake clocks, a fake HTTP client, sample metadata, and in-memory caches.

from typing import Any

import pytest

from lexora.cache.book_cache import BookCache
from lexora.cache.store import MemoryStore
from lexora.metadata.http import RetryPolicy
from lexora.metadata.types import BookMetadata, SourceTag


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class RecordingSleep:
    """Stands in for time.sleep and records requested delays (seconds)."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeHttpClient:
    """Fake HTTP client that returns canned responses based on URL patterns.

    A response may be an Exception instance, which is raised instead. Every
    call is recorded as (url, params, headers) in request_log.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self._responses = responses or {}
        self.request_log: list[tuple[str, dict[str, str], dict[str, str]]] = []

    def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        policy: RetryPolicy | None = None,
    ) -> Any:
        self.request_log.append((url, dict(params or {}), dict(headers or {})))
        for pattern, response in self._responses.items():
            if pattern in url:
                if isinstance(response, Exception):
                    raise response
                return response
        return {}

    @property
    def call_count(self) -> int:
        return len(self.request_log)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recorded_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def book_cache(memory_store: MemoryStore, clock: FakeClock) -> BookCache:
    """A BookCache over an in-memory store driven by the fake clock."""
    return BookCache(memory_store, clock=clock)


@pytest.fixture
def sample_metadata() -> BookMetadata:
    """Fully populated metadata as a provider would return it."""
    return BookMetadata(
        title="Effective Java",
        authors="Joshua Bloch",
        publisher="Addison-Wesley Professional",
        published_date="2017-12-27",
        thumbnail="http://books.google.com/books/content?id=BIpDDwAAQBAJ&zoom=1",
        description="The definitive guide to Java platform best practices.",
        isbn="9780134685991",
        page_count=412,
        categories="Computers, Programming",
        source=SourceTag.GOOGLE_ISBN,
    )
