# ABOUTME: HTTP client abstraction for metadata provider API calls.
# ABOUTME: Bounded retry with capped exponential backoff and an injectable transport for testing.

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 8.0  # seconds, per attempt
_USER_AGENT = "lexora/0.1.0"


class MetadataFetchError(Exception):
    """Raised when an HTTP request to a metadata provider fails."""

    def __init__(self, message: str, *, url: str = "", status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class NotFoundError(MetadataFetchError):
    """HTTP 404: the provider has no record. Never retried."""


class ClientError(MetadataFetchError):
    """Non-retryable 4xx (other than 404 and 429) or unexpected non-2xx status."""


class RateLimitError(MetadataFetchError):
    """HTTP 429 from the provider. Retried under backoff."""


class TransientNetworkError(MetadataFetchError):
    """Timeout, connection failure, or 5xx. Retried under backoff."""


class MetadataParseError(MetadataFetchError):
    """A successful response whose body could not be decoded as JSON."""


_RETRYABLE_ERRORS = (RateLimitError, TransientNetworkError)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to retry and how long to wait in between.

    Delays are in milliseconds. The wait before retry n (0-based) is
    base_delay_ms * 2**n, capped at max_delay_ms.
    """

    max_retries: int = 2
    base_delay_ms: int = 500
    max_delay_ms: int = 3000

    def __post_init__(self) -> None:
        if self.max_retries < 0 or self.base_delay_ms < 0 or self.max_delay_ms < 0:
            msg = f"retry policy values must be non-negative, got {self}"
            raise ValueError(msg)

    @property
    def attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, attempt_index: int) -> int:
        """Backoff delay in milliseconds before the retry following attempt_index."""
        return min(self.base_delay_ms * (2**attempt_index), self.max_delay_ms)


DEFAULT_RETRY_POLICY = RetryPolicy()


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP GET operations against metadata APIs."""

    def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        policy: RetryPolicy | None = None,
    ) -> Any: ...


def error_for_status(url: str, status: int) -> MetadataFetchError:
    """Map a non-2xx HTTP status to the matching MetadataFetchError subclass."""
    if status == 404:
        return NotFoundError(f"HTTP 404 from {url}", url=url, status=status)
    if status == 429:
        return RateLimitError(f"HTTP 429 from {url}", url=url, status=status)
    if 400 <= status < 500:
        return ClientError(f"HTTP {status} from {url}", url=url, status=status)
    if status >= 500:
        return TransientNetworkError(f"HTTP {status} from {url}", url=url, status=status)
    return ClientError(f"Unexpected HTTP {status} from {url}", url=url, status=status)


class LexoraHttpClient:
    """HTTP client with retry and backoff for metadata API calls.

    Each get() either returns the decoded JSON body or raises exactly one
    MetadataFetchError: the terminal one immediately, or the last retryable
    one once the policy is exhausted.

    The timeout is enforced twice. httpx applies it to each phase of a
    request (connect, each socket read), and the client also checks a
    wall-clock deadline while the body streams in, so a server that trickles
    bytes cannot hold one attempt open for longer than the timeout.
    """

    def __init__(
        self,
        *,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        monotonic: Callable[[], float] = time.monotonic,
        user_agent: str = _USER_AGENT,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": user_agent},
            "timeout": timeout,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.Client(**client_kwargs)
        self._sleep = sleep
        self._monotonic = monotonic
        self._timeout = timeout

    def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        policy: RetryPolicy | None = None,
    ) -> Any:
        """Send a GET request, retrying transient failures.

        Args:
            url: The URL to request.
            params: Optional query parameters (URL-encoded by httpx).
            headers: Optional extra headers for this request.
            policy: Retry policy; DEFAULT_RETRY_POLICY when omitted.

        Returns:
            Parsed JSON response body.

        Raises:
            NotFoundError: On HTTP 404, without retrying.
            ClientError: On other non-retryable statuses, without retrying.
            MetadataParseError: When a 2xx body is not valid JSON.
            RateLimitError: When 429 persists through every attempt.
            TransientNetworkError: When network errors, 5xx or slow bodies persist.
        """
        policy = policy or DEFAULT_RETRY_POLICY

        for attempt in range(policy.max_retries):
            try:
                body = self._attempt(url, params, headers)
            except _RETRYABLE_ERRORS as exc:
                delay_ms = policy.delay_for(attempt)
                logger.info(
                    "%s, retrying in %dms (attempt %d/%d)",
                    exc,
                    delay_ms,
                    attempt + 1,
                    policy.attempts,
                )
                self._sleep(delay_ms / 1000)
                continue
            if attempt > 0:
                logger.info("Request to %s succeeded on attempt %d", url, attempt + 1)
            return body

        # Final attempt: a retryable failure here is the one the caller sees.
        try:
            body = self._attempt(url, params, headers)
        except _RETRYABLE_ERRORS as exc:
            logger.warning("All %d attempts failed for %s: %s", policy.attempts, url, exc)
            raise
        if policy.max_retries > 0:
            logger.info("Request to %s succeeded on attempt %d", url, policy.attempts)
        return body

    def close(self) -> None:
        self._client.close()

    def _attempt(
        self,
        url: str,
        params: dict[str, str] | None,
        headers: dict[str, str] | None,
    ) -> Any:
        """Issue one request, bounded by the wall-clock deadline, and classify its outcome."""
        deadline = self._monotonic() + self._timeout
        try:
            with self._client.stream("GET", url, params=params, headers=headers) as response:
                if not response.is_success:
                    raise error_for_status(url, response.status_code)
                chunks: list[bytes] = []
                for chunk in response.iter_bytes():
                    if self._monotonic() > deadline:
                        raise TransientNetworkError(
                            f"Request exceeded {self._timeout:g}s deadline: {url}", url=url
                        )
                    chunks.append(chunk)
                status = response.status_code
        except httpx.TimeoutException as exc:
            raise TransientNetworkError(f"Request timed out: {url}", url=url) from exc
        except httpx.TransportError as exc:
            raise TransientNetworkError(f"Request failed: {url}: {exc}", url=url) from exc

        try:
            return json.loads(b"".join(chunks))
        except ValueError as exc:
            raise MetadataParseError(f"Invalid JSON from {url}", url=url, status=status) from exc
