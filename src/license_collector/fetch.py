"""Deduplicating HTTP fetch layer used by the remote license fallback.

Many packages in a dependency tree point at the same repository, so the
candidate license URLs of different packages overlap. ``FetchCache`` issues
at most one request per URL for its whole lifetime, and ``CandidateRacer``
fetches a package's candidate URLs concurrently while still honoring their
declared order.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Optional, Protocol

import aiohttp

from license_collector.models import FetchResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class Fetcher(Protocol):
    """Anything with an async ``fetch(url)`` returning a FetchResult."""

    async def fetch(self, url: str) -> FetchResult: ...


class FetchCache:
    """Single-flight memoizing fetch client keyed by URL.

    The first caller for a URL starts the request; every concurrent or later
    caller awaits the same task and observes the same result (or the same
    exception). Entries are never evicted.

    Attributes:
        timeout: Per-request timeout applied to every fetch.
        request_count: Number of underlying network requests issued.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the cache.

        Args:
            session: Optional aiohttp session to use. If not provided, one is
                created on first use and closed by :meth:`close`.
            timeout: Per-request timeout in seconds.
        """
        self._session = session
        self._owns_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._entries: dict[str, asyncio.Task[FetchResult]] = {}
        self.request_count = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session.

        Returns:
            The shared aiohttp ClientSession.
        """
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def fetch(self, url: str) -> FetchResult:
        """Fetch a URL, sharing one request among all callers.

        Args:
            url: Exact URL to fetch. Different spellings are different keys.

        Returns:
            The FetchResult for the URL. Non-2xx responses and timeouts give
            ``ok=False``.

        Raises:
            aiohttp.ClientError: On transport failures such as refused
                connections or DNS errors.
        """
        task = self._entries.get(url)
        if task is None:
            task = asyncio.ensure_future(self._request(url))
            task.add_done_callback(_observe_failure)
            self._entries[url] = task
        else:
            logger.debug("Fetch cache hit for %s", url)
        # Shielded so a cancelled caller never cancels the shared request
        return await asyncio.shield(task)

    async def _request(self, url: str) -> FetchResult:
        """Issue the underlying GET request for a URL."""
        self.request_count += 1
        session = await self._get_session()
        logger.debug("Fetching %s", url)

        try:
            async with session.get(url, timeout=self.timeout) as response:
                if 200 <= response.status < 300:
                    body = await response.text(errors="replace")
                    return FetchResult(url=url, ok=True, status=response.status, body=body)
                logger.debug("Fetching %s returned status %d", url, response.status)
                return FetchResult(url=url, ok=False, status=response.status)
        except asyncio.TimeoutError:
            logger.warning("Timed out fetching %s", url)
            return FetchResult(url=url, ok=False)

    async def close(self) -> None:
        """Close the aiohttp session if this cache created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "FetchCache":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


def _observe_failure(task: "asyncio.Task[FetchResult]") -> None:
    # Marks the exception as retrieved when every awaiter has gone away
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Shared fetch failed: %s", task.exception())


def response_ok(result: FetchResult) -> bool:
    """Default candidate predicate: the response indicates success."""
    return result.ok


class CandidateRacer:
    """Pick the first candidate URL, by declared order, whose fetch passes.

    All candidates are fetched concurrently through the fetcher. A later
    candidate that answers first never beats an earlier one that also
    passes: the winner is the lowest-indexed passing candidate, returned as
    soon as every candidate before it has completed and failed.
    """

    def __init__(self, fetcher: Fetcher) -> None:
        """Initialize the racer.

        Args:
            fetcher: Fetch client, normally a shared FetchCache.
        """
        self.fetcher = fetcher

    async def _attempt(self, url: str) -> Optional[FetchResult]:
        try:
            return await self.fetcher.fetch(url)
        except aiohttp.ClientError as e:
            logger.warning("Failed to fetch %s: %s", url, e)
            return None

    async def first_matching(
        self,
        urls: Sequence[str],
        predicate: Callable[[FetchResult], bool] = response_ok,
    ) -> Optional[FetchResult]:
        """Return the lowest-indexed candidate whose fetch satisfies predicate.

        Args:
            urls: Candidate URLs in order of preference.
            predicate: Test applied to each completed fetch.

        Returns:
            The winning FetchResult, or None if no candidate passes.
        """
        attempts = [asyncio.ensure_future(self._attempt(url)) for url in urls]
        try:
            for attempt in attempts:
                result = await attempt
                if result is not None and predicate(result):
                    return result
            return None
        finally:
            # Losing candidates stop waiting; shared cache requests keep going
            for attempt in attempts:
                if not attempt.done():
                    attempt.cancel()
