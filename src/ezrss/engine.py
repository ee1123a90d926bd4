"""Concurrent show search against EZRSS."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import AsyncIterator, Callable, Iterable, Sequence
from contextlib import asynccontextmanager
from typing import Any

import httpx

from ezrss.config import SearchOptions
from ezrss.exceptions import FeedParseError, FetchInProgressError
from ezrss.feed import parse_feed
from ezrss.models import SubjectFailure, SubjectItems
from ezrss.result_set import ResultSet

logger = logging.getLogger(__name__)

FeedParser = Callable[[bytes], Sequence[Any]]
Outcome = SubjectItems | SubjectFailure

SEARCH_PATH = "/search/index.php"


class Search:
    """Search one or more shows on EZRSS.

    One GET request is issued per show, at most ``max_concurrency`` at a
    time. Successful responses are parsed into items and appended to
    ``result_set``; any other response body is kept in ``errors`` under
    the show name. The fetch runs at most once per instance, usually
    triggered by the first read of ``result_set``.

    Args:
        shows: A show name, or an iterable of show names.
        options: Search options. Keyword arguments override its fields.
        client: Optional httpx client. When omitted, one is created for
            the duration of the fetch.
        parser: Feed parser, ``bytes -> items``. Defaults to ``parse_feed``.
    """

    def __init__(
        self,
        shows: str | Iterable[str],
        options: SearchOptions | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        parser: FeedParser | None = None,
        **opts: Any,
    ) -> None:
        unknown = set(opts) - set(SearchOptions.model_fields)
        if unknown:
            raise TypeError(f"Unknown search options: {sorted(unknown)}")
        base = options or SearchOptions()
        self.options = SearchOptions.model_validate({**base.model_dump(), **opts})
        self.max_concurrency = self.options.max_concurrency
        self._shows = [shows] if isinstance(shows, str) else list(shows)
        self._client = client
        self._parser = parser or parse_feed
        self._errors: dict[str, str] = {}
        self._fetched = False
        self._running = False
        self._lock = threading.Lock()
        self.result_set = ResultSet(source=self)

    @property
    def shows(self) -> list[str]:
        return list(self._shows)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    @max_concurrency.setter
    def max_concurrency(self, value: int) -> None:
        if value < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {value}")
        self._max_concurrency = value

    def is_fetched(self) -> bool:
        """Whether the queries were sent and every response was collected."""
        return self._fetched

    @property
    def fetched(self) -> bool:
        return self._fetched

    def search_url(self, show: str) -> str:
        params = {
            "show_name": show,
            "date": "",
            "quality": "",
            "release_group": "",
            "mode": "rss",
        }
        if self.options.exact:
            params["show_name_exact"] = "true"
        scheme = "https" if self.options.ssl else "http"
        url = httpx.URL(f"{scheme}://{self.options.host}{SEARCH_PATH}", params=params)
        return str(url)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def fetch(self) -> ResultSet:
        """Run every query and block until all of them completed.

        Does nothing but return ``result_set`` once the search is fetched.
        """
        with self._lock:
            if self._fetched:
                return self.result_set
            return asyncio.run(self.afetch())

    async def afetch(self) -> ResultSet:
        """Run every query from inside an event loop."""
        if self._fetched:
            return self.result_set
        if self._running:
            raise FetchInProgressError("A fetch is already running for this search")

        self._running = True
        try:
            t0 = time.perf_counter()
            outcomes = await self._run()
            self._commit(outcomes)
            self._fetched = True
        finally:
            self._running = False

        logger.info(
            "Fetched %d shows (%d failed) in %.1fs",
            len(self._shows),
            len(self._errors),
            time.perf_counter() - t0,
        )
        return self.result_set

    async def _run(self) -> list[Outcome]:
        """Fan out one worker per show and collect outcomes in arrival order."""
        queue: asyncio.Queue[Outcome | None] = asyncio.Queue()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async with self._http_client() as client:
            aggregator = asyncio.create_task(self._aggregate(queue))
            workers = [
                asyncio.create_task(self._fetch_show(client, semaphore, queue, show))
                for show in self._shows
            ]
            try:
                await asyncio.gather(*workers)
            except BaseException:
                for worker in workers:
                    worker.cancel()
                aggregator.cancel()
                await asyncio.gather(*workers, aggregator, return_exceptions=True)
                raise

            await queue.put(None)
            return await aggregator

    @staticmethod
    async def _aggregate(queue: asyncio.Queue[Outcome | None]) -> list[Outcome]:
        outcomes: list[Outcome] = []
        while (outcome := await queue.get()) is not None:
            outcomes.append(outcome)
        return outcomes

    async def _fetch_show(
        self,
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
        queue: asyncio.Queue[Outcome | None],
        show: str,
    ) -> None:
        url = self.search_url(show)
        async with semaphore:
            logger.debug("GET %s", url)
            try:
                response = await client.get(url)
            except httpx.RequestError as exc:
                await queue.put(SubjectFailure(subject=show, payload=str(exc)))
                return

        if response.status_code != 200:
            payload = _body_text(response)
            await queue.put(SubjectFailure(subject=show, payload=payload))
            return

        try:
            items = self._parser(response.content)
        except FeedParseError as exc:
            if self.options.parse_errors == "raise":
                raise
            await queue.put(SubjectFailure(subject=show, payload=str(exc)))
            return

        await queue.put(SubjectItems(subject=show, items=list(items)))

    def _commit(self, outcomes: list[Outcome]) -> None:
        for outcome in outcomes:
            if isinstance(outcome, SubjectItems):
                self.result_set.append(outcome.subject, outcome.items)
            else:
                logger.warning(
                    "Show '%s' failed: %.200r", outcome.subject, outcome.payload
                )
                self._errors[outcome.subject] = outcome.payload

    @asynccontextmanager
    async def _http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return

        limits = httpx.Limits(
            max_connections=self.max_concurrency,
            max_keepalive_connections=self.max_concurrency,
        )
        async with httpx.AsyncClient(
            headers={"User-Agent": self.options.user_agent},
            timeout=httpx.Timeout(self.options.timeout_s),
            limits=limits,
        ) as client:
            yield client


def _body_text(response: httpx.Response) -> str:
    """Decode a response body without losing bytes.

    Undecodable bytes are kept as surrogate escapes, so
    ``payload.encode(encoding, "surrogateescape")`` gives back the body.
    """
    encoding = response.encoding or "utf-8"
    try:
        return response.content.decode(encoding, errors="surrogateescape")
    except LookupError:
        return response.content.decode("utf-8", errors="surrogateescape")
