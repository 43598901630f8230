# === FILE: link_crawler/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from contextlib import aclosing
from typing import Dict, List, Optional

from link_crawler.crawler.fetcher import FetchError, Fetcher
from link_crawler.crawler.page import Page
from link_crawler.logger import logger
from link_crawler.utils import parse_url

__all__ = ("AsyncCrawler", "InvalidStartURL", "PageLinks", "DEFAULT_CONCURRENCY")

#: page URL -> links found on that page
PageLinks = Dict[str, List[str]]

DEFAULT_CONCURRENCY = 20


class InvalidStartURL(ValueError):
    """The seed URL cannot be parsed; raised before anything is fetched."""

    def __init__(self, url: str, reason: Exception) -> None:
        super().__init__(f"invalid start URL {url!r}: {reason}")
        self.url = url


def check_start_url(url: str) -> None:
    try:
        parse_url(url)
    except ValueError as exc:
        raise InvalidStartURL(url, exc) from exc


class AsyncCrawler:
    """
    Level-by-level (BFS) crawler restricted to one host.

    Every level is fetched concurrently, at most ``concurrency`` pages at a
    time, and fully joined before the next frontier is computed. The result
    map is written only here, after the join, never from fetch tasks.

    ``stop_event`` and ``deadline`` (seconds from the start of :meth:`crawl`)
    stop the crawl softly: fetches in flight are cancelled and recorded as
    failed pages, no further level starts, and the links gathered so far are
    returned.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        start_url: str,
        host: str,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
        deadline: Optional[float] = None,
        stop_event: Optional[asyncio.Event] = None,
    ) -> None:
        check_start_url(start_url)
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        if deadline is not None and deadline <= 0:
            raise ValueError("deadline must be > 0")
        self.fetcher = fetcher
        self.start_url = start_url
        self.host = host
        self.concurrency = concurrency
        self.deadline = deadline
        self.stop_event = stop_event if stop_event is not None else asyncio.Event()
        self.links: PageLinks = {}
        self.failed: Dict[str, str] = {}
        self.levels = 0

    async def crawl(self) -> PageLinks:
        logger.info("Crawling %s...", self.start_url)
        start = time.monotonic()
        loop = asyncio.get_running_loop()
        deadline_at = None if self.deadline is None else loop.time() + self.deadline

        frontier: Dict[str, Page] = {self.start_url: Page(self.start_url, self.host)}
        while frontier:
            if deadline_at is not None and loop.time() >= deadline_at:
                self.stop_event.set()
            if self.stop_event.is_set():
                logger.warning("Crawl stopped, %d pages left unvisited", len(frontier))
                break
            fetched = await self._fetch_level(frontier, deadline_at)
            frontier = self._next_frontier(fetched)

        duration = time.monotonic() - start
        logger.info(
            "Finished: %d pages (%d failed) in %d levels, %.2f s",
            len(self.links), len(self.failed), self.levels, duration,
        )
        return self.links

    async def _fetch_level(self, frontier: Dict[str, Page], deadline_at: Optional[float]) -> List[Page]:
        pages = [page for url, page in frontier.items() if url not in self.links]
        logger.debug("Level %d: fetching %d pages", self.levels + 1, len(pages))
        semaphore = asyncio.Semaphore(self.concurrency)
        tasks = [asyncio.create_task(self._get_page(semaphore, page)) for page in pages]
        watcher = asyncio.create_task(self._watch(tasks, deadline_at))
        try:
            outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            watcher.cancel()
            await asyncio.gather(watcher, return_exceptions=True)
        for page, outcome in zip(pages, outcomes):
            if isinstance(outcome, (FetchError, asyncio.CancelledError)):
                reason = str(outcome) or "cancelled"
                logger.warning("Error reading page %s: %s", page.url, reason)
                page.fail(outcome)
                self.failed[page.url] = reason
            elif isinstance(outcome, BaseException):
                raise outcome
        self.levels += 1
        return pages

    async def _get_page(self, semaphore: asyncio.Semaphore, page: Page) -> None:
        async with semaphore:
            async with aclosing(self.fetcher.get(page.url)) as body:
                async for chunk in body:
                    page.feed(chunk)
        page.close()

    async def _watch(self, tasks: List[asyncio.Task], deadline_at: Optional[float]) -> None:
        """Cancel the level's fetches once the crawl is told to stop."""
        try:
            async with asyncio.timeout_at(deadline_at):
                await self.stop_event.wait()
        except TimeoutError:
            logger.warning("Crawl deadline of %.2f s reached", self.deadline)
            self.stop_event.set()
        for task in tasks:
            task.cancel()

    def _next_frontier(self, fetched: List[Page]) -> Dict[str, Page]:
        for page in fetched:
            self.links[page.url] = page.sorted_links()
        frontier: Dict[str, Page] = {}
        for page in fetched:
            for link in page.links:
                if link not in self.links and link not in frontier:
                    frontier[link] = Page(link, self.host)
        return frontier
