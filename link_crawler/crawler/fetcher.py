"""
Fetcher module: the fetch capability the crawler depends on, plus its HTTP implementation.
"""
from __future__ import annotations

import asyncio
from typing import AsyncIterator, Optional, Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout

from link_crawler.logger import logger

__all__ = ("FetchError", "Fetcher", "HttpFetcher", "DEFAULT_USER_AGENT", "DEFAULT_CHUNK_SIZE")

DEFAULT_USER_AGENT = "LinkCrawler/0.1"
DEFAULT_CHUNK_SIZE = 64 * 1024


class FetchError(Exception):
    """A page could not be fetched: non-2xx status, transport or read error."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        super().__init__(url, reason, status)
        self.url = url
        self.reason = reason
        self.status = status

    def __str__(self) -> str:
        return f"{self.url}: {self.reason}"


class Fetcher(Protocol):
    """Anything that can stream the body behind a URL."""

    def get(self, url: str) -> AsyncIterator[bytes]:
        """Yield the response body in chunks; raise FetchError on failure."""
        ...


class HttpFetcher:
    """
    Streams page bodies over HTTP with a shared aiohttp session.

    No client timeout is configured: a fetch only ends early when the task
    running it is cancelled. Redirects are followed.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.user_agent = user_agent
        self.chunk_size = chunk_size
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> HttpFetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(),
                headers={"User-Agent": self.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def get(self, url: str) -> AsyncIterator[bytes]:
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(url) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(url, f"HTTP {resp.status}", status=resp.status)
                logger.debug("GET %s -> %s", url, resp.status)
                async for chunk in resp.content.iter_chunked(self.chunk_size):
                    yield chunk
        except (ClientError, ValueError, asyncio.TimeoutError) as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
