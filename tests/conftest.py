# File: tests/conftest.py
import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pytest
from aiohttp import web

from link_crawler.crawler.fetcher import FetchError

GOOGLE = "https://www.google.com"

#: page with absolute and relative links, Google linked twice
LINKS_HTML = (
    "<!DOCTYPE html>"
    "<html>"
    "<body>"
    "<h2>Absolute URLs</h2>"
    '<p><a href="https://www.w3.org/">W3C</a></p>'
    '<p><a href="https://www.google.com/">Google</a></p>'
    '<p><a href="https://www.google.com/">Google</a></p>'
    "<h2>Relative URLs</h2>"
    '<p><a href="html_images.asp">HTML Images</a></p>'
    '<p><a href="/css/default.asp">CSS Tutorial</a></p>'
    "</body>"
    "</html>"
)

#: small site: seed -> contacts, help, search, seed; contacts -> test;
#: help -> search; search -> test, help; test -> seed
GOOGLE_SITE: Dict[str, str] = {
    GOOGLE: (
        "<html><head><title>Google</title></head><body>"
        '<a href="#main">Skip</a>'
        '<a href="/contacts">Contacts</a>'
        '<a href="/help">Help</a>'
        '<a href="/search">Search</a>'
        '<a href="https://www.google.com">Home</a>'
        '<a href="https://www.youtube.com/">YouTube</a>'
        '<a href="/images/logo.png">Logo</a>'
        "</body></html>"
    ),
    f"{GOOGLE}/contacts": '<html><body><a href="/test">Test</a></body></html>',
    f"{GOOGLE}/help": '<html><body><a href="/search">Search</a><a href="/search">Again</a></body></html>',
    f"{GOOGLE}/search": (
        '<html><body><form action="/search"></form>'
        '<a href="/test">Test</a><a href="/help">Help</a></body></html>'
    ),
    f"{GOOGLE}/test": '<html><body><a href="https://www.google.com">Back</a></body></html>',
}

GOOGLE_LINKS: Dict[str, List[str]] = {
    GOOGLE: [GOOGLE, f"{GOOGLE}/contacts", f"{GOOGLE}/help", f"{GOOGLE}/search"],
    f"{GOOGLE}/contacts": [f"{GOOGLE}/test"],
    f"{GOOGLE}/help": [f"{GOOGLE}/search"],
    f"{GOOGLE}/search": [f"{GOOGLE}/help", f"{GOOGLE}/test"],
    f"{GOOGLE}/test": [GOOGLE],
}


@dataclass
class CannedResponse:
    body: bytes
    status: int = 200
    delay: float = 0.0


class CannedFetcher:
    """
    Fetcher returning canned bodies keyed by URL; unknown URLs are 404.

    Bodies are streamed in small chunks. Every fetch is recorded in ``calls``
    and ``events`` (("start"|"end", url)); ``max_in_flight`` tracks the
    highest number of simultaneous fetches.
    """

    def __init__(self, chunk_size: int = 16) -> None:
        self.chunk_size = chunk_size
        self.responses: Dict[str, CannedResponse] = {}
        self.calls: List[str] = []
        self.events: List[Tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def add(self, url: str, body: str | bytes = b"", status: int = 200, delay: float = 0.0) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.responses[url] = CannedResponse(body, status, delay)

    def add_site(self, pages: Dict[str, str], delay: float = 0.0) -> None:
        for url, html in pages.items():
            self.add(url, html, delay=delay)

    async def get(self, url: str) -> AsyncIterator[bytes]:
        self.calls.append(url)
        self.events.append(("start", url))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            response: Optional[CannedResponse] = self.responses.get(url)
            if response is not None and response.delay:
                await asyncio.sleep(response.delay)
            if response is None or response.status != 200:
                status = 404 if response is None else response.status
                raise FetchError(url, f"HTTP {status}", status=status)
            for i in range(0, len(response.body), self.chunk_size):
                yield response.body[i:i + self.chunk_size]
                await asyncio.sleep(0)
        finally:
            self.in_flight -= 1
            self.events.append(("end", url))


@pytest.fixture()
def canned_fetcher() -> CannedFetcher:
    return CannedFetcher()


@pytest.fixture()
def google_fetcher(canned_fetcher: CannedFetcher) -> CannedFetcher:
    canned_fetcher.add_site(GOOGLE_SITE)
    return canned_fetcher


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()
