# link_crawler/crawler/link_extractor.py
"""
Incremental extraction of anchor hrefs from an HTML stream.

Markup is tokenized with the ``html.parser`` tokenizer (the same one we hand
to BeautifulSoup elsewhere), fed chunk by chunk, so a page never has to be
buffered in full before its links are known.
"""
from __future__ import annotations

from html.parser import HTMLParser
from typing import List, Optional, Tuple

from link_crawler.logger import logger

__all__ = ("LinkExtractor",)

_ANCHOR = "a"
_LINK_REF = "href"


class LinkExtractor(HTMLParser):
    """
    Collects raw ``href`` values of ``<a>`` tags in document order.

    No filtering or deduplication happens here. A tokenizer error stops the
    extraction: the extractor is marked broken and reports nothing further.
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.broken = False
        self._found: List[str] = []

    def feed(self, data: str) -> List[str]:  # type: ignore[override]
        """Tokenize *data* and return hrefs of anchors completed by it."""
        if not self.broken:
            try:
                super().feed(data)
            except (AssertionError, ValueError) as exc:
                self._break(exc)
        return self._drain()

    def close(self) -> List[str]:  # type: ignore[override]
        """Flush buffered markup at end of stream."""
        if not self.broken:
            try:
                super().close()
            except (AssertionError, ValueError) as exc:
                self._break(exc)
        return self._drain()

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        if tag != _ANCHOR:
            return
        for name, value in attrs:
            if name == _LINK_REF:
                self._found.append(value or "")

    def _break(self, exc: Exception) -> None:
        logger.debug("Stopped extracting links after parse error: %s", exc)
        self.broken = True

    def _drain(self) -> List[str]:
        found, self._found = self._found, []
        return found
