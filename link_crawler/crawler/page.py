# link_crawler/crawler/page.py
"""
Page: one fetch target and the in-scope links found on it.

Bytes are pushed in with :meth:`Page.feed` as they arrive from the fetcher;
each chunk runs through :class:`LinkExtractor` and every href through
:func:`accept_and_normalize`. A page never touches the network.
"""
from __future__ import annotations

import codecs
from dataclasses import dataclass, field
from typing import List, Optional, Set

from bs4.dammit import EncodingDetector

from link_crawler.crawler.link_extractor import LinkExtractor
from link_crawler.logger import logger
from link_crawler.utils import accept_and_normalize

__all__ = ("Page",)

#: bytes buffered before the document charset is guessed
SNIFF_BYTES = 1024
DEFAULT_ENCODING = "utf-8"


@dataclass(slots=True)
class Page:
    """URL страницы, ограничение по хосту и множество найденных ссылок."""

    url: str
    host: str = ""
    links: Set[str] = field(default_factory=set)
    error: Optional[BaseException] = field(default=None, repr=False)
    closed: bool = field(default=False, repr=False)
    _extractor: LinkExtractor = field(default_factory=LinkExtractor, init=False, repr=False)
    _decoder: Optional[codecs.IncrementalDecoder] = field(default=None, init=False, repr=False)
    _head: bytes = field(default=b"", init=False, repr=False)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def feed(self, chunk: bytes) -> None:
        """Push the next chunk of the response body through the pipeline."""
        if self.closed:
            raise RuntimeError(f"page {self.url!r} is already complete")
        if self._decoder is None:
            self._head += chunk
            if len(self._head) < SNIFF_BYTES:
                return
            head, self._head = self._head, b""
            text = self._start_decoding(head)
        else:
            text = self._decode(chunk)
        self._add(self._extractor.feed(text))

    def close(self) -> None:
        """End of body: flush what is buffered and freeze the page."""
        if self.closed:
            return
        if self._decoder is None:
            head, self._head = self._head, b""
            self._add(self._extractor.feed(self._start_decoding(head)))
        self._add(self._extractor.feed(self._decode(b"", final=True)))
        self._add(self._extractor.close())
        self.closed = True

    def fail(self, error: BaseException) -> None:
        """The fetch failed: keep the error, drop partial links, freeze."""
        self.error = error
        self.links.clear()
        self.closed = True

    def sorted_links(self) -> List[str]:
        return sorted(self.links)

    def _add(self, hrefs: List[str]) -> None:
        for href in hrefs:
            link = accept_and_normalize(href, self.url, self.host)
            if link is not None:
                self.links.add(link)

    def _decode(self, data: bytes, final: bool = False) -> str:
        try:
            return self._decoder.decode(data, final)
        except (UnicodeError, ValueError) as exc:
            logger.debug("Decoding %s failed mid-stream (%s), switching to %s", self.url, exc, DEFAULT_ENCODING)
            self._decoder = _text_decoder(DEFAULT_ENCODING)
            return self._decoder.decode(data, final)

    def _start_decoding(self, head: bytes) -> str:
        head, bom_encoding = EncodingDetector.strip_byte_order_mark(head)
        declared = EncodingDetector.find_declared_encoding(head, is_html=True)
        for encoding in (bom_encoding, declared):
            decoder = _text_decoder(encoding)
            if decoder is None:
                continue
            try:
                text = decoder.decode(head)
            except (UnicodeError, ValueError):
                logger.debug("Charset %s does not fit %s, trying next", encoding, self.url)
                continue
            self._decoder = decoder
            return text
        self._decoder = _text_decoder(DEFAULT_ENCODING)
        return self._decoder.decode(head)


def _text_decoder(encoding: Optional[str]) -> Optional[codecs.IncrementalDecoder]:
    """Incremental decoder for a text codec; None for unknown or bytes-to-bytes codecs."""
    if not encoding:
        return None
    try:
        info = codecs.lookup(encoding)
    except LookupError:
        return None
    if not getattr(info, "_is_text_encoding", True) or info.incrementaldecoder is None:
        return None
    return info.incrementaldecoder(errors="replace")
