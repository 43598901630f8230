# File: link_crawler/utils.py
"""link_crawler.utils: URL parsing and the link scoping / normalization rules applied to every href."""

from __future__ import annotations

import re
from typing import Optional, Sequence
from urllib.parse import SplitResult, urlsplit

from link_crawler.logger import logger

__all__: Sequence[str] = (
    "parse_url",
    "extract_host",
    "is_in_scope",
    "normalize_link",
    "accept_and_normalize",
)

# Extensions of schemeless hrefs that are treated as pages of the same site.
_PAGE_EXTENSIONS = ("", ".html")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_url(url: str) -> SplitResult:
    """Разбирает URL строго: ValueError там, где urlsplit молча угадывает.

    Rejects control characters, a colon inside the first path segment of a
    schemeless reference (``http$://`` is not a scheme), broken IPv6
    literals, malformed percent-escapes outside the query and non-numeric
    ports.
    """
    if _CONTROL_CHARS_RE.search(url):
        raise ValueError(f"invalid control character in URL {url!r}")
    parts = urlsplit(url)
    if not parts.scheme and ":" in parts.path.split("/", 1)[0]:
        raise ValueError(f"first path segment in URL cannot contain colon: {url!r}")
    for component in (parts.netloc, parts.path, parts.fragment):
        if _BAD_ESCAPE_RE.search(component):
            raise ValueError(f"invalid URL escape in {url!r}")
    _ = parts.port
    return parts


def _host_of(parts: SplitResult) -> str:
    """host[:port] без userinfo."""
    return parts.netloc.rpartition("@")[2]


def _extension(href: str) -> str:
    """Suffix from the last dot of the last slash-separated element, dot included."""
    name = href.rpartition("/")[2]
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def extract_host(url: str) -> str:
    """Возвращает host[:port] из URL; пустая строка, если хоста нет."""
    return _host_of(parse_url(url))


def is_in_scope(href: str, host: str) -> bool:
    """Decide whether an (already trimmed) href may be followed.

    Same-page fragments, parent-relative paths and unparsable hrefs are
    rejected. Otherwise the link is in scope when it has no scheme and looks
    like a page (no extension or ``.html``), when its host equals *host*, or
    when *host* is empty.
    """
    if not href or href.startswith(("#", "..")):
        return False
    try:
        parts = parse_url(href)
    except ValueError:
        return False
    if not parts.scheme and _extension(href) in _PAGE_EXTENSIONS:
        return True
    return not host or _host_of(parts) == host


def normalize_link(href: str, page_url: str) -> str:
    """Make *href* absolute against the scheme and host of *page_url*.

    Absolute hrefs are returned untouched. Relative ones are appended to
    ``scheme://host`` of the page; ``/`` is inserted between them only when
    neither side supplies it. Dot segments are not resolved.
    """
    try:
        parts = parse_url(href)
    except ValueError:
        logger.debug("Error parsing url: %s", href)
        return href
    if _host_of(parts) or not page_url:
        return href
    try:
        base = parse_url(page_url)
    except ValueError:
        logger.warning("Error parsing page url: %s", page_url)
        return href
    base_host = _host_of(base)
    separator = "" if href.startswith("/") or base_host.endswith("/") else "/"
    return f"{base.scheme}://{base_host}{separator}{href}"


def accept_and_normalize(raw_href: str, page_url: str, host: str) -> Optional[str]:
    """Return the absolute form of *raw_href* or None when it is out of scope."""
    href = raw_href.strip()
    if not is_in_scope(href, host):
        return None
    return normalize_link(href, page_url)
