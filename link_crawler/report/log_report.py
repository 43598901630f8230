"""Plain-text rendering of the crawl result to the project log stream."""
from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from link_crawler.logger import logger as project_logger


def render_log(links: Mapping[str, Sequence[str]], log: Optional[logging.Logger] = None) -> None:
    """Log every page with its link count and links, sorted by page then by link."""
    log = log or project_logger
    for page in sorted(links):
        page_links = sorted(links[page])
        log.info("Page: %s No of Links: %d", page, len(page_links))
        for link in page_links:
            log.info("\tLink: %s", link)
        log.info("-----")
