# File: link_crawler/engine.py
"""link_crawler.engine: точка входа обхода, от seed URL до карты «страница → ссылки»."""

from __future__ import annotations

import asyncio
from typing import Optional

from link_crawler.config import CrawlerConfig
from link_crawler.crawler.crawler import DEFAULT_CONCURRENCY, AsyncCrawler, PageLinks, check_start_url
from link_crawler.crawler.fetcher import DEFAULT_CHUNK_SIZE, DEFAULT_USER_AGENT, Fetcher, HttpFetcher
from link_crawler.logger import logger
from link_crawler.utils import extract_host

__all__ = ["crawl", "start_crawl", "run_crawl"]


async def crawl(
    start_url: str,
    host: str,
    *,
    fetcher: Optional[Fetcher] = None,
    concurrency: int = DEFAULT_CONCURRENCY,
    deadline: Optional[float] = None,
    stop_event: Optional[asyncio.Event] = None,
    user_agent: str = DEFAULT_USER_AGENT,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> PageLinks:
    """Обходит все страницы хоста *host*, достижимые из *start_url*.

    Без *fetcher* открывается собственный HttpFetcher на время обхода.
    Единственная фатальная ошибка: InvalidStartURL, до первого запроса.
    """
    check_start_url(start_url)
    options = dict(concurrency=concurrency, deadline=deadline, stop_event=stop_event)
    if fetcher is not None:
        return await AsyncCrawler(fetcher, start_url, host, **options).crawl()
    async with HttpFetcher(user_agent=user_agent, chunk_size=chunk_size) as http:
        return await AsyncCrawler(http, start_url, host, **options).crawl()


async def start_crawl(config: CrawlerConfig, fetcher: Optional[Fetcher] = None) -> PageLinks:
    """Запускает обход по проверенной конфигурации; host выводится из start_url, если не задан."""
    host = config.host if config.host is not None else extract_host(config.start_url)
    logger.debug("Host restriction: %r, concurrency: %d", host, config.concurrency)
    return await crawl(
        config.start_url,
        host,
        fetcher=fetcher,
        concurrency=config.concurrency,
        deadline=config.deadline,
        user_agent=config.user_agent,
        chunk_size=config.chunk_size,
    )


def run_crawl(config: CrawlerConfig) -> PageLinks:
    """Блокирующая обёртка над start_crawl для CLI и скриптов."""
    try:
        return asyncio.run(start_crawl(config))
    except Exception as exc:
        logger.error("Crawl failed: %s", exc)
        raise
