"""Crawl engine, page model, link extraction and the fetch capability."""
from link_crawler.crawler.crawler import DEFAULT_CONCURRENCY, AsyncCrawler, InvalidStartURL, PageLinks
from link_crawler.crawler.fetcher import Fetcher, FetchError, HttpFetcher
from link_crawler.crawler.link_extractor import LinkExtractor
from link_crawler.crawler.page import Page

__all__ = [
    "AsyncCrawler",
    "DEFAULT_CONCURRENCY",
    "Fetcher",
    "FetchError",
    "HttpFetcher",
    "InvalidStartURL",
    "LinkExtractor",
    "Page",
    "PageLinks",
]
