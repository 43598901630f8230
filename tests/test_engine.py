import pytest

import link_crawler.engine as engine_module
from link_crawler.config import CrawlerConfig
from link_crawler.engine import run_crawl, start_crawl

from conftest import GOOGLE, GOOGLE_LINKS, CannedFetcher


@pytest.mark.asyncio()
async def test_start_crawl_derives_host_from_start_url(google_fetcher: CannedFetcher):
    config = CrawlerConfig(start_url=GOOGLE, concurrency=2)
    assert await start_crawl(config, fetcher=google_fetcher) == GOOGLE_LINKS


def two_host_fetcher() -> CannedFetcher:
    fetcher = CannedFetcher()
    fetcher.add(GOOGLE, '<a href="https://www.w3.org/">W3C</a><a href="/about">About</a>')
    fetcher.add("https://www.w3.org/", '<a href="https://www.w3.org/TR/">TR</a>')
    return fetcher


@pytest.mark.asyncio()
async def test_empty_host_lifts_restriction():
    restricted = await start_crawl(CrawlerConfig(start_url=GOOGLE), fetcher=two_host_fetcher())
    assert restricted[GOOGLE] == [f"{GOOGLE}/about"]

    open_config = CrawlerConfig(start_url=GOOGLE, host="")
    unrestricted = await start_crawl(open_config, fetcher=two_host_fetcher())
    assert unrestricted[GOOGLE] == [f"{GOOGLE}/about", "https://www.w3.org/"]
    assert unrestricted["https://www.w3.org/"] == ["https://www.w3.org/TR/"]
    assert "https://www.w3.org/TR/" in unrestricted


def test_run_crawl_blocks_until_done(monkeypatch):
    seen = {}

    async def fake_start(cfg):
        seen["cfg"] = cfg
        return {cfg.start_url: []}

    monkeypatch.setattr(engine_module, "start_crawl", fake_start)
    config = CrawlerConfig(start_url="https://example.com")
    assert run_crawl(config) == {"https://example.com": []}
    assert seen["cfg"] is config


def test_run_crawl_reraises(monkeypatch):
    async def broken(cfg):
        raise RuntimeError("boom")

    monkeypatch.setattr(engine_module, "start_crawl", broken)
    with pytest.raises(RuntimeError):
        run_crawl(CrawlerConfig(start_url="https://example.com"))
