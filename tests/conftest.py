from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, Dict, List

import pytest
import pytest_asyncio
from aiohttp import web

from helpers import MemoryBlobStore, MemoryRowStore, Route, make_app
from site_harvest.config import CrawlerConfig
from site_harvest.crawler.fetcher import Fetcher


@pytest.fixture()
def row_store() -> MemoryRowStore:
    return MemoryRowStore()


@pytest.fixture()
def blob_store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture()
def make_config(tmp_path) -> Callable[..., CrawlerConfig]:
    """
    Return a factory of CrawlerConfig objects tuned for fast local tests.
    Keyword arguments override the defaults.
    """

    def _make(**overrides: Any) -> CrawlerConfig:
        data: Dict[str, Any] = {
            "sitemaps": ["http://example.com/sitemap.xml"],
            "max_requests_per_crawl": 100,
            "concurrency": 4,
            "request_timeout": 5.0,
            "user_agent": "TestAgent/1.0",
            "retry_times": 0,
            "retry_backoff": 0.0,
            "storage_dir": tmp_path / "storage",
        }
        data.update(overrides)
        return CrawlerConfig(**data)

    return _make


@pytest.fixture()
def basic_config(make_config) -> CrawlerConfig:
    return make_config()


@pytest_asyncio.fixture
async def fetcher(basic_config) -> AsyncIterator[Fetcher]:
    async with Fetcher(basic_config) as f:
        yield f


@pytest_asyncio.fixture
async def serve(unused_tcp_port_factory) -> AsyncIterator[Callable[[Dict[str, Route]], Awaitable[str]]]:
    """Start local test servers on demand and return their base URL; clean up afterwards."""
    runners: List[web.AppRunner] = []

    async def _serve(routes: Dict[str, Route]) -> str:
        port = unused_tcp_port_factory()
        runner = web.AppRunner(make_app(routes))
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}"

    yield _serve
    for runner in runners:
        await runner.cleanup()
