"""Builders shared by the test-suite: in-memory sinks, test apps and sitemap bodies."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Dict, List, Union

from aiohttp import web

from site_harvest.crawler.models import PageRecord

#: value of a route: HTML text, (body, content_type), or a ready aiohttp handler
Route = Union[str, tuple, Callable[[web.Request], Awaitable[web.StreamResponse]]]


class MemoryRowStore:
    """Row sink keeping records in a list."""

    def __init__(self) -> None:
        self.records: List[PageRecord] = []

    def append(self, record: PageRecord) -> None:
        self.records.append(record)

    @property
    def urls(self) -> set[str]:
        return {r.url for r in self.records}


class MemoryBlobStore:
    """Blob sink keeping documents in a dict and recording every put."""

    def __init__(self) -> None:
        self.data: Dict[str, Any] = {}
        self.puts: List[str] = []

    def put(self, key: str, value: Any) -> None:
        self.puts.append(key)
        self.data[key] = value


def _route_handler(value: Route):
    if callable(value):
        return value
    if isinstance(value, tuple):
        body, content_type = value
    else:
        body, content_type = value, "text/html"

    async def handler(request: web.Request) -> web.Response:
        origin = str(request.url.origin())
        return web.Response(text=body.replace("{base}", origin), content_type=content_type)

    return handler


def make_app(routes: Dict[str, Route]) -> web.Application:
    """Build an aiohttp app; ``{base}`` in text bodies becomes the server origin."""
    app = web.Application()
    for path, value in routes.items():
        app.router.add_get(path, _route_handler(value))
    return app


def urlset(*urls: str) -> tuple[str, str]:
    """Sitemap urlset body for the given <loc> values."""
    items = "".join(f"<url><loc>{u}</loc></url>" for u in urls)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{items}</urlset>',
        "application/xml",
    )


def sitemap_index(*urls: str) -> tuple[str, str]:
    """Sitemap index body for the given nested sitemap locations."""
    items = "".join(f"<sitemap><loc>{u}</loc></sitemap>" for u in urls)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{items}</sitemapindex>',
        "application/xml",
    )


def page(title: str, *links: str, body: str = "") -> str:
    """Small HTML page with a title and links."""
    anchors = "".join(f'<a href="{href}">{href}</a>' for href in links)
    return f"<html><head><title>{title}</title></head><body>{body}{anchors}</body></html>"
