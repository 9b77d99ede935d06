# site_harvest/crawler/sitemap_resolver.py
"""
Recursive expansion of sitemap indexes into a flat list of page URLs.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Set
from urllib.parse import urljoin

from site_harvest.crawler.fetcher import Fetcher
from site_harvest.crawler.models import SitemapEntry
from site_harvest.parser.sitemap_parser import parse_sitemap
from site_harvest.utils import normalize_url, remove_duplicates

__all__ = ("SitemapResolver",)


class SitemapResolver:
    """Resolve sitemap and sitemap-index URLs to :class:`SitemapEntry` lists.

    Every call to :meth:`resolve` gets its own visited set which is shared by
    the whole recursive call tree: a sitemap is fetched at most once per
    call, so indexes that point at themselves or at each other terminate.
    Failures of one branch are logged and yield an empty list for that
    branch only.
    """

    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher
        self.logger = logging.getLogger("SiteHarvest.sitemap")

    async def resolve(self, url: str) -> List[SitemapEntry]:
        entries = await self._resolve(url, visited=set())
        return remove_duplicates(entries)

    async def _resolve(self, url: str, visited: Set[str]) -> List[SitemapEntry]:
        key = normalize_url(url)
        if key is None:
            self.logger.warning("Skipping invalid sitemap URL: %r", url)
            return []
        if key in visited:
            self.logger.debug("Sitemap already visited, skipping: %s", key)
            return []
        visited.add(key)

        text = await self._fetch_text(key)
        if text is None:
            return []

        doc = parse_sitemap(text)
        if doc.is_index:
            self.logger.info("Sitemap index %s lists %d sitemaps", key, len(doc.locs))
            targets = [u for u in (_join(key, loc) for loc in doc.locs) if u]
            nested = await asyncio.gather(*(self._resolve(u, visited) for u in targets))
            return [entry for branch in nested for entry in branch]

        self.logger.info("Sitemap %s lists %d URLs", key, len(doc.locs))
        return [
            SitemapEntry(url=u, source_sitemap=key)
            for u in (_join(key, loc) for loc in doc.locs)
            if u
        ]

    async def _fetch_text(self, url: str) -> Optional[str]:
        result = await self.fetcher.fetch(url, follow_redirects=True)
        if not result.ok:
            self.logger.warning("Failed to fetch sitemap %s: %s", url, result.error)
            return None
        return result.body


def _join(base: str, loc: str) -> Optional[str]:
    try:
        return urljoin(base, loc)
    except ValueError:
        return None
