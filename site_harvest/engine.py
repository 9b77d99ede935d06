# File: site_harvest/engine.py
"""site_harvest.engine: orchestration of one crawl run, from seed sitemaps to persisted pages."""

from __future__ import annotations

from typing import List, Optional

from site_harvest.config import CrawlerConfig
from site_harvest.crawler.dispatcher import Dispatcher
from site_harvest.crawler.fetcher import Fetcher
from site_harvest.crawler.frontier import Frontier
from site_harvest.crawler.models import CrawlStats, SitemapEntry
from site_harvest.crawler.sitemap_resolver import SitemapResolver
from site_harvest.logger import logger
from site_harvest.storage import BlobStore, DatasetStore, KeyValueStore, RowStore
from site_harvest.utils import remove_duplicates

__all__ = ["resolve_sitemaps", "start_crawl"]


async def resolve_sitemaps(resolver: SitemapResolver, sitemaps: List[str]) -> List[SitemapEntry]:
    """Resolve every seed sitemap in order and drop repeated (url, sitemap) pairs."""
    entries: List[SitemapEntry] = []
    for sitemap in sitemaps:
        entries.extend(await resolver.resolve(sitemap))
    return remove_duplicates(entries)


async def start_crawl(
    cfg: CrawlerConfig,
    row_store: Optional[RowStore] = None,
    blob_store: Optional[BlobStore] = None,
) -> CrawlStats:
    """
    Run a complete crawl described by *cfg*.

    Parameters
    ----------
    cfg : CrawlerConfig
        Validated crawl configuration.
    row_store, blob_store
        Sinks for page rows and full documents; file stores under
        ``cfg.storage_dir`` are used when omitted.

    Returns
    -------
    CrawlStats
        Counters of the run.
    """
    rows = row_store if row_store is not None else DatasetStore(cfg.storage_dir)
    blobs = blob_store if blob_store is not None else KeyValueStore(cfg.storage_dir)

    async with Fetcher(cfg) as fetcher:
        seeds = await resolve_sitemaps(SitemapResolver(fetcher), cfg.sitemap_urls)
        logger.info("Resolved %d URLs from %d sitemaps", len(seeds), len(cfg.sitemap_urls))

        frontier = Frontier(cfg.max_requests_per_crawl, follow_internal_only=cfg.follow_internal_only)
        dispatcher = Dispatcher(cfg, fetcher, frontier, rows, blobs)
        stats = await dispatcher.run(seeds)

    stats.sitemap_urls = len(seeds)
    return stats
