# === FILE: site_harvest/crawler/dispatcher.py ===
"""Bounded-concurrency crawl loop that turns admitted tasks into persisted page records."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional, Sequence

from site_harvest.config import CrawlerConfig
from site_harvest.crawler.fetcher import Fetcher
from site_harvest.crawler.frontier import Frontier
from site_harvest.crawler.link_extractor import extract_links
from site_harvest.crawler.models import CrawlStats, CrawlTask, FetchResult, PageRecord, SitemapEntry
from site_harvest.parser.html_parser import PageMetadata, extract_metadata
from site_harvest.storage import BlobStore, RowStore
from site_harvest.utils import blob_key, url_host

__all__ = ("Dispatcher",)

PageProcessor = Callable[[str, str], PageMetadata]
LinkExtractor = Callable[[str, str], List[str]]


class Dispatcher:
    """Fixed-size pool of asyncio workers draining a shared task queue.

    Each worker fetches a task and hands the body to the page processor.
    The record goes to both sinks before the page is mined for links, so a
    page that breaks link discovery is still stored. The run ends once the
    queue is empty and no worker is busy.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        fetcher: Fetcher,
        frontier: Frontier,
        row_store: RowStore,
        blob_store: BlobStore,
        page_processor: Optional[PageProcessor] = None,
        link_extractor: LinkExtractor = extract_links,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.frontier = frontier
        self.row_store = row_store
        self.blob_store = blob_store
        self.page_processor = page_processor or self._default_processor
        self.link_extractor = link_extractor
        self.concurrency = config.concurrency
        self.stats = CrawlStats()
        self.logger = logging.getLogger("SiteHarvest.dispatcher")

    def _default_processor(self, html: str, url: str) -> PageMetadata:
        return extract_metadata(html, url, extract_main_text=self.config.extract_main_text)

    async def run(self, seeds: Sequence[SitemapEntry]) -> CrawlStats:
        self.logger.info("Crawl started: %d seed URLs, %d workers", len(seeds), self.concurrency)
        start = time.monotonic()
        queue: asyncio.Queue[CrawlTask] = asyncio.Queue()
        for seed in seeds:
            host = url_host(seed.url)
            if host is None:
                self.logger.debug("Seed skipped, not a URL: %r", seed.url)
                continue
            task = self.frontier.try_admit(seed.url, host, seed.source_sitemap, depth=0)
            if task is not None:
                queue.put_nowait(task)

        workers = [asyncio.create_task(self._worker(queue)) for _ in range(self.concurrency)]
        try:
            await queue.join()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        self.stats.admitted = self.frontier.admitted_count
        self.stats.duration = time.monotonic() - start
        if self.frontier.exhausted:
            self.logger.info("Request budget of %d reached", self.frontier.budget)
        self.logger.info(
            "Finished: %d pages in %.2f s (%d failed, %d skipped)",
            self.stats.processed,
            self.stats.duration,
            self.stats.failed,
            self.stats.skipped,
        )
        return self.stats

    async def _worker(self, queue: asyncio.Queue[CrawlTask]) -> None:
        while True:
            task = await queue.get()
            try:
                await self._process(task, queue)
            except Exception:
                self.stats.failed += 1
                self.logger.exception("Unexpected error while processing %s", task.url)
            finally:
                queue.task_done()

    async def _process(self, task: CrawlTask, queue: asyncio.Queue[CrawlTask]) -> None:
        result = await self.fetcher.fetch(task.url, timeout=self.config.request_timeout)
        if not result.ok:
            self.stats.failed += 1
            self.logger.warning("Failed %s: %s", task.url, result.error)
            return
        if not self._in_scope(task, result):
            self.stats.skipped += 1
            self.logger.info("Redirected out of scope, dropped: %s -> %s", task.url, result.final_url)
            return
        if not result.is_html:
            self.stats.skipped += 1
            self.logger.debug("Skipping non-HTML %s (%s)", task.url, result.content_type)
            return

        self.logger.info("Processing %s", task.url)
        meta = self.page_processor(result.body, task.url)
        record = PageRecord(
            title=meta.title,
            url=task.url,
            sitemap=task.sitemap,
            meta_description=meta.meta_description,
            snippet=meta.snippet,
        )
        self._persist(record)
        self.stats.processed += 1

        try:
            self._enqueue_links(task, result, queue)
        except ValueError as e:
            self.logger.warning("Link discovery failed for %s: %s", task.url, e)

    def _in_scope(self, task: CrawlTask, result: FetchResult) -> bool:
        if not self.config.follow_internal_only or not result.final_url:
            return True
        return url_host(result.final_url) == task.start_host

    def _enqueue_links(self, task: CrawlTask, result: FetchResult, queue: asyncio.Queue[CrawlTask]) -> None:
        max_depth = self.config.max_depth
        if max_depth is not None and task.depth >= max_depth:
            return
        if self.frontier.exhausted:
            return
        base = result.final_url or task.url
        for link in self.link_extractor(result.body, base):
            child = self.frontier.try_admit(link, task.start_host, task.sitemap, depth=task.depth + 1)
            if child is not None:
                queue.put_nowait(child)

    def _persist(self, record: PageRecord) -> None:
        try:
            self.row_store.append(record)
        except (OSError, TypeError, ValueError) as e:
            self.stats.persist_errors += 1
            self.logger.warning("Failed to append dataset row for %s: %s", record.url, e)
        key = blob_key(record.url)
        try:
            self.blob_store.put(key, record.as_document())
        except (OSError, TypeError, ValueError) as e:
            self.stats.persist_errors += 1
            self.logger.warning("Failed to save KV entry %s: %s", key, e)
