# site_harvest/crawler/frontier.py
"""
Crawl frontier: deduplicated set of admitted URLs with a request budget
and an optional per-seed host restriction.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional, Set

from site_harvest.crawler.models import CrawlTask
from site_harvest.utils import normalize_url, url_host

__all__ = ("Frontier",)


class Frontier:
    """Admission control for one crawl run.

    :meth:`try_admit` runs the URL, scope, dedup and budget checks and the
    state update under a single lock, so two concurrent discoveries of the
    same URL can never both be admitted and ``admitted_count`` never
    passes ``budget``. The method has no suspension point and is safe to
    call from asyncio tasks and from threads.
    """

    def __init__(self, budget: int, follow_internal_only: bool = True) -> None:
        if budget < 1:
            raise ValueError("budget must be >= 1")
        self.budget = budget
        self.follow_internal_only = follow_internal_only
        self._seen: Set[str] = set()
        self._admitted_count = 0
        self._lock = threading.Lock()
        self.logger = logging.getLogger("SiteHarvest.frontier")

    @property
    def admitted_count(self) -> int:
        return self._admitted_count

    @property
    def exhausted(self) -> bool:
        return self._admitted_count >= self.budget

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, url: object) -> bool:
        if not isinstance(url, str):
            return False
        norm = normalize_url(url)
        return norm is not None and norm in self._seen

    def try_admit(
        self, url: str, start_host: str, sitemap: str = "", depth: int = 0
    ) -> Optional[CrawlTask]:
        """Admit *url* and return its CrawlTask, or None if any check fails."""
        norm = normalize_url(url)
        if norm is None:
            self.logger.debug("Rejected unparseable URL %r", url)
            return None
        if self.follow_internal_only and url_host(norm) != start_host:
            self.logger.debug("Out of scope for %s: %s", start_host, norm)
            return None

        with self._lock:
            if norm in self._seen:
                return None
            if self._admitted_count >= self.budget:
                return None
            self._seen.add(norm)
            self._admitted_count += 1

        return CrawlTask(url=norm, start_host=start_host, sitemap=sitemap, depth=depth)
