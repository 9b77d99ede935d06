# site_harvest/crawler/models.py
"""
Data models passed between the sitemap resolver, the frontier, the dispatcher and the sinks.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass(frozen=True, slots=True)
class SitemapEntry:
    """Page URL found in a urlset together with the sitemap that listed it."""

    url: str
    source_sitemap: str


@dataclass(frozen=True, slots=True)
class CrawlTask:
    """A URL admitted to the frontier and waiting to be fetched."""

    url: str
    start_host: str
    sitemap: str
    depth: int = 0


@dataclass(slots=True)
class FetchResult:
    """Outcome of one HTTP GET. Failures are reported through *error*, never raised."""

    url: str
    status: int = 0
    body: str = ""
    final_url: str = ""
    content_type: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and 200 <= self.status < 300

    @property
    def is_html(self) -> bool:
        # servers that omit Content-Type are given the benefit of the doubt
        return not self.content_type or "html" in self.content_type


@dataclass(frozen=True, slots=True)
class PageRecord:
    """Metadata of one successfully fetched page."""

    title: str
    url: str
    sitemap: str
    meta_description: str
    snippet: str

    def as_row(self) -> Dict[str, str]:
        """Compact dataset row."""
        return asdict(self)

    def as_document(self, timestamp: Optional[datetime] = None) -> Dict[str, Any]:
        """Full document stored in the key-value store."""
        ts = timestamp or datetime.now(timezone.utc)
        return {
            "url": self.url,
            "sitemap": self.sitemap,
            "title": self.title,
            "meta_description": self.meta_description,
            "snippet": self.snippet,
            "timestamp": ts.isoformat(),
        }


@dataclass(slots=True)
class CrawlStats:
    """Counters of one crawl run."""

    sitemap_urls: int = 0
    admitted: int = 0
    processed: int = 0
    failed: int = 0
    skipped: int = 0
    persist_errors: int = 0
    duration: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["duration"] = round(self.duration, 3)
        return data
