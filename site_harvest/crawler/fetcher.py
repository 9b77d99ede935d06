# site_harvest/crawler/fetcher.py
"""
Fetcher module: HTTP GET with timeout, redirects, optional proxy and retry/backoff.

Failures are reported as :class:`FetchResult` objects with ``error`` set so
callers keep a single control flow.
"""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_harvest.config import CrawlerConfig
from site_harvest.crawler.models import FetchResult


class Fetcher:
    """Thin aiohttp client shared by the sitemap resolver and the dispatcher."""

    RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

    def __init__(self, config: CrawlerConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self.logger = logging.getLogger("SiteHarvest.fetcher")

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.request_timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(
        self,
        url: str,
        timeout: Optional[float] = None,
        follow_redirects: bool = True,
    ) -> FetchResult:
        """
        GET *url*, retrying 429/5xx responses and network errors.

        Returns a FetchResult; ``result.ok`` tells whether a 2xx body was received.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        req_timeout = ClientTimeout(total=timeout or self.config.request_timeout)
        attempts = 0
        last_error = ""
        while True:
            try:
                async with self.session.get(
                    url,
                    timeout=req_timeout,
                    allow_redirects=follow_redirects,
                    proxy=self.config.proxy,
                ) as resp:
                    status = resp.status
                    if status in self.RETRY_STATUS:
                        raise ClientError(f"retryable status {status}")
                    mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                    body = await resp.text(errors="replace") if 200 <= status < 300 else ""
                    result = FetchResult(
                        url=url,
                        status=status,
                        body=body,
                        final_url=str(resp.url),
                        content_type=mime,
                    )
                    if not result.ok:
                        result.error = f"HTTP {status}"
                    return result
            except ValueError as e:
                return FetchResult(url=url, final_url=url, error=f"invalid URL: {e}")
            except (ClientError, asyncio.TimeoutError) as e:
                last_error = str(e) or type(e).__name__
                attempts += 1
                if attempts > self.config.retry_times:
                    break
                backoff = min(60.0, self.config.retry_backoff * (2**attempts + random.random()))
                self.logger.debug(
                    "Retry %d/%d for %s after %.2f s", attempts, self.config.retry_times, url, backoff
                )
                await asyncio.sleep(backoff)
        return FetchResult(url=url, final_url=url, error=last_error)
