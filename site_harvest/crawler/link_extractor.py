# site_harvest/crawler/link_extractor.py
"""
Outbound link discovery for fetched pages.
"""
from __future__ import annotations

from typing import List
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

_SKIP_PREFIXES = ("mailto:", "javascript:", "tel:", "data:", "#")


def extract_links(html: str, base_url: str) -> List[str]:
    """
    Absolute http(s) links of every <a href> in *html*, resolved against *base_url*.

    Fragments are dropped and duplicates removed, first occurrence wins.
    No host filtering happens here; the frontier applies the crawl scope.
    """
    soup = BeautifulSoup(html, "html.parser")
    base_tag = soup.find("base", href=True)
    if isinstance(base_tag, Tag) and isinstance(base_tag.get("href"), str):
        try:
            base_url = urljoin(base_url, base_tag["href"].strip())
        except ValueError:
            pass  # unusable <base>, links resolve against the page URL

    seen: set[str] = set()
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or raw.lower().startswith(_SKIP_PREFIXES):
            continue
        try:
            absolute, _ = urldefrag(urljoin(base_url, raw))
            scheme = urlparse(absolute).scheme
        except ValueError:
            continue
        if scheme in ("http", "https") and absolute not in seen:
            seen.add(absolute)
            links.append(absolute)
    return links
