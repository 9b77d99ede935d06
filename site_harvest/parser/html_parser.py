# === FILE: site_harvest/parser/html_parser.py ===
"""HTML metadata extraction for SiteHarvest.

:func:`extract_metadata` is the page processor used by the dispatcher. It is
a pure function of the markup: no I/O, no exceptions, empty strings for
anything the page does not provide.

* title: ``og:title``, then ``twitter:title``, then ``<title>``.
* meta_description: ``<meta name="description">``, then ``og:description``.
* snippet: text of the first ``article``/``main``/``[role=main]`` element,
  otherwise the first paragraph longer than 40 characters; whitespace
  collapsed and cut to :data:`SNIPPET_LENGTH` characters.
"""
from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__: Sequence[str] = ("PageMetadata", "extract_metadata", "SNIPPET_LENGTH")

SNIPPET_LENGTH = 800
MIN_PARAGRAPH_LENGTH = 40

_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class PageMetadata:
    """What the page processor extracts from one document."""

    title: str = ""
    meta_description: str = ""
    snippet: str = ""


def _collapse(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def _meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if not isinstance(tag, Tag):
        return None
    content = tag.get("content")
    if isinstance(content, str) and content.strip():
        return content.strip()
    return None


def _title(soup: BeautifulSoup) -> str:
    title = _meta_content(soup, property="og:title") or _meta_content(soup, name="twitter:title")
    if title:
        return title
    tag = soup.find("title")
    return tag.get_text(strip=True) if isinstance(tag, Tag) else ""


def _description(soup: BeautifulSoup) -> str:
    return (
        _meta_content(soup, name="description")
        or _meta_content(soup, property="og:description")
        or ""
    )


def _snippet(soup: BeautifulSoup) -> str:
    main = soup.select_one('article, main, [role="main"]')
    if main is not None:
        return _collapse(main.get_text(" "))[:SNIPPET_LENGTH]
    for p in soup.find_all("p"):
        if len(p.get_text().strip()) > MIN_PARAGRAPH_LENGTH:
            return _collapse(p.get_text(" "))[:SNIPPET_LENGTH]
    return ""


def extract_metadata(html: str, url: str = "", extract_main_text: bool = True) -> PageMetadata:
    """Extract title, description and (optionally) a text snippet from *html*.

    Parameters
    ----------
    html
        Raw page markup.
    url
        Address of the page; accepted for interface symmetry with the other
        page-level helpers, not used for extraction.
    extract_main_text
        When false the snippet is always empty.
    """
    if not html:
        return PageMetadata()
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(["script", "style", "noscript", "template"]):
        element.decompose()
    return PageMetadata(
        title=_title(soup),
        meta_description=_description(soup),
        snippet=_snippet(soup) if extract_main_text else "",
    )
