# File: site_harvest/parser/sitemap_parser.py
"""site_harvest.parser.sitemap_parser: tolerant parsing of sitemap.xml and sitemap index files."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import List

from lxml import etree

INDEX = "index"
URLSET = "urlset"

_SITEMAP_NAMESPACES = (
    None,
    "http://www.sitemaps.org/schemas/sitemap/0.9",
    "http://www.google.com/schemas/sitemap/0.84",
)

# unprefixed tags only: extension tags such as <image:loc> are not page URLs
_SITEMAP_BLOCK_RE = re.compile(
    r"<sitemap\b[^>]*>[\s\S]*?<loc>(.*?)</loc>[\s\S]*?</sitemap>",
    re.IGNORECASE | re.DOTALL,
)
_LOC_RE = re.compile(r"<loc>(.*?)</loc>", re.IGNORECASE | re.DOTALL)
_CDATA_RE = re.compile(r"^<!\[CDATA\[(.*)\]\]>$", re.DOTALL)


@dataclass(slots=True)
class SitemapDocument:
    """Shape of a sitemap and the <loc> values it lists."""

    kind: str
    locs: List[str] = field(default_factory=list)

    @property
    def is_index(self) -> bool:
        return self.kind == INDEX


def _clean_loc(raw: str) -> str:
    value = raw.strip()
    m = _CDATA_RE.match(value)
    if m:
        value = m.group(1).strip()
    return html.unescape(value)


def _is_sitemap_tag(element, name: str) -> bool:
    if not isinstance(element.tag, str):
        return False
    qname = etree.QName(element)
    return qname.localname == name and qname.namespace in _SITEMAP_NAMESPACES


def _loc_text(element) -> str:
    return element.text.strip() if element.text else ""


def _parse_tree(xml_content: str) -> SitemapDocument | None:
    """lxml pass: recovering parser, no entity expansion, no network access."""
    parser = etree.XMLParser(
        ns_clean=True,
        recover=True,
        resolve_entities=False,
        no_network=True,
        huge_tree=False,
    )
    try:
        root = etree.fromstring(xml_content.encode("utf-8"), parser=parser)
    except (etree.XMLSyntaxError, ValueError):
        return None
    if root is None:
        return None
    nested = [
        _loc_text(loc)
        for block in root.iter()
        if _is_sitemap_tag(block, "sitemap")
        for loc in block
        if _is_sitemap_tag(loc, "loc") and _loc_text(loc)
    ]
    if nested:
        return SitemapDocument(INDEX, nested)
    locs = [_loc_text(loc) for loc in root.iter() if _is_sitemap_tag(loc, "loc") and _loc_text(loc)]
    if not locs:
        return None
    return SitemapDocument(URLSET, locs)


def _parse_text(xml_content: str) -> SitemapDocument:
    """Regex pass over the raw text for documents lxml cannot make sense of."""
    nested = [_clean_loc(m) for m in _SITEMAP_BLOCK_RE.findall(xml_content)]
    nested = [u for u in nested if u]
    if nested:
        return SitemapDocument(INDEX, nested)
    locs = [_clean_loc(m) for m in _LOC_RE.findall(xml_content)]
    return SitemapDocument(URLSET, [u for u in locs if u])


def parse_sitemap(xml_content: str) -> SitemapDocument:
    """Detect the sitemap shape and return its <loc> values.

    A document with ``<sitemap><loc>…</loc></sitemap>`` blocks is an index
    and only the nested sitemap locations are returned; anything else is
    treated as a urlset. Never raises: broken markup yields whatever
    well-formed ``<loc>`` tags it still contains, possibly nothing.

    Example:
    ```python
    doc = parse_sitemap(Path("sitemap.xml").read_text(encoding="utf-8"))
    if doc.is_index:
        ...
    ```
    """
    if not xml_content or not xml_content.strip():
        return SitemapDocument(URLSET)
    tree = _parse_tree(xml_content)
    text = _parse_text(xml_content)
    if tree is None:
        return text
    # recovering parsers may silently drop the tail of a broken document
    if text.kind != tree.kind:
        return text if text.is_index else tree
    return tree if len(tree.locs) >= len(text.locs) else text


__all__ = ["INDEX", "URLSET", "SitemapDocument", "parse_sitemap"]
