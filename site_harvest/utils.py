# File: site_harvest/utils.py
"""site_harvest.utils: URL helpers shared by the sitemap resolver, the frontier and the sinks."""

from __future__ import annotations

from typing import Collection, List, Optional, Sequence
from urllib.parse import quote, urlsplit, urlunsplit

from site_harvest.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "url_host",
    "blob_key",
    "remove_duplicates",
)

_HTTP_SCHEMES = ("http", "https")
BLOB_KEY_PREFIX = "pages/"


def normalize_url(url: str) -> Optional[str]:
    """Canonical form of an absolute http(s) URL, or None if it cannot be parsed.

    Only what URL parsing itself implies is applied: surrounding whitespace
    and the fragment are dropped, scheme and host are lower-cased, an empty
    path becomes ``/``. Path case, trailing slashes and the query string
    are left untouched.
    """
    if not isinstance(url, str):
        return None
    try:
        parts = urlsplit(url.strip())
        _ = parts.port  # raises ValueError for an invalid port
    except ValueError:
        logger.debug("Unparseable URL skipped: %r", url)
        return None
    scheme = parts.scheme.lower()
    if scheme not in _HTTP_SCHEMES or not parts.hostname:
        return None
    netloc = parts.netloc
    host_start = netloc.rfind("@") + 1
    netloc = netloc[:host_start] + netloc[host_start:].lower()
    return urlunsplit((scheme, netloc, parts.path or "/", parts.query, ""))


def url_host(url: str) -> Optional[str]:
    """``host[:port]`` of *url* lower-cased, without credentials; None if invalid."""
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except (ValueError, AttributeError):
        return None
    if not parts.hostname:
        return None
    return parts.hostname if port is None else f"{parts.hostname}:{port}"


def blob_key(url: str) -> str:
    """Key-value store key of a page document: ``pages/<percent-encoded url>``."""
    return BLOB_KEY_PREFIX + quote(url, safe="")


def remove_duplicates(items: Collection) -> List:
    """Drop duplicates while keeping the first-seen order."""
    unique = list(dict.fromkeys(items))
    removed = len(items) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate entries", removed)
    return unique
