"""site_harvest.storage: sinks for page records (dataset rows and key-value documents)."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from site_harvest.crawler.models import PageRecord


@runtime_checkable
class RowStore(Protocol):
    """Append-only store of compact page rows."""

    def append(self, record: PageRecord) -> None: ...


@runtime_checkable
class BlobStore(Protocol):
    """Key-value store of full page documents; ``put`` overwrites by key."""

    def put(self, key: str, value: Any) -> None: ...


from site_harvest.storage.dataset import DatasetStore  # noqa: E402
from site_harvest.storage.key_value import KeyValueStore  # noqa: E402

__all__ = ["RowStore", "BlobStore", "DatasetStore", "KeyValueStore"]
