# site_harvest/storage/dataset.py
"""
Dataset sink: one JSON object per line, appended as pages are processed.
"""
from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Dict, Iterator, List, Union

from site_harvest.crawler.models import PageRecord


class DatasetStore:
    """Append-only JSON Lines file ``<root>/datasets/<name>.jsonl``."""

    def __init__(self, root: Union[str, Path], name: str = "default") -> None:
        self.path = Path(root) / "datasets" / f"{name}.jsonl"
        self._lock = threading.Lock()

    def append(self, record: PageRecord) -> None:
        line = json.dumps(record.as_row(), ensure_ascii=False)
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        if not self.path.exists():
            return
        with self.path.open(encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    yield json.loads(line)

    def read_all(self) -> List[Dict[str, Any]]:
        return list(self)
