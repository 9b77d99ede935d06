# site_harvest/storage/key_value.py
"""
Key-value sink: one JSON file per key under ``<root>/key_value_stores/<name>/``.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import quote, unquote


class KeyValueStore:
    """Directory-backed store; ``put`` replaces the file atomically."""

    def __init__(self, root: Union[str, Path], name: str = "default") -> None:
        self.directory = Path(root) / "key_value_stores" / name

    def path_for(self, key: str) -> Path:
        if not key:
            raise ValueError("key must not be empty")
        # keys may contain "/" (pages/...); keep one flat file per key
        return self.directory / f"{quote(key, safe='')}.json"

    def put(self, key: str, value: Any) -> None:
        target = self.path_for(key)
        data = json.dumps(value, ensure_ascii=False, indent=2)
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(target.name + ".tmp")
        tmp.write_text(data, encoding="utf-8")
        os.replace(tmp, target)

    def get(self, key: str) -> Optional[Any]:
        target = self.path_for(key)
        if not target.is_file():
            return None
        return json.loads(target.read_text(encoding="utf-8"))

    def keys(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(unquote(p.name[: -len(".json")]) for p in self.directory.glob("*.json"))
