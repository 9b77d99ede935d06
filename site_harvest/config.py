# === FILE: site_harvest/config.py ===
"""
Loading and validation of the SiteHarvest crawler configuration.
The schema is described with Pydantic; input keys may use either the
snake_case field names or the camelCase names of the crawler input
(``maxRequestsPerCrawl``, ``extractMainText``, ``followInternalOnly``).
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
)


class CrawlerConfig(BaseModel):
    """Configuration of a single crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    sitemaps: List[HttpUrl] = Field(
        ..., min_length=1, description="Seed sitemap (or sitemap index) URLs."
    )
    max_requests_per_crawl: int = Field(
        500,
        ge=1,
        validation_alias=AliasChoices("max_requests_per_crawl", "maxRequestsPerCrawl"),
        description="Hard limit on the number of URLs admitted to the frontier.",
    )
    extract_main_text: bool = Field(
        True,
        validation_alias=AliasChoices("extract_main_text", "extractMainText"),
        description="Extract a main-text snippet for every page.",
    )
    follow_internal_only: bool = Field(
        True,
        validation_alias=AliasChoices("follow_internal_only", "followInternalOnly"),
        description="Only follow links on the same host as the seed URL.",
    )
    concurrency: int = Field(10, ge=1, description="Number of parallel fetch workers.")
    request_timeout: float = Field(60.0, gt=0, description="Timeout of one request (seconds).")
    user_agent: str = Field("SiteHarvestBot/1.0", min_length=1, description="User-Agent header.")
    retry_times: int = Field(2, ge=0, description="Retries on 429/5xx responses and network errors.")
    retry_backoff: float = Field(1.0, ge=0, description="Base of the exponential retry backoff (seconds).")
    max_depth: Optional[int] = Field(None, ge=0, description="Link depth limit; unlimited when absent.")
    proxy: Optional[str] = Field(None, description="Proxy URL for every outgoing request.")
    storage_dir: Path = Field(Path("storage"), description="Root directory of the file sinks.")

    @field_validator("sitemaps", mode="before")
    def _wrap_single_sitemap(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("proxy")
    def _check_proxy_scheme(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError("proxy must be an http:// or https:// URL")
        return v

    @property
    def sitemap_urls(self) -> List[str]:
        """Seed sitemaps as plain strings, duplicates removed, order kept."""
        return list(dict.fromkeys(str(u) for u in self.sitemaps))


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Read a YAML or JSON file and return a validated CrawlerConfig.
    Raises FileNotFoundError when the file does not exist.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return CrawlerConfig(**data)


__all__ = ["CrawlerConfig", "ValidationError", "load_config"]
