from __future__ import annotations

from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, Optional, Tuple
from pathlib import Path
import os
import json

from .version import CONFIG_SCHEMA_VERSION

DOMAIN_MATCH_MODES = ("subdomain", "exact", "substring")

DEFAULT_PRODUCT_PATTERNS: Tuple[str, ...] = ("/product/", "/item/", "/p/")
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/114.0.0.0 Safari/537.36"
)
DEFAULT_EXPORTER = "product_crawler.export.json_exporter:JSONExporter"
DEFAULT_OUTPUT_PATH = "output/product_urls.json"


@dataclass(frozen=True)
class CrawlConfig:
    """
    Canonical configuration object passed explicitly to every component.
    Frozen: derive variants with ``with_overrides`` instead of mutating.
    Durations are in seconds.
    """
    schema_version: int = CONFIG_SCHEMA_VERSION
    start_urls: Tuple[str, ...] = ()
    max_depth: int = 3
    # Regexes searched against the URL path; any hit marks a product URL.
    product_path_patterns: Tuple[str, ...] = DEFAULT_PRODUCT_PATTERNS
    request_timeout: float = 10.0
    domain_parallelism: int = 5
    # Concurrent page workers per domain; 1 keeps the sequential crawl order.
    fan_out: int = 1
    retry_limit: int = 3
    inter_request_delay: float = 1.0
    rate_limit_cooldown: float = 3.0
    user_agent: str = DEFAULT_USER_AGENT
    domain_match: str = "subdomain"
    crawl_timeout: Optional[float] = None
    # Extra PathMatcher classes (dotted paths) to register at startup
    extra_matchers: Tuple[str, ...] = ()
    exporter: str = DEFAULT_EXPORTER
    output_path: str = DEFAULT_OUTPUT_PATH

    def __post_init__(self) -> None:
        # Accept lists from JSON/env loaders but store tuples.
        for name in ("start_urls", "product_path_patterns", "extra_matchers"):
            object.__setattr__(self, name, tuple(getattr(self, name) or ()))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for name in ("start_urls", "product_path_patterns", "extra_matchers"):
            data[name] = list(data[name])
        return data

    def with_overrides(self, **changes: Any) -> "CrawlConfig":
        """Return a copy with the given (non-None) fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    # ---------- Loaders ----------

    @classmethod
    def from_env(cls) -> "CrawlConfig":
        """
        Build config from environment variables (all optional).
        """
        def _get(name: str, default: str) -> str:
            return os.getenv(name, default)

        def _list(name: str) -> Tuple[str, ...]:
            return tuple(v.strip() for v in _get(name, "").split(",") if v.strip())

        crawl_timeout = _get("CRAWLER_CRAWL_TIMEOUT", "")

        return cls(
            start_urls=_list("CRAWLER_START_URLS"),
            max_depth=int(_get("CRAWLER_MAX_DEPTH", "3")),
            product_path_patterns=_list("CRAWLER_PRODUCT_PATTERNS") or DEFAULT_PRODUCT_PATTERNS,
            request_timeout=float(_get("CRAWLER_REQUEST_TIMEOUT", "10.0")),
            domain_parallelism=int(_get("CRAWLER_DOMAIN_PARALLELISM", "5")),
            fan_out=int(_get("CRAWLER_FAN_OUT", "1")),
            retry_limit=int(_get("CRAWLER_RETRY_LIMIT", "3")),
            inter_request_delay=float(_get("CRAWLER_INTER_REQUEST_DELAY", "1.0")),
            rate_limit_cooldown=float(_get("CRAWLER_RATE_LIMIT_COOLDOWN", "3.0")),
            user_agent=_get("CRAWLER_USER_AGENT", DEFAULT_USER_AGENT),
            domain_match=_get("CRAWLER_DOMAIN_MATCH", "subdomain"),
            crawl_timeout=float(crawl_timeout) if crawl_timeout else None,
            extra_matchers=_list("CRAWLER_EXTRA_MATCHERS"),
            exporter=_get("CRAWLER_EXPORTER", DEFAULT_EXPORTER),
            output_path=_get("CRAWLER_OUTPUT_PATH", DEFAULT_OUTPUT_PATH),
        )

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "CrawlConfig":
        """
        Load configuration from a JSON file. Supports schema migration for older versions.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data = migrate_config(data)
        return cls(**data)

    # ---------- Validation ----------

    def validate(self) -> None:
        if not self.start_urls:
            raise ValueError("start_urls cannot be empty; provide at least one URL.")
        if self.max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        if self.domain_parallelism <= 0:
            raise ValueError("domain_parallelism must be > 0")
        if self.fan_out <= 0:
            raise ValueError("fan_out must be > 0")
        if self.retry_limit <= 0:
            raise ValueError("retry_limit must be > 0")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be > 0")
        if self.inter_request_delay < 0 or self.rate_limit_cooldown < 0:
            raise ValueError("inter_request_delay and rate_limit_cooldown must be >= 0")
        if self.crawl_timeout is not None and self.crawl_timeout <= 0:
            raise ValueError("crawl_timeout must be > 0 when set")
        if self.domain_match not in DOMAIN_MATCH_MODES:
            raise ValueError(f"domain_match must be one of {', '.join(DOMAIN_MATCH_MODES)}")
        # Validate output path parent exists or is creatable
        parent = Path(self.output_path).parent
        parent.mkdir(parents=True, exist_ok=True)


def migrate_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Migrate config dict to the latest schema version.
    Keep this pure and additive. Add migrations here as you bump schema.
    """
    raw = dict(raw)
    schema = raw.get("schema_version", 1)

    if schema < 2:
        # v1 had a single global concurrency knob and counted retries after the first try.
        if "max_concurrency" in raw:
            raw.setdefault("domain_parallelism", raw.pop("max_concurrency"))
        if "retries" in raw:
            raw.setdefault("retry_limit", raw.pop("retries") + 1)
        for dropped in ("allowed_domains", "engine", "extra_adapters", "keywords"):
            raw.pop(dropped, None)

    raw["schema_version"] = CONFIG_SCHEMA_VERSION
    return raw
