from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List

from ..config import CrawlConfig, DOMAIN_MATCH_MODES
from ..utils.logging import setup_logging
from ..utils.loader import load_instance
from ..engines.base import DomainResult
from ..engines.orchestrator import DomainOrchestrator
from ..export.base import Exporter

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Discover product page URLs on e-commerce domains")
    p.add_argument("urls", nargs="*", help="Start domains or URLs (space-separated)")
    p.add_argument("--config", type=str, help="Path to config JSON", default=None)
    p.add_argument("--max-depth", type=int, default=None, help="Max crawl depth (default from config)")
    p.add_argument("--domain-parallelism", type=int, default=None, help="Domains crawled at the same time")
    p.add_argument("--fan-out", type=int, default=None, help="Concurrent page workers per domain")
    p.add_argument("--retry-limit", type=int, default=None, help="Attempts per page under HTTP 429")
    p.add_argument("--delay", type=float, default=None, help="Seconds between requests to one domain")
    p.add_argument("--cooldown", type=float, default=None, help="Seconds to wait after HTTP 429")
    p.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds")
    p.add_argument("--crawl-timeout", type=float, default=None, help="Per-domain crawl time limit in seconds")
    p.add_argument("--pattern", action="append", default=None, dest="patterns",
                   help="Product path regex (repeatable; replaces the defaults)")
    p.add_argument("--domain-match", choices=DOMAIN_MATCH_MODES, default=None,
                   help="How link hosts are matched against the start domain")
    p.add_argument("--extra-matchers", type=str, default=None,
                   help="Comma-separated dotted paths for additional path matchers")
    p.add_argument("--exporter", type=str, default=None, help="Exporter dotted path (module:ClassName)")
    p.add_argument("--output", type=str, default=None, help="Output file path")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
    p.add_argument("--serve", action="store_true", help="Run REST API server instead of CLI crawl")
    p.add_argument("--host", type=str, default="127.0.0.1", help="API host (when --serve)")
    p.add_argument("--port", type=int, default=8000, help="API port (when --serve)")
    return p


def _load_config(args: argparse.Namespace) -> CrawlConfig:
    cfg = CrawlConfig.from_file(args.config) if args.config else CrawlConfig.from_env()

    extra_matchers = None
    if args.extra_matchers:
        extra_matchers = [m.strip() for m in args.extra_matchers.split(",") if m.strip()]

    cfg = cfg.with_overrides(
        start_urls=list(args.urls) or None,
        max_depth=args.max_depth,
        domain_parallelism=args.domain_parallelism,
        fan_out=args.fan_out,
        retry_limit=args.retry_limit,
        inter_request_delay=args.delay,
        rate_limit_cooldown=args.cooldown,
        request_timeout=args.timeout,
        crawl_timeout=args.crawl_timeout,
        product_path_patterns=args.patterns,
        domain_match=args.domain_match,
        extra_matchers=extra_matchers,
        exporter=args.exporter,
        output_path=args.output,
    )
    cfg.validate()
    return cfg


def run_server(host: str, port: int) -> None:
    try:
        import uvicorn  # type: ignore
    except ImportError as exc:  # pragma: no cover - optional dep
        raise SystemExit("To run the API, install dependencies: pip install 'product-crawler[api]'") from exc
    uvicorn.run("product_crawler.apis.app:app", host=host, port=port)


def run_cli(argv: List[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.serve:
        run_server(args.host, args.port)
        return 0

    try:
        cfg = _load_config(args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    # Dynamic exporter loading so output formats can change without code edits.
    exporter: Exporter = load_instance(cfg.exporter)

    results: List[DomainResult] = asyncio.run(DomainOrchestrator(cfg).crawl_all())
    exporter.export(results, cfg.output_path)

    for result in results:
        logger.info("- %s: %d product URLs (%d pages)", result.domain, len(result.product_urls), result.pages_visited)
    logger.info("Domains: %s | Products: %s | Output: %s",
                len(results),
                sum(len(r.product_urls) for r in results),
                cfg.output_path)
    return 0
