from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from ..config import CrawlConfig
from ..engines.orchestrator import DomainOrchestrator
from ..version import __version__

logger = logging.getLogger(__name__)

app = FastAPI(title="product_crawler API", version=__version__)


class CrawlRequest(BaseModel):
    start_urls: List[str]
    max_depth: Optional[int] = None
    domain_parallelism: Optional[int] = None
    fan_out: Optional[int] = None
    product_path_patterns: Optional[List[str]] = None
    domain_match: Optional[str] = None
    crawl_timeout: Optional[float] = None


def build_config(req: CrawlRequest) -> CrawlConfig:
    cfg = CrawlConfig.from_env().with_overrides(
        start_urls=req.start_urls or None,
        max_depth=req.max_depth,
        domain_parallelism=req.domain_parallelism,
        fan_out=req.fan_out,
        product_path_patterns=req.product_path_patterns,
        domain_match=req.domain_match,
        crawl_timeout=req.crawl_timeout,
    )
    cfg.validate()
    return cfg


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/crawl")
async def crawl(req: CrawlRequest) -> Dict[str, Any]:
    try:
        cfg = build_config(req)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    logger.info("API crawl requested for %d domain(s)", len(cfg.start_urls))
    results = await DomainOrchestrator(cfg).crawl_all()
    return {"results": [r.to_dict() for r in results]}
