from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional

from .base import DomainResult
from .domain_engine import DomainCrawlEngine, LinkExtractor
from .fetcher import PageFetcher
from .pacing import Sleep
from ..config import CrawlConfig
from ..matchers.classifier import UrlClassifier
from ..matchers.registry import MatcherRegistry
from ..utils.http import AiohttpTransport, Transport
from ..utils.parsing import extract_links, root_url

logger = logging.getLogger(__name__)


class DomainOrchestrator:
    """
    Runs one isolated DomainCrawlEngine per target domain, at most
    ``domain_parallelism`` at a time, batch after batch.
    Results come back in submission order, one per domain, always.
    """
    def __init__(
        self,
        config: CrawlConfig,
        *,
        transport: Optional[Transport] = None,
        matchers: Optional[MatcherRegistry] = None,
        extract: LinkExtractor = extract_links,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config
        self.transport = transport
        self.matchers = matchers or MatcherRegistry.from_config(config)
        self.extract = extract
        self._sleep = sleep

    def build_engine(self, domain: str, transport: Transport) -> DomainCrawlEngine:
        cfg = self.config
        return DomainCrawlEngine(
            domain,
            cfg,
            fetcher=PageFetcher(transport, cfg, sleep=self._sleep),
            classifier=UrlClassifier(root_url(domain), self.matchers.matchers, domain_match=cfg.domain_match),
            extract=self.extract,
            sleep=self._sleep,
        )

    async def crawl_all(self, domains: Optional[Iterable[str]] = None) -> List[DomainResult]:
        targets = list(self.config.start_urls if domains is None else domains)
        if self.transport is not None:
            return await self._crawl_batches(targets, self.transport)
        async with AiohttpTransport() as transport:
            return await self._crawl_batches(targets, transport)

    async def _crawl_batches(self, domains: List[str], transport: Transport) -> List[DomainResult]:
        size = self.config.domain_parallelism
        results: List[DomainResult] = []
        for start in range(0, len(domains), size):
            batch = domains[start:start + size]
            logger.info("Starting batch of %d domain(s) (%d-%d of %d)",
                        len(batch), start + 1, start + len(batch), len(domains))
            # gather keeps argument order, so results line up with submission order
            results.extend(await asyncio.gather(*(self._crawl_one(d, transport) for d in batch)))
        return results

    async def _crawl_one(self, domain: str, transport: Transport) -> DomainResult:
        try:
            return await self.build_engine(domain, transport).crawl()
        except Exception:  # isolate domains from each other
            logger.exception("Crawl of %s aborted; reporting no product URLs", domain)
            return DomainResult.build(domain, ())
