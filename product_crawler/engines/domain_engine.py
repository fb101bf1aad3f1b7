from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Set

from .base import CrawlEngine, CrawlTask, DomainResult
from .fetcher import PageFetcher
from .pacing import RequestPacer, Sleep
from .visited import VisitedRegistry
from ..config import CrawlConfig
from ..matchers.classifier import UrlClassifier
from ..utils.parsing import extract_links, root_url

logger = logging.getLogger(__name__)

LinkExtractor = Callable[[str], List[str]]


class DomainCrawlEngine(CrawlEngine):
    """
    Depth-bounded crawl of a single domain.
    - Frontier is an explicit FIFO of (url, depth) tasks, not the call stack.
    - ``fan_out`` workers drain it; one worker reproduces a sequential crawl.
    - The visited registry claims a URL before it is fetched, so each URL is
      fetched at most once whatever the number of workers.
    - Page failures contribute nothing and never stop the crawl.
    """
    def __init__(
        self,
        domain: str,
        config: CrawlConfig,
        *,
        fetcher: PageFetcher,
        classifier: UrlClassifier,
        extract: LinkExtractor = extract_links,
        pacer: Optional[RequestPacer] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.domain = domain
        self.root = root_url(domain)
        self.config = config
        self.fetcher = fetcher
        self.classifier = classifier
        self.extract = extract
        self.pacer = pacer or RequestPacer(
            config.inter_request_delay, sequential=config.fan_out == 1, sleep=sleep,
        )
        self.visited = VisitedRegistry()
        self.product_urls: Set[str] = set()

    async def crawl(self) -> DomainResult:
        cfg = self.config
        logger.info("Crawling domain: %s", self.domain)
        try:
            if cfg.crawl_timeout is None:
                await self._run()
            else:
                await asyncio.wait_for(self._run(), timeout=cfg.crawl_timeout)
        except asyncio.TimeoutError:
            logger.warning("Crawl of %s stopped after %.1fs; keeping results found so far",
                           self.domain, cfg.crawl_timeout)

        logger.info("Finished %s: %d pages claimed, %d product URLs",
                    self.domain, len(self.visited), len(self.product_urls))
        return DomainResult.build(self.domain, self.product_urls, pages_visited=len(self.visited))

    async def _run(self) -> None:
        frontier: asyncio.Queue[CrawlTask] = asyncio.Queue()
        frontier.put_nowait(CrawlTask(url=self.root, depth=0))

        workers = [asyncio.create_task(self._worker(frontier)) for _ in range(self.config.fan_out)]
        try:
            await frontier.join()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

    async def _worker(self, frontier: "asyncio.Queue[CrawlTask]") -> None:
        while True:
            task = await frontier.get()
            try:
                await self._expand(task, frontier)
            except Exception:  # one bad page must not end the domain crawl
                logger.exception("Unexpected error while expanding %s", task.url)
            finally:
                frontier.task_done()

    async def _expand(self, task: CrawlTask, frontier: "asyncio.Queue[CrawlTask]") -> None:
        cfg = self.config
        # Depth control and dedup
        if task.depth > cfg.max_depth or not self.visited.try_mark(task.url):
            return

        await self.pacer.wait()
        outcome = await self.fetcher.fetch(task.url)
        if not outcome.ok:
            return

        next_depth = task.depth + 1
        for link in self.extract(outcome.body):
            url = self.classifier.resolve(link, task.url)
            if url is None:
                continue
            if self.classifier.classify(url):
                if url not in self.product_urls:
                    logger.debug("Product URL found: %s (on page at depth %d)", url, task.depth)
                    self.product_urls.add(url)
            elif next_depth <= cfg.max_depth and url not in self.visited:
                frontier.put_nowait(CrawlTask(url=url, depth=next_depth))
