from __future__ import annotations

import asyncio
from collections import Counter
from typing import Dict, List, Mapping, Union

import pytest

from product_crawler.config import CrawlConfig
from product_crawler.engines.orchestrator import DomainOrchestrator
from product_crawler.matchers.registry import MatcherRegistry
from product_crawler.utils.http import HttpResponse

Reply = Union[HttpResponse, BaseException, str, int]


def page(*links: str) -> str:
    anchors = "".join(f'<a href="{href}">link</a>' for href in links)
    return f"<html><body>{anchors}</body></html>"


class FakeTransport:
    """
    Serves a synthetic site. Each URL maps to a reply or a list of replies
    consumed one per request (the last one repeats). A str reply is a 200
    page body, an int is a bare status, an exception is raised.
    Unknown URLs answer 404.
    """

    def __init__(self, site: Mapping[str, Union[Reply, List[Reply]]]) -> None:
        self.site: Dict[str, List[Reply]] = {
            url: list(reply) if isinstance(reply, list) else [reply] for url, reply in site.items()
        }
        self.calls: List[str] = []
        self.headers: List[Mapping[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def call_counts(self) -> Counter:
        return Counter(self.calls)

    async def get(self, url: str, *, headers: Mapping[str, str], timeout: float) -> HttpResponse:
        self.calls.append(url)
        self.headers.append(dict(headers))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            # let sibling tasks run so concurrency is observable
            for _ in range(3):
                await asyncio.sleep(0)
            replies = self.site.get(url)
            if not replies:
                return HttpResponse(404, "")
            reply = replies.pop(0) if len(replies) > 1 else replies[0]
            if isinstance(reply, BaseException):
                raise reply
            if isinstance(reply, int):
                return HttpResponse(reply, "")
            if isinstance(reply, str):
                return HttpResponse(200, reply)
            return reply
        finally:
            self.in_flight -= 1


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def make_config(tmp_path):
    def _make(**overrides) -> CrawlConfig:
        base = dict(
            start_urls=("https://shop.test",),
            inter_request_delay=0.0,
            rate_limit_cooldown=0.0,
            output_path=str(tmp_path / "out" / "product_urls.json"),
        )
        base.update(overrides)
        return CrawlConfig(**base)
    return _make


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


def run_crawl(config: CrawlConfig, transport: FakeTransport, **kwargs):
    orchestrator = DomainOrchestrator(
        config,
        transport=transport,
        matchers=MatcherRegistry.from_config(config, discover=False),
        **kwargs,
    )
    return asyncio.run(orchestrator.crawl_all())
