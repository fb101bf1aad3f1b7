from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .pacing import Sleep
from ..config import CrawlConfig
from ..utils.http import Transport

logger = logging.getLogger(__name__)

RATE_LIMITED = 429


class FetchStatus(enum.Enum):
    SUCCESS = "success"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchOutcome:
    state: FetchStatus
    url: str
    status: Optional[int] = None
    body: str = ""
    reason: Optional[str] = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.state is FetchStatus.SUCCESS


class PageFetcher:
    """
    Fetches one page, retrying only on HTTP 429.

    Every rate-limited answer costs a fixed cooldown; after ``retry_limit``
    of them the page is given up as EXHAUSTED. Any other failure is FAILED
    on the spot. Neither case raises: callers treat both as "no content".
    """

    def __init__(self, transport: Transport, config: CrawlConfig, *, sleep: Sleep = asyncio.sleep) -> None:
        self.transport = transport
        self.config = config
        self._sleep = sleep
        self._headers = {"User-Agent": config.user_agent}

    async def fetch(self, url: str) -> FetchOutcome:
        cfg = self.config
        attempts = 0
        while True:
            try:
                resp = await self.transport.get(url, headers=self._headers, timeout=cfg.request_timeout)
            except asyncio.TimeoutError:
                return self._failed(url, attempts + 1, f"timed out after {cfg.request_timeout:.1f}s")
            except Exception as exc:  # broad catch to keep crawler moving
                return self._failed(url, attempts + 1, repr(exc))

            if resp.status == RATE_LIMITED:
                attempts += 1
                logger.info(
                    "Rate limit hit for %s; retrying in %.1fs (attempt %d/%d)",
                    url, cfg.rate_limit_cooldown, attempts, cfg.retry_limit,
                )
                await self._sleep(cfg.rate_limit_cooldown)
                if attempts < cfg.retry_limit:
                    continue
                logger.warning("Giving up on %s after %d rate-limited attempts", url, attempts)
                return FetchOutcome(FetchStatus.EXHAUSTED, url, status=resp.status, attempts=attempts)

            if resp.status >= 400:
                return self._failed(url, attempts + 1, f"HTTP {resp.status}", status=resp.status)

            return FetchOutcome(FetchStatus.SUCCESS, url, status=resp.status, body=resp.body, attempts=attempts + 1)

    def _failed(self, url: str, attempts: int, reason: str, *, status: Optional[int] = None) -> FetchOutcome:
        logger.warning("Failed to crawl %s: %s", url, reason)
        return FetchOutcome(FetchStatus.FAILED, url, status=status, reason=reason, attempts=attempts)
