from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable
from abc import ABC, abstractmethod


@dataclass(frozen=True)
class CrawlTask:
    url: str
    depth: int


@dataclass(frozen=True)
class DomainResult:
    domain: str
    product_urls: FrozenSet[str] = field(default_factory=frozenset)
    pages_visited: int = field(default=0, compare=False)

    @classmethod
    def build(cls, domain: str, product_urls: Iterable[str], pages_visited: int = 0) -> "DomainResult":
        return cls(domain=domain, product_urls=frozenset(product_urls), pages_visited=pages_visited)

    def to_dict(self) -> Dict[str, Any]:
        return {"domain": self.domain, "productUrls": sorted(self.product_urls)}


class CrawlEngine(ABC):
    """
    Abstract engine interface. Implementations own one domain's crawl lifecycle.
    """
    @abstractmethod
    async def crawl(self) -> DomainResult:  # pragma: no cover - interface
        ...
