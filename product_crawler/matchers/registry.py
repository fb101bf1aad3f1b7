from __future__ import annotations

import logging
from typing import Iterable, List
from importlib import metadata

from .base import PathMatcher
from .patterns import compile_patterns
from ..config import CrawlConfig
from ..utils.loader import load_instance

logger = logging.getLogger(__name__)


class MatcherRegistry:
    """
    Ordered registry of product-path matchers.
    Supports config patterns, config-defined dotted classes, and entry-point plugins.
    """
    def __init__(self, matchers: Iterable[PathMatcher] = ()) -> None:
        self._matchers: List[PathMatcher] = list(matchers)

    @classmethod
    def from_config(cls, config: CrawlConfig, *, discover: bool = True) -> "MatcherRegistry":
        registry = cls(compile_patterns(config.product_path_patterns))
        # Allow runtime registration of additional matchers
        for dotted in config.extra_matchers:
            try:
                registry.register(load_instance(dotted))
            except (ImportError, AttributeError, TypeError, ValueError) as exc:
                logger.warning("Failed to load matcher %s: %r", dotted, exc)
        if discover:
            registry.discover_entry_points()
        return registry

    # ---- Introspection / Management ----

    def register(self, matcher: PathMatcher) -> None:
        if not isinstance(matcher, PathMatcher):
            raise TypeError(f"{matcher!r} does not implement matches(path)")
        self._matchers.append(matcher)

    @property
    def matchers(self) -> List[PathMatcher]:
        return list(self._matchers)

    def __len__(self) -> int:
        return len(self._matchers)

    # ---- Discovery ----

    def discover_entry_points(self, group: str = "product_crawler.matchers") -> int:
        """
        Discover third-party matchers installed as entry points.
        Returns count of newly registered matchers.
        """
        added = 0
        for ep in metadata.entry_points(group=group):
            try:
                self.register(ep.load()())
            except Exception as exc:  # plugins are optional; a broken one must not stop the crawl
                logger.warning("Skipping matcher entry point %s: %r", ep.name, exc)
                continue
            added += 1
        return added
