from __future__ import annotations

from typing import Protocol, runtime_checkable
from urllib.parse import urlparse


@runtime_checkable
class PathMatcher(Protocol):
    """
    Interface for product-path detection.
    Keep this small and stable so custom matchers rarely break across upgrades.
    """

    name: str

    def matches(self, path: str) -> bool:
        """Return True if the URL path looks like a product detail page."""
        ...


def host_of(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def host_matches(host: str, target: str, mode: str = "subdomain") -> bool:
    """
    Decide whether ``host`` belongs to the crawl target ``target``.

    ``subdomain`` accepts the host itself and any of its subdomains,
    ``exact`` only the host itself, and ``substring`` any host that contains
    the target text (so ``evil-example.com`` passes for ``example.com``).
    """
    if not host or not target:
        return False
    if mode == "exact":
        return host == target
    if mode == "substring":
        return target in host
    return host == target or host.endswith("." + target)
