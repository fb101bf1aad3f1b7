from __future__ import annotations

from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlparse

from .base import PathMatcher, host_of, host_matches
from ..utils.parsing import normalize_url

_WEB_SCHEMES = ("http", "https")


class UrlClassifier:
    """
    Resolves candidate links for one target domain and tells product pages
    apart from everything else. Pure: holds no crawl state.
    """

    def __init__(self, target_url: str, matchers: Iterable[PathMatcher], *, domain_match: str = "subdomain") -> None:
        self.target_host = host_of(target_url)
        self.matchers: List[PathMatcher] = list(matchers)
        self.domain_match = domain_match

    def resolve(self, link: str, base_url: str) -> Optional[str]:
        """
        Return the absolute, fragment-free form of ``link`` if it stays inside
        the target domain, else None. Malformed links are not an error.
        """
        try:
            absolute = urljoin(base_url, link)
            parsed = urlparse(absolute)
            host = (parsed.hostname or "").lower()
        except ValueError:
            return None
        if parsed.scheme.lower() not in _WEB_SCHEMES:
            return None
        if not host_matches(host, self.target_host, self.domain_match):
            return None
        return normalize_url(absolute)

    def classify(self, url: str) -> bool:
        path = urlparse(url).path or "/"
        return any(m.matches(path) for m in self.matchers)
