from __future__ import annotations

from typing import Iterator, Set


class VisitedRegistry:
    """
    Per-domain set of URLs already claimed for fetching.

    All workers of a domain share one event loop and ``try_mark`` never
    awaits, so the membership test and the insert cannot interleave with
    another task.
    """

    def __init__(self) -> None:
        self._seen: Set[str] = set()

    def try_mark(self, url: str) -> bool:
        """Claim ``url``; return False if it was already claimed."""
        if url in self._seen:
            return False
        self._seen.add(url)
        return True

    def __contains__(self, url: object) -> bool:
        return url in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    def __iter__(self) -> Iterator[str]:
        return iter(self._seen)
