from __future__ import annotations

import re
from typing import Iterable, List


class RegexPathMatcher:
    """Matches when the compiled pattern is found anywhere in the path."""

    name = "regex"

    def __init__(self, pattern: str, *, flags: int = 0) -> None:
        self.pattern = pattern
        self._regex = re.compile(pattern, flags)

    def matches(self, path: str) -> bool:
        return self._regex.search(path) is not None

    def __repr__(self) -> str:
        return f"RegexPathMatcher({self.pattern!r})"


class SegmentPathMatcher:
    """
    Matches a path that has one of the given segments followed by something
    else, e.g. ``/product/42`` for segment ``product`` but not ``/product/``.
    """

    name = "segment"

    def __init__(self, segments: Iterable[str] = ("product", "item", "p")) -> None:
        self.segments = {s.strip("/").lower() for s in segments if s.strip("/")}

    def matches(self, path: str) -> bool:
        parts = [p for p in path.lower().split("/") if p]
        return any(part in self.segments for part in parts[:-1])


def compile_patterns(patterns: Iterable[str]) -> List[RegexPathMatcher]:
    return [RegexPathMatcher(p) for p in patterns]
