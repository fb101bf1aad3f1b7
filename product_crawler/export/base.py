from __future__ import annotations

from typing import Protocol, Sequence

from ..engines.base import DomainResult


class Exporter(Protocol):
    def export(self, results: Sequence[DomainResult], path: str) -> None:
        ...
