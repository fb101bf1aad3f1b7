from __future__ import annotations

import json
from typing import Sequence
from pathlib import Path

from ..engines.base import DomainResult


class JSONExporter:
    """Writes ``[{"domain": ..., "productUrls": [...]}, ...]`` in input order."""

    def export(self, results: Sequence[DomainResult], path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump([r.to_dict() for r in results], f, indent=2, ensure_ascii=False)
