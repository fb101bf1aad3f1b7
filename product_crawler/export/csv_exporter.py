from __future__ import annotations

import csv
from typing import Sequence
from pathlib import Path

from ..engines.base import DomainResult


class CSVExporter:
    """
    Writes one ``domain,url`` row per product URL.
    Domains without products produce no rows.
    """

    _headers = ["domain", "url"]

    def export(self, results: Sequence[DomainResult], path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            w = csv.writer(f)
            w.writerow(self._headers)
            for result in results:
                for url in sorted(result.product_urls):
                    w.writerow([result.domain, url])
