from __future__ import annotations

import logging
import os

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def resolve_level(level: str | int | None) -> int:
    """Map a level name (or None -> CRAWLER_LOG_LEVEL) to a logging constant."""
    if level is None:
        level = os.getenv("CRAWLER_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        return _LEVELS.get(level.upper(), logging.INFO)
    return level


def setup_logging(level: str | int | None = None) -> None:
    """
    Configure application logging once for the CLI and API entry points.
    """
    logging.basicConfig(level=resolve_level(level), format=LOG_FORMAT)
    # aiohttp logs every connection hiccup at DEBUG; the fetcher reports failures itself.
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
