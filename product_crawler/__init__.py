"""Discover product-page URLs on e-commerce sites by bounded in-domain crawling."""

from .version import __version__

__all__ = ["__version__"]
