from __future__ import annotations

from typing import List
from urllib.parse import urlparse, urlunparse

from bs4 import BeautifulSoup


def normalize_url(url: str) -> str:
    """
    Normalize URL by removing the fragment and lower-casing scheme and host.
    """
    parts = list(urlparse(url))
    parts[0] = parts[0].lower()
    parts[1] = parts[1].lower()
    parts[5] = ""  # strip fragment
    # Optionally we could normalize query params here.
    return urlunparse(parts)


def root_url(domain: str) -> str:
    """
    Turn a configured domain into a crawlable root URL.
    Bare hosts ("example.com") get the https scheme.
    """
    domain = domain.strip()
    if "://" not in domain:
        domain = f"https://{domain}"
    parsed = urlparse(domain)
    return normalize_url(urlunparse((parsed.scheme, parsed.netloc, parsed.path or "/", "", parsed.query, "")))


def extract_links(html: str) -> List[str]:
    """
    Return raw href values of every <a href> in document order.
    Resolution and filtering are left to the classifier.
    """
    soup = BeautifulSoup(html, "html.parser")
    out: List[str] = []
    for a in soup.select("a[href]"):
        href = a.get("href")
        if not href or not href.strip():
            continue
        out.append(href.strip())
    return out
