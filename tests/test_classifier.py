from __future__ import annotations

import re

import pytest

from product_crawler.matchers.base import host_matches
from product_crawler.matchers.classifier import UrlClassifier
from product_crawler.matchers.patterns import RegexPathMatcher, SegmentPathMatcher, compile_patterns
from product_crawler.config import DEFAULT_PRODUCT_PATTERNS

PAGE = "https://shop.test/category/shoes"


@pytest.fixture
def classifier():
    return UrlClassifier("https://shop.test/", compile_patterns(DEFAULT_PRODUCT_PATTERNS))


@pytest.mark.parametrize("link, expected", [
    ("/product/42", "https://shop.test/product/42"),
    ("boots", "https://shop.test/category/boots"),
    ("../item/9?color=red#reviews", "https://shop.test/item/9?color=red"),
    ("HTTPS://SHOP.TEST/About", "https://shop.test/About"),
    ("//m.shop.test/p/1", "https://m.shop.test/p/1"),
])
def test_resolve_accepts_in_domain_links(classifier, link, expected):
    assert classifier.resolve(link, PAGE) == expected


@pytest.mark.parametrize("link", [
    "https://other.test/product/1",
    "https://evil-shop.test/product/1",
    "https://shop.test.evil.com/product/1",
    "mailto:sales@shop.test",
    "javascript:void(0)",
    "ftp://shop.test/file",
    "http://[::1",
])
def test_resolve_rejects_foreign_and_malformed_links(classifier, link):
    assert classifier.resolve(link, PAGE) is None


def test_exact_mode_rejects_subdomains():
    c = UrlClassifier("https://shop.test", [], domain_match="exact")
    assert c.resolve("https://m.shop.test/x", PAGE) is None
    assert c.resolve("/x", PAGE) == "https://shop.test/x"


def test_substring_mode_is_opt_in():
    c = UrlClassifier("https://shop.test", [], domain_match="substring")
    assert c.resolve("https://evil-shop.test/product/1", PAGE) == "https://evil-shop.test/product/1"


def test_host_matches_modes():
    assert host_matches("shop.test", "shop.test")
    assert host_matches("www.shop.test", "shop.test")
    assert not host_matches("evil-shop.test", "shop.test")
    assert host_matches("evil-shop.test", "shop.test", "substring")
    assert not host_matches("www.shop.test", "shop.test", "exact")
    assert not host_matches("", "shop.test")


@pytest.mark.parametrize("url, expected", [
    ("https://shop.test/product/42", True),
    ("https://shop.test/en/item/abc", True),
    ("https://shop.test/p/123", True),
    ("https://shop.test/products", False),
    ("https://shop.test/about?next=/product/1", False),
    ("https://shop.test/", False),
])
def test_classify_checks_path_only(classifier, url, expected):
    assert classifier.classify(url) is expected


def test_matchers_are_injected():
    c = UrlClassifier("https://shop.test", [RegexPathMatcher(r"-pd-\d+$")])
    assert c.classify("https://shop.test/red-shoe-pd-1234")
    assert not c.classify("https://shop.test/product/1")


def test_segment_matcher_needs_an_identifier_after_the_segment():
    m = SegmentPathMatcher(["product", "/dp/"])
    assert m.matches("/product/42")
    assert m.matches("/gp/dp/B000123/ref")
    assert not m.matches("/product/")
    assert not m.matches("/products/42")


def test_default_patterns_are_case_sensitive(classifier):
    assert classifier.classify("https://shop.test/product/1")
    assert not classifier.classify("https://shop.test/Product/1")
    assert not classifier.classify("https://shop.test/ITEM/1")


def test_case_insensitive_matching_is_opt_in():
    m = RegexPathMatcher("/product/", flags=re.IGNORECASE)
    assert m.matches("/Product/1")
