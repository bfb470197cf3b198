"""Utilities shared by the fetchers and the extractor."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Optional
from urllib.parse import urljoin


USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}

# Optional single currency marker (symbol or rupee abbreviation), then
# comma grouped digits with an optional two digit fraction.
PRICE_PATTERN = re.compile(
    r"(?:[^\w\s.,]|Rs\.?|INR)?\s*([0-9]+(?:,[0-9]+)*(?:\.[0-9]{2})?)"
)


def parse_price(price_text: str | None) -> Optional[Decimal]:
    """Extract a positive Decimal from free-form price text.

    Returns None when no digits are found or when the value is zero, so
    callers never confuse a missing price with a free product.
    """
    if not price_text:
        return None

    match = PRICE_PATTERN.search(price_text)
    if not match:
        return None

    try:
        value = Decimal(match.group(1).replace(",", ""))
    except (InvalidOperation, ValueError):
        return None

    if value <= 0:
        return None
    return value


def normalize_whitespace(value: str) -> str:
    """Collapse repeated spaces and newlines."""
    return re.sub(r"\s+", " ", value).strip()


def absolute_link(href: str | None, base_url: str) -> str:
    """Resolve relative product links against the source's base URL."""
    if not href:
        return ""
    href = href.strip()
    if href.startswith(("http://", "https://")):
        return href
    return urljoin(base_url, href)
