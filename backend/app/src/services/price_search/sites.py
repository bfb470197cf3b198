"""Registry of pharmacy sources and their selector profiles.

Each source is plain data: a search URL template, the base URL used to
resolve relative links and two selector profiles. Adding a pharmacy means
adding an entry to ``SITES``.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional
from urllib.parse import quote

from .models import UnknownSiteError


@dataclass(frozen=True)
class SelectorProfile:
    """CSS queries locating a product card and its fields."""

    product_card: str
    name: str
    price: str
    link: Optional[str] = None


@dataclass(frozen=True)
class SiteProfile:
    """Static configuration for one pharmacy source."""

    id: str
    search_url_template: str
    base_url: str
    primary_selectors: SelectorProfile
    fallback_selectors: Optional[SelectorProfile] = None

    def search_url(self, query: str) -> str:
        """Build the search URL for a query."""
        return self.search_url_template.format(query=quote(query, safe=""))

    @property
    def profiles(self) -> tuple[SelectorProfile, ...]:
        if self.fallback_selectors is None:
            return (self.primary_selectors,)
        return (self.primary_selectors, self.fallback_selectors)


ONE_MG = SiteProfile(
    id="1mg",
    search_url_template="https://www.1mg.com/search/all?name={query}",
    base_url="https://www.1mg.com",
    primary_selectors=SelectorProfile(
        product_card=(
            '[data-testid="product-card"], .style__product-card___1gbex, '
            ".ProductCard__product-card"
        ),
        name=(
            '[data-testid="product-name"], .style__product-name___2VZi3, '
            ".ProductCard__product-name"
        ),
        price=(
            '[data-testid="price"], .style__price-tag___KzOkY, '
            ".ProductCard__price"
        ),
        link="a",
    ),
    fallback_selectors=SelectorProfile(
        product_card='.col-3, .product-card, [class*="product"], [class*="card"]',
        name='[class*="name"], [class*="title"], h3, h4',
        price='[class*="price"], [class*="cost"], [class*="amount"]',
    ),
)

PHARMEASY = SiteProfile(
    id="pharmeasy",
    search_url_template="https://pharmeasy.in/search/all?name={query}",
    base_url="https://pharmeasy.in",
    primary_selectors=SelectorProfile(
        product_card=(
            '.ProductCard_medicineUnitWrapper__eoLpy, [class*="ProductCard"], '
            '[class*="product"]'
        ),
        name=(
            '.ProductCard_medicineName__8Yy0C, [class*="medicineName"], '
            '[class*="productName"]'
        ),
        price='.ProductCard_ourPrice__yDytt, [class*="ourPrice"], [class*="price"]',
        link="a",
    ),
    fallback_selectors=SelectorProfile(
        product_card='[class*="card"], [class*="product"], .medicine-card',
        name='h3, h4, [class*="name"], [class*="title"]',
        price='[class*="price"], [class*="cost"], [class*="amount"]',
    ),
)

SITES: Mapping[str, SiteProfile] = MappingProxyType(
    {site.id: site for site in (ONE_MG, PHARMEASY)}
)


def get_site(site_id: str, sites: Mapping[str, SiteProfile] = SITES) -> SiteProfile:
    """Return the profile for ``site_id`` or raise UnknownSiteError."""
    try:
        return sites[site_id]
    except KeyError as exc:
        raise UnknownSiteError(site_id) from exc
