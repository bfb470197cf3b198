"""Turn a fetched search page into normalized product records."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

from .models import NoMatchingSelectors, ProductRecord
from .sites import SelectorProfile, SiteProfile
from .utils import absolute_link, normalize_whitespace, parse_price

logger = logging.getLogger("price_search.extractor")

NAME_FALLBACK_SELECTORS = (
    "h3",
    "h4",
    ".title",
    '[class*="name"]',
    '[class*="title"]',
)

PRICE_FALLBACK_SELECTORS = (
    '[class*="price"]',
    '[class*="cost"]',
    '[class*="amount"]',
    ".price",
    ".cost",
)


class ProductExtractor:
    """Apply a site's selector profiles to page HTML."""

    DEFAULT_MAX_CARDS = 15

    def __init__(
        self,
        max_cards: int | None = None,
        name_fallbacks: Sequence[str] = NAME_FALLBACK_SELECTORS,
        price_fallbacks: Sequence[str] = PRICE_FALLBACK_SELECTORS,
    ) -> None:
        self.max_cards = self.DEFAULT_MAX_CARDS if max_cards is None else max_cards
        self.name_fallbacks = tuple(name_fallbacks)
        self.price_fallbacks = tuple(price_fallbacks)

    def extract(
        self,
        html: str,
        site: SiteProfile,
        method: str,
        strict: bool = False,
    ) -> List[ProductRecord]:
        """Extract up to ``max_cards`` records using primary then fallback profile.

        A profile is abandoned when its card query matches nothing or when
        none of its cards yield both a name and a positive price. With
        ``strict`` set, a page where no profile matched a single card raises
        NoMatchingSelectors instead of returning an empty list.
        """
        soup = BeautifulSoup(html or "", "html.parser")
        matched_cards = False

        for profile in site.profiles:
            cards = soup.select(profile.product_card)
            if not cards:
                logger.debug(
                    "%s: no cards for selector %s", site.id, profile.product_card
                )
                continue

            matched_cards = True
            logger.info(
                "%s: found %d product cards with selector: %s",
                site.id,
                len(cards),
                profile.product_card,
            )
            records = [
                record
                for record in (
                    self._build_record(card, profile, site, method)
                    for card in cards[: self.max_cards]
                )
                if record is not None
            ]
            if records:
                return records

        if not matched_cards:
            logger.info("%s: no selector profile matched the page", site.id)
            if strict:
                raise NoMatchingSelectors(
                    site.id, f"No product cards found on {site.id}."
                )
        return []

    def _build_record(
        self,
        card: Tag,
        profile: SelectorProfile,
        site: SiteProfile,
        method: str,
    ) -> Optional[ProductRecord]:
        name = self._first_text(card, (profile.name, *self.name_fallbacks))
        price_text = self._first_text(card, (profile.price, *self.price_fallbacks))
        if not name or not price_text:
            return None

        price = parse_price(price_text)
        if price is None:
            logger.debug("%s: skipping '%s', unparseable price %r", site.id, name, price_text)
            return None

        return ProductRecord(
            name=name,
            price=price,
            price_text=price_text,
            link=absolute_link(self._find_href(card, profile), site.base_url),
            source_id=site.id,
            fetch_method=method,
            selector=profile.product_card,
        )

    @staticmethod
    def _first_text(card: Tag, selectors: Sequence[str]) -> str:
        """Return the first non-empty text found by trying ``selectors`` in order."""
        for selector in selectors:
            element = card.select_one(selector)
            if element is None:
                continue
            text = normalize_whitespace(element.get_text(" ", strip=True))
            if text:
                return text
        return ""

    @staticmethod
    def _find_href(card: Tag, profile: SelectorProfile) -> Optional[str]:
        for selector in (profile.link, "a"):
            if not selector:
                continue
            anchor = card.select_one(selector)
            if anchor is not None and anchor.get("href"):
                return anchor["href"]
        if card.name == "a" and card.get("href"):
            return card["href"]
        return None
