"""Test selector profile resolution in the product extractor."""

from decimal import Decimal

import pytest

from src.services.price_search.extractor import ProductExtractor
from src.services.price_search.models import NoMatchingSelectors
from src.services.price_search.sites import SITES, SelectorProfile, SiteProfile


TEST_SITE = SiteProfile(
    id="testpharmacy",
    search_url_template="https://pharmacy.test/search?q={query}",
    base_url="https://pharmacy.test",
    primary_selectors=SelectorProfile(
        product_card=".med-tile",
        name=".med-label",
        price=".med-mrp",
        link="a.med-link",
    ),
    fallback_selectors=SelectorProfile(
        product_card="li.result",
        name="strong",
        price="em",
    ),
)


def primary_tile(name, price, href="/med/1"):
    return (
        '<div class="med-tile">'
        f'<a class="med-link" href="{href}"><span class="med-label">{name}</span></a>'
        f'<span class="med-mrp">{price}</span>'
        "</div>"
    )


def fallback_item(name, price, href="/item/1"):
    return f'<li class="result"><strong>{name}</strong><em>{price}</em><a href="{href}">view</a></li>'


class TestProductExtractor:
    """Test cases for ProductExtractor."""

    def setup_method(self) -> None:
        self.extractor = ProductExtractor()

    def test_primary_profile_builds_records(self) -> None:
        html = "<html><body>" + primary_tile("Crocin 500mg", "₹1,299.50", "/drugs/crocin") + "</body></html>"

        records = self.extractor.extract(html, TEST_SITE, "axios")

        assert len(records) == 1
        record = records[0]
        assert record.name == "Crocin 500mg"
        assert record.price == Decimal("1299.50")
        assert record.price_text == "₹1,299.50"
        assert record.link == "https://pharmacy.test/drugs/crocin"
        assert record.source_id == "testpharmacy"
        assert record.fetch_method == "axios"
        assert record.selector == ".med-tile"

    def test_fallback_profile_used_when_primary_matches_nothing(self) -> None:
        html = "<ul>" + "".join(
            fallback_item(f"Dolo {i}", f"₹{i}0.00", f"/item/{i}") for i in range(1, 4)
        ) + "</ul>"

        records = self.extractor.extract(html, TEST_SITE, "puppeteer")

        assert [record.name for record in records] == ["Dolo 1", "Dolo 2", "Dolo 3"]
        assert [record.price for record in records] == [
            Decimal("10.00"),
            Decimal("20.00"),
            Decimal("30.00"),
        ]
        assert records[2].link == "https://pharmacy.test/item/3"
        assert all(record.selector == "li.result" for record in records)

    def test_fallback_profile_used_when_primary_cards_yield_nothing(self) -> None:
        html = (
            '<div class="med-tile"><p>Sponsored</p></div>'
            '<div class="med-tile"><p>Banner</p></div>'
            "<ul>" + fallback_item("Calpol", "₹32") + "</ul>"
        )

        records = self.extractor.extract(html, TEST_SITE, "axios")

        assert len(records) == 1
        assert records[0].name == "Calpol"
        assert records[0].selector == "li.result"

    def test_only_first_fifteen_cards_are_evaluated(self) -> None:
        html = "".join(primary_tile(f"Tablet {i}", f"₹{i + 1}") for i in range(20))

        records = self.extractor.extract(html, TEST_SITE, "axios")

        assert len(records) == 15
        assert records[-1].name == "Tablet 14"

    def test_cap_counts_inspected_cards_not_records(self) -> None:
        tiles = [primary_tile(f"Tablet {i}", "N/A") for i in range(15)]
        tiles.append(primary_tile("Tablet 15", "₹10"))

        records = self.extractor.extract("".join(tiles), TEST_SITE, "axios")

        assert records == []

    def test_custom_card_limit(self) -> None:
        html = "".join(primary_tile(f"Tablet {i}", f"₹{i + 1}") for i in range(6))

        records = ProductExtractor(max_cards=4).extract(html, TEST_SITE, "axios")

        assert len(records) == 4

    def test_zero_card_limit_is_respected(self) -> None:
        html = primary_tile("Crocin", "₹20")

        assert ProductExtractor(max_cards=0).extract(html, TEST_SITE, "axios") == []

    def test_candidates_without_price_or_name_are_skipped(self) -> None:
        html = (
            primary_tile("Crocin", "Out of stock")
            + primary_tile("", "₹25")
            + primary_tile("Saridon", "₹0")
            + primary_tile("Combiflam", "₹41.60")
        )

        records = self.extractor.extract(html, TEST_SITE, "axios")

        assert [record.name for record in records] == ["Combiflam"]

    def test_generic_name_and_price_fallbacks(self) -> None:
        html = (
            '<div class="med-tile">'
            "<h3>Pan 40 Tablet</h3>"
            '<div class="final-price">₹155.20</div>'
            "</div>"
        )

        records = self.extractor.extract(html, TEST_SITE, "axios")

        assert len(records) == 1
        assert records[0].name == "Pan 40 Tablet"
        assert records[0].price == Decimal("155.20")
        assert records[0].link == ""

    def test_card_that_is_an_anchor_uses_its_own_href(self) -> None:
        site = SiteProfile(
            id="anchors",
            search_url_template="https://anchors.test/?q={query}",
            base_url="https://anchors.test",
            primary_selectors=SelectorProfile(
                product_card="a.card", name=".n", price=".p"
            ),
        )
        html = '<a class="card" href="/p/7"><span class="n">Zincovit</span><span class="p">₹99</span></a>'

        records = self.extractor.extract(html, site, "axios")

        assert records[0].link == "https://anchors.test/p/7"

    def test_no_matching_cards_returns_empty_list(self) -> None:
        assert self.extractor.extract("<p>No results</p>", TEST_SITE, "axios") == []
        assert self.extractor.extract("", TEST_SITE, "axios") == []

    def test_no_matching_cards_raises_in_strict_mode(self) -> None:
        with pytest.raises(NoMatchingSelectors) as exc_info:
            self.extractor.extract("<p>No results</p>", TEST_SITE, "axios", strict=True)

        assert exc_info.value.site == "testpharmacy"


def test_registered_one_mg_profile_parses_listing():
    html = (
        '<div data-testid="product-card">'
        '<a href="/drugs/dolo-650-tablet-74467">'
        '<div data-testid="product-name">Dolo 650 Tablet</div></a>'
        '<div data-testid="price">MRP₹33.60</div>'
        "</div>"
    )

    records = ProductExtractor().extract(html, SITES["1mg"], "axios")

    assert len(records) == 1
    assert records[0].price == Decimal("33.60")
    assert records[0].link == "https://www.1mg.com/drugs/dolo-650-tablet-74467"
