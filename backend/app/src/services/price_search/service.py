"""High-level service that orchestrates price comparisons."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from configs import settings

from .extractor import ProductExtractor
from .fetchers.base import PageFetcher
from .fetchers.rendered import RenderedPageFetcher
from .fetchers.static import StaticPageFetcher
from .models import (
    BatchReport,
    ComparisonReport,
    PriceSearchError,
    ProductRecord,
    SiteOutcome,
    SourceStatistics,
    UnknownMethodError,
)
from .sites import SITES, SiteProfile, get_site

logger = logging.getLogger("price_search.service")

STATIC = "static"
RENDERED = "rendered"

# Public method names, including the legacy axios/puppeteer ones, to fetcher kind.
METHOD_ALIASES: Mapping[str, str] = {
    "axios": STATIC,
    "static": STATIC,
    "puppeteer": RENDERED,
    "rendered": RENDERED,
}


def resolve_method(method: str) -> str:
    """Map a public method name to a fetcher kind."""
    try:
        return METHOD_ALIASES[method.strip().lower()]
    except (KeyError, AttributeError) as exc:
        raise UnknownMethodError(str(method)) from exc


def build_statistics(
    per_source: Mapping[str, Sequence[ProductRecord]],
) -> Dict[str, SourceStatistics]:
    """Count, min, max and mean price for every source with records."""
    statistics: Dict[str, SourceStatistics] = {}
    for source_id, records in per_source.items():
        if not records:
            continue
        prices = [record.price for record in records]
        average = (sum(prices, Decimal(0)) / len(prices)).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
        statistics[source_id] = SourceStatistics(
            count=len(prices),
            min_price=min(prices),
            max_price=max(prices),
            avg_price=average,
        )
    return statistics


def build_suggestions(
    per_source: Mapping[str, Sequence[ProductRecord]],
    fetcher_kind: str,
    limited_threshold: int = 5,
) -> Optional[List[str]]:
    """Hints for the caller when results are sparse or sources came back empty."""
    suggestions: List[str] = []
    total = sum(len(records) for records in per_source.values())

    if total == 0:
        suggestions.append("No results found. Try:")
        suggestions.append("- Using a different medicine name or brand")
        suggestions.append("- Switching to 'puppeteer' method for better reliability")
        suggestions.append("- Checking if the medicine name is spelled correctly")
    elif total < limited_threshold:
        suggestions.append("Limited results found. Consider:")
        suggestions.append("- Trying alternative medicine names or generic versions")
        if fetcher_kind == STATIC:
            suggestions.append(
                "- Using 'puppeteer' method for more comprehensive scraping"
            )

    empty_sources = sum(1 for records in per_source.values() if not records)
    if empty_sources and fetcher_kind == STATIC:
        suggestions.append(
            "Some sites blocked axios requests - try 'puppeteer' method "
            "for better success rate"
        )

    return suggestions or None


class PriceComparisonService:
    """Fan out a query to every source and merge the results."""

    DEFAULT_TOP_DEALS = 10
    DEFAULT_BATCH_DELAY_SECONDS = 1.0

    def __init__(
        self,
        fetchers: Mapping[str, PageFetcher] | None = None,
        sites: Sequence[SiteProfile] | None = None,
        extractor: ProductExtractor | None = None,
        top_deals_limit: int | None = None,
        batch_delay_seconds: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.fetchers: Mapping[str, PageFetcher] = fetchers or {
            STATIC: StaticPageFetcher(),
            RENDERED: RenderedPageFetcher(),
        }
        self.sites: Sequence[SiteProfile] = tuple(sites or SITES.values())
        self._sites_by_id = {site.id: site for site in self.sites}
        self.extractor = extractor or ProductExtractor()
        self.top_deals_limit = (
            self.DEFAULT_TOP_DEALS if top_deals_limit is None else top_deals_limit
        )
        self.batch_delay_seconds = (
            self.DEFAULT_BATCH_DELAY_SECONDS
            if batch_delay_seconds is None
            else batch_delay_seconds
        )
        self._sleep = sleep

    def compare(self, query: str, method: str = "axios") -> ComparisonReport:
        """Compare prices for ``query`` across every configured source."""
        return self._run(query, method, self.sites)

    def search_site(
        self, site_id: str, query: str, method: str = "axios"
    ) -> ComparisonReport:
        """Same pipeline as ``compare`` restricted to one source."""
        return self._run(query, method, (get_site(site_id, self._sites_by_id),))

    def compare_many(self, queries: Iterable[str], method: str = "axios") -> BatchReport:
        """Run comparisons one after another, pausing between queries."""
        queries = list(queries)
        resolve_method(method)

        results: Dict[str, ComparisonReport] = {}
        for query in queries:
            results[query] = self.compare(query, method)
            self._sleep(self.batch_delay_seconds)
        return BatchReport(batch_results=results, processed=len(queries))

    def _run(
        self, query: str, method: str, sites: Sequence[SiteProfile]
    ) -> ComparisonReport:
        kind = resolve_method(method)
        fetcher = self.fetchers[kind]
        method = method.strip().lower()

        logger.info(
            "Starting price comparison for '%s' using %s method across %d sources",
            query,
            method,
            len(sites),
        )
        outcomes = self._scrape_all(sites, query, fetcher, method)

        per_source = {outcome.source_id: outcome.records for outcome in outcomes}
        errors = {
            outcome.source_id: outcome.error
            for outcome in outcomes
            if outcome.error is not None
        }
        all_records = [record for outcome in outcomes for record in outcome.records]
        all_records.sort(key=lambda record: record.price)
        successful = sum(1 for outcome in outcomes if outcome.records)

        logger.info(
            "Comparison complete: %d total results from %d sources",
            len(all_records),
            successful,
        )
        return ComparisonReport(
            query=query,
            method=method,
            total_results=len(all_records),
            successful_source_count=successful,
            per_source=per_source,
            top_deals=all_records[: self.top_deals_limit],
            statistics=build_statistics(per_source),
            errors=errors or None,
            suggestions=build_suggestions(per_source, kind),
        )

    def _scrape_all(
        self,
        sites: Sequence[SiteProfile],
        query: str,
        fetcher: PageFetcher,
        method: str,
    ) -> List[SiteOutcome]:
        with ThreadPoolExecutor(
            max_workers=max(len(sites), 1), thread_name_prefix="scrape"
        ) as executor:
            futures: List[Future[SiteOutcome]] = [
                executor.submit(self._scrape_site, site, query, fetcher, method)
                for site in sites
            ]
        return [future.result() for future in futures]

    def _scrape_site(
        self,
        site: SiteProfile,
        query: str,
        fetcher: PageFetcher,
        method: str,
    ) -> SiteOutcome:
        """Fetch and extract one source, containing any failure."""
        try:
            html = fetcher.fetch(site, query)
            records = self.extractor.extract(html, site, method)
        except PriceSearchError as exc:
            logger.warning("Source %s failed: %s", exc.site, exc.message)
            return SiteOutcome(source_id=site.id, error=exc.message)
        except Exception as exc:
            logger.exception("Unexpected error scraping %s", site.id)
            return SiteOutcome(
                source_id=site.id, error=f"Could not scrape {site.id}: {exc}"
            )

        logger.info("%s: found %d results", site.id, len(records))
        return SiteOutcome(source_id=site.id, records=records)


def get_price_comparison_service() -> PriceComparisonService:
    """FastAPI dependency wiring the service with the environment settings."""
    return PriceComparisonService(
        fetchers={
            STATIC: StaticPageFetcher(
                timeout=settings.STATIC_TIMEOUT_SECONDS,
                max_redirects=settings.STATIC_MAX_REDIRECTS,
            ),
            RENDERED: RenderedPageFetcher(
                navigation_timeout_ms=settings.NAVIGATION_TIMEOUT_MS,
                settle_ms=settings.SETTLE_DELAY_MS,
                headless=settings.BROWSER_HEADLESS,
            ),
        },
        extractor=ProductExtractor(max_cards=settings.MAX_CARDS_PER_PROFILE),
        top_deals_limit=settings.TOP_DEALS_LIMIT,
        batch_delay_seconds=settings.BATCH_DELAY_SECONDS,
    )
