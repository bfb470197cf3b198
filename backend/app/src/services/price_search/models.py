"""Domain models for price comparison results."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional


@dataclass(slots=True)
class ProductRecord:
    """Single listing scraped from a pharmacy search page."""

    name: str
    price: Decimal
    price_text: str
    link: str
    source_id: str
    fetch_method: str
    selector: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        """Return a JSON friendly representation."""
        return {
            "name": self.name,
            "price": float(self.price),
            "priceText": self.price_text,
            "link": self.link,
            "pharmacy": self.source_id,
            "method": self.fetch_method,
            "selector": self.selector,
        }


@dataclass(slots=True)
class SourceStatistics:
    """Price summary for one source with at least one record."""

    count: int
    min_price: Decimal
    max_price: Decimal
    avg_price: Decimal

    def as_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "minPrice": float(self.min_price),
            "maxPrice": float(self.max_price),
            "avgPrice": float(self.avg_price),
        }


@dataclass(slots=True)
class SiteOutcome:
    """Result of scraping a single source, successful or not."""

    source_id: str
    records: List[ProductRecord] = field(default_factory=list)
    error: Optional[str] = None


@dataclass(slots=True)
class ComparisonReport:
    """Aggregated comparison across every configured source."""

    query: str
    method: str
    total_results: int
    successful_source_count: int
    per_source: Dict[str, List[ProductRecord]]
    top_deals: List[ProductRecord]
    statistics: Dict[str, SourceStatistics]
    errors: Optional[Dict[str, str]] = None
    suggestions: Optional[List[str]] = None

    def as_dict(self) -> Dict[str, Any]:
        """Return the report using the public camelCase keys."""
        return {
            "query": self.query,
            "method": self.method,
            "totalResults": self.total_results,
            "successfulSourceCount": self.successful_source_count,
            "perSource": {
                source_id: [record.as_dict() for record in records]
                for source_id, records in self.per_source.items()
            },
            "topDeals": [record.as_dict() for record in self.top_deals],
            "statistics": {
                source_id: stats.as_dict()
                for source_id, stats in self.statistics.items()
            },
            "errors": self.errors,
            "suggestions": self.suggestions,
        }


@dataclass(slots=True)
class BatchReport:
    """Sequential comparisons for several queries."""

    batch_results: Dict[str, ComparisonReport]
    processed: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "batch_results": {
                query: report.as_dict() for query, report in self.batch_results.items()
            },
            "processed": self.processed,
        }


class PriceSearchError(RuntimeError):
    """Raised when a source cannot complete the search."""

    def __init__(self, site: str, message: str) -> None:
        super().__init__(message)
        self.site = site
        self.message = message


class FetchTimeout(PriceSearchError):
    """The page did not load within the configured timeout."""


class FetchBlocked(PriceSearchError):
    """The source refused the request (HTTP 403 or 429)."""

    def __init__(self, site: str, status_code: int) -> None:
        super().__init__(
            site,
            f"{site} blocked the request (HTTP {status_code}); "
            "try the 'puppeteer' method.",
        )
        self.status_code = status_code


class NavigationError(PriceSearchError):
    """The page could not be retrieved."""


class NoMatchingSelectors(PriceSearchError):
    """Neither selector profile matched any product card."""


class UnknownSiteError(LookupError):
    """Requested source is not in the site registry."""

    def __init__(self, site: str) -> None:
        super().__init__(f"Pharmacy {site} not supported")
        self.site = site


class UnknownMethodError(ValueError):
    """Requested fetch method has no registered fetcher."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Unknown fetch method '{method}'")
        self.method = method
