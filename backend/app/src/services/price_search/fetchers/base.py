"""Base class for page fetching strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..sites import SiteProfile


class PageFetcher(ABC):
    """Retrieve the raw HTML of a source's search results page."""

    @abstractmethod
    def fetch(self, site: SiteProfile, query: str) -> str:
        """Return page HTML or raise a PriceSearchError subclass."""
        raise NotImplementedError
