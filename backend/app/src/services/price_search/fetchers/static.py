"""Plain HTTP fetcher: no script execution, static HTML only."""

from __future__ import annotations

import logging

import requests
from bs4 import UnicodeDammit

from ..models import FetchBlocked, FetchTimeout, NavigationError
from ..sites import SiteProfile
from ..utils import DEFAULT_HEADERS
from .base import PageFetcher

logger = logging.getLogger("price_search.static")

BLOCKED_STATUS_CODES = frozenset({403, 429})


class StaticPageFetcher(PageFetcher):
    """Fetch search pages with a single browser-like GET request."""

    def __init__(self, timeout: float = 15, max_redirects: int = 5) -> None:
        self.timeout = timeout
        self.max_redirects = max_redirects
        self.headers = {
            **DEFAULT_HEADERS,
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
            "Sec-Fetch-Dest": "document",
            "Sec-Fetch-Mode": "navigate",
            "Sec-Fetch-Site": "none",
            "Cache-Control": "max-age=0",
        }

    def fetch(self, site: SiteProfile, query: str) -> str:
        url = site.search_url(query)
        logger.info("Static fetch %s: %s", site.id, url)

        with requests.Session() as session:
            session.max_redirects = self.max_redirects
            try:
                response = session.get(url, headers=self.headers, timeout=self.timeout)
            except requests.Timeout as exc:
                raise FetchTimeout(
                    site.id, f"Timed out after {self.timeout}s fetching {site.id}."
                ) from exc
            except requests.RequestException as exc:
                raise NavigationError(
                    site.id, f"Could not fetch {site.id}: {exc}"
                ) from exc

        if response.status_code in BLOCKED_STATUS_CODES:
            logger.warning(
                "%s blocked the static request (HTTP %s), try the puppeteer method",
                site.id,
                response.status_code,
            )
            raise FetchBlocked(site.id, response.status_code)

        if not response.ok:
            raise NavigationError(
                site.id, f"HTTP {response.status_code} fetching {site.id}."
            )

        return self._decode(response)

    @staticmethod
    def _decode(response: requests.Response) -> str:
        """Decode the body, sniffing <meta charset> then UTF-8 when the header has no charset."""
        content_type = response.headers.get("Content-Type", "")
        if "charset=" in content_type.lower():
            return response.text
        return UnicodeDammit(
            response.content, user_encodings=["utf-8"], is_html=True
        ).unicode_markup
