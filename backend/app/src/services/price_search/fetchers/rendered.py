"""Headless browser fetcher for pages that render listings client side."""

from __future__ import annotations

import logging
from typing import Sequence

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from ..models import FetchTimeout, NavigationError
from ..sites import SiteProfile
from ..utils import DEFAULT_HEADERS, USER_AGENT
from .base import PageFetcher

logger = logging.getLogger("price_search.rendered")

CHROMIUM_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--disable-gpu",
    "--disable-web-security",
    "--disable-features=VizDisplayCompositor",
)

DISMISS_SELECTOR = (
    '[class*="close"], [class*="dismiss"], .modal-close, [aria-label*="close"]'
)

_DISMISS_SCRIPT = "sel => document.querySelectorAll(sel).forEach(el => el.click())"


class RenderedPageFetcher(PageFetcher):
    """Render the search page in Chromium, one isolated browser per call."""

    def __init__(
        self,
        navigation_timeout_ms: int = 45_000,
        settle_ms: int = 5_000,
        headless: bool = True,
        launch_args: Sequence[str] = CHROMIUM_ARGS,
    ) -> None:
        self.navigation_timeout_ms = navigation_timeout_ms
        self.settle_ms = settle_ms
        self.headless = headless
        self.launch_args = list(launch_args)

    def fetch(self, site: SiteProfile, query: str) -> str:
        url = site.search_url(query)
        logger.info("Rendered fetch %s: %s", site.id, url)

        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(
                headless=self.headless, args=self.launch_args
            )
            try:
                context = browser.new_context(
                    user_agent=USER_AGENT,
                    locale="en-US",
                    extra_http_headers={
                        "Accept-Language": DEFAULT_HEADERS["Accept-Language"],
                        "Accept": DEFAULT_HEADERS["Accept"],
                    },
                )
                page = context.new_page()
                try:
                    page.goto(
                        url,
                        wait_until="domcontentloaded",
                        timeout=self.navigation_timeout_ms,
                    )
                except PlaywrightTimeoutError as exc:
                    raise FetchTimeout(
                        site.id,
                        f"Navigation to {site.id} timed out after "
                        f"{self.navigation_timeout_ms}ms.",
                    ) from exc
                except PlaywrightError as exc:
                    raise NavigationError(
                        site.id, f"Could not open {site.id}: {exc.message}"
                    ) from exc

                page.wait_for_timeout(self.settle_ms)
                self._dismiss_overlays(page, site)
                return page.content()
            finally:
                browser.close()

    @staticmethod
    def _dismiss_overlays(page, site: SiteProfile) -> None:
        try:
            page.evaluate(_DISMISS_SCRIPT, DISMISS_SELECTOR)
        except PlaywrightError as exc:
            logger.debug("%s: overlay dismissal failed: %s", site.id, exc.message)
