"""
Direct Playwright Client
========================

Launches Playwright in-process and hands out pages for the journeys.

Usage:
    from blog_journeys.playwright_client import PlaywrightClient

    async with PlaywrightClient() as client:
        await client.page.goto("http://localhost:3000")
        await client.page.click("#post_menu > a")
"""
from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from blog_journeys.config import settings

logger = logging.getLogger(__name__)


class PlaywrightClient:
    """
    Playwright browser plus one default context/page.

    Example:
        async with PlaywrightClient() as client:
            await client.page.goto("http://localhost:3000")
    """

    def __init__(
        self,
        browser_type: Optional[str] = None,
        headless: Optional[bool] = None,
        timeout: Optional[int] = None,
    ):
        """
        Args:
            browser_type: chromium, firefox or webkit (default from settings)
            headless: Run headless (default from settings)
            timeout: Default action timeout in milliseconds (default from settings)
        """
        self.browser_type = browser_type or settings.browser_type
        self.headless = settings.playwright_headless if headless is None else headless
        self.timeout = settings.action_timeout_ms if timeout is None else timeout

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> "PlaywrightClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def connect(self) -> None:
        """Launch the browser and open the default context and page."""
        self._playwright = await async_playwright().start()

        if self.browser_type == "firefox":
            self._browser = await self._playwright.firefox.launch(headless=self.headless)
        elif self.browser_type == "webkit":
            self._browser = await self._playwright.webkit.launch(headless=self.headless)
        else:
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
        logger.debug("Launched %s (headless=%s)", self.browser_type, self.headless)

        self._context = await self.new_context()
        self._page = await self._context.new_page()

    async def new_context(self, **kwargs) -> BrowserContext:
        """Create a new isolated browser context (own cookies and storage)."""
        if not self._browser:
            raise RuntimeError("Client not connected. Use 'async with' or call connect()")
        context = await self._browser.new_context(**kwargs)
        context.set_default_timeout(self.timeout)
        context.set_default_navigation_timeout(self.timeout)
        return context

    async def close(self) -> None:
        """Close all connections and cleanup resources."""
        if self._page:
            await self._page.close()
            self._page = None

        if self._context:
            await self._context.close()
            self._context = None

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    @property
    def browser(self) -> Browser:
        if not self._browser:
            raise RuntimeError("Client not connected")
        return self._browser

    @property
    def context(self) -> BrowserContext:
        if not self._context:
            raise RuntimeError("Client not connected")
        return self._context

    @property
    def page(self) -> Page:
        if not self._page:
            raise RuntimeError("Client not connected or page not created")
        return self._page

