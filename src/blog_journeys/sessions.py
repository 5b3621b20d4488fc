"""
Isolated browser sessions for setup hooks.

A setup hook that registers an account must not share cookies with the test
that later logs in, so every hook gets its own Playwright BrowserContext.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional, TypedDict

from playwright.async_api import Browser as PlaywrightBrowser, BrowserContext, Page

from blog_journeys.browser import Browser

logger = logging.getLogger(__name__)


class ViewportSize(TypedDict):
    width: int
    height: int


@dataclass
class SessionHandle:
    """Handle to one isolated browser session."""

    session_id: str
    context: BrowserContext
    page: Page
    role: str  # 'setup', 'user', 'anonymous'

    @property
    def browser(self) -> Browser:
        return Browser(self.page)

    def __repr__(self) -> str:
        return f"SessionHandle(id={self.session_id}, role={self.role})"


class SessionManager:
    """
    Opens and tracks isolated browser sessions on one Playwright browser.

    Each session gets its own BrowserContext: separate cookies, storage and
    authentication state.

    Usage:
        async with SessionManager(client.browser) as manager:
            async with manager.isolated_session("setup") as browser:
                artifact = await create_account(browser)
    """

    DEFAULT_VIEWPORT: ViewportSize = {"width": 1280, "height": 720}
    DEFAULT_LOCALE = "en-US"

    def __init__(
        self,
        browser: PlaywrightBrowser,
        viewport: Optional[ViewportSize] = None,
        locale: str = DEFAULT_LOCALE,
        timeout: Optional[int] = None,
    ):
        self.browser = browser
        self.viewport: ViewportSize = viewport or self.DEFAULT_VIEWPORT
        self.locale = locale
        self.timeout = timeout
        self.sessions: Dict[str, SessionHandle] = {}
        self._counter = 0

    async def __aenter__(self) -> "SessionManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close_all()

    async def open_session(self, role: str, session_id: Optional[str] = None) -> SessionHandle:
        """Create a new isolated session."""
        if session_id is None:
            self._counter += 1
            session_id = f"{role}_{self._counter}"

        if session_id in self.sessions:
            raise ValueError(f"Session {session_id} already exists")

        context = await self.browser.new_context(viewport=self.viewport, locale=self.locale)
        if self.timeout is not None:
            context.set_default_timeout(self.timeout)
            context.set_default_navigation_timeout(self.timeout)
        page = await context.new_page()

        handle = SessionHandle(session_id=session_id, context=context, page=page, role=role)
        self.sessions[session_id] = handle
        logger.debug("Created session: %r", handle)
        return handle

    async def close_session(self, session_id: str) -> None:
        """Close and forget a session."""
        handle = self.sessions.pop(session_id, None)
        if handle is None:
            return
        try:
            await handle.context.close()
            logger.debug("Closed session: %r", handle)
        except Exception as exc:
            # A context already torn down by the browser is not a test failure.
            logger.warning("Error closing session %s: %s", session_id, exc)

    async def close_all(self) -> None:
        for session_id in list(self.sessions.keys()):
            await self.close_session(session_id)

    @asynccontextmanager
    async def isolated_session(self, role: str = "setup") -> AsyncIterator[Browser]:
        """Yield a ``Browser`` on a fresh context, closed when the block exits."""
        handle = await self.open_session(role)
        try:
            yield handle.browser
        finally:
            await self.close_session(handle.session_id)
