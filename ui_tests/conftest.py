import logging
import re
import secrets

import pytest
import pytest_asyncio
from PIL import Image

from blog_journeys.browser import Browser, ToolError
from blog_journeys.config import settings
from blog_journeys.playwright_client import PlaywrightClient
from blog_journeys.sessions import SessionManager

logger = logging.getLogger(__name__)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report on the item (``item.rep_setup``, ``item.rep_call``)."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest_asyncio.fixture()
async def playwright_client():
    """Create a Playwright client instance."""
    async with PlaywrightClient() as client:
        yield client


@pytest_asyncio.fixture()
async def browser(playwright_client, request):
    """The test's own browser session.

    When SCREENSHOT_DIR is set, a failing test leaves a full-page screenshot
    named after its node id.
    """
    browser = Browser(playwright_client.page)
    yield browser

    report = getattr(request.node, "rep_call", None)
    if settings.screenshot_dir is None or report is None or not report.failed:
        return
    name = re.sub(r"[^A-Za-z0-9_.-]+", "_", request.node.nodeid)
    try:
        path = await browser.screenshot(settings.screenshot_dir / f"{name}.png")
        print(f"📸 {path}")
    except ToolError as exc:
        logger.warning("Could not capture failure screenshot: %s", exc)


@pytest_asyncio.fixture()
async def session_manager(playwright_client):
    """Isolated browser contexts for setup hooks.

    Usage:
        async with session_manager.isolated_session() as setup_browser:
            credentials = await create_account(setup_browser)
    """
    async with SessionManager(playwright_client.browser, timeout=settings.action_timeout_ms) as manager:
        yield manager


@pytest.fixture
def profile_picture(tmp_path):
    """A small JPEG with a random colour, so every upload differs from the last."""
    colour = tuple(secrets.randbelow(256) for _ in range(3))
    path = tmp_path / "profile.jpg"
    Image.new("RGB", (64, 64), colour).save(path, "JPEG")
    return path
