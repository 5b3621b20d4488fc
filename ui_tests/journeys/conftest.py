"""
Fixtures for journey-based testing.

- Skips every journey when the application under test is unreachable
  (fails instead when UI_REQUIRE_APP=1)
- Setup hooks that register accounts in isolated browser sessions
- ``other_user``: a second account for ownership checks
"""
import logging

import httpx
import pytest
import pytest_asyncio

from blog_journeys import workflows
from blog_journeys.config import settings
from blog_journeys.orchestrator import before_all, before_each, precondition

logger = logging.getLogger(__name__)


# ============================================================================
# Application availability
# ============================================================================

@pytest.fixture(scope="session", autouse=True)
def application_available():
    """Probe the application root once per session."""
    url = settings.url("/")
    try:
        response = httpx.get(url, timeout=5.0, follow_redirects=True)
    except httpx.HTTPError as exc:
        message = f"Application under test not reachable at {url}: {exc}"
        if settings.require_app:
            pytest.fail(message)
        pytest.skip(message)
    if response.status_code >= 500:
        pytest.fail(f"Application under test at {url} answered HTTP {response.status_code}")
    logger.info("Application under test reachable at %s", url)


# ============================================================================
# Setup hooks
# ============================================================================

async def _register_in_isolation(session_manager):
    async with session_manager.isolated_session("setup") as setup_browser:
        return await workflows.create_account(setup_browser)


@pytest_asyncio.fixture
async def fresh_user(session_manager, suite_state):
    """Per-test hook: a newly registered account for every test of the suite."""
    return await before_each(
        suite_state.current_user,
        "create account",
        lambda: _register_in_isolation(session_manager),
    )


@pytest_asyncio.fixture
async def suite_user(session_manager, suite_state):
    """Per-suite hook: one account registered by the first test and shared by the rest."""
    return await before_all(
        suite_state.current_user,
        "create shared account",
        lambda: _register_in_isolation(session_manager),
    )


@pytest_asyncio.fixture
async def other_user(session_manager):
    """A second account that owns nothing; the suite state keeps its own user."""
    async with precondition("create second account"):
        return await _register_in_isolation(session_manager)
