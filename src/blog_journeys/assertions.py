"""Post-condition checks for journey steps.

Each check polls the page until the expectation holds or the window
(``settings.assert_timeout``) runs out, then raises ``UiAssertionError`` with
the last value it observed. Read failures inside the window (element not
rendered yet) count as observations, not as errors.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional, TypeVar

import anyio

from blog_journeys import ui_contract as ui
from blog_journeys.browser import Browser, Target, ToolError
from blog_journeys.config import settings
from blog_journeys.errors import UiAssertionError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def poll_until(
    observe: Callable[[], Awaitable[T]],
    predicate: Callable[[T], bool],
    *,
    step: str,
    expectation: str,
    expected: object,
    timeout: Optional[float] = None,
    interval: Optional[float] = None,
) -> T:
    """Observe repeatedly until ``predicate`` accepts the observation."""
    timeout = settings.assert_timeout if timeout is None else timeout
    interval = settings.poll_interval if interval is None else interval
    deadline = anyio.current_time() + timeout
    observed: object = None

    while True:
        try:
            value = await observe()
        except ToolError as exc:
            observed = f"<unavailable: {exc.message}>"
        else:
            if predicate(value):
                return value
            observed = value
        if anyio.current_time() >= deadline:
            break
        await anyio.sleep(interval)

    logger.warning("[%s] %s %r not met; last observed %r", step, expectation, expected, observed)
    raise UiAssertionError(step, expectation, expected, observed, timeout)


async def expect_text(
    browser: Browser,
    target: Target,
    expected: str,
    *,
    step: str,
    timeout: Optional[float] = None,
) -> str:
    """Element text equals ``expected`` (surrounding whitespace ignored)."""
    return await poll_until(
        lambda: browser.text(target),
        lambda text: text.strip() == expected,
        step=step,
        expectation=f"text of {target.describe()} to equal",
        expected=expected,
        timeout=timeout,
    )


async def expect_contains(
    browser: Browser,
    target: Target,
    expected: str,
    *,
    step: str,
    timeout: Optional[float] = None,
) -> str:
    """Element text contains ``expected``."""
    return await poll_until(
        lambda: browser.text(target),
        lambda text: expected in text,
        step=step,
        expectation=f"text of {target.describe()} to contain",
        expected=expected,
        timeout=timeout,
    )


async def expect_not_contains(
    browser: Browser,
    target: Target,
    unexpected: str,
    *,
    step: str,
    timeout: Optional[float] = None,
) -> str:
    """Element text no longer contains ``unexpected`` (e.g. a deleted comment)."""
    return await poll_until(
        lambda: browser.text(target),
        lambda text: unexpected not in text,
        step=step,
        expectation=f"text of {target.describe()} not to contain",
        expected=unexpected,
        timeout=timeout,
    )


async def expect_visible(
    browser: Browser,
    target: Target,
    *,
    step: str,
    timeout: Optional[float] = None,
) -> None:
    await poll_until(
        lambda: browser.is_visible(target),
        bool,
        step=step,
        expectation="visibility of",
        expected=target.describe(),
        timeout=timeout,
    )


async def expect_hidden(
    browser: Browser,
    target: Target,
    *,
    step: str,
    timeout: Optional[float] = None,
) -> None:
    await poll_until(
        lambda: browser.is_visible(target),
        lambda visible: not visible,
        step=step,
        expectation="absence of",
        expected=target.describe(),
        timeout=timeout,
    )


async def expect_attribute_changed(
    browser: Browser,
    target: Target,
    attribute: str,
    before: Optional[str],
    *,
    step: str,
    timeout: Optional[float] = None,
) -> Optional[str]:
    """Attribute differs from ``before``; returns the new value.

    Used for side effects whose content is opaque, such as a replaced image.
    """
    return await poll_until(
        lambda: browser.get_attribute(target, attribute),
        lambda value: value != before,
        step=step,
        expectation=f"{attribute} of {target.describe()} to differ from",
        expected=before,
        timeout=timeout,
    )


async def expect_url_contains(
    browser: Browser,
    fragment: str,
    *,
    step: str,
    timeout: Optional[float] = None,
) -> str:
    async def _current_url() -> str:
        return browser.current_url

    return await poll_until(
        _current_url,
        lambda url: fragment in url,
        step=step,
        expectation="page URL to contain",
        expected=fragment,
        timeout=timeout,
    )


async def expect_signed_in(browser: Browser, *, step: str, timeout: Optional[float] = None) -> None:
    """Authenticated navigation (Posts and User menus) is shown and Login is gone."""
    await expect_visible(browser, ui.NAV_FIRST_LINK, step=f"{step}: posts menu", timeout=timeout)
    await expect_visible(browser, ui.NAV_SECOND_LINK, step=f"{step}: user menu", timeout=timeout)
    await expect_hidden(browser, ui.NAV_LOGIN_LINK, step=f"{step}: login link gone", timeout=timeout)


async def expect_signed_out(browser: Browser, *, step: str, timeout: Optional[float] = None) -> None:
    await expect_visible(browser, ui.NAV_LOGIN_LINK, step=f"{step}: login link", timeout=timeout)
