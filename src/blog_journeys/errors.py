"""Failure taxonomy for the journey engine.

Action failures (a locator that cannot be found or interacted with) are
raised as ``blog_journeys.browser.ToolError``; everything else lives here.
"""
from __future__ import annotations

from typing import Any


class JourneyError(Exception):
    """Base class for engine failures that are not plain assertion failures."""


class SuiteStateError(JourneyError):
    """A suite read a state slot that no earlier step has written."""

    def __init__(self, slot: str, message: str | None = None) -> None:
        self.slot = slot
        super().__init__(
            message
            or f"Suite state slot '{slot}' was read before any step populated it"
        )


class PreconditionError(JourneyError):
    """A setup hook could not establish the state its dependents need."""

    def __init__(self, step: str, cause: BaseException) -> None:
        self.step = step
        self.cause = cause
        super().__init__(f"Precondition '{step}' failed: {cause}")


class SuiteOrderError(JourneyError):
    """A serial suite tried to run a test out of declaration order."""


class UiAssertionError(AssertionError):
    """Expected UI state never materialized within the polling window."""

    def __init__(
        self,
        step: str,
        expectation: str,
        expected: Any,
        observed: Any,
        timeout: float,
    ) -> None:
        self.step = step
        self.expectation = expectation
        self.expected = expected
        self.observed = observed
        self.timeout = timeout
        super().__init__(
            f"[{step}] expected {expectation} {expected!r} within {timeout:g}s; "
            f"last observed {observed!r}"
        )
