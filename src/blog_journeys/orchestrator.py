"""Serial suite bookkeeping and setup hooks.

A suite is an ordered group of dependent tests: test N+1 may read state that
only test N produced, so tests run one at a time in declaration order and
the first failure aborts everything after it.

Per suite run:

    NOT_STARTED -> RUNNING(index) -> COMPLETED
                                  -> FAILED(index)
"""
from __future__ import annotations

import enum
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Optional, TypeVar

from blog_journeys.errors import PreconditionError, SuiteOrderError
from blog_journeys.state import Slot

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SuiteStatus(enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class SuiteRun:
    """Execution state of one serial suite."""

    suite: str
    tests: List[str]
    status: SuiteStatus = SuiteStatus.NOT_STARTED
    index: Optional[int] = None
    failed_test: Optional[str] = None
    failure: Optional[str] = None
    passed_tests: List[str] = field(default_factory=list)

    @property
    def current_test(self) -> Optional[str]:
        if self.index is None:
            return None
        return self.tests[self.index]

    @property
    def aborted(self) -> bool:
        return self.status is SuiteStatus.FAILED

    def position(self, test: str) -> int:
        try:
            return self.tests.index(test)
        except ValueError:
            raise SuiteOrderError(f"{test} is not part of suite {self.suite}") from None

    def start(self, test: str) -> int:
        """Enter ``RUNNING`` for ``test``.

        Tests may only move forward through the declaration order. Skipping
        ahead is allowed (a test skipped by a marker never starts), going
        back or re-entering a finished suite is not.
        """
        if self.status in (SuiteStatus.COMPLETED, SuiteStatus.FAILED):
            raise SuiteOrderError(f"Suite {self.suite} already finished ({self.status.value}); cannot start {test}")

        position = self.position(test)
        expected = 0 if self.index is None else self.index + 1
        if position < expected:
            raise SuiteOrderError(
                f"Suite {self.suite} already ran past {test}; tests must run in declaration order"
            )
        self.status = SuiteStatus.RUNNING
        self.index = position
        logger.debug("Suite %s running %s (%d/%d)", self.suite, test, position + 1, len(self.tests))
        return position

    def passed(self, test: str) -> None:
        position = self.position(test)
        if self.status is not SuiteStatus.RUNNING or position != self.index:
            raise SuiteOrderError(f"{test} passed but suite {self.suite} is not running it")
        if test not in self.passed_tests:
            self.passed_tests.append(test)
        if position == len(self.tests) - 1:
            self.status = SuiteStatus.COMPLETED
            logger.info("Suite %s completed (%d tests)", self.suite, len(self.tests))

    def failed(self, test: str, phase: str, message: str = "") -> None:
        self.status = SuiteStatus.FAILED
        self.index = self.position(test)
        self.failed_test = test
        self.failure = f"{phase}: {message}" if message else phase
        logger.error("Suite %s failed at %s during %s", self.suite, test, phase)

    def finish(self) -> SuiteStatus:
        """Close a run whose trailing tests were skipped or deselected."""
        if self.status is SuiteStatus.RUNNING:
            self.status = SuiteStatus.COMPLETED
        return self.status

    def remaining(self) -> List[str]:
        if self.index is None:
            return list(self.tests)
        return self.tests[self.index + 1:]

    def summary(self) -> Dict[str, object]:
        """Outcome as plain data (sent from xdist workers to the controller)."""
        return {
            "suite": self.suite,
            "status": self.status.value,
            "passed": len(self.passed_tests),
            "total": len(self.tests),
            "failed_test": self.failed_test,
            "failure": self.failure,
        }


class SuiteRegistry:
    """One ``SuiteRun`` per suite, keyed by suite id."""

    def __init__(self) -> None:
        self._runs: Dict[str, SuiteRun] = {}
        self._suite_of: Dict[str, str] = {}

    def register(self, suite: str, tests: List[str]) -> SuiteRun:
        run = SuiteRun(suite=suite, tests=list(tests))
        self._runs[suite] = run
        for test in tests:
            self._suite_of[test] = suite
        return run

    def run_for(self, test: str) -> Optional[SuiteRun]:
        suite = self._suite_of.get(test)
        return self._runs.get(suite) if suite is not None else None

    def get(self, suite: str) -> Optional[SuiteRun]:
        return self._runs.get(suite)

    def runs(self) -> List[SuiteRun]:
        return list(self._runs.values())

    def __len__(self) -> int:
        return len(self._runs)


# ============================================================================
# Setup hooks
# ============================================================================

@asynccontextmanager
async def precondition(step: str) -> AsyncIterator[None]:
    """Report any failure inside the block as ``PreconditionError``."""
    logger.debug("Establishing precondition: %s", step)
    try:
        yield
    except PreconditionError:
        raise
    except Exception as exc:
        logger.error("Precondition '%s' failed: %s", step, exc)
        raise PreconditionError(step, exc) from exc


async def before_each(slot: Slot[T], step: str, factory: Callable[[], Awaitable[T]]) -> T:
    """Run ``factory`` for every test and store the result in ``slot``."""
    async with precondition(step):
        return slot.set(await factory())


async def before_all(slot: Slot[T], step: str, factory: Callable[[], Awaitable[T]]) -> T:
    """Run ``factory`` once per suite run; later tests reuse the stored value."""
    if slot.is_set:
        return slot.get()
    return await before_each(slot, step, factory)
