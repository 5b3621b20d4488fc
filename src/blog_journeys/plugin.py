"""pytest plugin that runs ``@pytest.mark.serial`` suites as ordered, dependent steps.

    @pytest.mark.serial
    class TestPostAndComment:
        async def test_01_create_post(self, suite_state): ...
        async def test_02_create_comment(self, suite_state): ...

- tests of a suite run in declaration order; going back is an error
- the first failing test (or setup hook) skips every later test of the suite
- with pytest-xdist every suite stays on one worker: ``-n N`` alone switches
  the ``load``/``worksteal`` schedulers to ``loadgroup``
- ``suite_state`` gives every test of a suite the same ``SuiteState``
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pytest

from blog_journeys.config import settings
from blog_journeys.orchestrator import SuiteRegistry, SuiteRun, SuiteStatus
from blog_journeys.state import SuiteState

logger = logging.getLogger(__name__)

SERIAL_MARKER = "serial"
WORKER_OUTPUT_KEY = "blog_journeys_serial_suites"
# xdist schedulers that may hand tests of one class to different workers
SPLITTING_SCHEDULERS = ("load", "worksteal")

registry_key = pytest.StashKey[SuiteRegistry]()
worker_summaries_key = pytest.StashKey[List[Dict[str, object]]]()


def _suite_id(item: pytest.Item) -> Optional[str]:
    if item.get_closest_marker(SERIAL_MARKER) is None:
        return None
    return item.parent.nodeid if item.parent is not None else item.nodeid


def get_registry(config: pytest.Config) -> SuiteRegistry:
    return config.stash[registry_key]


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        f"{SERIAL_MARKER}: run the suite's tests in declaration order and skip the rest after the first failure",
    )
    # also declared by pytest-xdist; repeated here so runs without it stay warning-free
    config.addinivalue_line("markers", "xdist_group(name): run tests of the same group on one xdist worker")
    config.stash[registry_key] = SuiteRegistry()
    config.stash[worker_summaries_key] = []
    logging.getLogger("blog_journeys").setLevel(settings.log_level)
    _keep_suites_on_one_worker(config)


def _is_xdist_worker(config: pytest.Config) -> bool:
    return hasattr(config, "workerinput")


def _keep_suites_on_one_worker(config: pytest.Config) -> None:
    """Make the xdist controller honour the ``xdist_group`` tags added below.

    The schedulers read ``config.option.dist`` when the session starts, so
    rewriting it here is enough.
    """
    if _is_xdist_worker(config) or not getattr(config.option, "numprocesses", None):
        return
    dist = getattr(config.option, "dist", "no")
    if dist not in SPLITTING_SCHEDULERS:
        return
    config.option.dist = "loadgroup"
    config.issue_config_time_warning(
        pytest.PytestConfigWarning(
            f"--dist {dist} would split serial suites across workers; using --dist loadgroup"
        ),
        stacklevel=2,
    )


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(session: pytest.Session, config: pytest.Config, items: List[pytest.Item]) -> None:
    for item in items:
        suite = _suite_id(item)
        if suite is not None and item.get_closest_marker("xdist_group") is None:
            item.add_marker(pytest.mark.xdist_group(name=suite))


def pytest_collection_finish(session: pytest.Session) -> None:
    registry = get_registry(session.config)
    suites: dict[str, List[str]] = {}
    for item in session.items:
        suite = _suite_id(item)
        if suite is not None:
            suites.setdefault(suite, []).append(item.nodeid)
    for suite, tests in suites.items():
        registry.register(suite, tests)
        logger.debug("Registered serial suite %s with %d tests", suite, len(tests))


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_setup(item: pytest.Item) -> None:
    run = get_registry(item.config).run_for(item.nodeid)
    if run is None:
        return
    if run.aborted:
        pytest.skip(f"serial suite aborted: {run.failed_test} failed ({run.failure})")
    run.start(item.nodeid)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo):
    outcome = yield
    report = outcome.get_result()
    run = get_registry(item.config).run_for(item.nodeid)
    if run is None or run.aborted:
        return
    if report.failed:
        message = ""
        if call.excinfo is not None:
            message = call.excinfo.exconly().splitlines()[0]
        run.failed(item.nodeid, report.when, message)
    elif report.when == "call" and report.passed and run.status is SuiteStatus.RUNNING:
        run.passed(item.nodeid)


def pytest_sessionfinish(session: pytest.Session) -> None:
    config = session.config
    runs = get_registry(config).runs()
    for run in runs:
        run.finish()
    if _is_xdist_worker(config):
        # every worker collects every suite; report only the ones it ran
        config.workeroutput[WORKER_OUTPUT_KEY] = [
            run.summary() for run in runs if run.status is not SuiteStatus.NOT_STARTED
        ]


@pytest.hookimpl(optionalhook=True)
def pytest_testnodedown(node, error) -> None:
    """xdist controller: keep the suite outcomes a finished worker reported."""
    output = getattr(node, "workeroutput", None) or {}
    node.config.stash[worker_summaries_key].extend(output.get(WORKER_OUTPUT_KEY, []))


def pytest_terminal_summary(terminalreporter, exitstatus: int, config: pytest.Config) -> None:
    summaries = [run.summary() for run in get_registry(config).runs()]
    summaries += config.stash[worker_summaries_key]
    if not summaries:
        return
    terminalreporter.write_sep("-", "serial suites")
    for summary in sorted(summaries, key=lambda s: s["suite"]):
        terminalreporter.write_line(_summary_line(summary))


def _summary_line(summary: Dict[str, object]) -> str:
    status = str(summary["status"]).upper()
    line = f"{status:<11} {summary['suite']} ({summary['passed']}/{summary['total']} passed)"
    if summary["status"] == SuiteStatus.FAILED.value:
        line += f" - {summary['failed_test']}: {summary['failure']}"
    return line


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(scope="class")
def suite_state(request: pytest.FixtureRequest) -> SuiteState:
    """State shared by the tests of one suite; fresh for every suite run."""
    return SuiteState(request.node.nodeid)


@pytest.fixture
def suite_run(request: pytest.FixtureRequest) -> Optional[SuiteRun]:
    """The ``SuiteRun`` the current test belongs to (``None`` outside serial suites)."""
    return get_registry(request.config).run_for(request.node.nodeid)
