import logging
import os
import sys
from typing import Callable, Optional

import pytest
from selenium import webdriver
from selenium.webdriver.remote.webdriver import WebDriver

from .browser import build_chrome_options, build_driver
from .evidence import EvidenceCapture
from .models import CheckResult, Report, ReportOutcome
from .report_exporter import ReportExporter
from .runner import Check, CheckRunner
from .settings import HarnessSettings

logger = logging.getLogger(__name__)

# Command-line option dest -> HarnessSettings field. Options left unset fall
# back to the SNULINKS_* environment, then to the defaults.
_SETTINGS_OPTIONS = {
    "smoke_base_url": "base_url",
    "smoke_wait_timeout": "timeout_seconds",
    "smoke_headless": "headless",
    "smoke_selenium_server": "selenium_server",
    "smoke_screenshot_dir": "screenshot_dir",
    "smoke_report_dir": "report_dir",
}


def pytest_addoption(parser):
    group = parser.getgroup("snulinks_smoke")
    group.addoption(
        "--portal-url",
        action="store",
        dest="smoke_base_url",
        default=None,
        help="The page every browser session opens (default: https://snulinks.snu.edu.in/).",
    )
    group.addoption(
        "--wait-timeout",
        action="store",
        dest="smoke_wait_timeout",
        type=int,
        default=None,
        help="Seconds every wait condition gets before the check fails with a timeout (default: 20).",
    )
    group.addoption(
        "--headless",
        action="store_const",
        const=True,
        dest="smoke_headless",
        default=None,
        help="Run Chrome without a visible window.",
    )
    group.addoption(
        "--selenium-server",
        action="store",
        dest="smoke_selenium_server",
        default=None,
        help="Remote selenium webdriver to connect to (eg localhost:4444)",
    )
    group.addoption(
        "--screenshot-dir",
        action="store",
        dest="smoke_screenshot_dir",
        default=None,
        help="The directory evidence screenshots are written to (default: target/screenshots).",
    )
    group.addoption(
        "--report-dir",
        action="store",
        dest="smoke_report_dir",
        default=None,
        help="The directory the run report is written to (default: target/smoke-report).",
    )
    group.addoption(
        "--report-title",
        action="store",
        dest="smoke_report_title",
        default="SNULinks Smoke Summary",
        help="An optional title for your report; if not provided, a default will be used.",
    )


@pytest.fixture(scope="session")
def harness_settings(request) -> HarnessSettings:
    overrides = {}
    for dest, field in _SETTINGS_OPTIONS.items():
        value = request.config.getoption(dest)
        if value is not None:
            overrides[field] = value
    return HarnessSettings(**overrides)


@pytest.fixture(scope="session")
def chrome_options(harness_settings) -> webdriver.ChromeOptions:
    """
    The ChromeOptions every session is launched with. Extend it in your own conftest:

        @pytest.fixture(scope='session')
        def chrome_options(chrome_options):
            chrome_options.add_argument("--incognito")
            return chrome_options
    """
    return build_chrome_options(harness_settings)


@pytest.fixture(scope="session")
def driver_factory(chrome_options) -> Callable[[HarnessSettings], WebDriver]:
    """Builds one fresh browser per check. Override to substitute a different driver."""

    def inner(settings: HarnessSettings) -> WebDriver:
        return build_driver(settings, chrome_options)

    return inner


@pytest.fixture(scope="session")
def evidence_capture(harness_settings) -> EvidenceCapture:
    return EvidenceCapture(harness_settings.screenshot_dir)


@pytest.fixture
def check_runner(harness_settings, evidence_capture, driver_factory) -> CheckRunner:
    return CheckRunner(harness_settings, evidence_capture, driver_factory=driver_factory)


@pytest.fixture(scope="session")
def report_title(request) -> str:
    return request.config.getoption("smoke_report_title")


@pytest.fixture(scope="session")
def smoke_report(report_title) -> Report:
    args = []
    if len(sys.argv) > 1:
        args.extend(sys.argv[1:])

    return Report(
        arguments=" ".join(args),
        outcome=ReportOutcome.never_started,
        title=report_title,
    )


@pytest.fixture(scope="session")
def report_dir(harness_settings) -> str:
    dir_ = harness_settings.report_dir
    os.makedirs(dir_, exist_ok=True)
    return dir_


@pytest.fixture(scope="session")
def report_generator(report_dir, smoke_report):
    """Writes report.json and index.html into the report directory once the session is over."""
    yield
    smoke_report.stop_timer()
    smoke_report.outcome = ReportOutcome.success
    ReportExporter().export_all(smoke_report, report_dir)
    logger.info(
        f"Smoke run finished: {len(smoke_report.results)} checks, {smoke_report.num_failures} failed, "
        f"report in {os.path.abspath(report_dir)}"
    )


@pytest.fixture
def smoke_check(request, check_runner, smoke_report, report_generator) -> Callable[..., CheckResult]:
    """
    Runs a check in its own browser session, records the result in the run
    report, and fails the calling test if the check did not pass:

        def test_home_page_title(smoke_check):
            smoke_check(check_home_page_title)
    """

    def inner(check: Check, test_name: Optional[str] = None) -> CheckResult:
        result = check_runner.run(test_name or request.node.name, check)
        smoke_report.results.append(result)
        result.raise_for_outcome()
        return result

    return inner
