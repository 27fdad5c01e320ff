"""
Runs one smoke check through the same lifecycle every time:

    open session -> run check -> classify outcome -> capture evidence -> close session

A check is any callable taking the open Session and returning the element
that proves it passed (or None when there is nothing to point at, such as a
title check). The outcome is returned as a CheckResult rather than raised,
so evidence capture and teardown never sit inside exception handlers.
"""
from datetime import datetime
from logging import getLogger
from typing import Callable, Optional

from selenium.common.exceptions import TimeoutException
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from .browser import Session, build_driver, open_session
from .evidence import EvidenceCapture
from .exceptions import SetupError
from .models import CheckResult, Outcome
from .settings import HarnessSettings

logger = getLogger(__name__)

Check = Callable[[Session], Optional[WebElement]]


class CheckRunner:
    def __init__(
        self,
        settings: HarnessSettings,
        evidence: EvidenceCapture,
        driver_factory: Callable[[HarnessSettings], WebDriver] = build_driver,
    ):
        self.settings = settings
        self.evidence = evidence
        self.driver_factory = driver_factory

    def run(self, test_name: str, check: Check) -> CheckResult:
        logger.info(f"Starting test: {test_name}")
        start_time = datetime.now()
        try:
            session = open_session(self.settings, self.driver_factory)
        except SetupError as e:
            logger.error(f"Test Failed (Setup): {test_name} - {e}")
            return CheckResult(
                test_name=test_name,
                outcome=Outcome.failed_setup,
                message=str(e),
                start_time=start_time,
                end_time=datetime.now(),
            )

        try:
            result = self.execute(test_name, check, session)
            result.start_time = start_time
            if result.outcome.captures_evidence:
                result.artifact = self.capture_evidence(result, session)
        finally:
            session.close()
        result.stop_timer()
        return result

    def run_and_raise(self, test_name: str, check: Check) -> CheckResult:
        result = self.run(test_name, check)
        result.raise_for_outcome()
        return result

    @staticmethod
    def execute(test_name: str, check: Check, session: Session) -> CheckResult:
        try:
            element = check(session)
        except TimeoutException as e:
            logger.error(f"Test Failed (Timeout): {test_name} - {e.msg}")
            return CheckResult(test_name=test_name, outcome=Outcome.failed_timeout, message=e.msg)
        except AssertionError as e:
            logger.error(f"Test Failed: {test_name} - {e}")
            return CheckResult(
                test_name=test_name,
                outcome=Outcome.failed_assertion,
                message=str(e),
                element=session.last_element,
            )
        except Exception as e:
            logger.error(f"Test Failed: {test_name} - {type(e).__name__}: {e}", exc_info=True)
            return CheckResult(
                test_name=test_name,
                outcome=Outcome.failed_error,
                message=f"{type(e).__name__}: {e}",
                element=session.last_element,
            )
        logger.info(f"Test Passed: {test_name}")
        return CheckResult(test_name=test_name, outcome=Outcome.passed, element=element)

    def capture_evidence(self, result: CheckResult, session: Session):
        # Timeouts are captured without a highlight; the element may never have been found.
        color = result.outcome.highlight_color
        element = result.element if color else None
        return self.evidence.capture(session.driver, result.test_name, element=element, color=color)
