import os
import re
import string
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field
from selenium.webdriver.common.by import By as By_

from .exceptions import CheckError, LocatorTimeoutError, SetupError

_XPATH_TRANSLATE_CASE = f"translate(., '{string.ascii_uppercase}', '{string.ascii_lowercase}')"


class By(Enum):
    """
    An Enum based on selenium's By object, so that values can be explicitly declared.
    """

    ID = By_.ID
    XPATH = By_.XPATH
    LINK_TEXT = By_.LINK_TEXT
    PARTIAL_LINK_TEXT = By_.PARTIAL_LINK_TEXT
    NAME = By_.NAME
    TAG_NAME = By_.TAG_NAME
    CLASS_NAME = By_.CLASS_NAME
    CSS_SELECTOR = By_.CSS_SELECTOR


class Locator(BaseModel):
    """
    An immutable description of how to find a DOM element. `payload` is the
    (by, value) pair selenium's find_element and expected conditions take.

    Usage:

        footer = Locator(search_method=By.CSS_SELECTOR, search_value='footer p.text-center')
        driver.find_element(*footer.payload)
    """

    model_config = ConfigDict(frozen=True)

    search_method: By
    search_value: Optional[str] = None

    @property
    def payload(self) -> Tuple[str, str]:
        return self.search_method.value, self.resolved_value

    @property
    def resolved_value(self) -> str:
        return self.search_value or ""

    @property
    def description(self) -> str:
        desc = f"{self.search_method.value}"
        if self.search_value:
            desc = f'{desc} whose value is "{self.search_value}"'
        return desc


class XPathWithSubstringLocator(Locator):
    """
    CSS cannot select on element text, so text searches use XPath. Matches
    the given tag displaying the substring, case-insensitively.

    locator = XPathWithSubstringLocator(tag='a', displayed_substring='login')  # matches <a>Login</a>
    """

    search_method: By = By.XPATH
    tag: str
    displayed_substring: str

    @property
    def resolved_value(self) -> str:
        return xpath_contains(f"//{self.tag}", self.displayed_substring)

    @property
    def description(self) -> str:
        desc = f"tag[{self.tag}]"
        if self.displayed_substring:
            desc = f'{desc} containing the string "{self.displayed_substring}"'
        return desc


def xpath_contains(node: str, substring: str) -> str:
    if '"' in substring:
        raise ValueError("double quotes in substring not supported")
    substring = substring.lower()
    return f'{node}[contains({_XPATH_TRANSLATE_CASE}, "{substring}")]'


def slugify(name: str) -> str:
    """Reduces a test name (parametrized ids included) to word characters and single dashes."""
    slug = re.sub(r"[^\w]", "-", name)
    return re.sub(r"-+", "-", slug).strip("-")


class Condition(Enum):
    present = "present"
    visible = "visible"


class EvidenceTag(Enum):
    none = ""
    PASS = "_PASS"
    FAIL = "_FAIL"

    @classmethod
    def for_color(cls, color: Optional[str]) -> "EvidenceTag":
        if color is None:
            return cls.none
        if color.lower() == "green":
            return cls.PASS
        return cls.FAIL


class Outcome(Enum):
    passed = "passed"
    failed_assertion = "failed (assertion)"
    failed_timeout = "failed (timeout)"
    failed_error = "failed (error)"
    failed_setup = "failed (setup)"

    @property
    def highlight_color(self) -> Optional[str]:
        if self is Outcome.passed:
            return "green"
        if self in (Outcome.failed_assertion, Outcome.failed_error):
            return "red"
        return None

    @property
    def captures_evidence(self) -> bool:
        # Setup failures have no browser to take a picture of.
        return self is not Outcome.failed_setup


_OUTCOME_ERRORS = {
    Outcome.failed_assertion: AssertionError,
    Outcome.failed_timeout: LocatorTimeoutError,
    Outcome.failed_error: CheckError,
    Outcome.failed_setup: SetupError,
}


class ReportOutcome(Enum):
    success = "success"
    failure = "failure"
    never_started = "never started"


class Timed(BaseModel):
    start_time: datetime = Field(default_factory=lambda: datetime.now())
    end_time: Optional[datetime] = None

    def __enter__(self):
        self.start_time = datetime.now()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = datetime.now()

    def stop_timer(self):
        self.end_time = datetime.now()

    @computed_field  # type: ignore[misc]
    @property
    def duration(self) -> str:
        """
        Creates a human-readable minutes/seconds slug
        detailing how long the check took.

        If the duration was 129.5 seconds,
        the output would be '2m 9s'
        """
        end_time = self.end_time or datetime.now()
        minutes = 0
        seconds = (end_time - self.start_time).seconds
        if seconds >= 60:
            minutes = int(seconds / 60)
            seconds = round(seconds % 60)
        if minutes:
            return f"{minutes}m {seconds}s"
        return f"{seconds}s"


class EvidenceArtifact(BaseModel):
    """A screenshot written for one check. Never modified once written."""

    model_config = ConfigDict(frozen=True)

    path: str
    test_name: str
    tag: EvidenceTag = EvidenceTag.none
    timestamp: datetime

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)


class CheckResult(Timed):
    test_name: str
    test_id: Optional[str] = None
    outcome: Outcome
    message: Optional[str] = None
    artifact: Optional[EvidenceArtifact] = None
    # Best-known element handle; only meaningful while its session is open.
    element: Optional[Any] = Field(default=None, exclude=True)

    def model_post_init(self, __context: Any) -> None:
        if self.test_id is None:
            self.test_id = slugify(self.test_name)

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.passed

    def raise_for_outcome(self):
        if self.passed:
            return
        message = self.message or f"{self.test_name} {self.outcome.value}"
        raise _OUTCOME_ERRORS[self.outcome](message)


class Report(Timed):
    outcome: ReportOutcome = ReportOutcome.never_started
    results: List[CheckResult] = []
    arguments: Optional[str] = None
    title: str

    @property
    def failures(self) -> List[CheckResult]:
        filter_ = filter(lambda result: not result.passed, self.results)
        return list(filter_)

    @property
    def num_failures(self) -> int:
        return len(self.failures)
