from typing import Dict, Optional, Tuple

import pytest
from selenium.common.exceptions import NoSuchElementException, StaleElementReferenceException

from snulinks_smoke.evidence import EvidenceCapture
from snulinks_smoke.highlight import GET_STYLE_SCRIPT, REMOVE_STYLE_SCRIPT, SET_STYLE_SCRIPT
from snulinks_smoke.models import By
from snulinks_smoke.settings import HarnessSettings

BASE_URL = "https://portal.test/"


class FakeElement:
    """Just enough of a WebElement for the waits, checks and highlighter."""

    def __init__(self, text: str = "", displayed: bool = True, style: Optional[str] = None):
        self.text = text
        self.displayed = displayed
        self.stale = False
        self.attributes: Dict[str, str] = {}
        if style is not None:
            self.attributes["style"] = style

    def _check_stale(self):
        if self.stale:
            raise StaleElementReferenceException("element is not attached to the page document")

    def is_displayed(self) -> bool:
        self._check_stale()
        return self.displayed

    def get_attribute(self, name: str) -> Optional[str]:
        self._check_stale()
        return self.attributes.get(name)

    def __repr__(self):
        return f"<FakeElement {self.text!r}>"


class FakeDriver:
    """
    Stands in for a selenium WebDriver. Elements are registered by their
    (by, value) locator payload; a <body> is always present.
    """

    def __init__(self, title: str = "SNULinks", elements: Optional[Dict[Tuple[str, str], FakeElement]] = None):
        self.title = title
        self.elements = dict(elements or {})
        self.elements.setdefault((By.TAG_NAME.value, "body"), FakeElement())
        self.screenshot = b"\x89PNG fake"
        self.screenshot_error: Optional[Exception] = None
        self.quit_error: Optional[Exception] = None
        self.get_error: Optional[Exception] = None
        self.visited = []
        self.scripts = []
        self.maximized = False
        self.quit_count = 0
        # Style attribute of every registered element at the moment of each screenshot.
        self.styles_at_screenshot = []

    def maximize_window(self):
        self.maximized = True

    def get(self, url: str):
        if self.get_error:
            raise self.get_error
        self.visited.append(url)

    def find_element(self, by: str, value: str) -> FakeElement:
        try:
            return self.elements[(by, value)]
        except KeyError:
            raise NoSuchElementException(f"Unable to locate element: {by}={value}")

    def execute_script(self, script: str, *args):
        self.scripts.append(script)
        if script == GET_STYLE_SCRIPT:
            return args[0].get_attribute("style")
        if script == SET_STYLE_SCRIPT:
            args[0]._check_stale()
            args[0].attributes["style"] = args[1]
        elif script == REMOVE_STYLE_SCRIPT:
            args[0]._check_stale()
            args[0].attributes.pop("style", None)
        return None

    def get_screenshot_as_png(self) -> bytes:
        self.styles_at_screenshot.append(
            [element.attributes.get("style") for element in self.elements.values()]
        )
        if self.screenshot_error:
            raise self.screenshot_error
        return self.screenshot

    def quit(self):
        self.quit_count += 1
        if self.quit_error:
            raise self.quit_error


class DriverWithoutScreenshots:
    """A driver that cannot take screenshots at all."""

    def __init__(self):
        self.scripts = []

    def execute_script(self, script, *args):
        self.scripts.append(script)


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def screenshot_dir(tmp_path) -> str:
    return str(tmp_path / "target" / "screenshots")


@pytest.fixture
def settings(screenshot_dir, tmp_path) -> HarnessSettings:
    return HarnessSettings(
        base_url=BASE_URL,
        timeout_seconds=0,
        poll_frequency=0.01,
        screenshot_dir=screenshot_dir,
        report_dir=str(tmp_path / "target" / "smoke-report"),
    )


@pytest.fixture
def evidence(screenshot_dir) -> EvidenceCapture:
    return EvidenceCapture(screenshot_dir)


@pytest.fixture
def driver_factory(fake_driver):
    """Hands out the same fake driver and counts how many sessions asked for one."""

    def inner(settings):
        inner.calls += 1
        return fake_driver

    inner.calls = 0
    return inner