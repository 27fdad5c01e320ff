import os
from datetime import datetime
from logging import getLogger
from typing import Callable, Optional

from selenium.webdriver.remote.webelement import WebElement

from .exceptions import EvidenceCaptureError
from .highlight import highlighted
from .models import EvidenceArtifact, EvidenceTag, slugify

logger = getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def artifact_name(test_name: str, color: Optional[str], timestamp: datetime, counter: int = 0) -> str:
    """
    testName[_PASS|_FAIL]_yyyyMMdd_HHmmss[_n].png

    The tag comes from the highlight color: none for no color, _PASS for
    green (in any case), _FAIL for anything else. The counter is only
    appended when an earlier capture already took the name. Characters a
    path cannot carry, such as the slashes of a parametrized id, become dashes.
    """
    tag = EvidenceTag.for_color(color)
    name = f"{slugify(test_name)}{tag.value}_{timestamp.strftime(TIMESTAMP_FORMAT)}"
    if counter:
        name = f"{name}_{counter}"
    return f"{name}.png"


class EvidenceCapture:
    """Writes a screenshot of the browser viewport for each finished check."""

    def __init__(self, directory: str, clock: Callable[[], datetime] = datetime.now):
        self.directory = directory
        self.clock = clock

    def capture(
        self,
        driver,
        test_name: str,
        element: Optional[WebElement] = None,
        color: Optional[str] = None,
    ) -> Optional[EvidenceArtifact]:
        """
        Screenshot the current viewport. If an element and color are both given,
        the element is highlighted for the shot and restored afterwards, even
        if saving fails. Failures are logged, never raised.
        """
        if not callable(getattr(driver, "get_screenshot_as_png", None)):
            logger.warning("Driver does not support taking screenshots.")
            return None

        highlight_color = color if element is not None else None
        with highlighted(driver, element, highlight_color):
            try:
                return self._save(driver, test_name, color)
            except EvidenceCaptureError as e:
                logger.error(f"Failed to save screenshot for {test_name}: {e}")
                return None

    def _save(self, driver, test_name: str, color: Optional[str]) -> EvidenceArtifact:
        try:
            png = driver.get_screenshot_as_png()
        except Exception as e:
            raise EvidenceCaptureError(f"could not take screenshot: {e}") from e

        timestamp = self.clock()
        try:
            os.makedirs(self.directory, exist_ok=True)
            path = self._write_new_file(png, test_name, color, timestamp)
        except OSError as e:
            raise EvidenceCaptureError(f"could not write screenshot: {e}") from e

        logger.info(f"Screenshot saved to: {os.path.abspath(path)}")
        return EvidenceArtifact(
            path=path,
            test_name=test_name,
            tag=EvidenceTag.for_color(color),
            timestamp=timestamp,
        )

    def _write_new_file(self, png: bytes, test_name: str, color: Optional[str], timestamp: datetime) -> str:
        # Exclusive create: a name already taken in the same second (by this
        # or another worker) gets the next counter instead of being overwritten.
        counter = 0
        while True:
            path = os.path.join(self.directory, artifact_name(test_name, color, timestamp, counter))
            try:
                with open(path, "xb") as f:
                    f.write(png)
                return path
            except FileExistsError:
                counter += 1
