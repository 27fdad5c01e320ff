from logging import getLogger
from typing import Any, Callable, Optional

from selenium import webdriver
from selenium.common.exceptions import TimeoutException
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

from .exceptions import LocatorTimeoutError, SetupError, TeardownError
from .models import By, Condition, Locator
from .settings import HarnessSettings

logger = getLogger(__name__)

__all__ = [
    "Session",
    "Waiter",
    "build_chrome_options",
    "build_driver",
    "open_session",
]

BODY_LOCATOR = Locator(search_method=By.TAG_NAME, search_value="body")

SCROLL_TO_BOTTOM_SCRIPT = "window.scrollTo(0, document.body.scrollHeight)"
SCROLL_INTO_VIEW_SCRIPT = "arguments[0].scrollIntoView(true);"

_CONDITIONS = {
    Condition.present: EC.presence_of_element_located,
    Condition.visible: EC.visibility_of_element_located,
}


def build_chrome_options(settings: HarnessSettings) -> webdriver.ChromeOptions:
    options = webdriver.ChromeOptions()
    if settings.allow_remote_origins:
        options.add_argument("--remote-allow-origins=*")
    if settings.headless:
        options.add_argument("--headless=new")
    return options


def build_driver(settings: HarnessSettings, options: Optional[webdriver.ChromeOptions] = None) -> WebDriver:
    """
    Launch a browser for one session. Uses the remote grid if one is
    configured, otherwise a local Chrome. There is no retry: a browser that
    will not start fails the check.
    """
    options = options or build_chrome_options(settings)
    if settings.selenium_server:
        return webdriver.Remote(command_executor=f"http://{settings.selenium_server}/wd/hub", options=options)
    if settings.use_driver_manager:
        service = Service(ChromeDriverManager().install())
        return webdriver.Chrome(service=service, options=options)
    return webdriver.Chrome(options=options)


class Waiter(WebDriverWait):
    """WebDriverWait that reports an unmet condition as a LocatorTimeoutError."""

    def __init__(self, driver, timeout: float, poll_frequency: float = 0.5, **kwargs):
        super().__init__(driver, timeout, poll_frequency=poll_frequency, **kwargs)
        self.timeout = timeout

    def until(self, method: Callable, message: str = "") -> Any:
        try:
            return super().until(method, message)
        except LocatorTimeoutError:
            raise
        except TimeoutException as e:
            err = LocatorTimeoutError(
                message or f"Condition not met within {self.timeout} seconds",
                e.screen,
                e.stacktrace,
            )
            raise err from e


class Session:
    """
    A live browser plus the wait policy that goes with it. Owned by exactly
    one check; never shared or reused.
    """

    def __init__(self, driver: WebDriver, settings: HarnessSettings):
        self.driver = driver
        self.settings = settings
        self.waiter = Waiter(driver, settings.timeout_seconds, poll_frequency=settings.poll_frequency)
        # The most recent element a wait returned; failure screenshots highlight it.
        self.last_element: Optional[WebElement] = None
        self._closed = False

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def title(self) -> str:
        return self.driver.title

    def wait_for(self, locator: Locator, condition: Condition = Condition.visible) -> WebElement:
        """Wait until the element is present in (or visible on) the page, and return it."""
        logger.debug(f"Waiting for {locator.description} to be {condition.value}")
        element = self.waiter.until(
            _CONDITIONS[condition](locator.payload),
            f"Timed out after {self.waiter.timeout}s waiting for {locator.description} to be {condition.value}",
        )
        self.last_element = element
        return element

    def wait_until_visible(self, element: WebElement) -> WebElement:
        logger.debug(f"Waiting for {element} to be visible")
        return self.waiter.until(
            EC.visibility_of(element),
            f"Timed out after {self.waiter.timeout}s waiting for element to be visible",
        )

    def wait_for_title(self, title: str) -> bool:
        logger.debug(f"Waiting for title to be '{title}'")
        return self.waiter.until(
            EC.title_is(title),
            f'Timed out after {self.waiter.timeout}s waiting for title to be "{title}"',
        )

    def execute_script(self, script: str, *args):
        return self.driver.execute_script(script, *args)

    def scroll_to_bottom(self):
        self.execute_script(SCROLL_TO_BOTTOM_SCRIPT)
        logger.debug("Scrolled to bottom of page.")

    def scroll_into_view(self, element: WebElement):
        self.execute_script(SCROLL_INTO_VIEW_SCRIPT, element)
        logger.debug(f"Scrolled {element} into view.")

    def close(self):
        """Quit the browser. Safe to call more than once; never raises."""
        if self._closed:
            return
        self._closed = True
        logger.info("Tearing down WebDriver...")
        try:
            self._quit()
            logger.info("WebDriver quit successfully.")
        except TeardownError as e:
            logger.error(f"Error quitting WebDriver: {e}")

    def _quit(self):
        try:
            self.driver.quit()
        except Exception as e:
            raise TeardownError(str(e)) from e


def open_session(
    settings: HarnessSettings,
    driver_factory: Callable[[HarnessSettings], WebDriver] = build_driver,
) -> Session:
    """
    Start a browser, maximize it, and load the base URL. Raises SetupError if
    the browser will not start or the page body never shows up; a browser
    that did start is shut down first.
    """
    logger.info("Setting up WebDriver and wait...")
    try:
        driver = driver_factory(settings)
    except Exception as e:
        logger.error(f"Error during WebDriver setup: {e}")
        raise SetupError(f"WebDriver setup failed: {e}") from e

    session = Session(driver, settings)
    logger.debug(f"Wait initialized with {settings.timeout_seconds} second timeout.")
    try:
        driver.maximize_window()
        logger.info(f"Navigating to base URL: {settings.base_url}")
        driver.get(settings.base_url)
        session.wait_for(BODY_LOCATOR, Condition.present)
        session.last_element = None
        logger.info("Base URL loaded and body tag found.")
    except Exception as e:
        logger.error(f"Error during WebDriver setup: {e}")
        session.close()
        raise SetupError(f"WebDriver setup failed: {e}") from e
    return session
