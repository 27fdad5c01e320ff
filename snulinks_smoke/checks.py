"""The SNULinks portal smoke checks. Each takes an open Session."""
from logging import getLogger
from typing import Optional

from selenium.webdriver.remote.webelement import WebElement

from .browser import Session
from .models import By, Condition, Locator

logger = getLogger(__name__)

EXPECTED_TITLE = "SNULinks"
COPYRIGHT_INSTITUTION = "Shiv Nadar (Institution of Eminence Deemed to be University)"
COPYRIGHT_YEAR = "2025"
COPYRIGHT_SYMBOL = "©"


class Locators:
    login_link = Locator(
        search_method=By.XPATH,
        search_value="//a[contains(@class, 'login-btn') or contains(normalize-space(), 'Login')]",
    )
    erp_link = Locator(search_method=By.XPATH, search_value="//a[contains(normalize-space(), 'University ERP')]")
    academic_research_link = Locator(search_method=By.LINK_TEXT, search_value="Academic Research")
    footer_copyright = Locator(search_method=By.CSS_SELECTOR, search_value="footer p.text-center.text-white")


def check_home_page_title(session: Session) -> Optional[WebElement]:
    assert session.wait_for_title(EXPECTED_TITLE), "Title did not match expected value within timeout."
    actual_title = session.title
    logger.info(f"Actual title found: '{actual_title}'")
    assert actual_title == EXPECTED_TITLE, f"Page title should match: expected '{EXPECTED_TITLE}', got '{actual_title}'"
    return None


def _check_link_is_displayed(session: Session, locator: Locator, label: str) -> WebElement:
    link = session.wait_for(locator, Condition.visible)
    logger.info(f"{label} link found and visible.")
    assert link.is_displayed(), f"{label} link should be displayed"
    return link


def check_login_link_is_present(session: Session) -> WebElement:
    return _check_link_is_displayed(session, Locators.login_link, "Login")


def check_university_erp_link_is_present(session: Session) -> WebElement:
    return _check_link_is_displayed(session, Locators.erp_link, "University ERP")


def check_footer_academic_research_link_is_present(session: Session) -> WebElement:
    session.scroll_to_bottom()
    return _check_link_is_displayed(session, Locators.academic_research_link, "Academic Research")


def check_footer_copyright_text(session: Session) -> WebElement:
    session.scroll_to_bottom()
    element = session.wait_for(Locators.footer_copyright, Condition.present)
    logger.info("Copyright element found in DOM.")

    session.scroll_into_view(element)
    session.wait_until_visible(element)
    logger.info("Copyright element is visible.")
    assert element.is_displayed(), "Copyright text should be displayed"

    actual_text = element.text.strip()
    logger.debug(f"Actual copyright text: {actual_text}")
    assert COPYRIGHT_INSTITUTION in actual_text, (
        f"Copyright text does not contain expected content 'Shiv Nadar...'. Found: [{actual_text}]"
    )
    assert COPYRIGHT_YEAR in actual_text, (
        f"Copyright text does not contain the year '{COPYRIGHT_YEAR}'. Found: [{actual_text}]"
    )
    assert COPYRIGHT_SYMBOL in actual_text, (
        f"Copyright text does not contain the '{COPYRIGHT_SYMBOL}' symbol. Found: [{actual_text}]"
    )
    return element
