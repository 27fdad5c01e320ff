"""
Temporary, reversible style overrides applied to an element before a
screenshot is taken. Highlighting is cosmetic: nothing in this module
ever raises.
"""
from contextlib import contextmanager
from logging import getLogger
from typing import Optional

from selenium.webdriver.remote.webelement import WebElement

logger = getLogger(__name__)

HIGHLIGHT_STYLE = "border: 3px solid {color}; background: yellow;"

GET_STYLE_SCRIPT = "return arguments[0].getAttribute('style');"
SET_STYLE_SCRIPT = "arguments[0].setAttribute('style', arguments[1]);"
REMOVE_STYLE_SCRIPT = "arguments[0].removeAttribute('style');"


def highlight(driver, element: Optional[WebElement], color: str) -> Optional[str]:
    """
    Overwrite the element's inline style with a border of the given color.
    Returns the style the element had before, or None if it had none (or
    could not be highlighted).
    """
    if element is None:
        return None
    original_style = None
    try:
        original_style = driver.execute_script(GET_STYLE_SCRIPT, element)
        driver.execute_script(SET_STYLE_SCRIPT, element, HIGHLIGHT_STYLE.format(color=color))
        logger.debug(f"Highlighted element with {color}: {element}")
    except Exception as e:
        logger.warning(f"Could not highlight element with {color}: {e}")
    return original_style


def unhighlight(driver, element: Optional[WebElement], original_style: Optional[str]):
    """Put back the style captured by highlight(), or drop the attribute if there was none at all."""
    if element is None:
        return
    try:
        if original_style is not None:
            driver.execute_script(SET_STYLE_SCRIPT, element, original_style)
        else:
            driver.execute_script(REMOVE_STYLE_SCRIPT, element)
        logger.debug(f"Unhighlighted element: {element}")
    except Exception as e:
        logger.warning(f"Could not unhighlight element: {e}")


@contextmanager
def highlighted(driver, element: Optional[WebElement], color: Optional[str]):
    """Highlight for the duration of the block; a None color leaves the element alone."""
    if element is None or color is None:
        yield
        return
    original_style = highlight(driver, element, color)
    try:
        yield
    finally:
        unhighlight(driver, element, original_style)
