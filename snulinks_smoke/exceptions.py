"""Errors raised by the smoke harness."""
from selenium.common.exceptions import TimeoutException


class SmokeHarnessError(Exception):
    """Base exception for all harness errors."""

    pass


class SetupError(SmokeHarnessError):
    """The browser could not be started or the base page never loaded."""

    pass


class LocatorTimeoutError(SmokeHarnessError, TimeoutException):
    """
    A wait condition never became true within the session's timeout.
    Also a selenium TimeoutException, so callers that only know selenium
    still catch it.
    """

    pass


class CheckError(SmokeHarnessError):
    """A check failed with something other than a timeout or an assertion."""

    pass


class EvidenceCaptureError(SmokeHarnessError):
    """Highlighting or screenshot capture failed. Never fails a test."""

    pass


class TeardownError(SmokeHarnessError):
    """The browser could not be shut down cleanly. Never fails a test."""

    pass
