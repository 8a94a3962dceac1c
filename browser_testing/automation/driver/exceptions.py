"""Custom exception types for the automation driver layer."""

from __future__ import annotations

from typing import Optional


class AutomationError(RuntimeError):
    """Base class for automation-related failures."""


class WebDriverError(AutomationError):
    """Raised when the remote end answers a command with an error."""

    def __init__(
        self,
        message: str,
        *,
        error: Optional[str] = None,
        status: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error = error
        self.status = status
        self.url = url


class SessionNotCreatedError(WebDriverError):
    """Raised when the remote end refuses to create a session."""


class StaleReferenceError(WebDriverError):
    """Raised when an element reference no longer points into the document."""


class InvalidSelectorError(WebDriverError):
    """Raised when the remote end cannot evaluate a locator."""


class NoSuchAlertError(WebDriverError):
    """Raised when a dialog operation finds no open dialog."""


class TransportError(AutomationError):
    """Raised when the remote end cannot be reached or does not answer in time."""


class UploadError(AutomationError):
    """Raised when a file upload response does not carry the remote path."""


class InvalidURLError(AutomationError):
    """Raised when the current URL has no usable path component."""


class UnknownClientError(AutomationError):
    """Raised when a protocol client selector does not name a known client."""


class UnknownKeyError(AutomationError):
    """Raised when a special key name has no WebDriver codepoint."""
