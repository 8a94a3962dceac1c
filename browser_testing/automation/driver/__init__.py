"""Public exports for the browser automation driver."""

from .capabilities import BASE_USER_AGENT, default_capabilities, resolve_capabilities
from .client import ProtocolClient, WebdriverClient, available_clients, resolve_client
from .core import Element, Session
from .exceptions import (
    AutomationError,
    InvalidSelectorError,
    InvalidURLError,
    NoSuchAlertError,
    SessionNotCreatedError,
    StaleReferenceError,
    TransportError,
    UnknownClientError,
    UnknownKeyError,
    UploadError,
    WebDriverError,
)
from .jwp import JWPClient
from .keys import SpecialKey, key
from .selenium_driver import SeleniumDriver, default_driver, end_session, start_session
from .w3c import W3CClient

__all__ = [
    "BASE_USER_AGENT",
    "default_capabilities",
    "resolve_capabilities",
    "ProtocolClient",
    "WebdriverClient",
    "available_clients",
    "resolve_client",
    "Element",
    "Session",
    "AutomationError",
    "InvalidSelectorError",
    "InvalidURLError",
    "NoSuchAlertError",
    "SessionNotCreatedError",
    "StaleReferenceError",
    "TransportError",
    "UnknownClientError",
    "UnknownKeyError",
    "UploadError",
    "WebDriverError",
    "JWPClient",
    "SpecialKey",
    "key",
    "SeleniumDriver",
    "default_driver",
    "end_session",
    "start_session",
    "W3CClient",
]
