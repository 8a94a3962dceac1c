"""
JSON-over-HTTP transport shared by the protocol clients and the file upload.

Responses are decoded into plain mappings. Error payloads from either wire
protocol are raised as ``WebDriverError`` subclasses:

* W3C: ``{"value": {"error": "<code>", "message": "..."}}`` (usually with an
  HTTP 4xx/5xx status);
* JSON Wire Protocol: ``{"status": <non-zero>, "value": {"message": "..."}}``
  (often with HTTP 200).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Type

import requests

from .exceptions import (
    InvalidSelectorError,
    NoSuchAlertError,
    SessionNotCreatedError,
    StaleReferenceError,
    TransportError,
    WebDriverError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0

_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json;charset=UTF-8",
    "User-Agent": "browser-testing",
}

_ERROR_TYPES: Dict[str, Type[WebDriverError]] = {
    "session not created": SessionNotCreatedError,
    "stale element reference": StaleReferenceError,
    "invalid selector": InvalidSelectorError,
    "no such alert": NoSuchAlertError,
}

# Legacy numeric status codes that map onto the W3C error codes above.
_JWP_STATUS_CODES = {
    7: "no such element",
    10: "stale element reference",
    13: "unknown error",
    27: "no such alert",
    32: "invalid selector",
    33: "session not created",
}


def request(
    method: str,
    url: str,
    body: Optional[Mapping[str, Any]] = None,
    *,
    timeout: Optional[float] = None,
) -> Dict[str, Any]:
    """Send one command and return the decoded response mapping."""
    kwargs: Dict[str, Any] = {
        "headers": _HEADERS,
        "timeout": timeout if timeout is not None else DEFAULT_TIMEOUT,
    }
    if body is not None:
        kwargs["json"] = body
    logger.debug("%s %s", method, url)
    try:
        response = requests.request(method, url, **kwargs)
    except requests.RequestException as exc:
        raise TransportError(f"{method} {url} failed: {exc}") from exc
    return decode_response(response, url)


def decode_response(response: requests.Response, url: str) -> Dict[str, Any]:
    status = response.status_code
    if not response.content:
        if status >= 400:
            raise WebDriverError(f"HTTP {status} from {url}", status=status, url=url)
        return {}
    try:
        payload = response.json()
    except ValueError as exc:
        raise WebDriverError(
            f"Undecodable response from {url} (HTTP {status})", status=status, url=url
        ) from exc
    if not isinstance(payload, dict):
        raise WebDriverError(f"Unexpected response from {url}: {payload!r}", status=status, url=url)

    error = error_from_payload(payload, status=status, url=url)
    if error is not None:
        raise error
    if status >= 400:
        raise WebDriverError(f"HTTP {status} from {url}", status=status, url=url)
    return payload


def error_from_payload(
    payload: Mapping[str, Any], *, status: Optional[int] = None, url: Optional[str] = None
) -> Optional[WebDriverError]:
    """Build the matching ``WebDriverError`` for an error payload, or ``None``."""
    value = payload.get("value")
    code: Optional[str] = None
    message: Optional[str] = None

    if isinstance(value, dict) and value.get("error"):
        code = str(value["error"])
        message = str(value.get("message") or code)
    else:
        jwp_status = payload.get("status")
        if isinstance(jwp_status, int) and jwp_status != 0:
            code = _JWP_STATUS_CODES.get(jwp_status, "unknown error")
            if isinstance(value, dict):
                message = str(value.get("message") or code)
            else:
                message = str(value) if value is not None else code

    if code is None:
        return None
    error_type = _ERROR_TYPES.get(code, WebDriverError)
    if error_type is WebDriverError and message:
        # Some servers only say what went wrong in the message text.
        for known_code, known_type in _ERROR_TYPES.items():
            if known_code in message.lower():
                error_type = known_type
                break
    return error_type(message or code, error=code, status=status, url=url)
