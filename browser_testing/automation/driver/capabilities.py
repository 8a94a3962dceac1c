"""Capability documents for new sessions."""

from __future__ import annotations

from typing import Any, Dict, Optional

from . import metadata as ua_metadata

BASE_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 6.1) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/41.0.2228.0 Safari/537.36"
)


def default_capabilities(metadata: ua_metadata.Metadata = None) -> Dict[str, Any]:
    """Headless Firefox with a user agent carrying ``metadata``."""
    user_agent = ua_metadata.append(BASE_USER_AGENT, metadata)
    return {
        "javascriptEnabled": True,
        "browserName": "firefox",
        "moz:firefoxOptions": {
            "args": ["-headless"],
            "prefs": {
                "general.useragent.override": user_agent,
            },
        },
    }


def resolve_capabilities(
    explicit: Optional[Dict[str, Any]] = None,
    configured: Optional[Dict[str, Any]] = None,
    metadata: ua_metadata.Metadata = None,
) -> Dict[str, Any]:
    """
    Pick the capability document for a new session.

    The first source present wins as a whole: the per-call ``explicit``
    document, then the ``configured`` one, then the defaults. Sources are
    never merged key by key.
    """
    if explicit is not None:
        return explicit
    if configured is not None:
        return configured
    return default_capabilities(metadata)
