"""
Embed test-run metadata in a browser user agent.

The server side of an application under test can call ``extract`` on the
incoming ``User-Agent`` header to recover the mapping, which lets it tie
requests to the automated test that issued them.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any, Dict, Mapping, Optional, Union

PREFIX = "BrowserTestingMetadata"

_PATTERN = re.compile(re.escape(PREFIX) + r" \(([A-Za-z0-9_\-=]+)\)")

Metadata = Union[str, Mapping[str, Any], None]


def append(user_agent: str, metadata: Metadata) -> str:
    if metadata is None:
        return user_agent
    if isinstance(metadata, str):
        return f"{user_agent}/{metadata}"
    return f"{user_agent}/{format_metadata(metadata)}"


def format_metadata(metadata: Mapping[str, Any]) -> str:
    encoded = base64.urlsafe_b64encode(
        json.dumps(dict(metadata), sort_keys=True, separators=(",", ":")).encode("utf-8")
    ).decode("ascii")
    return f"{PREFIX} ({encoded})"


def extract(user_agent: Optional[str]) -> Dict[str, Any]:
    """Return the metadata mapping embedded in ``user_agent``, or ``{}``."""
    if not user_agent:
        return {}
    match = _PATTERN.search(user_agent)
    if match is None:
        return {}
    try:
        decoded = json.loads(base64.urlsafe_b64decode(match.group(1)).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return {}
    return decoded if isinstance(decoded, dict) else {}
