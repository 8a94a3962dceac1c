"""Translate keystroke tokens into the characters sent over the wire."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Union

from selenium.webdriver.common.keys import Keys

from .exceptions import UnknownKeyError

_ALIASES = {
    "pageup": "PAGE_UP",
    "pagedown": "PAGE_DOWN",
    "left_arrow": "ARROW_LEFT",
    "up_arrow": "ARROW_UP",
    "right_arrow": "ARROW_RIGHT",
    "down_arrow": "ARROW_DOWN",
    "esc": "ESCAPE",
    "ctrl": "CONTROL",
    "cmd": "COMMAND",
}
_ALIASES.update({f"num{digit}": f"NUMPAD{digit}" for digit in range(10)})


def code_for(name: str) -> str:
    """Return the WebDriver codepoint for a special key such as ``"enter"``."""
    normalized = str(name).strip().lower().replace("-", "_").replace(" ", "_")
    attribute = _ALIASES.get(normalized, normalized.upper())
    value = None if attribute.startswith("_") else getattr(Keys, attribute, None)
    if not isinstance(value, str):
        raise UnknownKeyError(f"Unknown key name: {name!r}")
    return value


@dataclass(frozen=True, slots=True)
class SpecialKey:
    """A non-printable key, referenced by name."""

    name: str

    @property
    def char(self) -> str:
        return code_for(self.name)


def key(name: str) -> SpecialKey:
    """Build a SpecialKey, failing early for names without a codepoint."""
    code_for(name)
    return SpecialKey(name)


KeyToken = Union[str, SpecialKey, Sequence["KeyToken"]]


def to_text(token: KeyToken) -> str:
    """Render one token as literal text, expanding special keys."""
    if isinstance(token, SpecialKey):
        return token.char
    if isinstance(token, str):
        return token
    if isinstance(token, (list, tuple)):
        return "".join(to_text(part) for part in token)
    raise TypeError(f"Unsupported key token: {token!r}")


def chars(keys: Union[KeyToken, Iterable[KeyToken]]) -> List[str]:
    """Flatten ``keys`` into the list of single characters both protocols expect."""
    if isinstance(keys, (str, SpecialKey)):
        return list(to_text(keys))
    return list("".join(to_text(token) for token in keys))
