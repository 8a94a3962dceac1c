"""
Session and element records shared by the driver, the protocol clients and the
file upload helpers.

Both records are frozen: the identifiers, URLs and the bound protocol client
are fixed when the record is built. The only mutable member is the
append-only ``Session.screenshots`` list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .client import ProtocolClient


@dataclass(frozen=True, slots=True)
class Session:
    """A live remote browser session."""

    id: str
    session_url: str
    url: str
    driver: Any
    client: "ProtocolClient"
    capabilities: Dict[str, Any]
    server: Optional[Any] = None
    screenshots: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Element:
    """A reference to a DOM node inside one session."""

    id: str
    url: str
    session_url: str
    parent: Union[Session, "Element"]
    client: "ProtocolClient"
    driver: Any

    @property
    def session(self) -> Session:
        parent = self.parent
        while isinstance(parent, Element):
            parent = parent.parent
        return parent


Parent = Union[Session, Element]


def session_of(target: Parent) -> Session:
    """Return the session owning ``target``."""
    if isinstance(target, Element):
        return target.session
    return target
