"""Protocol client for the legacy JSON Wire Protocol."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from .client import WebdriverClient, button_code
from .core import Element, Parent, Session
from .exceptions import SessionNotCreatedError
from .keys import chars


class JWPClient(WebdriverClient):
    name = "jwp"
    element_key = "ELEMENT"

    def create_session(self, base_url: str, capabilities: Dict[str, Any]) -> str:
        url = f"{base_url}session"
        response = self._request("POST", url, {"desiredCapabilities": capabilities})
        session_id = response.get("sessionId")
        if not session_id and isinstance(response.get("value"), dict):
            session_id = response["value"].get("sessionId")
        if not session_id:
            raise SessionNotCreatedError(f"No session id in response from {url}", url=url)
        return str(session_id)

    # ------------------------------------------------------------------
    # Windows
    # ------------------------------------------------------------------
    def window_handle(self, session: Session) -> str:
        return self._get(f"{session.url}/window_handle")

    def window_handles(self, session: Session) -> List[str]:
        return self._get(f"{session.url}/window_handles")

    def focus_window(self, session: Session, handle: str) -> Any:
        return self._post(f"{session.url}/window", {"name": handle})

    def close_window(self, session: Session) -> Any:
        return self._delete(f"{session.url}/window")

    def get_window_size(self, session: Session) -> Dict[str, int]:
        return self._get(f"{session.url}/window/current/size")

    def set_window_size(self, session: Session, width: int, height: int) -> Any:
        return self._post(f"{session.url}/window/current/size", {"width": width, "height": height})

    def get_window_position(self, session: Session) -> Dict[str, int]:
        return self._get(f"{session.url}/window/current/position")

    def set_window_position(self, session: Session, x: int, y: int) -> Any:
        return self._post(f"{session.url}/window/current/position", {"x": x, "y": y})

    def maximize_window(self, session: Session) -> Any:
        return self._post(f"{session.url}/window/current/maximize")

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def set_value(self, element: Element, value: str) -> Any:
        return self._post(f"{element.url}/value", {"value": [value]})

    def send_keys(self, parent: Parent, keys: Any) -> Any:
        if isinstance(parent, Element):
            return self._post(f"{parent.url}/value", {"value": chars(keys)})
        return self._post(f"{parent.session_url}/keys", {"value": chars(keys)})

    def mouse_click(self, parent: Parent, button: Union[str, int]) -> Any:
        return self._post(f"{parent.session_url}/click", {"button": button_code(button)})

    def button_down(self, parent: Parent, button: Union[str, int]) -> Any:
        return self._post(f"{parent.session_url}/buttondown", {"button": button_code(button)})

    def button_up(self, parent: Parent, button: Union[str, int]) -> Any:
        return self._post(f"{parent.session_url}/buttonup", {"button": button_code(button)})

    def double_click(self, parent: Parent) -> Any:
        return self._post(f"{parent.session_url}/doubleclick")

    def move_mouse_to(
        self,
        session: Optional[Session],
        element: Optional[Element],
        x_offset: Optional[int] = None,
        y_offset: Optional[int] = None,
    ) -> Any:
        target = session if session is not None else element
        if target is None:
            raise ValueError("move_mouse_to needs a session or an element")
        body: Dict[str, Any] = {}
        if element is not None:
            body["element"] = element.id
        if x_offset is not None:
            body["xoffset"] = x_offset
        if y_offset is not None:
            body["yoffset"] = y_offset
        return self._post(f"{target.session_url}/moveto", body)

    # ------------------------------------------------------------------
    # Element geometry
    # ------------------------------------------------------------------
    def element_size(self, element: Element) -> Dict[str, int]:
        return self._get(f"{element.url}/size")

    def element_location(self, element: Element) -> Dict[str, int]:
        return self._get(f"{element.url}/location")
