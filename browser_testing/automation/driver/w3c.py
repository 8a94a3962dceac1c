"""Protocol client for W3C WebDriver."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from .client import WebdriverClient, button_code
from .core import Element, Parent, Session
from .exceptions import SessionNotCreatedError
from .keys import chars

ELEMENT_KEY = "element-6066-11e4-a52e-4f735466cecf"


class W3CClient(WebdriverClient):
    name = "w3c"
    element_key = ELEMENT_KEY

    alert_text_path = "/alert/text"
    alert_accept_path = "/alert/accept"
    alert_dismiss_path = "/alert/dismiss"

    execute_path = "/execute/sync"
    execute_async_path = "/execute/async"

    def create_session(self, base_url: str, capabilities: Dict[str, Any]) -> str:
        url = f"{base_url}session"
        body = {"capabilities": {"alwaysMatch": capabilities, "firstMatch": [{}]}}
        value = self._request("POST", url, body).get("value")
        session_id = value.get("sessionId") if isinstance(value, dict) else None
        if not session_id:
            raise SessionNotCreatedError(f"No session id in response from {url}", url=url)
        return str(session_id)

    # ------------------------------------------------------------------
    # Windows
    # ------------------------------------------------------------------
    def window_handle(self, session: Session) -> str:
        return self._get(f"{session.url}/window")

    def window_handles(self, session: Session) -> List[str]:
        return self._get(f"{session.url}/window/handles")

    def focus_window(self, session: Session, handle: str) -> Any:
        return self._post(f"{session.url}/window", {"handle": handle})

    def close_window(self, session: Session) -> Any:
        return self._delete(f"{session.url}/window")

    def get_window_size(self, session: Session) -> Dict[str, int]:
        rect = self._get(f"{session.url}/window/rect") or {}
        return {"width": rect.get("width"), "height": rect.get("height")}

    def set_window_size(self, session: Session, width: int, height: int) -> Any:
        return self._post(f"{session.url}/window/rect", {"width": width, "height": height})

    def get_window_position(self, session: Session) -> Dict[str, int]:
        rect = self._get(f"{session.url}/window/rect") or {}
        return {"x": rect.get("x"), "y": rect.get("y")}

    def set_window_position(self, session: Session, x: int, y: int) -> Any:
        return self._post(f"{session.url}/window/rect", {"x": x, "y": y})

    def maximize_window(self, session: Session) -> Any:
        return self._post(f"{session.url}/window/maximize")

    def _screenshot_url(self, target: Parent) -> str:
        if isinstance(target, Element):
            return f"{target.url}/screenshot"
        return f"{target.session_url}/screenshot"

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def set_value(self, element: Element, value: str) -> Any:
        return self._post(f"{element.url}/value", {"text": value, "value": list(value)})

    def send_keys(self, parent: Parent, keys: Any) -> Any:
        characters = chars(keys)
        if isinstance(parent, Element):
            return self._post(
                f"{parent.url}/value", {"text": "".join(characters), "value": characters}
            )
        key_actions: List[Dict[str, Any]] = []
        for character in characters:
            key_actions.append({"type": "keyDown", "value": character})
            key_actions.append({"type": "keyUp", "value": character})
        return self._perform(parent, {"type": "key", "id": "keyboard", "actions": key_actions})

    def mouse_click(self, parent: Parent, button: Union[str, int]) -> Any:
        code = button_code(button)
        return self._pointer(
            parent,
            [{"type": "pointerDown", "button": code}, {"type": "pointerUp", "button": code}],
        )

    def button_down(self, parent: Parent, button: Union[str, int]) -> Any:
        return self._pointer(parent, [{"type": "pointerDown", "button": button_code(button)}])

    def button_up(self, parent: Parent, button: Union[str, int]) -> Any:
        return self._pointer(parent, [{"type": "pointerUp", "button": button_code(button)}])

    def double_click(self, parent: Parent) -> Any:
        press = [{"type": "pointerDown", "button": 0}, {"type": "pointerUp", "button": 0}]
        return self._pointer(parent, press + press)

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
        origin: Any = self.element_reference(element) if element is not None else "pointer"
        move = {
            "type": "pointerMove",
            "duration": 0,
            "origin": origin,
            "x": x_offset or 0,
            "y": y_offset or 0,
        }
        return self._pointer(target, [move])

    def _pointer(self, parent: Parent, actions: List[Dict[str, Any]]) -> Any:
        return self._perform(
            parent,
            {
                "type": "pointer",
                "id": "mouse",
                "parameters": {"pointerType": "mouse"},
                "actions": actions,
            },
        )

    def _perform(self, parent: Parent, source: Dict[str, Any]) -> Any:
        return self._post(f"{parent.session_url}/actions", {"actions": [source]})

    # ------------------------------------------------------------------
    # Element geometry
    # ------------------------------------------------------------------
    def element_size(self, element: Element) -> Dict[str, int]:
        rect = self._get(f"{element.url}/rect") or {}
        return {"width": rect.get("width"), "height": rect.get("height")}

    def element_location(self, element: Element) -> Dict[str, int]:
        rect = self._get(f"{element.url}/rect") or {}
        return {"x": rect.get("x"), "y": rect.get("y")}
