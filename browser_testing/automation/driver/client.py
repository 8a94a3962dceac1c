"""
Protocol client contract and the behaviour shared by both wire protocols.

A protocol client turns driver operations into WebDriver HTTP commands. Two
implementations exist, ``JWPClient`` (legacy JSON Wire Protocol) and
``W3CClient``; a session is bound to one of them when it is created and every
operation on the session or its elements goes through that same client.
"""

from __future__ import annotations

import base64
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple, Type, Union

from . import http
from .core import Element, Parent, Session
from .exceptions import UnknownClientError

Query = Tuple[str, str]
DialogFn = Callable[[Session], Any]

BUTTONS = {"left": 0, "middle": 1, "right": 2}


class ProtocolClient(Protocol):  # pragma: no cover - interface only
    """Operations every protocol client implements, named identically across protocols."""

    name: str

    def create_session(self, base_url: str, capabilities: Dict[str, Any]) -> str:
        ...

    def delete_session(self, session: Session) -> Any:
        ...

    def window_handle(self, session: Session) -> str:
        ...

    def window_handles(self, session: Session) -> List[str]:
        ...

    def focus_window(self, session: Session, handle: str) -> Any:
        ...

    def close_window(self, session: Session) -> Any:
        ...

    def get_window_size(self, session: Session) -> Dict[str, int]:
        ...

    def set_window_size(self, session: Session, width: int, height: int) -> Any:
        ...

    def get_window_position(self, session: Session) -> Dict[str, int]:
        ...

    def set_window_position(self, session: Session, x: int, y: int) -> Any:
        ...

    def maximize_window(self, session: Session) -> Any:
        ...

    def focus_frame(self, session: Session, frame: Union[None, int, Element]) -> Any:
        ...

    def focus_parent_frame(self, session: Session) -> Any:
        ...

    def accept_alert(self, session: Session, fn: DialogFn) -> str:
        ...

    def dismiss_alert(self, session: Session, fn: DialogFn) -> str:
        ...

    def accept_confirm(self, session: Session, fn: DialogFn) -> str:
        ...

    def dismiss_confirm(self, session: Session, fn: DialogFn) -> str:
        ...

    def accept_prompt(self, session: Session, input_value: Optional[str], fn: DialogFn) -> str:
        ...

    def dismiss_prompt(self, session: Session, fn: DialogFn) -> str:
        ...

    def take_screenshot(self, target: Parent) -> bytes:
        ...

    def cookies(self, session: Session) -> List[Dict[str, Any]]:
        ...

    def set_cookie(self, session: Session, key: str, value: str) -> Any:
        ...

    def current_url(self, session: Session) -> str:
        ...

    def page_source(self, session: Session) -> str:
        ...

    def page_title(self, session: Session) -> str:
        ...

    def visit(self, session: Session, path: str) -> Any:
        ...

    def find_elements(self, parent: Parent, query: Query) -> List[Element]:
        ...

    def attribute(self, element: Element, name: str) -> Optional[str]:
        ...

    def text(self, element: Element) -> str:
        ...

    def displayed(self, element: Element) -> bool:
        ...

    def selected(self, element: Element) -> bool:
        ...

    def set_value(self, element: Element, value: str) -> Any:
        ...

    def clear(self, element: Element) -> Any:
        ...

    def click(self, element: Element) -> Any:
        ...

    def mouse_click(self, parent: Parent, button: Union[str, int]) -> Any:
        ...

    def button_down(self, parent: Parent, button: Union[str, int]) -> Any:
        ...

    def button_up(self, parent: Parent, button: Union[str, int]) -> Any:
        ...

    def double_click(self, parent: Parent) -> Any:
        ...

    def move_mouse_to(
        self,
        session: Optional[Session],
        element: Optional[Element],
        x_offset: Optional[int] = None,
        y_offset: Optional[int] = None,
    ) -> Any:
        ...

    def execute_script(self, parent: Parent, script: str, arguments: Sequence[Any] = ()) -> Any:
        ...

    def execute_script_async(self, parent: Parent, script: str, arguments: Sequence[Any] = ()) -> Any:
        ...

    def send_keys(self, parent: Parent, keys: Any) -> Any:
        ...

    def element_size(self, element: Element) -> Dict[str, int]:
        ...

    def element_location(self, element: Element) -> Dict[str, int]:
        ...


class WebdriverClient:
    """Commands whose endpoints and payloads are the same under both protocols."""

    name = "webdriver"
    element_key = "ELEMENT"

    alert_text_path = "/alert_text"
    alert_accept_path = "/accept_alert"
    alert_dismiss_path = "/dismiss_alert"

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"{type(self).__name__}(timeout={self.timeout!r})"

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, url: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return http.request(method, url, body, timeout=self.timeout)

    def _get(self, url: str) -> Any:
        return self._request("GET", url).get("value")

    def _post(self, url: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("POST", url, body if body is not None else {}).get("value")

    def _delete(self, url: str) -> Any:
        return self._request("DELETE", url).get("value")

    # ------------------------------------------------------------------
    # Element references
    # ------------------------------------------------------------------
    def element_reference(self, element: Element) -> Dict[str, str]:
        return {self.element_key: element.id}

    def _is_reference(self, value: Any) -> bool:
        return isinstance(value, dict) and len(value) <= 2 and self.element_key in value

    def _build_element(self, parent: Parent, reference: Dict[str, Any]) -> Element:
        element_id = str(reference[self.element_key])
        return Element(
            id=element_id,
            url=f"{parent.session_url}/element/{element_id}",
            session_url=parent.session_url,
            parent=parent,
            client=self,
            driver=parent.driver,
        )

    def _encode_arguments(self, arguments: Sequence[Any]) -> List[Any]:
        encoded: List[Any] = []
        for argument in arguments:
            if isinstance(argument, Element):
                encoded.append(self.element_reference(argument))
            elif isinstance(argument, (list, tuple)):
                encoded.append(self._encode_arguments(argument))
            else:
                encoded.append(argument)
        return encoded

    def _decode_result(self, parent: Parent, value: Any) -> Any:
        if self._is_reference(value):
            return self._build_element(parent, value)
        if isinstance(value, list):
            return [self._decode_result(parent, item) for item in value]
        if isinstance(value, dict):
            return {key: self._decode_result(parent, item) for key, item in value.items()}
        return value

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------
    def delete_session(self, session: Session) -> Any:
        return self._delete(session.session_url)

    # ------------------------------------------------------------------
    # Navigation and page state
    # ------------------------------------------------------------------
    def visit(self, session: Session, path: str) -> Any:
        return self._post(f"{session.url}/url", {"url": path})

    def current_url(self, session: Session) -> str:
        return self._get(f"{session.url}/url")

    def page_source(self, session: Session) -> str:
        return self._get(f"{session.url}/source")

    def page_title(self, session: Session) -> str:
        return self._get(f"{session.url}/title")

    def cookies(self, session: Session) -> List[Dict[str, Any]]:
        return self._get(f"{session.url}/cookie") or []

    def set_cookie(self, session: Session, key: str, value: str) -> Any:
        return self._post(f"{session.url}/cookie", {"cookie": {"name": key, "value": value}})

    def take_screenshot(self, target: Parent) -> bytes:
        encoded = self._get(self._screenshot_url(target))
        return base64.b64decode(encoded)

    def _screenshot_url(self, target: Parent) -> str:
        return f"{target.session_url}/screenshot"

    # ------------------------------------------------------------------
    # Frames and dialogs
    # ------------------------------------------------------------------
    def focus_frame(self, session: Session, frame: Union[None, int, Element]) -> Any:
        frame_id: Any = self.element_reference(frame) if isinstance(frame, Element) else frame
        return self._post(f"{session.url}/frame", {"id": frame_id})

    def focus_parent_frame(self, session: Session) -> Any:
        return self._post(f"{session.url}/frame/parent")

    def accept_alert(self, session: Session, fn: DialogFn) -> str:
        return self._handle_dialog(session, fn, accept=True)

    def dismiss_alert(self, session: Session, fn: DialogFn) -> str:
        return self._handle_dialog(session, fn, accept=False)

    def accept_confirm(self, session: Session, fn: DialogFn) -> str:
        return self._handle_dialog(session, fn, accept=True)

    def dismiss_confirm(self, session: Session, fn: DialogFn) -> str:
        return self._handle_dialog(session, fn, accept=False)

    def accept_prompt(self, session: Session, input_value: Optional[str], fn: DialogFn) -> str:
        return self._handle_dialog(session, fn, accept=True, input_value=input_value)

    def dismiss_prompt(self, session: Session, fn: DialogFn) -> str:
        return self._handle_dialog(session, fn, accept=False)

    def _handle_dialog(
        self, session: Session, fn: DialogFn, *, accept: bool, input_value: Optional[str] = None
    ) -> str:
        """Run ``fn`` to open the dialog, then read, answer and close it; return its text."""
        fn(session)
        message = self._get(f"{session.url}{self.alert_text_path}")
        if input_value is not None:
            self._post(f"{session.url}{self.alert_text_path}", {"text": input_value})
        path = self.alert_accept_path if accept else self.alert_dismiss_path
        self._post(f"{session.url}{path}")
        return message

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------
    def find_elements(self, parent: Parent, query: Query) -> List[Element]:
        using, value = query
        references = self._post(f"{parent.url}/elements", {"using": using, "value": value}) or []
        return [self._build_element(parent, reference) for reference in references]

    def attribute(self, element: Element, name: str) -> Optional[str]:
        return self._get(f"{element.url}/attribute/{name}")

    def text(self, element: Element) -> str:
        return self._get(f"{element.url}/text")

    def displayed(self, element: Element) -> bool:
        return bool(self._get(f"{element.url}/displayed"))

    def selected(self, element: Element) -> bool:
        return bool(self._get(f"{element.url}/selected"))

    def clear(self, element: Element) -> Any:
        return self._post(f"{element.url}/clear")

    def click(self, element: Element) -> Any:
        return self._post(f"{element.url}/click")

    # ------------------------------------------------------------------
    # Scripts
    # ------------------------------------------------------------------
    execute_path = "/execute"
    execute_async_path = "/execute_async"

    def execute_script(self, parent: Parent, script: str, arguments: Sequence[Any] = ()) -> Any:
        return self._execute(parent, self.execute_path, script, arguments)

    def execute_script_async(self, parent: Parent, script: str, arguments: Sequence[Any] = ()) -> Any:
        return self._execute(parent, self.execute_async_path, script, arguments)

    def _execute(self, parent: Parent, path: str, script: str, arguments: Sequence[Any]) -> Any:
        value = self._post(
            f"{parent.session_url}{path}",
            {"script": script, "args": self._encode_arguments(arguments)},
        )
        return self._decode_result(parent, value)


def button_code(button: Union[str, int]) -> int:
    if isinstance(button, int):
        return button
    try:
        return BUTTONS[str(button).lower()]
    except KeyError:
        raise ValueError(f"Unknown mouse button: {button!r}") from None


def available_clients() -> Dict[str, Type[WebdriverClient]]:
    from .jwp import JWPClient
    from .w3c import W3CClient

    return {JWPClient.name: JWPClient, W3CClient.name: W3CClient}


def resolve_client(selector: Any, *, timeout: Optional[float] = None) -> ProtocolClient:
    """
    Turn a client selector into a client instance.

    ``selector`` may be a client instance (returned unchanged), a client class,
    or a registered name such as ``"jwp"`` or ``"w3c"``.
    """
    if isinstance(selector, str):
        clients = available_clients()
        try:
            return clients[selector.lower()](timeout=timeout)
        except KeyError:
            raise UnknownClientError(
                f"Unknown protocol client {selector!r}; expected one of {sorted(clients)}"
            ) from None
    if isinstance(selector, type):
        return selector(timeout=timeout)
    if selector is None:
        raise UnknownClientError("No protocol client given")
    return selector
