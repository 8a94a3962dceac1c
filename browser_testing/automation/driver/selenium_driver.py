"""
Selenium driver: session lifecycle and the browser interaction surface.

The driver talks to a Selenium-compatible remote end (Selenium Server,
chromedriver, geckodriver). It does not start or stop that server.

Every interaction is forwarded unchanged to the protocol client bound to the
session, so callers never branch on the protocol version. Only three
operations add behaviour of their own:

* ``start_session`` resolves capabilities and builds the ``Session``;
* ``end_session`` and ``blank_page`` never raise;
* ``send_keys`` to an element uploads local files named by the keys.
"""

from __future__ import annotations

import copy
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union
from urllib.parse import urlsplit

from browser_testing.app.configuration import get_driver_settings
from .capabilities import resolve_capabilities
from .client import DialogFn, Query, resolve_client
from .core import Element, Parent, Session, session_of
from .exceptions import InvalidURLError
from .metadata import Metadata
from .upload import substitute_local_files

logger = logging.getLogger(__name__)

DEFAULT_REMOTE_URL = "http://localhost:4444/wd/hub/"
DEFAULT_CLIENT = "jwp"
BLANK_PAGE = "about:blank"

CreateSessionFn = Callable[[str, Dict[str, Any]], str]


class SeleniumDriver:
    """Driver for remote ends speaking the JSON Wire Protocol or W3C WebDriver."""

    def __init__(self, name: str = "selenium") -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start_session(
        self,
        *,
        remote_url: Optional[str] = None,
        client: Any = None,
        create_session_fn: Optional[CreateSessionFn] = None,
        capabilities: Optional[Dict[str, Any]] = None,
        window_size: Optional[Mapping[str, int]] = None,
        metadata: Metadata = None,
    ) -> Session:
        """
        Create a remote session and return its record.

        Parameters
        ----------
        remote_url:
            Base URL of the remote end. Defaults to the configured URL, then
            ``http://localhost:4444/wd/hub/``. A missing trailing ``/`` is
            added, so the session URL is always ``<base>/session/<id>`` rather
            than the literal ``remote_url + "session/" + id``.
        client:
            Protocol client instance, class or registered name (``"jwp"``,
            ``"w3c"``). Defaults to the configured client, then ``"jwp"``.
        create_session_fn:
            Replacement for the client's ``create_session``; receives the base
            URL and capabilities and returns the new session id.
        capabilities:
            Capability document for this call. When omitted the configured
            document is used, then the defaults.
        window_size:
            Mapping with ``width`` and ``height``. Applied right after the
            session is created; if that fails the error propagates and the
            remote session is left running.
        metadata:
            Embedded in the default user agent; ignored when a capability
            document is given or configured.
        """
        settings = get_driver_settings(self.name)
        base_url = _with_trailing_slash(remote_url or settings.remote_url or DEFAULT_REMOTE_URL)
        selector = client if client is not None else (settings.client or DEFAULT_CLIENT)
        bound_client = resolve_client(selector, timeout=settings.http_timeout)
        create = create_session_fn or bound_client.create_session
        resolved = resolve_capabilities(capabilities, settings.capabilities, metadata)

        session_id = create(base_url, resolved)
        session_url = f"{base_url}session/{session_id}"
        session = Session(
            id=session_id,
            session_url=session_url,
            url=session_url,
            driver=self,
            client=bound_client,
            capabilities=copy.deepcopy(resolved),
        )
        logger.debug("Started session %s via %s", session_url, bound_client)

        if window_size:
            self.set_window_size(session, window_size["width"], window_size["height"])
        return session

    def end_session(self, session: Session) -> None:
        """Delete the remote session. Failures are ignored."""
        try:
            session.client.delete_session(session)
        except Exception as exc:
            logger.debug("Ignoring error while ending session %s: %s", session.id, exc)
        else:
            logger.debug("Ended session %s", session.id)

    def blank_page(self, session: Session) -> bool:
        """True when the session shows ``about:blank``; False when that cannot be determined."""
        try:
            url = self.current_url(session)
        except Exception:
            return False
        return url == BLANK_PAGE

    # ------------------------------------------------------------------
    # Windows
    # ------------------------------------------------------------------
    def window_handle(self, session: Session) -> str:
        return session.client.window_handle(session)

    def window_handles(self, session: Session) -> List[str]:
        return session.client.window_handles(session)

    def focus_window(self, session: Session, handle: str) -> Any:
        return session.client.focus_window(session, handle)

    def close_window(self, session: Session) -> Any:
        return session.client.close_window(session)

    def get_window_size(self, session: Session) -> Dict[str, int]:
        return session.client.get_window_size(session)

    def set_window_size(self, session: Session, width: int, height: int) -> Any:
        return session.client.set_window_size(session, width, height)

    def get_window_position(self, session: Session) -> Dict[str, int]:
        return session.client.get_window_position(session)

    def set_window_position(self, session: Session, x: int, y: int) -> Any:
        return session.client.set_window_position(session, x, y)

    def maximize_window(self, session: Session) -> Any:
        return session.client.maximize_window(session)

    # ------------------------------------------------------------------
    # Frames and dialogs
    # ------------------------------------------------------------------
    def focus_frame(self, session: Session, frame: Union[None, int, Element]) -> Any:
        return session.client.focus_frame(session, frame)

    def focus_parent_frame(self, session: Session) -> Any:
        return session.client.focus_parent_frame(session)

    def accept_alert(self, session: Session, fn: DialogFn) -> str:
        return session.client.accept_alert(session, fn)

    def dismiss_alert(self, session: Session, fn: DialogFn) -> str:
        return session.client.dismiss_alert(session, fn)

    def accept_confirm(self, session: Session, fn: DialogFn) -> str:
        return session.client.accept_confirm(session, fn)

    def dismiss_confirm(self, session: Session, fn: DialogFn) -> str:
        return session.client.dismiss_confirm(session, fn)

    def accept_prompt(self, session: Session, input_value: Optional[str], fn: DialogFn) -> str:
        return session.client.accept_prompt(session, input_value, fn)

    def dismiss_prompt(self, session: Session, fn: DialogFn) -> str:
        return session.client.dismiss_prompt(session, fn)

    # ------------------------------------------------------------------
    # Screenshots
    # ------------------------------------------------------------------
    def take_screenshot(self, target: Parent) -> bytes:
        return target.client.take_screenshot(target)

    def save_screenshot(
        self,
        target: Parent,
        directory: Optional[Union[str, Path]] = None,
        name: Optional[str] = None,
    ) -> Path:
        """Write a PNG screenshot of ``target`` and record it on the owning session."""
        session = session_of(target)
        image = self.take_screenshot(target)
        folder = Path(directory) if directory is not None else Path(get_driver_settings(self.name).screenshot_dir)
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / (name or str(time.time_ns()))
        if path.suffix.lower() != ".png":
            path = path.with_name(path.name + ".png")
        path.write_bytes(image)
        session.screenshots.append(str(path))
        logger.debug("Saved screenshot %s", path)
        return path

    # ------------------------------------------------------------------
    # Navigation and page state
    # ------------------------------------------------------------------
    def cookies(self, session: Session) -> List[Dict[str, Any]]:
        return session.client.cookies(session)

    def set_cookie(self, session: Session, key: str, value: str) -> Any:
        return session.client.set_cookie(session, key, value)

    def current_url(self, session: Session) -> str:
        return session.client.current_url(session)

    def current_path(self, session: Session) -> str:
        url = session.client.current_url(session)
        try:
            path = urlsplit(url).path
        except (TypeError, ValueError, AttributeError) as exc:
            raise InvalidURLError(f"Cannot parse current URL {url!r}") from exc
        if not path:
            raise InvalidURLError(f"Current URL {url!r} has no path")
        return path

    def page_source(self, session: Session) -> str:
        return session.client.page_source(session)

    def page_title(self, session: Session) -> str:
        return session.client.page_title(session)

    def visit(self, session: Session, path: str) -> Any:
        return session.client.visit(session, path)

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------
    def find_elements(self, parent: Parent, query: Query) -> List[Element]:
        return parent.client.find_elements(parent, query)

    def attribute(self, element: Element, name: str) -> Optional[str]:
        return element.client.attribute(element, name)

    def text(self, element: Element) -> str:
        return element.client.text(element)

    def displayed(self, element: Element) -> bool:
        return element.client.displayed(element)

    def selected(self, element: Element) -> bool:
        return element.client.selected(element)

    def set_value(self, element: Element, value: str) -> Any:
        return element.client.set_value(element, value)

    def clear(self, element: Element) -> Any:
        return element.client.clear(element)

    def click(self, element: Element) -> Any:
        return element.client.click(element)

    def element_size(self, element: Element) -> Dict[str, int]:
        return element.client.element_size(element)

    def element_location(self, element: Element) -> Dict[str, int]:
        return element.client.element_location(element)

    # ------------------------------------------------------------------
    # Mouse
    # ------------------------------------------------------------------
    def mouse_click(self, parent: Parent, button: Union[str, int]) -> Any:
        return parent.client.mouse_click(parent, button)

    def button_down(self, parent: Parent, button: Union[str, int]) -> Any:
        return parent.client.button_down(parent, button)

    def button_up(self, parent: Parent, button: Union[str, int]) -> Any:
        return parent.client.button_up(parent, button)

    def double_click(self, parent: Parent) -> Any:
        return parent.client.double_click(parent)

    def hover(self, element: Element) -> Any:
        return element.client.move_mouse_to(None, element)

    def move_mouse_by(self, session: Session, x_offset: int, y_offset: int) -> Any:
        return session.client.move_mouse_to(session, None, x_offset, y_offset)

    # ------------------------------------------------------------------
    # Scripts and keyboard
    # ------------------------------------------------------------------
    def execute_script(self, parent: Parent, script: str, arguments: Sequence[Any] = ()) -> Any:
        return parent.client.execute_script(parent, script, arguments)

    def execute_script_async(self, parent: Parent, script: str, arguments: Sequence[Any] = ()) -> Any:
        return parent.client.execute_script_async(parent, script, arguments)

    def send_keys(self, target: Parent, keys: Any) -> Any:
        """
        Type ``keys`` into the page or into an element.

        When the target is an element and every token in ``keys`` names an
        existing local file, the files are uploaded to the remote end first
        and their remote paths are typed instead.
        """
        if isinstance(target, Element):
            keys = substitute_local_files(target, keys)
        return target.client.send_keys(target, keys)


def _with_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else f"{url}/"


_DEFAULT_DRIVER = SeleniumDriver()


def default_driver() -> SeleniumDriver:
    """Return the shared driver behind the module-level ``start_session``."""
    return _DEFAULT_DRIVER


def start_session(**options: Any) -> Session:
    """Start a session with the default Selenium driver."""
    return default_driver().start_session(**options)


def end_session(session: Session) -> None:
    """End ``session`` through the driver that created it."""
    session.driver.end_session(session)
