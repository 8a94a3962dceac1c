from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Any, Dict, List

import pytest

from browser_testing.app.configuration import configure_driver
from browser_testing.automation.driver import (
    Element,
    JWPClient,
    Session,
    SeleniumDriver,
    SessionNotCreatedError,
    TransportError,
    W3CClient,
    WebDriverError,
    default_capabilities,
    default_driver,
    end_session,
    start_session,
)
from browser_testing.automation.driver import upload
from browser_testing.automation.driver.exceptions import InvalidURLError


@pytest.fixture
def driver() -> SeleniumDriver:
    return SeleniumDriver()


@pytest.fixture
def started(driver: SeleniumDriver, recording_client) -> Session:  # type: ignore[no-untyped-def]
    return driver.start_session(client=recording_client)


def test_start_session_builds_session_from_remote_id(driver: SeleniumDriver, recording_client) -> None:  # type: ignore[no-untyped-def]
    session = driver.start_session(
        remote_url="http://host:4444/wd/hub/",
        client=recording_client,
        create_session_fn=lambda base_url, capabilities: "abc123",
        capabilities={"browserName": "chrome"},
    )
    assert session.id == "abc123"
    assert session.url == "http://host:4444/wd/hub/session/abc123"
    assert session.session_url == session.url
    assert session.capabilities == {"browserName": "chrome"}
    assert session.client is recording_client
    assert session.driver is driver
    assert session.server is None
    assert session.screenshots == []


def test_start_session_uses_client_create_session_by_default(driver: SeleniumDriver, recording_client) -> None:  # type: ignore[no-untyped-def]
    session = driver.start_session(client=recording_client, capabilities={"browserName": "chrome"})
    assert recording_client.calls == [
        ("create_session", ("http://localhost:4444/wd/hub/", {"browserName": "chrome"})),
    ]
    assert session.url == "http://localhost:4444/wd/hub/session/abc123"


def test_start_session_adds_missing_trailing_slash(driver: SeleniumDriver, recording_client) -> None:  # type: ignore[no-untyped-def]
    session = driver.start_session(remote_url="http://host:4444/wd/hub", client=recording_client)
    assert session.url == "http://host:4444/wd/hub/session/abc123"


def test_capabilities_are_copied_into_the_session(driver: SeleniumDriver, recording_client) -> None:  # type: ignore[no-untyped-def]
    capabilities: Dict[str, Any] = {"browserName": "chrome", "goog:chromeOptions": {"args": []}}
    session = driver.start_session(client=recording_client, capabilities=capabilities)
    capabilities["goog:chromeOptions"]["args"].append("--headless")
    assert session.capabilities == {"browserName": "chrome", "goog:chromeOptions": {"args": []}}


def test_explicit_capabilities_ignore_configuration(driver: SeleniumDriver, recording_client) -> None:  # type: ignore[no-untyped-def]
    configure_driver("selenium", capabilities={"browserName": "safari"})
    session = driver.start_session(client=recording_client, capabilities={"browserName": "chrome"})
    assert session.capabilities == {"browserName": "chrome"}


def test_configured_capabilities_replace_defaults(driver: SeleniumDriver, recording_client) -> None:  # type: ignore[no-untyped-def]
    configure_driver("selenium", capabilities={"browserName": "safari"})
    session = driver.start_session(client=recording_client)
    assert session.capabilities == {"browserName": "safari"}


def test_default_capabilities_carry_metadata(driver: SeleniumDriver, recording_client) -> None:  # type: ignore[no-untyped-def]
    session = driver.start_session(client=recording_client, metadata="run-1")
    assert session.capabilities == default_capabilities("run-1")


def test_configuration_is_keyed_by_driver_name(recording_client) -> None:  # type: ignore[no-untyped-def]
    configure_driver("grid", capabilities={"browserName": "edge"}, remote_url="http://grid:4444/")
    session = SeleniumDriver("grid").start_session(client=recording_client)
    assert session.capabilities == {"browserName": "edge"}
    assert session.url == "http://grid:4444/session/abc123"


def test_client_names_resolve_to_protocol_clients(driver: SeleniumDriver) -> None:
    configure_driver("selenium", http_timeout=7.5)
    session = driver.start_session(client="w3c", create_session_fn=lambda url, caps: "s1")
    assert isinstance(session.client, W3CClient)
    assert session.client.timeout == 7.5


def test_configured_client_is_used_when_none_given(driver: SeleniumDriver) -> None:
    configure_driver("selenium", client="w3c")
    session = driver.start_session(create_session_fn=lambda url, caps: "s1")
    assert isinstance(session.client, W3CClient)


def test_legacy_client_is_the_default(driver: SeleniumDriver) -> None:
    session = driver.start_session(create_session_fn=lambda url, caps: "s1")
    assert isinstance(session.client, JWPClient)


def test_creation_errors_propagate(driver: SeleniumDriver, recording_client) -> None:  # type: ignore[no-untyped-def]
    recording_client.errors["create_session"] = SessionNotCreatedError("no firefox here")
    with pytest.raises(SessionNotCreatedError):
        driver.start_session(client=recording_client)


def test_window_size_is_applied_after_creation(driver: SeleniumDriver, recording_client) -> None:  # type: ignore[no-untyped-def]
    session = driver.start_session(client=recording_client, window_size={"width": 1280, "height": 720})
    assert recording_client.calls[-1] == ("set_window_size", (session, 1280, 720))


def test_window_size_failure_propagates_without_teardown(driver: SeleniumDriver, recording_client) -> None:  # type: ignore[no-untyped-def]
    recording_client.errors["set_window_size"] = WebDriverError("unsupported")
    with pytest.raises(WebDriverError):
        driver.start_session(client=recording_client, window_size={"width": 10, "height": 10})
    operations = [operation for operation, _ in recording_client.calls]
    assert operations == ["create_session", "set_window_size"]


def test_session_identity_is_immutable(started: Session) -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        started.id = "other"  # type: ignore[misc]


def test_end_session_deletes_remote_session(driver: SeleniumDriver, started: Session, recording_client) -> None:  # type: ignore[no-untyped-def]
    assert driver.end_session(started) is None
    assert recording_client.calls[-1] == ("delete_session", (started,))


def test_end_session_swallows_errors(driver: SeleniumDriver, started: Session, recording_client) -> None:  # type: ignore[no-untyped-def]
    recording_client.errors["delete_session"] = TransportError("gone")
    assert driver.end_session(started) is None


@pytest.mark.parametrize(
    ("url", "error", "expected"),
    [
        ("about:blank", None, True),
        ("about:blank#", None, False),
        ("http://example.com/", None, False),
        (None, TransportError("timeout"), False),
        (None, WebDriverError("no such window"), False),
    ],
)
def test_blank_page(driver: SeleniumDriver, started: Session, recording_client, url, error, expected) -> None:  # type: ignore[no-untyped-def]
    recording_client.results["current_url"] = url
    if error is not None:
        recording_client.errors["current_url"] = error
    assert driver.blank_page(started) is expected


def test_current_path(driver: SeleniumDriver, started: Session, recording_client) -> None:  # type: ignore[no-untyped-def]
    recording_client.results["current_url"] = "http://example.com/account/settings?tab=2"
    assert driver.current_path(started) == "/account/settings"


def test_current_path_without_path_fails(driver: SeleniumDriver, started: Session, recording_client) -> None:  # type: ignore[no-untyped-def]
    recording_client.results["current_url"] = "http://example.com"
    with pytest.raises(InvalidURLError):
        driver.current_path(started)


def test_current_path_propagates_query_errors(driver: SeleniumDriver, started: Session, recording_client) -> None:  # type: ignore[no-untyped-def]
    recording_client.errors["current_url"] = TransportError("timeout")
    with pytest.raises(TransportError):
        driver.current_path(started)


SESSION_OPERATIONS = [
    ("window_handle", ()),
    ("window_handles", ()),
    ("focus_window", ("handle-2",)),
    ("close_window", ()),
    ("get_window_size", ()),
    ("set_window_size", (800, 600)),
    ("get_window_position", ()),
    ("set_window_position", (10, 20)),
    ("maximize_window", ()),
    ("focus_frame", (1,)),
    ("focus_parent_frame", ()),
    ("accept_alert", (print,)),
    ("dismiss_alert", (print,)),
    ("accept_confirm", (print,)),
    ("dismiss_confirm", (print,)),
    ("accept_prompt", ("answer", print)),
    ("dismiss_prompt", (print,)),
    ("take_screenshot", ()),
    ("cookies", ()),
    ("set_cookie", ("token", "abc")),
    ("current_url", ()),
    ("page_source", ()),
    ("page_title", ()),
    ("visit", ("http://example.com/",)),
    ("find_elements", (("css selector", ".item"),)),
    ("mouse_click", ("right",)),
    ("button_down", ("left",)),
    ("button_up", ("left",)),
    ("double_click", ()),
    ("execute_script", ("return 1", [1])),
    ("execute_script_async", ("done(1)", [])),
    ("send_keys", (["hello"],)),
]

ELEMENT_OPERATIONS = [
    ("attribute", ("href",)),
    ("text", ()),
    ("displayed", ()),
    ("selected", ()),
    ("set_value", ("hello",)),
    ("clear", ()),
    ("click", ()),
    ("element_size", ()),
    ("element_location", ()),
    ("take_screenshot", ()),
    ("find_elements", (("xpath", ".//a"),)),
]


@pytest.mark.parametrize(("operation", "args"), SESSION_OPERATIONS)
def test_session_operations_forward_unchanged(driver: SeleniumDriver, session: Session, recording_client, operation, args) -> None:  # type: ignore[no-untyped-def]
    recording_client.results[operation] = f"{operation}-result"
    assert getattr(driver, operation)(session, *args) == f"{operation}-result"
    assert recording_client.calls == [(operation, (session, *args))]


@pytest.mark.parametrize(("operation", "args"), ELEMENT_OPERATIONS)
def test_element_operations_forward_unchanged(driver: SeleniumDriver, element: Element, recording_client, operation, args) -> None:  # type: ignore[no-untyped-def]
    recording_client.results[operation] = f"{operation}-result"
    assert getattr(driver, operation)(element, *args) == f"{operation}-result"
    assert recording_client.calls == [(operation, (element, *args))]


def test_forwarded_errors_are_not_wrapped(driver: SeleniumDriver, element: Element, recording_client) -> None:  # type: ignore[no-untyped-def]
    failure = WebDriverError("stale", error="stale element reference")
    recording_client.errors["click"] = failure
    with pytest.raises(WebDriverError) as exc:
        driver.click(element)
    assert exc.value is failure


def test_hover_and_move_mouse_by(driver: SeleniumDriver, session: Session, element: Element, recording_client) -> None:  # type: ignore[no-untyped-def]
    driver.hover(element)
    driver.move_mouse_by(session, 5, -3)
    assert recording_client.calls == [
        ("move_mouse_to", (None, element)),
        ("move_mouse_to", (session, None, 5, -3)),
    ]


def test_send_keys_to_session_never_uploads(driver: SeleniumDriver, session: Session, recording_client, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    local = tmp_path / "cv.pdf"
    local.write_bytes(b"cv")
    driver.send_keys(session, [str(local)])
    assert recording_client.calls == [("send_keys", (session, [str(local)]))]


def test_send_keys_to_element_uploads_local_files(
    monkeypatch: pytest.MonkeyPatch, driver: SeleniumDriver, element: Element, recording_client, tmp_path: Path
) -> None:  # type: ignore[no-untyped-def]
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    first.write_text("a", encoding="utf-8")
    second.write_text("b", encoding="utf-8")
    posted: List[str] = []

    def fake_request(method: str, url: str, body: Any = None, *, timeout: Any = None) -> Dict[str, Any]:
        posted.append(url)
        return {"value": f"/remote/{len(posted)}"}

    monkeypatch.setattr(upload.http, "request", fake_request)

    driver.send_keys(element, [str(first), str(second)])
    assert posted == [f"{element.session_url}/file"] * 2
    assert recording_client.calls == [("send_keys", (element, "/remote/1\n/remote/2"))]


def test_send_keys_to_element_passes_text_through(driver: SeleniumDriver, element: Element, recording_client) -> None:  # type: ignore[no-untyped-def]
    keys = ["definitely/not/a/file.txt"]
    driver.send_keys(element, keys)
    assert recording_client.calls == [("send_keys", (element, keys))]


def test_send_keys_to_element_types_directory_names(driver: SeleniumDriver, element: Element, recording_client, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    (tmp_path / "big.bin").write_bytes(b"\x00" * 16)
    driver.send_keys(element, ["."])
    assert recording_client.calls == [("send_keys", (element, ["."]))]


def test_save_screenshot_records_path(driver: SeleniumDriver, element: Element, session: Session, recording_client, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    recording_client.results["take_screenshot"] = b"\x89PNG fake"
    path = driver.save_screenshot(element, tmp_path / "shots", name="checkout")
    assert path == tmp_path / "shots" / "checkout.png"
    assert path.read_bytes() == b"\x89PNG fake"
    assert session.screenshots == [str(path)]


def test_save_screenshot_uses_configured_directory(driver: SeleniumDriver, session: Session, recording_client, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    configure_driver("selenium", screenshot_dir=str(tmp_path / "configured"))
    recording_client.results["take_screenshot"] = b"png"
    first = driver.save_screenshot(session)
    second = driver.save_screenshot(session, name="second.png")
    assert first.parent == tmp_path / "configured"
    assert second.name == "second.png"
    assert session.screenshots == [str(first), str(second)]


def test_module_helpers_use_the_default_driver(recording_client) -> None:  # type: ignore[no-untyped-def]
    session = start_session(client=recording_client)
    assert session.driver is default_driver()
    assert isinstance(default_driver(), SeleniumDriver)
    assert end_session(session) is None
    assert recording_client.calls[-1] == ("delete_session", (session,))


def test_default_driver_is_shared() -> None:
    assert default_driver() is default_driver()
    assert default_driver().name == "selenium"
