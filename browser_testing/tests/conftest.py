from __future__ import annotations

import os
from typing import Any, Dict, List, Tuple

import pytest

from browser_testing.app.configuration import reset_driver_settings
from browser_testing.automation.driver.core import Element, Session


class RecordingClient:
    """Protocol client stand-in that records every call it receives."""

    name = "recording"
    timeout = None

    def __init__(self, results: Dict[str, Any] | None = None, errors: Dict[str, Exception] | None = None) -> None:
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.results = dict(results or {})
        self.errors = dict(errors or {})

    def __getattr__(self, operation: str):  # type: ignore[no-untyped-def]
        if operation.startswith("_"):
            raise AttributeError(operation)

        def _call(*args: Any) -> Any:
            self.calls.append((operation, args))
            if operation in self.errors:
                raise self.errors[operation]
            return self.results.get(operation)

        return _call


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:  # type: ignore[no-untyped-def]
    for name in list(os.environ):
        if name.startswith("BROWSER_TESTING_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_driver_settings()
    yield
    reset_driver_settings()


@pytest.fixture
def recording_client() -> RecordingClient:
    return RecordingClient(results={"create_session": "abc123"})


@pytest.fixture
def session(recording_client: RecordingClient) -> Session:
    session_url = "http://grid/wd/hub/session/abc123"
    return Session(
        id="abc123",
        session_url=session_url,
        url=session_url,
        driver=None,
        client=recording_client,
        capabilities={},
    )


@pytest.fixture
def element(session: Session) -> Element:
    return Element(
        id="el-1",
        url=f"{session.session_url}/element/el-1",
        session_url=session.session_url,
        parent=session,
        client=session.client,
        driver=session.driver,
    )
