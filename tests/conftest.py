"""
Shared fixtures for the test suite.

HTTP is faked at the ``requests.Session`` boundary; the controller runs
against an in-memory device service that records every call.
"""

from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from device_notes.core.config import Settings
from device_notes.core.errors import DeviceNotFoundError
from device_notes.services.auth import GraphSession

_NO_BODY = object()


def make_response(status_code: int = 200, payload: Any = _NO_BODY, reason: str = "OK") -> MagicMock:
    """Build a ``MagicMock`` that looks like a ``requests.Response``."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.reason = reason
    if payload is _NO_BODY:
        resp.json.side_effect = ValueError("no JSON body")
    else:
        resp.json.return_value = payload
    return resp


class FakeDeviceService:
    """In-memory stand-in for ``DeviceService``.

    ``devices`` maps display name to device id, ``notes`` maps device id to
    the stored note. Every call is appended to ``calls``.
    """

    def __init__(self, devices: dict[str, str], notes: Optional[dict[str, str]] = None) -> None:
        self.devices = devices
        self.notes = dict(notes or {})
        self.calls: list[tuple] = []

    def resolve_device_id(self, device_name: str) -> str:
        self.calls.append(("resolve", device_name))
        if device_name not in self.devices:
            raise DeviceNotFoundError(device_name)
        return self.devices[device_name]

    def get_notes(self, device_id: str) -> str:
        self.calls.append(("get", device_id))
        return self.notes.get(device_id, "")

    def set_notes(self, device_id: str, value: str) -> None:
        self.calls.append(("set", device_id, value))
        self.notes[device_id] = value

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        tenant_id="contoso.onmicrosoft.com",
        client_id="11111111-2222-3333-4444-555555555555",
        client_secret="s3cret",
    )


@pytest.fixture()
def graph_session() -> GraphSession:
    return GraphSession(access_token="eyJ0eXAi.fake.token", tenant_id="contoso.onmicrosoft.com")


@pytest.fixture()
def http() -> MagicMock:
    """A fake ``requests.Session`` with a real headers dict."""
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture()
def fake_service() -> FakeDeviceService:
    return FakeDeviceService({"VM-1874-39": "dev-1"}, {"dev-1": "Laddstation: 33"})
