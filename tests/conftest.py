from __future__ import annotations

import pytest
from fastapi import Request
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from login_gate.main import create_app
from login_gate.service.settings_store import GateSettings, SettingsStore


class RecordingLoginFlow:
    """Login flow stand-in that records every invocation."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def __call__(self, request: Request) -> PlainTextResponse:
        self.calls.append(request.url.path)
        return PlainTextResponse("login form")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("HIDDEN_LOGIN_PATH", "BLOCK_REDIRECT_PATH", "SITE_URL", "ADMIN_TOKEN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def login_flow() -> RecordingLoginFlow:
    return RecordingLoginFlow()


@pytest.fixture
def store() -> SettingsStore:
    return SettingsStore(GateSettings(hidden_login_path="secret", block_redirect_path="404"))


@pytest.fixture
def client(store: SettingsStore, login_flow: RecordingLoginFlow) -> TestClient:
    return TestClient(create_app(settings=store, login_flow=login_flow))
