"""Shared fixtures: settings isolated from the environment and a mock Wowza server."""

from __future__ import annotations

import json
import os
from typing import Any, Callable

import httpx
import pytest
import pytest_asyncio

from adapters.wowza_client import WowzaClient
from core.config import AppSettings

BASE = "http://wowza.test:8087/v2/servers/_defaultServer_/vhosts/_defaultVHost_"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.upper().startswith("WOWZA_D2_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


def make_settings(**overrides: Any) -> AppSettings:
    values: dict[str, Any] = {
        "host": "wowza.test",
        "port": 8087,
        "username": "admin",
        "password": "secret",
    }
    values.update(overrides)
    return AppSettings(_env_file=None, **values)


class MockWowza:
    """Records requests and answers with a fixed (status, body) or a custom handler."""

    def __init__(self, status: int = 200, body: Any = None, *, text: str | None = None) -> None:
        self.status = status
        self.body = body
        self.text = text
        self.requests: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        if self.body is None:
            return httpx.Response(self.status)
        return httpx.Response(self.status, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def settings() -> AppSettings:
    return make_settings()


@pytest.fixture
def server() -> MockWowza:
    return MockWowza(200, {"success": True})


@pytest_asyncio.fixture
async def client(settings, server):
    async with WowzaClient(settings, transport=server.transport()) as wowza:
        yield wowza
