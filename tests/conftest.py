"""Shared fixtures for relay tests."""

from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config
from ui import log_utils


class RecordingLogger:
    """RequestLogger that keeps every call in memory."""

    def __init__(self) -> None:
        self.help: list[tuple[str, str, int]] = []
        self.forwarded: list[tuple[str, str, int]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_help(self, method: str, candidate: str, status: int) -> None:
        self.help.append((method, candidate, status))

    def log_forward(self, method, target, status, *, headers) -> None:
        self.forwarded.append((method, target, status))

    def log_error(self, target: str, status: int, message: str) -> None:
        self.errors.append((target, status, message))


class UpstreamRecorder:
    """MockTransport handler that records requests and replays a response."""

    def __init__(self, response_factory: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []
        self._factory = response_factory

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._factory(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    """Keep log files out of the working directory."""
    monkeypatch.setattr(log_utils, "LOG_ROOT", tmp_path / "logs")
    monkeypatch.setattr(log_utils, "CLI_LOG_FILE", tmp_path / "logs" / "relay.log")
    return tmp_path / "logs"


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def upstream():
    """Upstream answering 200 with a small JSON body."""
    return UpstreamRecorder(
        lambda request: httpx.Response(
            200,
            json={"ok": True},
            headers={"content-type": "application/json; charset=utf-8"},
        )
    )


@pytest.fixture
def make_client(logger):
    """Build a TestClient whose upstream traffic goes to the given handler."""
    clients: list[TestClient] = []

    def _make(handler) -> TestClient:
        app = create_app(Config(), logger, transport=httpx.MockTransport(handler))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, upstream):
    return make_client(upstream)


@pytest.fixture
def upstream_recorder():
    """Expose the recorder class for tests that need a custom upstream."""
    return UpstreamRecorder
