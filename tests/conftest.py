from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK

from remote_client.services.schemas import Severity
from remote_client.state.app_state import AppState


_DROP = object()


class FakeWebSocket:
    """In-memory stand-in for a websockets client connection."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.closed = False
        self._inbox: asyncio.Queue[Any] = asyncio.Queue()

    def push(self, raw: str | bytes) -> None:
        self._inbox.put_nowait(raw)

    def drop(self) -> None:
        """Simulate an abnormal disconnection."""
        self._inbox.put_nowait(_DROP)

    def hang_up(self) -> None:
        """Simulate a clean close from the server."""
        self._inbox.put_nowait(None)

    async def send(self, message: str) -> None:
        if self.closed:
            raise ConnectionClosedOK(None, None)
        self.sent.append(message)

    async def close(self) -> None:
        self.closed = True
        self._inbox.put_nowait(None)

    def __aiter__(self) -> "FakeWebSocket":
        return self

    async def __anext__(self) -> Any:
        item = await self._inbox.get()
        if item is None:
            self.closed = True
            raise StopAsyncIteration
        if item is _DROP:
            self.closed = True
            raise ConnectionClosedError(None, None)
        return item


class FakeConnector:
    """Connector handing out FakeWebSocket instances; can be told to fail."""

    def __init__(self) -> None:
        self.sockets: list[FakeWebSocket] = []
        self.urls: list[str] = []
        self.failures = 0

    @property
    def calls(self) -> int:
        return len(self.urls)

    @property
    def live(self) -> list[FakeWebSocket]:
        return [ws for ws in self.sockets if not ws.closed]

    @property
    def latest(self) -> FakeWebSocket:
        return self.sockets[-1]

    async def __call__(self, url: str) -> FakeWebSocket:
        self.urls.append(url)
        await asyncio.sleep(0)
        if self.failures:
            self.failures -= 1
            raise ConnectionRefusedError("connection refused")
        websocket = FakeWebSocket()
        self.sockets.append(websocket)
        return websocket


class RecordingNotifier:
    """Notifier keeping every displayed message."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, Severity]] = []

    def display(self, message: str, severity: Severity) -> None:
        self.messages.append((message, severity))

    @property
    def texts(self) -> list[str]:
        return [message for message, _ in self.messages]

    def severities_of(self, message: str) -> list[Severity]:
        return [severity for text, severity in self.messages if text == message]


async def settle(rounds: int = 10) -> None:
    """Let pending callbacks and tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    monkeypatch.setenv("REMOTE_CLIENT_HOME", str(home))
    return home


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def state() -> AppState:
    app_state = AppState()
    app_state.settings.server.url = "ws://appliance.test/socket"
    app_state.settings.server.reconnect_delay = 0.05
    return app_state
