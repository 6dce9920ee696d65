"""Connection lifecycle manager for the appliance WebSocket."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Awaitable, Callable, Optional

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..runtime.notifications import NotifyCallback
from ..state.app_state import AppState
from .errors import ConnectionFailedError, NotConnectedError, ParseError
from .protocol import encode_command, parse_inbound
from .schemas import Command, InboundEnvelope, Phase, Severity

LOGGER = logging.getLogger(__name__)

Connector = Callable[[str], Awaitable[Any]]
EnvelopeCallback = Callable[[InboundEnvelope], Any]

_TRANSPORT_ERRORS = (OSError, asyncio.TimeoutError, WebSocketException)


class ConnectionManager:
    """Own the single connection to the endpoint and keep it alive.

    All callbacks run on one asyncio loop, which serializes them: ``start``
    is a no-op while an attempt is outstanding, and every close schedules
    exactly one new ``start`` after ``reconnect_delay`` seconds. Reconnection
    never gives up until :meth:`close` is called.
    """

    def __init__(
        self,
        url: str,
        *,
        state: AppState,
        notify: NotifyCallback,
        on_envelope: EnvelopeCallback,
        reconnect_delay: float = 3.0,
        connector: Optional[Connector] = None,
    ) -> None:
        self.url = url
        self.state = state
        self.reconnect_delay = reconnect_delay
        self._notify = notify
        self._on_envelope = on_envelope
        self._connector: Connector = connector or ws_connect
        self._handle: Any = None
        self._attempt: Optional[asyncio.Task[None]] = None
        self._reconnect: Optional[asyncio.TimerHandle] = None
        self._opened = asyncio.Event()
        self._stopped = False
        self._phase = Phase.IDLE
        self.state.phase = self._phase

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_open(self) -> bool:
        """Return True when a command can be sent right now."""
        return self._phase is Phase.OPEN and self._handle is not None

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect is not None

    def start(self) -> None:
        """Begin a connection attempt unless one is already outstanding."""
        if self._stopped:
            LOGGER.debug("start() ignored: manager closed")
            return
        if self._attempt is not None and not self._attempt.done():
            LOGGER.debug("start() ignored: attempt already %s", self._phase.value)
            return
        if self._reconnect is not None:
            self._reconnect.cancel()
            self._reconnect = None
        self._set_phase(Phase.CONNECTING)
        LOGGER.info("Connecting to %s", self.url)
        self._attempt = asyncio.get_running_loop().create_task(self._run())

    async def send(self, command: Command) -> None:
        """Transmit ``command`` over the open connection."""
        handle = self._handle
        if self._phase is not Phase.OPEN or handle is None:
            raise NotConnectedError(f"Cannot send {Command(command).value}: connection is {self._phase.value}.")
        try:
            await handle.send(encode_command(command))
        except ConnectionClosed as exc:
            raise ConnectionFailedError("Connection closed while sending.") from exc
        LOGGER.info("Sent command %s", Command(command).value)

    async def wait_open(self, timeout: Optional[float] = None) -> None:
        """Wait until the connection is open."""
        await asyncio.wait_for(self._opened.wait(), timeout)

    async def close(self) -> None:
        """Tear down the connection and stop reconnecting."""
        self._stopped = True
        if self._reconnect is not None:
            self._reconnect.cancel()
            self._reconnect = None
        attempt, self._attempt = self._attempt, None
        handle, self._handle = self._handle, None
        if attempt is not None and not attempt.done():
            attempt.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await attempt
        if handle is not None:
            with contextlib.suppress(*_TRANSPORT_ERRORS):
                await handle.close()
        self._opened.clear()
        self._set_phase(Phase.CLOSED)
        LOGGER.info("Connection to %s closed", self.url)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    async def _run(self) -> None:
        try:
            websocket = await self._connector(self.url)
        except _TRANSPORT_ERRORS as exc:
            self._on_error(exc)
            self._on_close()
            return

        self._handle = websocket
        self._on_open()
        try:
            async for raw in websocket:
                self._on_message(raw)
        except _TRANSPORT_ERRORS as exc:
            # a clean close ends the iteration without raising
            self._on_error(exc)
        except Exception as exc:
            LOGGER.exception("Read loop for %s failed", self.url)
            self._on_error(exc)
            with contextlib.suppress(*_TRANSPORT_ERRORS):
                await websocket.close()
        finally:
            self._on_close()

    def _on_open(self) -> None:
        self._set_phase(Phase.OPEN)
        self._opened.set()
        self.state.error = None
        LOGGER.info("Connected to %s", self.url)
        self._notify("Connected to appliance server", Severity.SUCCESS)

    def _on_message(self, raw: str | bytes) -> None:
        LOGGER.debug("Raw message received: %r", raw)
        try:
            envelope = parse_inbound(raw)
        except ParseError as exc:
            LOGGER.warning("Dropping inbound frame: %s", exc)
            self._notify("Error parsing server message!", Severity.ERROR)
            return
        try:
            self._on_envelope(envelope)
        except Exception:
            LOGGER.exception("Failed to apply inbound frame %r", envelope)
            self._notify("Error parsing server message!", Severity.ERROR)

    def _on_error(self, exc: BaseException) -> None:
        LOGGER.error("Connection error: %s", exc)
        self.state.error = "Connection failed!"
        self._notify("Connection error! Retrying...", Severity.ERROR)

    def _on_close(self) -> None:
        self._handle = None
        self._opened.clear()
        self._set_phase(Phase.CLOSED)
        if self._stopped:
            return
        LOGGER.warning("Disconnected from %s; reconnecting in %.1fs", self.url, self.reconnect_delay)
        self.state.error = "Disconnected. Reconnecting..."
        self._notify("Reconnecting to appliance server...", Severity.WARNING)
        loop = asyncio.get_running_loop()
        self._reconnect = loop.call_later(self.reconnect_delay, self._fire_reconnect)

    def _fire_reconnect(self) -> None:
        self._reconnect = None
        self.start()

    def _set_phase(self, phase: Phase) -> None:
        self._phase = phase
        self.state.phase = phase
