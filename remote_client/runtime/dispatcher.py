"""User-facing command entry point."""

from __future__ import annotations

import logging

from ..services.connection import ConnectionManager
from ..services.errors import ConnectionFailedError, NotConnectedError
from ..services.schemas import Command, Severity
from ..state.app_state import AppState
from .notifications import NotifyCallback

LOGGER = logging.getLogger(__name__)

NOT_CONNECTED_MESSAGE = "Not connected to appliance server!"


class CommandDispatcher:
    """Send commands only over a live connection; drop them otherwise."""

    def __init__(self, connection: ConnectionManager, state: AppState, notify: NotifyCallback) -> None:
        self._connection = connection
        self.state = state
        self._notify = notify

    async def dispatch(self, command: Command) -> bool:
        """Send ``command``; return True when it went out."""
        if not self._connection.is_open:
            self._reject(command)
            return False
        try:
            await self._connection.send(command)
        except NotConnectedError:
            self._reject(command)
            return False
        except ConnectionFailedError as exc:
            LOGGER.warning("Sending %s failed: %s", command.value, exc)
            self.state.error = "Connection failed!"
            self._notify("Connection lost while sending command!", Severity.ERROR)
            return False
        self._notify(f"Command sent: {command.value}", Severity.SUCCESS)
        self.state.error = None
        return True

    async def turn_on(self) -> bool:
        return await self.dispatch(Command.ON)

    async def turn_off(self) -> bool:
        return await self.dispatch(Command.OFF)

    def _reject(self, command: Command) -> None:
        LOGGER.error("Dropping %s: connection is %s", command.value, self._connection.phase.value)
        self.state.error = NOT_CONNECTED_MESSAGE
        self._notify(NOT_CONNECTED_MESSAGE, Severity.ERROR)
