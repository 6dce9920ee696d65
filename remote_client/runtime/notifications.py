"""Notifier protocol and the consecutive-duplicate gate."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from ..services.schemas import Severity

LOGGER = logging.getLogger(__name__)

NotifyCallback = Callable[[str, Severity], None]

_LOG_LEVELS = {
    Severity.SUCCESS: logging.INFO,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class Notifier(Protocol):
    """Displays short-lived messages tagged with a severity."""

    def display(self, message: str, severity: Severity) -> None: ...


class DedupGate:
    """Suppress a notification identical to the one displayed just before.

    The comparison is on the message text only and is shared by every source,
    so the same text with a different severity is still dropped.
    """

    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier
        self._last_message: Optional[str] = None

    @property
    def last_message(self) -> Optional[str]:
        """Return the most recently displayed message."""
        return self._last_message

    def notify(self, message: str, severity: Severity) -> bool:
        """Forward the message unless it repeats the previous one."""
        if message == self._last_message:
            LOGGER.debug("Suppressed duplicate notification: %s", message)
            return False
        self._last_message = message
        LOGGER.log(_LOG_LEVELS.get(severity, logging.INFO), "[%s] %s", severity.value, message)
        self._notifier.display(message, severity)
        return True
