"""Single source of truth for the reported appliance state."""

from __future__ import annotations

import logging

from ..runtime.notifications import NotifyCallback
from ..services.schemas import InboundEnvelope, Severity
from .app_state import AppState

LOGGER = logging.getLogger(__name__)


class StateReducer:
    """Apply inbound envelopes and announce real transitions only."""

    def __init__(self, state: AppState, notify: NotifyCallback) -> None:
        self.state = state
        self._notify = notify

    @property
    def current(self) -> str:
        """Return the last reported device state."""
        return self.state.device_state

    def apply(self, envelope: InboundEnvelope) -> bool:
        """Apply an envelope; return True when the state changed."""
        value = envelope.command
        if value is None or value == self.state.device_state:
            return False
        previous = self.state.device_state
        self.state.device_state = value
        LOGGER.info("Device state %s -> %s", previous, value)
        self._notify(f"Device is now {value}", Severity.INFO)
        return True
