"""Shared state model for the remote client."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config.settings import AppSettings
from ..runtime.intent import SUGGESTED_COMMANDS
from ..services.schemas import DeviceState, Phase


@dataclass(slots=True)
class AppState:
    """Display state read by the presentation layer.

    Mutated only from the controller's event loop.
    """

    settings: AppSettings = field(default_factory=AppSettings)
    phase: Phase = Phase.IDLE
    device_state: str = DeviceState.UNKNOWN.value
    error: str | None = None
    listening: bool = False
    transcript: str = ""
    suggested_commands: tuple[str, ...] = SUGGESTED_COMMANDS
