"""Data schemas exchanged with the appliance endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Command(str, Enum):
    """Outbound state-change intent."""

    ON = "ON"
    OFF = "OFF"


class DeviceState(str, Enum):
    """Reportable appliance states; UNKNOWN until the first report."""

    ON = "ON"
    OFF = "OFF"
    UNKNOWN = "UNKNOWN"


class Phase(str, Enum):
    """Lifecycle stage of the current connection."""

    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class Severity(str, Enum):
    """Notification severity."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class InboundEnvelope:
    """Parsed inbound frame carrying an optional device state."""

    command: Optional[str] = None


@dataclass(slots=True, frozen=True)
class Unrecognized:
    """Transcript that did not map to a known command."""

    transcript: str
