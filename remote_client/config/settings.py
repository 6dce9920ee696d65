"""Local configuration models for the remote client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


@dataclass(slots=True)
class ServerSettings:
    """Connection settings for the appliance endpoint."""

    url: str = "wss://nodebackend-y9bx.onrender.com"
    reconnect_delay: float = 3.0


@dataclass(slots=True)
class VoiceSettings:
    """Speech capture and recognition settings."""

    enabled: bool = True
    model: str = "tiny.en"
    device: str = "cpu"
    compute_type: str = "int8"
    language: str = "en"
    input_device: str | None = None
    sample_rate: int = 16_000
    max_seconds: float = 6.0
    trailing_silence_ms: int = 800
    vad_aggressiveness: int = 2


@dataclass(slots=True)
class NotificationSettings:
    """Toast display settings."""

    toast_ms: int = 3000
    max_visible: int = 4


@dataclass(slots=True)
class LoggingSettings:
    """Diagnostic logging settings."""

    level: LogLevel = "INFO"
    json_file: bool = True
    rotate_mb: int = 5
    retention_days: int = 7


@dataclass(slots=True)
class AppSettings:
    """Full set of settings for the remote client."""

    server: ServerSettings = field(default_factory=ServerSettings)
    voice: VoiceSettings = field(default_factory=VoiceSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
