"""Persistence helpers for remote client settings."""

from __future__ import annotations

import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, TypeVar

from .paths import config_dir
from .settings import AppSettings, LoggingSettings, NotificationSettings, ServerSettings, VoiceSettings


_T = TypeVar("_T")


def settings_path() -> Path:
    """Primary path for persisted settings."""
    return config_dir() / "remote_settings.json"


def _build(cls: type[_T], payload: Any) -> _T:
    """Instantiate a settings dataclass, dropping keys it does not know."""
    if not isinstance(payload, dict):
        return cls()
    known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    return cls(**{key: value for key, value in payload.items() if key in known})


def load_settings(path: Path | None = None) -> AppSettings:
    """Load settings from disk (defaults when missing)."""
    path = path or settings_path()
    if not path.exists():
        return AppSettings()

    raw_text = path.read_text(encoding="utf-8").lstrip("\ufeff")
    data = json.loads(raw_text) if raw_text.strip() else {}

    return AppSettings(
        server=_build(ServerSettings, data.get("server")),
        voice=_build(VoiceSettings, data.get("voice")),
        notifications=_build(NotificationSettings, data.get("notifications")),
        logging=_build(LoggingSettings, data.get("logging")),
    )


def save_settings(settings: AppSettings, path: Path | None = None) -> Path:
    """Persist settings to disk and return the written path."""
    path = path or settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
    return path
