"""Filesystem helpers for the remote client."""

from __future__ import annotations

import os
from pathlib import Path


def app_home() -> Path:
    """Return the folder holding local settings and logs."""
    override = os.environ.get("REMOTE_CLIENT_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".remote_client"


def config_dir() -> Path:
    """Directory storing local configuration."""
    root = app_home() / "config"
    root.mkdir(parents=True, exist_ok=True)
    return root


def logs_dir() -> Path:
    """Directory storing rotated log files."""
    root = app_home() / "logs"
    root.mkdir(parents=True, exist_ok=True)
    return root
