"""Desktop remote control for a single WebSocket-connected appliance."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("remote-client")
except PackageNotFoundError:  # running from a source checkout
    __version__ = "0.0.0"

__all__ = ["__version__", "run"]


def run(*args, **kwargs):
    """Launch the desktop window; Qt is only imported when called."""
    from .app import run as _run

    return _run(*args, **kwargs)
