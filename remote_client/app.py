"""Desktop entry point: settings, logging, then the Qt event loop."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import QApplication

from .config.store import load_settings
from .logger import configure_logging
from .ui.main_window import RemoteMainWindow

LOGGER = logging.getLogger(__name__)


def run(settings_file: Optional[Path] = None) -> int:
    """Open the control window and block until it is closed."""
    settings = load_settings(settings_file)
    configure_logging(settings.logging)
    LOGGER.info("Starting remote control for %s", settings.server.url)

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("remote-client")
    window = RemoteMainWindow(settings)
    window.show()
    return app.exec()
