"""Logging setup: console output plus rotating JSON-lines files."""

from __future__ import annotations

import json
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from .config.paths import logs_dir
from .config.settings import LoggingSettings

_CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_MARKER = "_remote_client_handler"


class JsonFormatter(logging.Formatter):
    """Serialize log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "category": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record, ensure_ascii=False)


class SizeAndTimeRotatingFileHandler(TimedRotatingFileHandler):
    """Rotate on whichever comes first: midnight or ``max_bytes``."""

    def __init__(
        self,
        filename: str | Path,
        max_bytes: int = 0,
        backup_count: int = 0,
        when: str = "midnight",
        interval: int = 1,
        encoding: str | None = "utf-8",
        delay: bool = False,
    ) -> None:
        self.maxBytes = max_bytes
        super().__init__(
            str(filename),
            when=when,
            interval=interval,
            backupCount=backup_count,
            encoding=encoding,
            delay=delay,
        )

    def shouldRollover(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if self.maxBytes > 0:
            if self.stream is None:  # pragma: no cover
                self.stream = self._open()
            msg = f"{self.format(record)}\n"
            if (self.stream.tell() + len(msg.encode(self.encoding or "utf-8"))) >= self.maxBytes:
                return True
        return super().shouldRollover(record)


def configure_logging(settings: LoggingSettings, *, log_dir: Path | None = None) -> logging.Logger:
    """Attach handlers to the package logger; safe to call repeatedly."""
    logger = logging.getLogger("remote_client")
    logger.setLevel(settings.level)
    for handler in list(logger.handlers):
        if getattr(handler, _MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    setattr(console, _MARKER, True)
    logger.addHandler(console)

    if settings.json_file:
        target = (log_dir or logs_dir()) / "remote_client.jsonl"
        file_handler = SizeAndTimeRotatingFileHandler(
            target,
            max_bytes=settings.rotate_mb * 1024 * 1024,
            backup_count=settings.retention_days,
        )
        file_handler.setFormatter(JsonFormatter())
        setattr(file_handler, _MARKER, True)
        logger.addHandler(file_handler)

    return logger
