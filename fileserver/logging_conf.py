"""Logging configuration for the file server.

Two line formats are available:
- ``text``: ``YYYY/MM/DD HH:MM:SS <message>``, the format operators grep.
- ``json``: one JSON object per line with any structured extras attached.

Records go to stdout and, when a log path is given, are duplicated to an
appending file. setup_logging() is idempotent: handlers are tracked by name
so repeated calls don't attach duplicates.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from logging import Handler, LogRecord
from pathlib import Path
from typing import Any

from .errors import ConfigError

_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CONSOLE_HANDLER_NAME = "fileserver.console"
FILE_HANDLER_NAME = "fileserver.file"

TEXT_FORMAT = "%(asctime)s %(message)s"
TEXT_DATEFMT = "%Y/%m/%d %H:%M:%S"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
    "asctime",
}


class TextFormatter(logging.Formatter):
    """Timestamp-prefixed plain text, one record per line."""

    def __init__(self) -> None:
        super().__init__(fmt=TEXT_FORMAT, datefmt=TEXT_DATEFMT)


class JsonFormatter(logging.Formatter):
    """A minimal JSON formatter.

    - Produces one JSON object per line.
    - Includes common fields (ts, level, logger, message) and any structured
      extras provided via `logger.info("msg", extra={...})`.
    """

    def format(self, record: LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED:
                continue
            # Do not overwrite core keys if present
            if key not in payload:
                payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def _make_formatter(fmt: str) -> logging.Formatter:
    if fmt == "json":
        return JsonFormatter()
    return TextFormatter()


def _make_stream_handler(level: int, fmt: str) -> Handler:
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(_make_formatter(fmt))
    return handler


def _make_file_handler(log_path: str | Path, level: int, fmt: str) -> Handler:
    """Open ``log_path`` for appending, creating its directory first.

    Raises:
        ConfigError: if the directory or the file cannot be created.
    """
    path = Path(log_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"cannot create log directory {path.parent}: {e}") from e
    try:
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot open log file {path}: {e}") from e
    handler.set_name(FILE_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(_make_formatter(fmt))
    return handler


def setup_logging(
    level: str | int = _DEFAULT_LEVEL,
    *,
    log_path: str | Path | None = None,
    fmt: str = "text",
) -> None:
    """Configure the root and uvicorn loggers.

    The console handler is attached before the file handler so a failure to
    open the log file can still be reported on stdout.

    Raises:
        ConfigError: if the log file or its directory cannot be created.
    """
    root = logging.getLogger()

    # Normalize level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root.setLevel(level)
    attached = {h.get_name() for h in root.handlers}
    if CONSOLE_HANDLER_NAME not in attached:
        root.addHandler(_make_stream_handler(level, fmt))
    if log_path and FILE_HANDLER_NAME not in attached:
        root.addHandler(_make_file_handler(log_path, level, fmt))

    # Align common server loggers to the same handlers/level
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.setLevel(level)
        lg.propagate = True
        for h in list(lg.handlers):
            lg.removeHandler(h)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger.

    Usage: logger = get_logger(__name__)
    """
    return logging.getLogger(name if name else __name__)
