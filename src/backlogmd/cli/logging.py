"""
Logging - Structured logging setup for the CLI.

Two output formats:
- text: human-readable, optionally colored, for terminals
- json: one JSON object per line, for log aggregation

Components log through plain named loggers
(``logging.getLogger("RetryingHttpClient")``); this module only decides
where and how records are written.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any


# Attributes every LogRecord has; anything else was passed via ``extra``
_STANDARD_RECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

NOISY_LOGGERS = ("urllib3", "requests", "keyring")


def _context_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
    }


def _iso_timestamp(record: logging.LogRecord) -> str:
    created = datetime.fromtimestamp(record.created, tz=timezone.utc)
    return created.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(record.msecs):03d}Z"


class JSONFormatter(logging.Formatter):
    """
    Format records as single-line JSON.

    Output fields: timestamp, level, logger, message, plus optional
    location, exception and context (fields passed via ``extra``).
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
        include_location: bool = False,
        static_fields: dict[str, Any] | None = None,
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger
        self.include_location = include_location
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {}

        if self.include_timestamp:
            entry["timestamp"] = _iso_timestamp(record)
        if self.include_level:
            entry["level"] = record.levelname
        if self.include_logger:
            entry["logger"] = record.name

        entry["message"] = record.getMessage()
        entry.update(self.static_fields)

        if self.include_location:
            entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
            }

        context = _context_fields(record)
        if context:
            entry["context"] = context

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter with optional ANSI colors."""

    LEVEL_COLORS = {
        "DEBUG": "\033[2m",
        "INFO": "\033[36m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool | None = None, include_context: bool = False):
        super().__init__(datefmt="%H:%M:%S")
        if use_colors is None:
            use_colors = sys.stderr.isatty()
        self.use_colors = use_colors
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors:
            level = f"{self.LEVEL_COLORS.get(level, '')}{level:<8}{self.RESET}"
        else:
            level = f"{level:<8}"

        line = f"{self.formatTime(record, self.datefmt)} {level} {record.name}: {record.getMessage()}"

        if self.include_context:
            context = _context_fields(record)
            if context:
                line += " " + " ".join(f"{key}={value}" for key, value in context.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: int | str = logging.INFO,
    log_format: str = "text",
    log_file: str | None = None,
    static_fields: dict[str, Any] | None = None,
) -> None:
    """
    Configure root logging for the CLI.

    Replaces any existing root handlers with one stderr handler, plus a
    file handler when ``log_file`` is given. File output never uses colors.

    Args:
        level: Log level (number or name)
        log_format: "text" or "json"
        log_file: Optional path to also write logs to
        static_fields: Fields added to every JSON record
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    def make_formatter(for_file: bool) -> logging.Formatter:
        if log_format == "json":
            return JSONFormatter(static_fields=static_fields)
        return TextFormatter(use_colors=False if for_file else None, include_context=True)

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    root.setLevel(level)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(make_formatter(for_file=False))
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(make_formatter(for_file=True))
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
