"""
Context logging - Named loggers that carry fixed context fields.

Context fields travel as ``extra`` on each record, so the JSON formatter
reports them under ``context`` and the text formatter can append them.
"""

from __future__ import annotations

import logging
from typing import Any


class ContextLogger:
    """
    Logger wrapper that attaches fixed context fields to every record.

    Example:
        >>> log = get_logger("commands", command="issue_get_detail")
        >>> log.bind(issue_key="PROJ-1").info("fetching")
    """

    def __init__(self, name: str, context: dict[str, Any] | None = None):
        self._logger = logging.getLogger(name)
        self._context = dict(context or {})

    def bind(self, **context: Any) -> ContextLogger:
        """New logger with ``context`` merged into the current context."""
        return ContextLogger(self._logger.name, {**self._context, **context})

    def _log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        extra = {**self._context, **kwargs.pop("extra", {})}
        self._logger.log(level, msg, *args, extra=extra, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, *args, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, msg, *args, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, *args, **kwargs)


def get_logger(name: str, **context: Any) -> ContextLogger:
    return ContextLogger(name, context)


__all__ = ["ContextLogger", "get_logger"]
