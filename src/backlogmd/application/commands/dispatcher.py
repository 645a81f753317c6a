"""
Command Dispatcher - Run commands on worker threads.

Retry backoff sleeps happen inside a command. Running every command on a
pool thread keeps them off the caller's thread, so a shell stays
responsive while a request is backing off.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from backlogmd.core.exceptions import ValidationError

from .backlog import COMMAND_NAMES, BacklogCommands
from .envelope import CommandResponse


class CommandDispatcher:
    """
    Submit commands by name and get a Future of their CommandResponse.

    Example:
        >>> with CommandDispatcher(commands) as dispatcher:
        ...     future = dispatcher.submit("issue_get_detail", "PROJ-1")
        ...     response = future.result()
    """

    DEFAULT_MAX_WORKERS = 4

    def __init__(self, commands: BacklogCommands, max_workers: int = DEFAULT_MAX_WORKERS):
        self.commands = commands
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="backlogmd-command",
        )
        self.logger = logging.getLogger("CommandDispatcher")

    def submit(self, command: str, *args: Any, **kwargs: Any) -> Future[CommandResponse]:
        """
        Schedule ``command`` on the pool.

        Unknown command names resolve to a VALIDATION failure response.
        """
        if command not in COMMAND_NAMES:
            future: Future[CommandResponse] = Future()
            future.set_result(
                CommandResponse.failure(ValidationError(f"unknown command: {command}"))
            )
            return future

        self.logger.debug(f"Dispatching {command}")
        handler = getattr(self.commands, command)
        return self._executor.submit(handler, *args, **kwargs)

    def call(self, command: str, *args: Any, **kwargs: Any) -> CommandResponse:
        """Submit ``command`` and wait for its response."""
        return self.submit(command, *args, **kwargs).result()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> CommandDispatcher:
        return self

    def __exit__(self, *args: object) -> None:
        self.shutdown()
