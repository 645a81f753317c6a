"""
Commands - The request/response surface exposed to shells.
"""

from .backlog import COMMAND_NAMES, BacklogCommands, SourceFactory
from .dispatcher import CommandDispatcher
from .envelope import CommandResponse, ErrorEnvelope, run_command, serialize


__all__ = [
    "COMMAND_NAMES",
    "BacklogCommands",
    "CommandDispatcher",
    "CommandResponse",
    "ErrorEnvelope",
    "SourceFactory",
    "run_command",
    "serialize",
]
