"""
Command responses - The uniform shape every command returns.

Nothing but ``CommandResponse`` crosses the command boundary: domain errors
become an ``ErrorEnvelope`` and unexpected exceptions become ``UNKNOWN``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from backlogmd.core.exceptions import BacklogMdError
from backlogmd.core.logging import get_logger


@dataclass(frozen=True)
class ErrorEnvelope:
    """``{code, message, recoverable}`` as seen by the caller."""

    code: str
    message: str
    recoverable: bool

    @classmethod
    def from_exception(cls, error: BaseException) -> ErrorEnvelope:
        if isinstance(error, BacklogMdError):
            return cls(code=error.code, message=str(error), recoverable=error.recoverable)
        return cls(code="UNKNOWN", message=str(error) or type(error).__name__, recoverable=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "recoverable": self.recoverable,
        }


@dataclass(frozen=True)
class CommandResponse:
    """Result of one command: ``data`` on success, ``error`` otherwise."""

    ok: bool
    data: Any = None
    error: ErrorEnvelope | None = None

    @classmethod
    def success(cls, data: Any = None) -> CommandResponse:
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: BaseException) -> CommandResponse:
        return cls(ok=False, error=ErrorEnvelope.from_exception(error))

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "data": self.data,
            "error": self.error.to_dict() if self.error else None,
        }


def serialize(value: Any) -> Any:
    """Convert entities (and lists of them) to plain camelCase data."""
    if isinstance(value, list):
        return [serialize(item) for item in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


def run_command(name: str, action: Callable[[], Any]) -> CommandResponse:
    """
    Run ``action`` and wrap its result or error in a CommandResponse.

    Domain errors are expected outcomes and logged at warning level;
    anything else is logged with its traceback and reported as UNKNOWN.
    Records carry the command name as context.
    """
    logger = get_logger("commands", command=name)
    try:
        result = action()
    except BacklogMdError as e:
        logger.warning(f"{name} failed: [{e.code}] {e}", extra={"error_code": e.code})
        return CommandResponse.failure(e)
    except Exception as e:
        logger.exception(f"{name} failed unexpectedly")
        return CommandResponse.failure(e)

    return CommandResponse.success(serialize(result))
