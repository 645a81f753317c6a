"""
Outcome - Classified result of a single remote attempt.

An Outcome is a closed set of variants. Each variant carries an
``OutcomeKind`` tag so that branch points can dispatch on the tag through
tables that cover every kind, instead of re-interpreting raw status codes.

    classify(200, body)  -> Success(body)
    classify(401)        -> AuthInvalid()
    classify(403)        -> Forbidden()
    classify(404)        -> NotFound()
    classify(429)        -> RateLimited()
    classify(5xx)        -> ServerError(detail)
    classify(other)      -> UnknownStatus(detail)

Transport-level failures never reach ``classify``; the HTTP client builds
``TransportTransient`` or ``TransportFatal`` directly.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from .exceptions import (
    AccessDeniedError,
    AuthenticationError,
    NetworkError,
    RateLimitError,
    ResourceNotFoundError,
    TrackerError,
    UnclassifiedError,
)


class OutcomeKind(Enum):
    """Tag of an Outcome variant."""

    SUCCESS = "success"
    AUTH_INVALID = "auth_invalid"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    UNKNOWN_STATUS = "unknown_status"
    TRANSPORT_TRANSIENT = "transport_transient"
    TRANSPORT_FATAL = "transport_fatal"


# Kinds the retry loop is allowed to repeat
RETRYABLE_KINDS = frozenset({OutcomeKind.RATE_LIMITED, OutcomeKind.TRANSPORT_TRANSIENT})


@dataclass(frozen=True)
class Outcome:
    """Base class for all outcome variants; only the variants are instantiated."""

    kind: ClassVar[OutcomeKind]

    def __post_init__(self) -> None:
        if type(self) is Outcome:
            raise TypeError("Outcome is abstract; use one of its variants")

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def is_retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS


@dataclass(frozen=True)
class Success(Outcome):
    body: str = ""

    kind = OutcomeKind.SUCCESS


@dataclass(frozen=True)
class AuthInvalid(Outcome):
    kind = OutcomeKind.AUTH_INVALID


@dataclass(frozen=True)
class Forbidden(Outcome):
    kind = OutcomeKind.FORBIDDEN


@dataclass(frozen=True)
class RateLimited(Outcome):
    kind = OutcomeKind.RATE_LIMITED


@dataclass(frozen=True)
class NotFound(Outcome):
    kind = OutcomeKind.NOT_FOUND


@dataclass(frozen=True)
class ServerError(Outcome):
    detail: str = ""

    kind = OutcomeKind.SERVER_ERROR


@dataclass(frozen=True)
class UnknownStatus(Outcome):
    detail: str = ""

    kind = OutcomeKind.UNKNOWN_STATUS


@dataclass(frozen=True)
class TransportTransient(Outcome):
    """Connect failure or timeout."""

    detail: str = ""

    kind = OutcomeKind.TRANSPORT_TRANSIENT


@dataclass(frozen=True)
class TransportFatal(Outcome):
    """Any other transport failure; never retried."""

    detail: str = ""

    kind = OutcomeKind.TRANSPORT_FATAL


def classify(status_code: int, body: str = "") -> Outcome:
    """
    Map an HTTP status code to an Outcome.

    Total and deterministic over all integers.

    Args:
        status_code: HTTP status code of the response
        body: Response body, kept only for successful responses

    Returns:
        The classified Outcome
    """
    if status_code == 200:
        return Success(body=body)
    if status_code == 401:
        return AuthInvalid()
    if status_code == 403:
        return Forbidden()
    if status_code == 404:
        return NotFound()
    if status_code == 429:
        return RateLimited()
    if 500 <= status_code <= 599:
        return ServerError(detail=f"server error: {status_code}")
    return UnknownStatus(detail=f"unexpected status: {status_code}")


# =============================================================================
# Outcome -> Error
# =============================================================================


def _detail(outcome: Outcome) -> str:
    return getattr(outcome, "detail", "") or outcome.kind.value


ERROR_FACTORIES: dict[OutcomeKind, Callable[[Outcome, str | None], TrackerError]] = {
    OutcomeKind.AUTH_INVALID: lambda o, key: AuthenticationError(
        "authentication failed", issue_key=key
    ),
    OutcomeKind.FORBIDDEN: lambda o, key: AccessDeniedError("permission denied", issue_key=key),
    OutcomeKind.RATE_LIMITED: lambda o, key: RateLimitError("rate limited", issue_key=key),
    OutcomeKind.NOT_FOUND: lambda o, key: ResourceNotFoundError("not found", issue_key=key),
    OutcomeKind.SERVER_ERROR: lambda o, key: NetworkError(
        f"network error: {_detail(o)}", issue_key=key
    ),
    OutcomeKind.TRANSPORT_TRANSIENT: lambda o, key: NetworkError(
        f"network error: {_detail(o)}", issue_key=key
    ),
    OutcomeKind.UNKNOWN_STATUS: lambda o, key: UnclassifiedError(
        f"unknown error: {_detail(o)}", issue_key=key
    ),
    OutcomeKind.TRANSPORT_FATAL: lambda o, key: UnclassifiedError(
        f"unknown error: {_detail(o)}", issue_key=key
    ),
}


def to_error(outcome: Outcome, issue_key: str | None = None) -> TrackerError:
    """
    Build the domain error for a failed Outcome.

    Raises:
        ValueError: If called with a Success outcome
    """
    if outcome.is_success:
        raise ValueError("a successful outcome has no error")
    return ERROR_FACTORIES[outcome.kind](outcome, issue_key)


__all__ = [
    "ERROR_FACTORIES",
    "RETRYABLE_KINDS",
    "AuthInvalid",
    "Forbidden",
    "NotFound",
    "Outcome",
    "OutcomeKind",
    "RateLimited",
    "ServerError",
    "Success",
    "TransportFatal",
    "TransportTransient",
    "UnknownStatus",
    "classify",
    "to_error",
]
