"""
Exceptions - Centralized exception hierarchy for backlogmd.

Every error carries an envelope ``code`` and a ``recoverable`` flag.
Recoverable means that retrying the same action later may succeed.

Hierarchy:
    BacklogMdError
    ├── TrackerError
    │   ├── AuthenticationError
    │   ├── AccessDeniedError
    │   ├── RateLimitError
    │   ├── ResourceNotFoundError
    │   ├── NetworkError
    │   └── UnclassifiedError
    ├── CredentialStoreError
    ├── ValidationError
    └── StorageError
"""

from __future__ import annotations


class BacklogMdError(Exception):
    """Base class for all backlogmd errors."""

    code: str = "UNKNOWN"
    recoverable: bool = False

    def __init__(self, message: str, cause: BaseException | None = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


# =============================================================================
# Tracker Errors
# =============================================================================


class TrackerError(BacklogMdError):
    """An error reported by, or while talking to, the remote issue tracker."""

    def __init__(
        self,
        message: str,
        issue_key: str | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, cause=cause)
        self.issue_key = issue_key


class AuthenticationError(TrackerError):
    """The API key was rejected (HTTP 401)."""

    code = "AUTH_INVALID"
    recoverable = True


class AccessDeniedError(TrackerError):
    """The API key is valid but lacks permission (HTTP 403)."""

    code = "FORBIDDEN"
    recoverable = True


class RateLimitError(TrackerError):
    """The tracker throttled the request (HTTP 429)."""

    code = "RATE_LIMIT"
    recoverable = True


class ResourceNotFoundError(TrackerError):
    """The requested issue or resource does not exist (HTTP 404)."""

    code = "NOT_FOUND"
    recoverable = True


class NetworkError(TrackerError):
    """Connect failure, timeout or server-side (5xx) failure."""

    code = "NETWORK"
    recoverable = True


class UnclassifiedError(TrackerError):
    """Unexpected status, fatal transport failure or undecodable payload."""

    code = "UNKNOWN"
    recoverable = False


# =============================================================================
# Local Errors
# =============================================================================


class CredentialStoreError(BacklogMdError):
    """The credential store could not be read or written."""

    code = "CREDENTIAL_STORE"
    recoverable = True


class ValidationError(BacklogMdError):
    """The request itself is invalid."""

    code = "VALIDATION"
    recoverable = False


class StorageError(BacklogMdError):
    """The local cache or the file system failed."""

    code = "STORAGE"
    recoverable = False


# Errors that allow the orchestrator to consult the local cache
FALLBACK_ELIGIBLE_ERRORS: tuple[type[TrackerError], ...] = (NetworkError, RateLimitError)


__all__ = [
    "FALLBACK_ELIGIBLE_ERRORS",
    "AccessDeniedError",
    "AuthenticationError",
    "BacklogMdError",
    "CredentialStoreError",
    "NetworkError",
    "RateLimitError",
    "ResourceNotFoundError",
    "StorageError",
    "TrackerError",
    "UnclassifiedError",
    "ValidationError",
]
