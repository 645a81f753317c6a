"""
Exit Codes - Process exit codes for the backlogmd CLI.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """
    Exit codes returned by ``backlogmd``.

    Scripts can branch on these without parsing output.
    """

    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    CONNECTION_ERROR = 3
    AUTH_ERROR = 4
    NOT_FOUND = 5
    VALIDATION_ERROR = 6
    STORAGE_ERROR = 7
    SIGINT = 130

    @classmethod
    def from_error_code(cls, code: str) -> "ExitCode":
        """Map an error envelope code to an exit code."""
        return _ENVELOPE_EXIT_CODES.get(code, cls.ERROR)


_ENVELOPE_EXIT_CODES = {
    "AUTH_INVALID": ExitCode.AUTH_ERROR,
    "FORBIDDEN": ExitCode.AUTH_ERROR,
    "CREDENTIAL_STORE": ExitCode.AUTH_ERROR,
    "NETWORK": ExitCode.CONNECTION_ERROR,
    "RATE_LIMIT": ExitCode.CONNECTION_ERROR,
    "NOT_FOUND": ExitCode.NOT_FOUND,
    "VALIDATION": ExitCode.VALIDATION_ERROR,
    "STORAGE": ExitCode.STORAGE_ERROR,
}
