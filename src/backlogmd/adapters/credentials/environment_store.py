"""
Environment Credential Store - Read-only API key from an environment variable.

Intended for headless use (CI, containers) where no keychain is available.
"""

import os

from backlogmd.core.exceptions import CredentialStoreError
from backlogmd.core.ports.credential_store import CredentialStorePort


DEFAULT_VARIABLE = "BACKLOGMD_API_KEY"


class EnvironmentCredentialStore(CredentialStorePort):
    """Reads the API key from ``BACKLOGMD_API_KEY`` (or a custom variable)."""

    def __init__(self, variable: str = DEFAULT_VARIABLE):
        self.variable = variable

    @property
    def name(self) -> str:
        return f"Environment ({self.variable})"

    def save(self, secret: str) -> None:
        raise CredentialStoreError(
            f"environment credential store is read-only; set {self.variable} instead"
        )

    def load(self) -> str | None:
        value = os.environ.get(self.variable, "").strip()
        return value or None

    def delete(self) -> None:
        raise CredentialStoreError(
            f"environment credential store is read-only; unset {self.variable} instead"
        )
