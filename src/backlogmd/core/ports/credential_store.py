"""
Credential Store Port - Abstract interface for secret storage.

Implementations:
- KeyringCredentialStore: OS keychain via the keyring library
- EnvironmentCredentialStore: Read-only, from an environment variable
"""

from abc import ABC, abstractmethod


class CredentialStorePort(ABC):
    """
    Holds a single secret string under a fixed service/account identifier.

    ``load`` returns ``None`` both when nothing is stored and when the
    stored value is blank.

    All methods raise ``CredentialStoreError`` when the backend fails.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def save(self, secret: str) -> None:
        """Store the secret, trimmed."""
        ...

    @abstractmethod
    def load(self) -> str | None:
        """Load the secret, or ``None`` when not configured."""
        ...

    @abstractmethod
    def delete(self) -> None:
        """Remove the secret. Deleting a missing secret is not an error."""
        ...
