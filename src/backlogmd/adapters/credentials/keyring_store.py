"""
Keyring Credential Store - API key in the operating system keychain.

Uses the ``keyring`` library, which picks the platform backend (macOS
Keychain, Windows Credential Locker, Secret Service on Linux).
"""

import logging

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from backlogmd.core.exceptions import CredentialStoreError
from backlogmd.core.ports.credential_store import CredentialStorePort


DEFAULT_SERVICE = "com.backlogmd.exporter"
DEFAULT_ACCOUNT = "backlog-api-key"


class KeyringCredentialStore(CredentialStorePort):
    """Single secret kept under a fixed service/account pair."""

    def __init__(self, service: str = DEFAULT_SERVICE, account: str = DEFAULT_ACCOUNT):
        self.service = service
        self.account = account
        self.logger = logging.getLogger("KeyringCredentialStore")

    @property
    def name(self) -> str:
        return "Keyring"

    def save(self, secret: str) -> None:
        try:
            keyring.set_password(self.service, self.account, secret.strip())
        except KeyringError as e:
            raise CredentialStoreError("failed to save API key to keyring", cause=e) from e
        self.logger.info(f"Saved API key to keyring service {self.service}")

    def load(self) -> str | None:
        try:
            value = keyring.get_password(self.service, self.account)
        except KeyringError as e:
            raise CredentialStoreError("failed to load API key from keyring", cause=e) from e

        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None

    def delete(self) -> None:
        try:
            keyring.delete_password(self.service, self.account)
        except PasswordDeleteError:
            # Nothing stored
            self.logger.debug("No API key in keyring to delete")
        except KeyringError as e:
            raise CredentialStoreError("failed to delete API key from keyring", cause=e) from e
