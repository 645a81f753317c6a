"""
Credential Stores - Where the Backlog API key lives.

- KeyringCredentialStore: OS keychain (default)
- EnvironmentCredentialStore: read-only ``BACKLOGMD_API_KEY``
"""

from backlogmd.core.ports.config_provider import CredentialBackend
from backlogmd.core.ports.credential_store import CredentialStorePort

from .environment_store import EnvironmentCredentialStore
from .keyring_store import KeyringCredentialStore


def create_credential_store(backend: CredentialBackend) -> CredentialStorePort:
    """Build the credential store for the configured backend."""
    if backend == CredentialBackend.ENVIRONMENT:
        return EnvironmentCredentialStore()
    return KeyringCredentialStore()


__all__ = [
    "EnvironmentCredentialStore",
    "KeyringCredentialStore",
    "create_credential_store",
]
