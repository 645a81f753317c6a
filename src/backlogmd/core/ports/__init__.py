"""
Ports - Abstract interfaces for external dependencies.

Ports define the contracts that adapters must implement.
This enables dependency inversion and easy testing.
"""

from .config_provider import (
    AppConfig,
    ConfigProviderPort,
    CredentialBackend,
    HttpConfig,
    default_data_dir,
)
from .credential_store import CredentialStorePort
from .issue_source import IssueSourcePort
from .local_cache import LocalCachePort, SettingsStorePort


__all__ = [
    "AppConfig",
    "ConfigProviderPort",
    "CredentialBackend",
    "CredentialStorePort",
    "HttpConfig",
    "IssueSourcePort",
    "LocalCachePort",
    "SettingsStorePort",
    "default_data_dir",
]
