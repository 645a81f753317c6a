"""
Adapters - Concrete implementations of the core ports.

- backlog/: Backlog REST API v2 issue source
- cache/: SQLite local cache and settings store
- config/: Environment and YAML configuration providers
- credentials/: Keyring and environment credential stores
- formatters/: Backlog wiki to Markdown conversion
"""

from .backlog import BacklogIssueSource, RetryingHttpClient
from .cache import SQLiteLocalCache
from .config import EnvironmentConfigProvider, FileConfigProvider
from .credentials import EnvironmentCredentialStore, KeyringCredentialStore
from .formatters import MarkdownFormatter


__all__ = [
    "BacklogIssueSource",
    "EnvironmentConfigProvider",
    "EnvironmentCredentialStore",
    "FileConfigProvider",
    "KeyringCredentialStore",
    "MarkdownFormatter",
    "RetryingHttpClient",
    "SQLiteLocalCache",
]
