"""
Configuration Provider Port - Abstract interface for configuration.

Implementations:
- EnvironmentConfigProvider: Load from env vars and .env
- FileConfigProvider: Load from a YAML config file
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


APP_DIR_NAME = "backlogmd"
DB_FILE_NAME = "app.db"


class CredentialBackend(Enum):
    """Where the API key is kept."""

    KEYRING = "keyring"
    ENVIRONMENT = "environment"

    @classmethod
    def from_string(cls, value: str) -> "CredentialBackend":
        value_lower = value.strip().lower()
        if value_lower in ("env", "environment"):
            return cls.ENVIRONMENT
        return cls.KEYRING


def default_data_dir() -> Path:
    """``$XDG_DATA_HOME/backlogmd``, falling back to ``~/.local/share/backlogmd``."""
    xdg = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / APP_DIR_NAME


@dataclass
class HttpConfig:
    """Timeouts for the tracker client; the retry policy itself is fixed."""

    connect_timeout: float = 8.0
    total_timeout: float = 20.0


@dataclass
class AppConfig:
    """Complete application configuration."""

    data_dir: Path = field(default_factory=default_data_dir)
    db_path: Path | None = None
    http: HttpConfig = field(default_factory=HttpConfig)
    credential_backend: CredentialBackend = CredentialBackend.KEYRING

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"
    log_file: str | None = None

    @property
    def database_path(self) -> Path:
        """Resolved path of the SQLite cache."""
        return self.db_path if self.db_path is not None else self.data_dir / DB_FILE_NAME

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.http.connect_timeout <= 0:
            errors.append("connect timeout must be > 0")
        if self.http.total_timeout <= 0:
            errors.append("total timeout must be > 0")
        if self.log_format not in ("text", "json"):
            errors.append(f"unknown log format: {self.log_format}")

        return errors


class ConfigProviderPort(ABC):
    """
    Abstract interface for configuration providers.

    Configuration can come from various sources:
    - Environment variables
    - .env files
    - YAML config files
    - Command line arguments
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        ...

    @abstractmethod
    def load(self) -> AppConfig:
        """
        Load configuration from source.

        Returns:
            Complete application configuration
        """
        ...

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a specific configuration value.

        Args:
            key: Configuration key
            default: Default value if not found
        """
        ...

    @abstractmethod
    def validate(self) -> list[str]:
        """
        Validate loaded configuration.

        Returns:
            List of validation errors
        """
        ...
