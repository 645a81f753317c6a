"""
Environment Config Provider - Load configuration from environment variables.

Supports:
- Environment variables (BACKLOGMD_DATA_DIR, BACKLOGMD_LOG_LEVEL, ...)
- .env files
- YAML config file as the lowest layer
- Command line argument overrides

Precedence: CLI overrides > environment > .env > config file > defaults.
"""

import os
from pathlib import Path
from typing import Any

from backlogmd.core.exceptions import ValidationError
from backlogmd.core.ports.config_provider import AppConfig, ConfigProviderPort

from .file_config import FileConfigProvider
from .values import build_config, normalize_key


ENV_MAPPING = {
    "BACKLOGMD_DATA_DIR": "data_dir",
    "BACKLOGMD_DB_PATH": "db_path",
    "BACKLOGMD_CREDENTIAL_BACKEND": "credential_backend",
    "BACKLOGMD_CONNECT_TIMEOUT": "http.connect_timeout",
    "BACKLOGMD_TOTAL_TIMEOUT": "http.total_timeout",
    "BACKLOGMD_LOG_LEVEL": "logging.level",
    "BACKLOGMD_LOG_FORMAT": "logging.format",
    "BACKLOGMD_LOG_FILE": "logging.file",
}

# CLI argument names to config keys
CLI_MAPPING = {
    "data_dir": "data_dir",
    "db_path": "db_path",
    "credential_backend": "credential_backend",
    "log_level": "logging.level",
    "log_format": "logging.format",
    "log_file": "logging.file",
}


class EnvironmentConfigProvider(ConfigProviderPort):
    """
    Configuration provider that loads from environment variables and .env files.
    """

    def __init__(
        self,
        env_file: Path | None = None,
        config_file: Path | None = None,
        cli_overrides: dict[str, Any] | None = None,
    ):
        """
        Initialize the config provider.

        Args:
            env_file: Path to .env file (auto-detected if not specified)
            config_file: YAML config file (auto-detected if not specified)
            cli_overrides: Command line argument overrides
        """
        self._values: dict[str, Any] = {}
        self._env_file = env_file
        self._cli_overrides = cli_overrides or {}
        self._file_provider = FileConfigProvider(config_path=config_file)

        # Lowest layer first
        self._values.update(self._file_provider.values())
        self._load_env_file()
        self._load_environment()
        self._apply_cli_overrides()

    # -------------------------------------------------------------------------
    # ConfigProviderPort Implementation
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        if self._file_provider.config_file_path:
            return f"Environment + {self._file_provider.config_file_path.name}"
        return "Environment"

    def load(self) -> AppConfig:
        """Load complete configuration."""
        return build_config(self.get)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        return self._values.get(normalize_key(key), default)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value."""
        self._values[normalize_key(key)] = value

    def validate(self) -> list[str]:
        """Validate configuration."""
        errors = self._file_provider.load_errors
        if errors:
            return errors

        try:
            errors.extend(self.load().validate())
        except ValidationError as e:
            errors.append(f"{e} - check environment, .env file or config file")

        return errors

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _load_env_file(self) -> None:
        """Load values from .env file."""
        env_file = self._find_env_file()
        if not env_file:
            return

        for line in env_file.read_text(encoding="utf-8").splitlines():
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, value = line.split("=", 1)
            config_key = ENV_MAPPING.get(key.strip().removeprefix("export ").strip())
            if config_key is None:
                continue

            self._values[config_key] = value.strip().strip('"').strip("'")

    def _find_env_file(self) -> Path | None:
        """Find .env file."""
        if self._env_file is not None:
            return self._env_file if self._env_file.exists() else None

        cwd_env = Path.cwd() / ".env"
        if cwd_env.exists():
            return cwd_env

        return None

    def _load_environment(self) -> None:
        """Load values from environment variables."""
        for env_key, config_key in ENV_MAPPING.items():
            raw_value = os.environ.get(env_key)
            if raw_value is not None and raw_value.strip():
                self._values[config_key] = raw_value.strip()

    def _apply_cli_overrides(self) -> None:
        """Apply CLI argument overrides."""
        for cli_key, config_key in CLI_MAPPING.items():
            if cli_key in self._cli_overrides and self._cli_overrides[cli_key] is not None:
                self._values[config_key] = self._cli_overrides[cli_key]
