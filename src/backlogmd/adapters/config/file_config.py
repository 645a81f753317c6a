"""
File Config Provider - Load configuration from a YAML file.

Searched in order when no path is given:
- ./backlogmd.yaml, ./.backlogmd.yaml (and .yml)
- ~/.backlogmd.yaml, ~/.config/backlogmd/config.yaml

Example file:

    data_dir: ~/backlog-cache
    credential_backend: keyring
    http:
      connect_timeout: 8
      total_timeout: 20
    logging:
      level: DEBUG
      format: json
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from backlogmd.core.exceptions import ValidationError
from backlogmd.core.ports.config_provider import APP_DIR_NAME, AppConfig, ConfigProviderPort

from .values import build_config, flatten, normalize_key


CONFIG_FILE_NAMES = (
    "backlogmd.yaml",
    "backlogmd.yml",
    ".backlogmd.yaml",
    ".backlogmd.yml",
)


class FileConfigProvider(ConfigProviderPort):
    """Configuration provider backed by a YAML file."""

    def __init__(
        self,
        config_path: Path | None = None,
        cli_overrides: dict[str, Any] | None = None,
    ):
        """
        Initialize the provider.

        Args:
            config_path: Explicit config file (auto-detected if not specified)
            cli_overrides: Values that win over the file, keyed like the file
        """
        self._explicit_path = config_path
        self._cli_overrides = {normalize_key(k): v for k, v in (cli_overrides or {}).items()}
        self._values: dict[str, Any] = {}
        self._errors: list[str] = []
        self.config_file_path: Path | None = None
        self.logger = logging.getLogger("FileConfigProvider")

        self._load_file()

    # -------------------------------------------------------------------------
    # ConfigProviderPort Implementation
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        if self.config_file_path:
            return f"File ({self.config_file_path})"
        return "File"

    def load(self) -> AppConfig:
        return build_config(self.get)

    def get(self, key: str, default: Any = None) -> Any:
        key = normalize_key(key)
        if key in self._cli_overrides and self._cli_overrides[key] is not None:
            return self._cli_overrides[key]
        return self._values.get(key, default)

    def values(self) -> dict[str, Any]:
        """All values read from the file, keyed by dotted name."""
        return dict(self._values)

    @property
    def load_errors(self) -> list[str]:
        """Problems found while reading the file."""
        return list(self._errors)

    def validate(self) -> list[str]:
        errors = list(self._errors)
        if errors:
            return errors

        try:
            errors.extend(self.load().validate())
        except ValidationError as e:
            errors.append(str(e))
        return errors

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _find_config_file(self) -> Path | None:
        if self._explicit_path is not None:
            return self._explicit_path

        cwd = Path.cwd()
        for file_name in CONFIG_FILE_NAMES:
            candidate = cwd / file_name
            if candidate.exists():
                return candidate

        home = Path.home()
        for candidate in (
            home / ".backlogmd.yaml",
            home / ".config" / APP_DIR_NAME / "config.yaml",
        ):
            if candidate.exists():
                return candidate

        return None

    def _load_file(self) -> None:
        path = self._find_config_file()
        if path is None:
            return

        if not path.exists():
            self._errors.append(f"Config file not found: {path}")
            return

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            self._errors.append(f"Invalid YAML syntax in {path}: {e}")
            return
        except OSError as e:
            self._errors.append(f"Cannot read config file {path}: {e}")
            return

        if data is None:
            data = {}
        if not isinstance(data, dict):
            self._errors.append(f"Config file {path} must contain a mapping at the top level")
            return

        self._values = flatten(data)
        self.config_file_path = path
        self.logger.debug(f"Loaded config from {path}")
