"""
Config values - Turn flat configuration values into an AppConfig.

Both providers collect values under dotted keys (``http.connect_timeout``)
and share this conversion so that type errors read the same everywhere.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

from backlogmd.core.exceptions import ValidationError
from backlogmd.core.ports.config_provider import (
    AppConfig,
    CredentialBackend,
    HttpConfig,
    default_data_dir,
)


def normalize_key(key: str) -> str:
    return key.strip().lower().replace("-", "_")


def flatten(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested mappings into dotted keys."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}{normalize_key(str(key))}"
        if isinstance(value, dict):
            flat.update(flatten(value, prefix=f"{full_key}."))
        else:
            flat[full_key] = value
    return flat


def _coerce(key: str, value: Any, convert: Callable[[Any], Any]) -> Any:
    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"invalid value for {key}: {value!r}", cause=e) from e


def build_config(get: Callable[[str, Any], Any]) -> AppConfig:
    """
    Build an AppConfig from a ``get(key, default)`` lookup.

    Raises:
        ValidationError: If a value cannot be converted to its type
    """
    defaults = HttpConfig()
    http = HttpConfig(
        connect_timeout=_coerce(
            "http.connect_timeout", get("http.connect_timeout", defaults.connect_timeout), float
        ),
        total_timeout=_coerce(
            "http.total_timeout", get("http.total_timeout", defaults.total_timeout), float
        ),
    )

    data_dir = get("data_dir", None)
    db_path = get("db_path", None)
    log_file = get("logging.file", None)

    return AppConfig(
        data_dir=Path(data_dir).expanduser() if data_dir else default_data_dir(),
        db_path=Path(db_path).expanduser() if db_path else None,
        http=http,
        credential_backend=CredentialBackend.from_string(
            str(get("credential_backend", CredentialBackend.KEYRING.value))
        ),
        log_level=str(get("logging.level", "INFO")).upper(),
        log_format=str(get("logging.format", "text")).lower(),
        log_file=str(log_file) if log_file else None,
    )
