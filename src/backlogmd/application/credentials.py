"""
Credential Cache - Process-wide, lock-guarded slot for the API key.

Commands may run concurrently on worker threads. The first one that needs
the key loads it from the credential store; everyone after that reads the
cached value without touching the store again.
"""

import logging
import threading

from backlogmd.core.exceptions import CredentialStoreError
from backlogmd.core.ports.credential_store import CredentialStorePort


logger = logging.getLogger("CredentialCache")


def pick_api_key(cached: str | None, loaded: str | None) -> str:
    """
    Choose the usable API key, preferring the cached one.

    Raises:
        CredentialStoreError: If neither value is a non-blank key
    """
    if cached is not None and cached.strip():
        return cached
    if loaded is not None and loaded.strip():
        return loaded
    raise CredentialStoreError("API key is not configured in the credential store")


class CredentialCache:
    """Single-slot API key cache. All access goes through one lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: str | None = None

    def get(self) -> str | None:
        with self._lock:
            return self._value

    def set(self, api_key: str) -> None:
        with self._lock:
            self._value = api_key.strip() or None

    def clear(self) -> None:
        with self._lock:
            self._value = None

    def resolve(self, store: CredentialStorePort) -> str:
        """
        Return the cached key, loading it from ``store`` on a miss.

        The lock is held across the store call so concurrent callers that
        miss together still load from the store once.

        Raises:
            CredentialStoreError: If no key is configured or the store fails
        """
        with self._lock:
            if self._value is not None:
                return pick_api_key(self._value, None)

            loaded = store.load()
            key = pick_api_key(None, loaded)
            self._value = key
            logger.debug(f"Loaded API key from {store.name}")
            return key
