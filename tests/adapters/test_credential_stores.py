"""
Tests for the credential stores.

The keyring module is patched so no test touches the real keychain.
"""

from unittest.mock import patch

import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from backlogmd.adapters.credentials import (
    EnvironmentCredentialStore,
    KeyringCredentialStore,
    create_credential_store,
)
from backlogmd.core.exceptions import CredentialStoreError
from backlogmd.core.ports.config_provider import CredentialBackend


KEYRING = "backlogmd.adapters.credentials.keyring_store.keyring"


class TestKeyringCredentialStore:
    """Tests for KeyringCredentialStore."""

    def test_save_trims_value(self):
        with patch(KEYRING) as mock_keyring:
            KeyringCredentialStore().save("  secret \n")

        mock_keyring.set_password.assert_called_once_with(
            "com.backlogmd.exporter", "backlog-api-key", "secret"
        )

    def test_load(self):
        with patch(KEYRING) as mock_keyring:
            mock_keyring.get_password.return_value = " secret "
            assert KeyringCredentialStore().load() == "secret"

    @pytest.mark.parametrize("stored", [None, "", "   "])
    def test_load_missing_or_blank(self, stored):
        with patch(KEYRING) as mock_keyring:
            mock_keyring.get_password.return_value = stored
            assert KeyringCredentialStore().load() is None

    def test_load_backend_failure(self):
        with patch(KEYRING) as mock_keyring:
            mock_keyring.get_password.side_effect = KeyringError("locked")

            with pytest.raises(CredentialStoreError) as exc_info:
                KeyringCredentialStore().load()

        assert isinstance(exc_info.value.cause, KeyringError)

    def test_save_backend_failure(self):
        with patch(KEYRING) as mock_keyring:
            mock_keyring.set_password.side_effect = KeyringError("denied")

            with pytest.raises(CredentialStoreError):
                KeyringCredentialStore().save("secret")

    def test_delete_missing_entry_is_ignored(self):
        with patch(KEYRING) as mock_keyring:
            mock_keyring.delete_password.side_effect = PasswordDeleteError("not found")
            KeyringCredentialStore().delete()

    def test_delete_backend_failure(self):
        with patch(KEYRING) as mock_keyring:
            mock_keyring.delete_password.side_effect = KeyringError("locked")

            with pytest.raises(CredentialStoreError):
                KeyringCredentialStore().delete()

    def test_custom_service_and_account(self):
        with patch(KEYRING) as mock_keyring:
            KeyringCredentialStore(service="svc", account="acct").delete()

        mock_keyring.delete_password.assert_called_once_with("svc", "acct")


class TestEnvironmentCredentialStore:
    """Tests for EnvironmentCredentialStore."""

    def test_load(self, monkeypatch):
        monkeypatch.setenv("BACKLOGMD_API_KEY", " env-key ")
        assert EnvironmentCredentialStore().load() == "env-key"

    def test_load_unset(self, monkeypatch):
        monkeypatch.delenv("BACKLOGMD_API_KEY", raising=False)
        assert EnvironmentCredentialStore().load() is None

    def test_load_blank(self, monkeypatch):
        monkeypatch.setenv("BACKLOGMD_API_KEY", "  ")
        assert EnvironmentCredentialStore().load() is None

    def test_custom_variable(self, monkeypatch):
        monkeypatch.setenv("MY_KEY", "abc")
        store = EnvironmentCredentialStore(variable="MY_KEY")

        assert store.load() == "abc"
        assert "MY_KEY" in store.name

    def test_read_only(self):
        store = EnvironmentCredentialStore()

        with pytest.raises(CredentialStoreError, match="read-only"):
            store.save("x")
        with pytest.raises(CredentialStoreError, match="read-only"):
            store.delete()


class TestCreateCredentialStore:
    """Tests for the backend factory."""

    def test_keyring(self):
        assert isinstance(create_credential_store(CredentialBackend.KEYRING), KeyringCredentialStore)

    def test_environment(self):
        store = create_credential_store(CredentialBackend.ENVIRONMENT)
        assert isinstance(store, EnvironmentCredentialStore)
