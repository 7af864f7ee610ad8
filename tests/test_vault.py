from unittest.mock import patch

import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from rssh.core.exceptions import VaultError
from rssh.infrastructure.state import KeyringVault


@pytest.fixture
def mock_keyring():
    with patch("rssh.infrastructure.state.vault.keyring") as mocked:
        yield mocked


def test_get_secret_uses_service_and_alias(mock_keyring):
    mock_keyring.get_password.return_value = "s3cret"

    assert KeyringVault().get_secret("box") == "s3cret"
    mock_keyring.get_password.assert_called_once_with("rssh", "box")


def test_get_secret_missing_is_none(mock_keyring):
    mock_keyring.get_password.return_value = None

    assert KeyringVault().get_secret("box") is None


def test_set_secret(mock_keyring):
    KeyringVault(service="custom").set_secret("box", "pw")

    mock_keyring.set_password.assert_called_once_with("custom", "box", "pw")


def test_delete_absent_secret_is_silent(mock_keyring):
    mock_keyring.delete_password.side_effect = PasswordDeleteError("not found")

    KeyringVault().delete_secret("box")

    mock_keyring.delete_password.assert_called_once_with("rssh", "box")


def test_backend_failures_become_vault_errors(mock_keyring):
    mock_keyring.get_password.side_effect = KeyringError("locked")
    mock_keyring.set_password.side_effect = KeyringError("locked")
    mock_keyring.delete_password.side_effect = KeyringError("locked")
    vault = KeyringVault()

    with pytest.raises(VaultError):
        vault.get_secret("box")
    with pytest.raises(VaultError):
        vault.set_secret("box", "pw")
    with pytest.raises(VaultError):
        vault.delete_secret("box")
