"""
OS keyring credential vault
"""
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from ...core.constants import VAULT_SERVICE_NAME
from ...core.exceptions import VaultError
from ...core.interfaces import CredentialVault
from ...core.logging import get_logger

logger = get_logger(__name__)


class KeyringVault(CredentialVault):
    """Secrets keyed by (service, alias) in the system keyring"""

    def __init__(self, service: str = VAULT_SERVICE_NAME):
        self.service = service

    def get_secret(self, alias: str) -> Optional[str]:
        try:
            return keyring.get_password(self.service, alias)
        except KeyringError as e:
            raise VaultError(f"Failed to retrieve password for '{alias}': {e}") from e

    def set_secret(self, alias: str, secret: str) -> None:
        try:
            keyring.set_password(self.service, alias, secret)
        except KeyringError as e:
            raise VaultError(f"Failed to save password for '{alias}': {e}") from e

    def delete_secret(self, alias: str) -> None:
        try:
            keyring.delete_password(self.service, alias)
        except PasswordDeleteError:
            # nothing stored for this alias
            logger.debug("No stored password for '%s'", alias)
        except KeyringError as e:
            raise VaultError(f"Failed to delete password for '{alias}': {e}") from e
