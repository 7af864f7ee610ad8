"""
Authentication state machines

Key login allows at most one passphrase prompt; password login checks the
vault first and only prompts when nothing is stored.
"""
from pathlib import Path
from typing import List, Optional

import paramiko

from ...client import TransportSession
from ...core.exceptions import AuthFailedError, VaultError
from ...core.interfaces import CredentialVault, PromptProvider
from ...core.logging import get_logger
from .models import KeyAuthState, PasswordAuthState

logger = get_logger(__name__)

AUTH_ERRORS = (paramiko.SSHException, OSError, EOFError)


class KeyAuthenticator:
    """
    UNAUTHENTICATED -> KEY_TRIED -> PASSPHRASE_TRIED -> DONE | FAILED

    A failed passphrase-less attempt only leads to a prompt when the key
    file turned out to be encrypted.
    """

    def __init__(self, session: TransportSession, key_path: Path, prompts: PromptProvider):
        self.session = session
        self.key_path = Path(key_path).expanduser()
        self.prompts = prompts
        self.state = KeyAuthState.UNAUTHENTICATED
        self.history: List[KeyAuthState] = [self.state]
        self.passphrase_prompts = 0
        self._passphrase: Optional[str] = None
        self._reason: Optional[BaseException] = None

    def authenticate(self) -> None:
        """Run the machine to completion, raising AuthFailedError on failure"""
        while self.state not in (KeyAuthState.DONE, KeyAuthState.FAILED):
            self._step()

        if self.state == KeyAuthState.FAILED:
            raise AuthFailedError(
                f"Authentication failed with key {self.key_path}: {self._reason}"
            ) from self._reason

    def _move(self, state: KeyAuthState) -> None:
        logger.debug("key auth: %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _step(self) -> None:
        if self.state == KeyAuthState.UNAUTHENTICATED:
            try:
                self.session.auth_key(self.key_path)
            except paramiko.PasswordRequiredException as e:
                self._reason = e
                self._move(KeyAuthState.KEY_TRIED)
                return
            except AUTH_ERRORS as e:
                self._reason = e
                self._move(KeyAuthState.FAILED)
                return
            self._move(KeyAuthState.DONE)

        elif self.state == KeyAuthState.KEY_TRIED:
            self.passphrase_prompts += 1
            self._passphrase = self.prompts.prompt("Enter passphrase for key", password=True)
            self._move(KeyAuthState.PASSPHRASE_TRIED)

        elif self.state == KeyAuthState.PASSPHRASE_TRIED:
            try:
                self.session.auth_key(self.key_path, self._passphrase)
            except AUTH_ERRORS as e:
                self._reason = e
                self._move(KeyAuthState.FAILED)
                return
            self._move(KeyAuthState.DONE)


class PasswordAuthenticator:
    """
    UNAUTHENTICATED -> VAULT_CHECKED -> PROMPTED -> DONE | FAILED

    A stored secret that the server rejects is a failure, never a reason
    to prompt.
    """

    def __init__(
        self,
        session: TransportSession,
        alias: str,
        vault: CredentialVault,
        prompts: PromptProvider,
    ):
        self.session = session
        self.alias = alias
        self.vault = vault
        self.prompts = prompts
        self.state = PasswordAuthState.UNAUTHENTICATED
        self.history: List[PasswordAuthState] = [self.state]
        self.prompted = False
        self._password: Optional[str] = None
        self._reason: Optional[str] = None
        self._cause: Optional[BaseException] = None

    def authenticate(self) -> None:
        """Run the machine to completion, raising AuthFailedError on failure"""
        while self.state not in (PasswordAuthState.DONE, PasswordAuthState.FAILED):
            self._step()

        if self.state == PasswordAuthState.FAILED:
            raise AuthFailedError(self._reason) from self._cause

    def _move(self, state: PasswordAuthState) -> None:
        logger.debug("password auth: %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _fail(self, reason: str, cause: Optional[BaseException] = None) -> None:
        self._reason = reason
        self._cause = cause
        self._move(PasswordAuthState.FAILED)

    def _step(self) -> None:
        if self.state == PasswordAuthState.UNAUTHENTICATED:
            try:
                self._password = self.vault.get_secret(self.alias)
            except VaultError as e:
                logger.warning("Could not read stored password for '%s': %s", self.alias, e)
                self._password = None
            self._move(PasswordAuthState.VAULT_CHECKED)

        elif self.state == PasswordAuthState.VAULT_CHECKED:
            if self._password is None:
                target = self.session.target
                self._password = self.prompts.prompt(
                    f"Enter password for {target.user}@{target.host}", password=True
                )
                self.prompted = True
                if not self._password:
                    self._fail(f"No stored password for '{self.alias}' and none was entered.")
                    return
            self._move(PasswordAuthState.PROMPTED)

        elif self.state == PasswordAuthState.PROMPTED:
            try:
                self.session.auth_password(self._password)
            except AUTH_ERRORS as e:
                if self.prompted:
                    reason = "Authentication failed. Please check your username/password."
                else:
                    reason = (
                        f"Authentication failed with the stored password for '{self.alias}'. "
                        f"Run 'rssh remove {self.alias}' and add it again to reset it."
                    )
                self._fail(f"{reason} ({e})", e)
                return

            if self.prompted and self.prompts.confirm("Save password to keychain?", default=True):
                self.vault.set_secret(self.alias, self._password)
                logger.info("Password for '%s' saved to keychain", self.alias)
            self._move(PasswordAuthState.DONE)
