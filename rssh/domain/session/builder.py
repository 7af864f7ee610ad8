"""
Session builder: alias -> authenticated transport session
"""
from pathlib import Path
from typing import Callable, Optional, Union

from rich.console import Console

from ...client import ConnectionTarget, TransportSession
from ...core.constants import DEFAULT_SSH_PORT, DEFAULT_SSH_TIMEOUT
from ...core.exceptions import AliasNotFoundError
from ...core.interfaces import AliasStore, CredentialVault, PromptProvider
from ...core.logging import get_logger, get_stdout_console
from .auth import KeyAuthenticator, PasswordAuthenticator
from .models import parse_connection_target

logger = get_logger(__name__)

SessionFactory = Callable[[ConnectionTarget, float], TransportSession]


class SessionBuilder:
    """Resolve an alias and drive connection, handshake and authentication"""

    def __init__(
        self,
        alias_store: AliasStore,
        vault: CredentialVault,
        prompts: PromptProvider,
        timeout: float = DEFAULT_SSH_TIMEOUT,
        session_factory: SessionFactory = TransportSession,
        console: Optional[Console] = None,
    ):
        self.alias_store = alias_store
        self.vault = vault
        self.prompts = prompts
        self.timeout = timeout
        self.session_factory = session_factory
        self.console = console or get_stdout_console()

    def resolve_target(self, alias: str, port: int = DEFAULT_SSH_PORT) -> ConnectionTarget:
        """
        Look up an alias and parse its connection string.

        Raises:
            AliasNotFoundError: Unknown alias
            InvalidConnectionStringError: Stored value is not user@host
        """
        connections = self.alias_store.load()
        if alias not in connections:
            raise AliasNotFoundError(alias)
        return parse_connection_target(connections[alias], port)

    def establish_session(
        self,
        alias: str,
        port: int = DEFAULT_SSH_PORT,
        identity_path: Optional[Union[str, Path]] = None,
    ) -> TransportSession:
        """
        Create an authenticated session for an alias.

        The caller owns the returned session and must close it. On any
        failure the partially opened connection is closed before the error
        propagates.

        Args:
            alias: Saved connection alias
            port: SSH port
            identity_path: Private key file; password login when None

        Returns:
            Authenticated TransportSession

        Raises:
            AliasNotFoundError, InvalidConnectionStringError,
            ConnectFailedError, HandshakeFailedError, AuthFailedError
        """
        target = self.resolve_target(alias, port)

        self.console.print(f"Connecting to {target.user}@{target.host}:{target.port}")
        logger.info("Connecting to %s (alias '%s')", target, alias)

        session = self.session_factory(target, self.timeout)
        try:
            session.connect()
            session.handshake()

            if identity_path is not None:
                KeyAuthenticator(session, Path(identity_path), self.prompts).authenticate()
            else:
                PasswordAuthenticator(session, alias, self.vault, self.prompts).authenticate()
        except BaseException:
            session.close()
            raise

        self.console.print("[green]Successfully connected![/green]")
        logger.info("Authenticated as %s", target.user)
        return session
