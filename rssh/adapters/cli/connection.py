"""
Wiring of the session builder for CLI commands
"""
from pathlib import Path
from typing import Optional

from ...client import TransportSession
from ...core.logging import get_logger
from ...domain.session import SessionBuilder
from ...infrastructure.state import JsonAliasStore, KeyringVault
from ..config import RsshConfig, load_config
from .prompts import RichPromptProvider

logger = get_logger(__name__)


def create_alias_store(config: Optional[RsshConfig] = None) -> JsonAliasStore:
    config = config or load_config()
    return JsonAliasStore(config.config_dir)


def create_vault() -> KeyringVault:
    return KeyringVault()


def create_session_builder(config: Optional[RsshConfig] = None) -> SessionBuilder:
    """Session builder over the user's alias file, keyring and terminal prompts"""
    config = config or load_config()
    return SessionBuilder(
        alias_store=create_alias_store(config),
        vault=create_vault(),
        prompts=RichPromptProvider(),
        timeout=config.timeout,
    )


def open_session(
    alias: str,
    port: int,
    identity: Optional[Path] = None,
    config: Optional[RsshConfig] = None,
) -> TransportSession:
    """
    Establish an authenticated session for a CLI command.

    Raises:
        RsshError: Any resolution, connection or authentication failure
    """
    builder = create_session_builder(config)
    return builder.establish_session(alias, port, identity)
