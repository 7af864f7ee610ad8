"""
Session domain models
"""
from enum import Enum

from ...client import ConnectionTarget
from ...core.constants import DEFAULT_SSH_PORT
from ...core.utils import split_connection_string, validate_port


class KeyAuthState(str, Enum):
    """Key login progress"""
    UNAUTHENTICATED = "unauthenticated"
    KEY_TRIED = "key_tried"
    PASSPHRASE_TRIED = "passphrase_tried"
    DONE = "done"
    FAILED = "failed"


class PasswordAuthState(str, Enum):
    """Password login progress"""
    UNAUTHENTICATED = "unauthenticated"
    VAULT_CHECKED = "vault_checked"
    PROMPTED = "prompted"
    DONE = "done"
    FAILED = "failed"


def parse_connection_target(connection_string: str, port: int = DEFAULT_SSH_PORT) -> ConnectionTarget:
    """
    Build a ConnectionTarget from a stored ``user@host`` string.

    Raises:
        InvalidConnectionStringError: Malformed connection string
        ConfigError: Port out of range
    """
    user, host = split_connection_string(connection_string)
    return ConnectionTarget(user=user, host=host, port=validate_port(port))
