"""
Unified exception definitions
"""


class RsshError(Exception):
    """Base exception class"""
    pass


class ConfigError(RsshError):
    """Configuration error"""
    pass


class VaultError(RsshError):
    """Credential vault backend error"""
    pass


# ============================================================
# Alias resolution
# ============================================================

class AliasNotFoundError(RsshError):
    """Alias is not present in the alias store"""

    def __init__(self, alias: str):
        super().__init__(f"Alias '{alias}' not found.")
        self.alias = alias


class InvalidConnectionStringError(RsshError):
    """Stored connection string is not in user@host form"""

    def __init__(self, connection_string: str):
        super().__init__(
            f"Invalid connection string format '{connection_string}'. Use 'user@host'."
        )
        self.connection_string = connection_string


# ============================================================
# Session establishment
# ============================================================

class SessionError(RsshError):
    """Session establishment error"""
    pass


class ConnectFailedError(SessionError):
    """TCP connection failed"""
    pass


class HandshakeFailedError(SessionError):
    """SSH protocol handshake failed"""
    pass


class AuthFailedError(SessionError):
    """Authentication failed"""
    pass


# ============================================================
# Interactive shell
# ============================================================

class ShellError(RsshError):
    """Interactive shell error"""
    pass


class ChannelReadError(ShellError):
    """Unrecoverable error while reading from the shell channel"""
    pass


# ============================================================
# File transfer
# ============================================================

class TransferError(RsshError):
    """Transfer error"""
    pass


class NotAFileError(TransferError):
    """Upload source is not a regular file"""
    pass


class InvalidRemotePathError(TransferError):
    """Remote path has no file name component"""
    pass


class DestinationIsFileError(TransferError):
    """Download destination is a file, not a directory"""
    pass


class TransferFailedError(TransferError):
    """Read or write failure while streaming a file"""
    pass
