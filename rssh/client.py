from __future__ import annotations
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Type, Tuple

import paramiko

from .core.constants import DEFAULT_SSH_PORT, DEFAULT_SSH_TIMEOUT, DEFAULT_TERM
from .core.exceptions import ConnectFailedError, HandshakeFailedError
from .core.logging import get_logger

logger = get_logger(__name__)


# Tried in order when loading a private key of unknown type
KEY_CLASSES: Tuple[Type[paramiko.PKey], ...] = (
    paramiko.Ed25519Key,
    paramiko.ECDSAKey,
    paramiko.RSAKey,
)


def load_private_key(path: Path, passphrase: Optional[str] = None) -> paramiko.PKey:
    """
    Load a private key file, probing Ed25519 / ECDSA / RSA in turn.

    Raises:
        paramiko.PasswordRequiredException: Key is encrypted and no
            passphrase was given
        paramiko.SSHException: Unreadable file, unsupported key type or
            wrong passphrase
    """
    p = Path(path).expanduser()
    last_error: Optional[Exception] = None

    for key_class in KEY_CLASSES:
        try:
            return key_class.from_private_key_file(str(p), password=passphrase)
        except paramiko.PasswordRequiredException:
            raise
        except (paramiko.SSHException, ValueError) as e:
            last_error = e
        except OSError as e:
            raise paramiko.SSHException(f"Cannot read private key {p}: {e}") from e

    raise paramiko.SSHException(f"Failed to load private key at {p}: {last_error}")


@dataclass
class ConnectionTarget:
    user: str
    host: str
    port: int = DEFAULT_SSH_PORT

    def __str__(self) -> str:
        return f"{self.user}@{self.host}:{self.port}"


class TransportSession:
    """
    对 paramiko.Transport 的显式封装：
    - 分步完成 TCP 连接 / 协议握手 / 认证，便于逐步报告错误
    - 支持 password 和 key 登录（key 可带 passphrase）
    - 提供 shell channel / sftp 辅助方法
    - 支持 with 上下文管理，close() 可重复调用
    """
    def __init__(self, target: ConnectionTarget, timeout: float = DEFAULT_SSH_TIMEOUT) -> None:
        self.target = target
        self.timeout = timeout

        self._sock: Optional[socket.socket] = None
        self._transport: Optional[paramiko.Transport] = None
        self._sftp: Optional[paramiko.SFTPClient] = None

    # --------------------
    # Connection management
    # --------------------
    def connect(self) -> None:
        """打开 TCP 连接"""
        host, port = self.target.host, self.target.port
        try:
            self._sock = socket.create_connection((host, port), timeout=self.timeout)
        except OSError as e:
            raise ConnectFailedError(f"Failed to connect to {host}:{port}: {e}") from e
        logger.debug("TCP connection to %s:%s established", host, port)

    def handshake(self) -> None:
        """完成 SSH 协议握手"""
        if self._sock is None:
            raise HandshakeFailedError("Handshake attempted before connecting")

        try:
            self._transport = paramiko.Transport(self._sock)
            self._transport.start_client(timeout=self.timeout)
        except (paramiko.SSHException, OSError, EOFError) as e:
            raise HandshakeFailedError(
                f"SSH handshake with {self.target.host}:{self.target.port} failed: {e}"
            ) from e
        logger.debug("Handshake complete, server key %s",
                     self._transport.get_remote_server_key().get_name())

    @property
    def transport(self) -> paramiko.Transport:
        if self._transport is None:
            raise HandshakeFailedError("Transport is not connected")
        return self._transport

    @property
    def is_authenticated(self) -> bool:
        return self._transport is not None and self._transport.is_authenticated()

    # --------------------
    # Authentication primitives
    # --------------------
    def auth_password(self, password: str) -> None:
        """Raises paramiko.AuthenticationException / SSHException on failure"""
        self.transport.auth_password(self.target.user, password)

    def auth_key(self, key_path: Path, passphrase: Optional[str] = None) -> None:
        """
        Public-key login.

        Raises:
            paramiko.PasswordRequiredException: Key is encrypted and no
                passphrase was given
            paramiko.AuthenticationException / SSHException: Rejected
        """
        key = load_private_key(key_path, passphrase)
        self.transport.auth_publickey(self.target.user, key)

    # --------------------
    # Helpers
    # --------------------
    def open_shell_channel(
        self,
        width: int,
        height: int,
        term: str = DEFAULT_TERM,
    ) -> paramiko.Channel:
        """Open a session channel with a PTY and a shell running on it"""
        channel = self.transport.open_session()
        try:
            channel.get_pty(term=term, width=width, height=height)
            channel.invoke_shell()
        except Exception:
            channel.close()
            raise
        return channel

    def open_sftp(self) -> paramiko.SFTPClient:
        """返回 SFTP 客户端，复用已有连接"""
        if self._sftp is None or self._sftp.get_channel() is None:
            self._sftp = paramiko.SFTPClient.from_transport(self.transport)
        return self._sftp

    def close(self) -> None:
        if self._sftp is not None:
            try:
                self._sftp.close()
            except (OSError, paramiko.SSHException) as e:
                logger.debug("Error closing SFTP client: %s", e)
            self._sftp = None
        if self._transport is not None:
            self._transport.close()
            self._transport = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    # --------------------
    # Context manager
    # --------------------
    def __enter__(self) -> TransportSession:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
