"""Shared fakes for rssh tests."""

from __future__ import annotations

import io
import socket
from typing import Dict, List, Optional

import paramiko
import pytest

from rssh.client import ConnectionTarget
from rssh.core.interfaces import AliasStore, CredentialVault, PromptProvider


class MemoryAliasStore(AliasStore):
    def __init__(self, connections: Optional[Dict[str, str]] = None):
        self.connections = dict(connections or {})

    def load(self) -> Dict[str, str]:
        return dict(self.connections)

    def save(self, connections: Dict[str, str]) -> None:
        self.connections = dict(connections)


class MemoryVault(CredentialVault):
    def __init__(self, secrets: Optional[Dict[str, str]] = None):
        self.secrets = dict(secrets or {})
        self.deleted: List[str] = []

    def get_secret(self, alias):
        return self.secrets.get(alias)

    def set_secret(self, alias, secret):
        self.secrets[alias] = secret

    def delete_secret(self, alias):
        self.deleted.append(alias)
        self.secrets.pop(alias, None)


class ScriptedPrompts(PromptProvider):
    """Answers prompts from queues and records what was asked."""

    def __init__(self, answers: Optional[List[str]] = None, confirms: Optional[List[bool]] = None):
        self.answers = list(answers or [])
        self.confirms = list(confirms or [])
        self.asked: List[str] = []
        self.confirmed: List[str] = []

    def prompt(self, message, default=None, password=False):
        self.asked.append(message)
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {message}")
        return self.answers.pop(0)

    def confirm(self, message, default=False):
        self.confirmed.append(message)
        if not self.confirms:
            raise AssertionError(f"unexpected confirm: {message}")
        return self.confirms.pop(0)

    def choose(self, message, choices):
        self.asked.append(message)
        return self.answers.pop(0)


class FakeTransportSession:
    """Stands in for TransportSession with scripted auth outcomes."""

    def __init__(
        self,
        target: ConnectionTarget,
        timeout: float = 10,
        connect_error: Optional[Exception] = None,
        handshake_error: Optional[Exception] = None,
        password: Optional[str] = None,
        key_results: Optional[List[Optional[Exception]]] = None,
    ):
        self.target = target
        self.timeout = timeout
        self.connect_error = connect_error
        self.handshake_error = handshake_error
        self.password = password
        self.key_results = list(key_results or [])
        self.calls: List[tuple] = []
        self.closed = False

    def connect(self):
        self.calls.append(("connect",))
        if self.connect_error:
            raise self.connect_error

    def handshake(self):
        self.calls.append(("handshake",))
        if self.handshake_error:
            raise self.handshake_error

    def auth_password(self, password):
        self.calls.append(("auth_password", password))
        if password != self.password:
            raise paramiko.AuthenticationException("Authentication failed.")

    def auth_key(self, key_path, passphrase=None):
        self.calls.append(("auth_key", str(key_path), passphrase))
        result = self.key_results.pop(0) if self.key_results else None
        if result is not None:
            raise result

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class FakeChannel:
    """
    Non-blocking channel double.

    ``reads`` items are returned by recv in order: bytes, or an exception
    instance to raise. An exhausted script behaves like EOF.
    """

    def __init__(self, reads=None, send_limit: Optional[int] = None, send_timeouts: int = 0):
        self.reads = list(reads or [])
        self.send_limit = send_limit
        self.send_timeouts = send_timeouts
        self.sent = bytearray()
        self.send_calls = 0
        self.resizes: List[tuple] = []
        self.blocking = None
        self.closed = False

    def setblocking(self, flag):
        self.blocking = flag

    def recv(self, nbytes):
        if not self.reads:
            return b""
        item = self.reads.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def send(self, data):
        self.send_calls += 1
        if self.send_timeouts:
            self.send_timeouts -= 1
            raise socket.timeout()
        chunk = bytes(data[: self.send_limit] if self.send_limit else data)
        self.sent.extend(chunk)
        return len(chunk)

    def resize_pty(self, width=80, height=24, width_pixels=0, height_pixels=0):
        self.resizes.append((width, height))

    def close(self):
        self.closed = True


class ShellSession:
    def __init__(self, channel: FakeChannel):
        self.channel = channel
        self.opened_with = None

    def open_shell_channel(self, width, height, term="xterm-256color"):
        self.opened_with = (width, height, term)
        return self.channel


class ScriptedEvents:
    """Event source returning one scripted batch per poll."""

    def __init__(self, batches=None):
        self.batches = list(batches or [])
        self.started = False
        self.stopped = False
        self.timeouts: List[float] = []

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def poll(self, timeout):
        self.timeouts.append(timeout)
        if self.batches:
            return self.batches.pop(0)
        return []


class RecordingGuard:
    instances: List["RecordingGuard"] = []

    def __init__(self, fd):
        self.fd = fd
        self.entered = 0
        self.released = 0
        RecordingGuard.instances.append(self)

    def enter(self):
        self.entered += 1

    def release(self):
        self.released += 1


class MemoryFile(io.BytesIO):
    """BytesIO that keeps its contents readable after close."""

    def __init__(self, data: bytes = b"", size: Optional[int] = None, fail_after: Optional[int] = None):
        super().__init__(data)
        self.size = size
        self.fail_after = fail_after
        self.contents = b""
        self.was_closed = False

    def write(self, data):
        if self.fail_after is not None and self.tell() + len(data) > self.fail_after:
            raise OSError("connection lost")
        return super().write(data)

    def stat(self):
        if self.size is None:
            raise IOError("stat unsupported")
        return paramiko.SFTPAttributes.from_stat(_FakeStat(self.size))

    def close(self):
        if not self.closed:
            self.contents = self.getvalue()
            self.was_closed = True
        super().close()


class _FakeStat:
    def __init__(self, size):
        self.st_size = size
        self.st_uid = 0
        self.st_gid = 0
        self.st_mode = 0o100644
        self.st_atime = 0
        self.st_mtime = 0


class FakeSFTP:
    def __init__(self, remote_files: Optional[Dict[str, MemoryFile]] = None):
        self.remote_files = dict(remote_files or {})
        self.opened: List[tuple] = []

    def open(self, path, mode="r"):
        self.opened.append((path, mode))
        if "w" in mode:
            handle = MemoryFile()
            self.remote_files[path] = handle
            return handle
        if path not in self.remote_files:
            raise IOError(2, "No such file")
        return self.remote_files[path]


class SFTPSession:
    def __init__(self, sftp: FakeSFTP):
        self.sftp = sftp
        self.sftp_opens = 0

    def open_sftp(self):
        self.sftp_opens += 1
        return self.sftp


@pytest.fixture
def target():
    return ConnectionTarget(user="u", host="10.0.0.1", port=22)


@pytest.fixture(autouse=True)
def _reset_guards():
    RecordingGuard.instances.clear()
    yield
    RecordingGuard.instances.clear()


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    path = tmp_path / "rssh-config"
    monkeypatch.setenv("RSSH_CONFIG_DIR", str(path))
    return path
