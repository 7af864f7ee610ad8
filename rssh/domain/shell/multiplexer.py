"""
Interactive shell multiplexer

Single-threaded cooperative loop between the local terminal and a remote
PTY channel. Each tick polls local input for up to the poll interval, then
drains whatever the channel has buffered.
"""
import socket
import sys
import time
from typing import BinaryIO, Callable, Optional, Protocol

import paramiko

from ...client import TransportSession
from ...core.constants import CHANNEL_READ_SIZE, DEFAULT_TERM, POLL_INTERVAL, WRITE_RETRY_DELAY
from ...core.exceptions import ChannelReadError, ShellError
from ...core.logging import get_logger
from .keys import KeyEvent, ResizeEvent, TerminalEvent, translate_key
from .terminal import SizeProvider, TerminalInput, TerminalModeGuard, get_terminal_size

logger = get_logger(__name__)

CHANNEL_ERRORS = (OSError, EOFError, paramiko.SSHException)


class EventSource(Protocol):
    def start(self) -> None: ...
    def stop(self) -> None: ...
    def poll(self, timeout: float) -> list: ...


class ShellMultiplexer:
    """Run a remote login shell against the local terminal"""

    def __init__(
        self,
        session: TransportSession,
        term: str = DEFAULT_TERM,
        poll_interval: float = POLL_INTERVAL,
        input_fd: Optional[int] = None,
        output: Optional[BinaryIO] = None,
        event_source: Optional[EventSource] = None,
        guard_factory: Callable[[int], TerminalModeGuard] = TerminalModeGuard,
        size_provider: SizeProvider = get_terminal_size,
    ):
        self.session = session
        self.term = term
        self.poll_interval = poll_interval
        self.input_fd = sys.stdin.fileno() if input_fd is None else input_fd
        self.output = output if output is not None else sys.stdout.buffer
        self.event_source = event_source
        self.guard_factory = guard_factory
        self.size_provider = size_provider

    def run(self) -> None:
        """
        Block until the remote shell exits.

        The local terminal mode is restored and the channel closed on every
        exit path.

        Raises:
            ChannelReadError: Channel read failed with something other than
                would-block
            ShellError: Channel write or terminal output failed
        """
        width, height = self.size_provider()
        channel = self.session.open_shell_channel(width, height, self.term)
        logger.info("Shell opened with %sx%s %s PTY", width, height, self.term)

        events = self.event_source or TerminalInput(self.input_fd, size_provider=self.size_provider)
        guard = self.guard_factory(self.input_fd)
        try:
            guard.enter()
            events.start()
            channel.setblocking(0)
            self._loop(channel, events)
        finally:
            events.stop()
            guard.release()
            channel.close()
            logger.info("Shell closed")

    def _loop(self, channel: paramiko.Channel, events: EventSource) -> None:
        while True:
            for event in events.poll(self.poll_interval):
                self._handle_event(channel, event)

            if not self._drain_output(channel):
                logger.debug("Remote EOF")
                return

    # --------------------
    # Input phase
    # --------------------
    def _handle_event(self, channel: paramiko.Channel, event: TerminalEvent) -> None:
        if isinstance(event, KeyEvent):
            data = translate_key(event)
            if data:
                self._send_all(channel, data)
        elif isinstance(event, ResizeEvent):
            try:
                channel.resize_pty(width=event.width, height=event.height)
            except CHANNEL_ERRORS as e:
                raise ShellError(f"Failed to resize remote terminal: {e}") from e

    def _send_all(self, channel: paramiko.Channel, data: bytes) -> None:
        """Write all of ``data`` before returning, retrying on a full window"""
        offset = 0
        while offset < len(data):
            try:
                offset += channel.send(data[offset:])
            except socket.timeout:
                time.sleep(WRITE_RETRY_DELAY)
            except CHANNEL_ERRORS as e:
                raise ShellError(f"Channel write error: {e}") from e

    # --------------------
    # Output phase
    # --------------------
    def _drain_output(self, channel: paramiko.Channel) -> bool:
        """
        Copy everything the channel has buffered to the display.

        Returns:
            False once the remote side has sent EOF
        """
        while True:
            try:
                data = channel.recv(CHANNEL_READ_SIZE)
            except socket.timeout:
                return True
            except CHANNEL_ERRORS as e:
                raise ChannelReadError(f"Channel read error: {e}") from e

            if not data:
                return False

            try:
                self.output.write(data)
                self.output.flush()
            except OSError as e:
                raise ShellError(f"Terminal write error: {e}") from e


def run_shell(session: TransportSession, **kwargs) -> None:
    """Convenience wrapper around ShellMultiplexer.run"""
    ShellMultiplexer(session, **kwargs).run()
