"""
Local terminal handling: raw mode guard and input polling
"""
import os
import select
import shutil
import signal
import termios
import time
import tty
from typing import Callable, List, Optional, Tuple

from ...core.constants import DEFAULT_TERMINAL_SIZE, INPUT_READ_SIZE
from ...core.logging import get_logger
from .keys import KeyDecoder, ResizeEvent, TerminalEvent

logger = get_logger(__name__)

SizeProvider = Callable[[], Tuple[int, int]]


def get_terminal_size() -> Tuple[int, int]:
    """(columns, rows) of the local terminal"""
    size = shutil.get_terminal_size(fallback=DEFAULT_TERMINAL_SIZE)
    return max(size.columns, 1), max(size.lines, 1)


class TerminalModeGuard:
    """
    Raw mode for a terminal file descriptor.

    ``enter()`` saves the current mode and switches; ``release()`` restores
    it and is safe to call any number of times. Descriptors that are not
    a TTY are left alone.

    O_NONBLOCK is never touched: on a terminal stdin and stdout share one
    open file description, so the flag would also make display writes
    fail with EAGAIN. Reads stay non-blocking because TerminalInput only
    reads after select() reports the descriptor readable.
    """

    def __init__(self, fd: int):
        self.fd = fd
        self.active = False
        self._saved_attrs: Optional[list] = None

    def enter(self) -> None:
        if self.active:
            return

        if os.isatty(self.fd):
            self._saved_attrs = termios.tcgetattr(self.fd)
            tty.setraw(self.fd)
        self.active = True
        logger.debug("Terminal fd %s in raw mode", self.fd)

    def release(self) -> None:
        if not self.active:
            return
        self.active = False

        if self._saved_attrs is not None:
            attrs, self._saved_attrs = self._saved_attrs, None
            termios.tcsetattr(self.fd, termios.TCSADRAIN, attrs)
        logger.debug("Terminal fd %s restored", self.fd)

    def __enter__(self) -> "TerminalModeGuard":
        self.enter()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release()


class TerminalInput:
    """
    Event source over a local terminal.

    Key presses come from the descriptor, resizes from SIGWINCH.
    """

    def __init__(
        self,
        fd: int,
        decoder: Optional[KeyDecoder] = None,
        size_provider: SizeProvider = get_terminal_size,
    ):
        self.fd = fd
        self.decoder = decoder or KeyDecoder()
        self.size_provider = size_provider
        self.closed = False
        self._resize_pending = False
        self._previous_handler = None
        self._installed = False

    def start(self) -> None:
        try:
            self._previous_handler = signal.signal(signal.SIGWINCH, self._on_sigwinch)
            self._installed = True
        except ValueError:
            # signal handlers can only be set from the main thread
            logger.debug("SIGWINCH handler not installed; resizes will not be forwarded")

    def stop(self) -> None:
        if self._installed:
            signal.signal(signal.SIGWINCH, self._previous_handler)
            self._installed = False

    def _on_sigwinch(self, signum, frame) -> None:
        self._resize_pending = True

    def poll(self, timeout: float) -> List[TerminalEvent]:
        """
        Wait up to ``timeout`` seconds for input.

        Returns:
            Events available now, possibly empty
        """
        events: List[TerminalEvent] = []

        if self._resize_pending:
            self._resize_pending = False
            events.append(ResizeEvent(*self.size_provider()))
            timeout = 0

        if self.closed:
            if not events:
                time.sleep(timeout)
            return events

        try:
            ready, _, _ = select.select([self.fd], [], [], timeout)
        except InterruptedError:
            return events

        if not ready:
            if self.decoder.has_pending:
                events.extend(self.decoder.flush())
            return events

        try:
            data = os.read(self.fd, INPUT_READ_SIZE)
        except BlockingIOError:
            return events

        if not data:
            # stdin closed; keep serving remote output
            logger.debug("Local input reached EOF")
            self.closed = True
            return events

        events.extend(self.decoder.feed(data))
        return events
