"""
Interactive shell domain module
"""
from .keys import (
    KeyCode,
    KeyModifiers,
    KeyEventKind,
    KeyEvent,
    ResizeEvent,
    KeyDecoder,
    translate_key,
)
from .terminal import TerminalModeGuard, TerminalInput, get_terminal_size
from .multiplexer import ShellMultiplexer, run_shell

__all__ = [
    "KeyCode",
    "KeyModifiers",
    "KeyEventKind",
    "KeyEvent",
    "ResizeEvent",
    "KeyDecoder",
    "translate_key",
    "TerminalModeGuard",
    "TerminalInput",
    "get_terminal_size",
    "ShellMultiplexer",
    "run_shell",
]
