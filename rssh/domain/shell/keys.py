"""
Key events for the interactive shell

Raw bytes read from a terminal in raw mode are decoded into key events,
and key events are translated into the byte stream sent to the remote
PTY. Only a small set of keys is forwarded; everything else is dropped.
"""
import codecs
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Dict, List, Optional, Tuple, Union


class KeyCode(str, Enum):
    CHAR = "char"
    ENTER = "enter"
    BACKSPACE = "backspace"
    TAB = "tab"
    BACK_TAB = "back_tab"
    ESC = "esc"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    INSERT = "insert"
    DELETE = "delete"
    F = "f"
    UNKNOWN = "unknown"


class KeyModifiers(IntFlag):
    NONE = 0
    SHIFT = 1
    CONTROL = 2
    ALT = 4


class KeyEventKind(str, Enum):
    PRESS = "press"
    REPEAT = "repeat"
    RELEASE = "release"


@dataclass(frozen=True)
class KeyEvent:
    code: KeyCode
    char: Optional[str] = None  # CHAR: the character; F: the function key number
    modifiers: KeyModifiers = KeyModifiers.NONE
    kind: KeyEventKind = KeyEventKind.PRESS


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


TerminalEvent = Union[KeyEvent, ResizeEvent]


# ============================================================
# Translation: key event -> bytes for the remote PTY
# ============================================================

KEY_SEQUENCES: Dict[KeyCode, bytes] = {
    KeyCode.ENTER: b"\r",
    KeyCode.BACKSPACE: b"\x08",
    KeyCode.TAB: b"\t",
    KeyCode.ESC: b"\x1b",
    KeyCode.LEFT: b"\x1b[D",
    KeyCode.RIGHT: b"\x1b[C",
    KeyCode.UP: b"\x1b[A",
    KeyCode.DOWN: b"\x1b[B",
}


def translate_key(event: KeyEvent) -> bytes:
    """
    Bytes to send for a key event.

    Control+letter maps to the C0 control code, other Control
    combinations and unlisted keys produce nothing.
    """
    if event.kind != KeyEventKind.PRESS:
        return b""

    if event.code == KeyCode.CHAR:
        c = event.char or ""
        if event.modifiers & KeyModifiers.CONTROL:
            if len(c) == 1 and "a" <= c <= "z":
                return bytes([ord(c) - ord("a") + 1])
            return b""
        return c.encode("utf-8")

    return KEY_SEQUENCES.get(event.code, b"")


# ============================================================
# Decoding: raw terminal bytes -> key events
# ============================================================

ESC = 0x1b

# Final byte of "ESC [ ... X" / "ESC O X"
_FINAL_KEYS: Dict[int, KeyCode] = {
    ord("A"): KeyCode.UP,
    ord("B"): KeyCode.DOWN,
    ord("C"): KeyCode.RIGHT,
    ord("D"): KeyCode.LEFT,
    ord("H"): KeyCode.HOME,
    ord("F"): KeyCode.END,
    ord("Z"): KeyCode.BACK_TAB,
}

# "ESC [ n ~"
_TILDE_KEYS: Dict[int, KeyCode] = {
    1: KeyCode.HOME,
    2: KeyCode.INSERT,
    3: KeyCode.DELETE,
    4: KeyCode.END,
    5: KeyCode.PAGE_UP,
    6: KeyCode.PAGE_DOWN,
    7: KeyCode.HOME,
    8: KeyCode.END,
}

# "ESC [ n ~" function keys F1..F12
_TILDE_FKEYS: Dict[int, int] = {
    11: 1, 12: 2, 13: 3, 14: 4, 15: 5, 17: 6,
    18: 7, 19: 8, 20: 9, 21: 10, 23: 11, 24: 12,
}

# "ESC O P".."ESC O S"
_SS3_FKEYS: Dict[int, int] = {ord("P"): 1, ord("Q"): 2, ord("R"): 3, ord("S"): 4}


def _xterm_modifiers(value: int) -> KeyModifiers:
    """xterm encodes modifiers as 1 + bitmask(shift=1, alt=2, ctrl=4)"""
    mask = max(value - 1, 0)
    modifiers = KeyModifiers.NONE
    if mask & 1:
        modifiers |= KeyModifiers.SHIFT
    if mask & 2:
        modifiers |= KeyModifiers.ALT
    if mask & 4:
        modifiers |= KeyModifiers.CONTROL
    return modifiers


def _control_key(byte: int) -> KeyEvent:
    """Single C0 control byte (or DEL) as a key event"""
    if byte in (0x0d, 0x0a):
        return KeyEvent(KeyCode.ENTER)
    if byte in (0x7f, 0x08):
        return KeyEvent(KeyCode.BACKSPACE)
    if byte == 0x09:
        return KeyEvent(KeyCode.TAB)
    if byte == 0x00:
        return KeyEvent(KeyCode.CHAR, " ", KeyModifiers.CONTROL)
    if 0x01 <= byte <= 0x1a:
        return KeyEvent(KeyCode.CHAR, chr(byte + 0x60), KeyModifiers.CONTROL)
    # 0x1c..0x1f: Ctrl+4..Ctrl+7
    return KeyEvent(KeyCode.CHAR, chr(byte + 0x18), KeyModifiers.CONTROL)


class KeyDecoder:
    """
    Incremental decoder for the byte stream of a raw-mode terminal.

    An escape sequence cut short at the end of a read is kept until the
    next feed; a lone ESC at the end of a read is reported as Escape.
    """

    def __init__(self):
        self._pending = b""
        self._text = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def feed(self, data: bytes) -> List[KeyEvent]:
        buf = self._pending + data
        self._pending = b""
        events: List[KeyEvent] = []
        i = 0

        while i < len(buf):
            byte = buf[i]

            if byte == ESC:
                event, consumed = self._decode_escape(buf, i)
                if consumed == 0:
                    self._pending = buf[i:]
                    break
                if event is not None:
                    events.append(event)
                i += consumed

            elif byte < 0x20 or byte == 0x7f:
                events.append(_control_key(byte))
                i += 1

            else:
                j = i
                while j < len(buf) and buf[j] >= 0x20 and buf[j] != 0x7f:
                    j += 1
                for c in self._text.decode(buf[i:j]):
                    events.append(KeyEvent(KeyCode.CHAR, c))
                i = j

        return events

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def flush(self) -> List[KeyEvent]:
        """Give up on an incomplete escape sequence"""
        pending, self._pending = self._pending, b""
        if not pending:
            return []
        return [KeyEvent(KeyCode.ESC)] + self.feed(pending[1:])

    def _decode_escape(self, buf: bytes, i: int) -> Tuple[Optional[KeyEvent], int]:
        """
        Decode a sequence starting with ESC at ``buf[i]``.

        Returns:
            (event, bytes consumed); consumed is 0 when more input is needed
        """
        if i + 1 >= len(buf):
            return KeyEvent(KeyCode.ESC), 1

        nxt = buf[i + 1]

        if nxt == ord("["):
            j = i + 2
            while j < len(buf) and not 0x40 <= buf[j] <= 0x7e:
                j += 1
            if j >= len(buf):
                return None, 0
            return self._decode_csi(buf[i + 2:j], buf[j]), j - i + 1

        if nxt == ord("O"):
            if i + 2 >= len(buf):
                return None, 0
            final = buf[i + 2]
            if final in _FINAL_KEYS:
                return KeyEvent(_FINAL_KEYS[final]), 3
            if final in _SS3_FKEYS:
                return KeyEvent(KeyCode.F, str(_SS3_FKEYS[final])), 3
            return KeyEvent(KeyCode.UNKNOWN), 3

        if nxt == ESC:
            return KeyEvent(KeyCode.ESC), 1

        if 0x20 <= nxt < 0x7f:
            return KeyEvent(KeyCode.CHAR, chr(nxt), KeyModifiers.ALT), 2

        if nxt < 0x20 or nxt == 0x7f:
            key = _control_key(nxt)
            return KeyEvent(key.code, key.char, key.modifiers | KeyModifiers.ALT), 2

        # ESC followed by non-ASCII text
        return KeyEvent(KeyCode.ESC), 1

    def _decode_csi(self, params: bytes, final: int) -> KeyEvent:
        fields = params.decode("ascii", errors="replace").split(";")
        numbers = [int(f) for f in fields if f.isdigit()]
        modifiers = _xterm_modifiers(numbers[1]) if len(numbers) > 1 else KeyModifiers.NONE

        if final in _FINAL_KEYS:
            return KeyEvent(_FINAL_KEYS[final], None, modifiers)

        if final == ord("~") and numbers:
            if numbers[0] in _TILDE_KEYS:
                return KeyEvent(_TILDE_KEYS[numbers[0]], None, modifiers)
            if numbers[0] in _TILDE_FKEYS:
                return KeyEvent(KeyCode.F, str(_TILDE_FKEYS[numbers[0]]), modifiers)

        return KeyEvent(KeyCode.UNKNOWN)
