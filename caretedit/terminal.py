"""Drawing to a terminal with escape sequences and reading key presses."""

from __future__ import annotations

import codecs
import os
import selectors
import signal
import sys
from collections import deque
from dataclasses import dataclass
from typing import Optional, TextIO, Union

from caretedit.annotated_string import AnnotatedString
from caretedit.annotation import AnnotationType
from caretedit.commands import KeyCode, KeyEvent, KeyModifiers, ResizeEvent
from caretedit.geometry import Position, Size

try:
    import termios
    import tty
except ImportError:  # pragma: no cover - platforms without termios
    termios = None  # type: ignore[assignment]
    tty = None  # type: ignore[assignment]

Rgb = tuple[int, int, int]

_ESC = "\x1b"
_CSI = "\x1b["
_REVERSE = "\x1b[7m"
_RESET = "\x1b[0m"
_MAX_COORD = 0xFFFF


@dataclass(frozen=True)
class Attribute:
    """Foreground and background colours of highlighted text."""

    foreground: Optional[Rgb] = None
    background: Optional[Rgb] = None


_ATTRIBUTES = {
    AnnotationType.MATCH: Attribute((0, 0, 0), (255, 251, 0)),
    AnnotationType.SELECTED_MATCH: Attribute((0, 0, 0), (255, 165, 0)),
    AnnotationType.NUMBER: Attribute((255, 99, 71)),
    AnnotationType.KEYWORD: Attribute((137, 206, 255)),
    AnnotationType.TYPE: Attribute((0, 140, 0)),
    AnnotationType.KNOWN_VALUE: Attribute((100, 0, 140)),
    AnnotationType.CHAR: Attribute((255, 191, 0)),
    AnnotationType.LIFETIME_SPECIFIER: Attribute((255, 191, 0)),
    AnnotationType.COMMENT: Attribute((0, 100, 0)),
    AnnotationType.MULTILINE_COMMENT: Attribute((0, 100, 100)),
    AnnotationType.STRING: Attribute((255, 0, 255)),
}


def attribute_for(annotation_type: AnnotationType) -> Attribute:
    """Colours used to draw text with ``annotation_type``."""
    return _ATTRIBUTES[annotation_type]


_CSI_FINALS = {
    "A": KeyCode.UP,
    "B": KeyCode.DOWN,
    "C": KeyCode.RIGHT,
    "D": KeyCode.LEFT,
    "H": KeyCode.HOME,
    "F": KeyCode.END,
    "Z": KeyCode.BACK_TAB,
}

_SS3_FINALS = {
    **{key: code for key, code in _CSI_FINALS.items() if key != "Z"},
    "P": KeyCode.FUNCTION,
    "Q": KeyCode.FUNCTION,
    "R": KeyCode.FUNCTION,
    "S": KeyCode.FUNCTION,
}

_TILDE_CODES = {
    1: KeyCode.HOME,
    2: KeyCode.INSERT,
    3: KeyCode.DELETE,
    4: KeyCode.END,
    5: KeyCode.PAGE_UP,
    6: KeyCode.PAGE_DOWN,
    7: KeyCode.HOME,
    8: KeyCode.END,
    **{code: KeyCode.FUNCTION for code in (11, 12, 13, 14, 15, 17, 18, 19, 20, 21, 23, 24)},
}


def _modifiers(param: str) -> KeyModifiers:
    try:
        bits = int(param) - 1
    except ValueError:
        return KeyModifiers.NONE
    modifiers = KeyModifiers.NONE
    if bits & 1:
        modifiers |= KeyModifiers.SHIFT
    if bits & 2:
        modifiers |= KeyModifiers.ALT
    if bits & 4:
        modifiers |= KeyModifiers.CONTROL
    return modifiers


def _decode_char(ch: str) -> KeyEvent:
    if ch in "\r\n":
        return KeyEvent(KeyCode.ENTER)
    if ch == "\t":
        return KeyEvent(KeyCode.TAB)
    if ch in "\x7f\x08":
        return KeyEvent(KeyCode.BACKSPACE)
    if ch == _ESC:
        return KeyEvent(KeyCode.ESC)
    if ch == "\x00":
        return KeyEvent(KeyCode.CHAR, KeyModifiers.CONTROL, " ")
    if "\x01" <= ch <= "\x1a":
        return KeyEvent(KeyCode.CHAR, KeyModifiers.CONTROL, chr(ord(ch) - 1 + ord("a")))
    if "\x1c" <= ch <= "\x1f":
        return KeyEvent(KeyCode.CHAR, KeyModifiers.CONTROL, chr(ord(ch) - 0x1C + ord("4")))
    modifiers = KeyModifiers.SHIFT if ch.isupper() else KeyModifiers.NONE
    return KeyEvent(KeyCode.CHAR, modifiers, ch)


def _decode_escape(text: str, index: int) -> tuple[Optional[KeyEvent], int]:
    """Decode what follows an ESC at ``index``; return the event and next index."""
    if index >= len(text) or text[index] == _ESC:
        return KeyEvent(KeyCode.ESC), index
    ch = text[index]
    if ch == "[":
        end = index + 1
        while end < len(text) and text[end] in "0123456789;":
            end += 1
        if end >= len(text):
            return KeyEvent(KeyCode.ESC), index
        final = text[end]
        params = text[index + 1 : end].split(";")
        modifiers = _modifiers(params[1]) if len(params) > 1 else KeyModifiers.NONE
        if final == "~":
            try:
                code = _TILDE_CODES.get(int(params[0]))
            except ValueError:
                code = None
        else:
            code = _CSI_FINALS.get(final)
        if code is KeyCode.BACK_TAB:
            modifiers |= KeyModifiers.SHIFT
        return (KeyEvent(code, modifiers) if code is not None else None), end + 1
    if ch == "O" and index + 1 < len(text):
        code = _SS3_FINALS.get(text[index + 1])
        return (KeyEvent(code) if code is not None else None), index + 2
    event = _decode_char(ch)
    return KeyEvent(event.code, event.modifiers | KeyModifiers.ALT, event.char), index + 1


def decode_keys(data: Union[str, bytes]) -> list[KeyEvent]:
    """Decode terminal input into key events; unknown sequences are dropped."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    events: list[KeyEvent] = []
    index = 0
    while index < len(data):
        ch = data[index]
        index += 1
        if ch == _ESC:
            event, index = _decode_escape(data, index)
            if event is not None:
                events.append(event)
        else:
            events.append(_decode_char(ch))
    return events


def _rgb(prefix: int, color: Rgb) -> str:
    red, green, blue = color
    return f"{_CSI}{prefix};2;{red};{green};{blue}m"


class Terminal:
    """Queues escape sequences on ``stream`` and reads keys from standard input."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._saved_mode: Optional[list] = None
        self._pending: deque = deque()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._wake_read: Optional[int] = None
        self._wake_write: Optional[int] = None
        self._previous_resize_handler = None

    def _queue(self, text: str) -> None:
        self._stream.write(text)

    # lifecycle

    def initialize(self) -> None:
        """Enter raw mode and the alternate screen."""
        self._enable_raw_mode()
        self._watch_resize()
        self.enter_alternate_screen()
        self.disable_line_wrap()
        self.clear_screen()
        self.execute()

    def terminate(self) -> None:
        """Restore the terminal to its normal state."""
        self.leave_alternate_screen()
        self.enable_line_wrap()
        self.show_caret()
        self.execute()
        self._disable_raw_mode()
        self._unwatch_resize()

    @staticmethod
    def _input_fd() -> int:
        return sys.stdin.fileno()

    def _enable_raw_mode(self) -> None:
        if termios is None or tty is None:
            raise OSError("raw mode is not supported on this platform")
        fd = self._input_fd()
        self._saved_mode = termios.tcgetattr(fd)
        tty.setraw(fd)

    def _disable_raw_mode(self) -> None:
        if self._saved_mode is not None and termios is not None:
            termios.tcsetattr(self._input_fd(), termios.TCSADRAIN, self._saved_mode)
            self._saved_mode = None

    def _watch_resize(self) -> None:
        if not hasattr(signal, "SIGWINCH") or self._wake_read is not None:
            return
        read_fd, write_fd = os.pipe()
        os.set_blocking(read_fd, False)
        os.set_blocking(write_fd, False)

        def on_resize(signum, frame):
            try:
                os.write(write_fd, b"\0")
            except OSError:
                pass

        self._previous_resize_handler = signal.signal(signal.SIGWINCH, on_resize)
        self._wake_read, self._wake_write = read_fd, write_fd

    def _unwatch_resize(self) -> None:
        if self._wake_read is None:
            return
        signal.signal(signal.SIGWINCH, self._previous_resize_handler or signal.SIG_DFL)
        os.close(self._wake_read)
        os.close(self._wake_write)
        self._wake_read = self._wake_write = None
        self._previous_resize_handler = None

    # output

    def clear_screen(self) -> None:
        self._queue(f"{_CSI}2J")

    def clear_line(self) -> None:
        self._queue(f"{_CSI}2K")

    def move_caret_to(self, position: Position) -> None:
        """Move the caret; coordinates beyond 65535 are clamped."""
        col = min(position.col, _MAX_COORD)
        row = min(position.row, _MAX_COORD)
        self._queue(f"{_CSI}{row + 1};{col + 1}H")

    def enter_alternate_screen(self) -> None:
        self._queue(f"{_CSI}?1049h")

    def leave_alternate_screen(self) -> None:
        self._queue(f"{_CSI}?1049l")

    def hide_caret(self) -> None:
        self._queue(f"{_CSI}?25l")

    def show_caret(self) -> None:
        self._queue(f"{_CSI}?25h")

    def disable_line_wrap(self) -> None:
        self._queue(f"{_CSI}?7l")

    def enable_line_wrap(self) -> None:
        self._queue(f"{_CSI}?7h")

    def set_title(self, title: str) -> None:
        self._queue(f"{_ESC}]0;{title}\x07")

    def print(self, string: str) -> None:
        self._queue(string)

    def print_row(self, row: int, line_text: str) -> None:
        """Replace row ``row`` with ``line_text``."""
        self.move_caret_to(Position(col=0, row=row))
        self.clear_line()
        self.print(line_text)

    def _set_attribute(self, attribute: Attribute) -> None:
        if attribute.foreground is not None:
            self._queue(_rgb(38, attribute.foreground))
        if attribute.background is not None:
            self._queue(_rgb(48, attribute.background))

    def _reset_color(self) -> None:
        self._queue(_RESET)

    def print_annotated_row(self, row: int, annotated_string: AnnotatedString) -> None:
        """Replace row ``row`` with text coloured by its annotations."""
        self.move_caret_to(Position(col=0, row=row))
        self.clear_line()
        for part in annotated_string:
            if part.annotation_type is not None:
                self._set_attribute(attribute_for(part.annotation_type))
            self.print(part.string)
            self._reset_color()

    def print_inverted_row(self, row: int, line_text: str) -> None:
        """Replace row ``row`` with ``line_text`` in reverse video, fitted to the width."""
        width = self.size().width
        fitted = line_text[:width].ljust(width)
        self.print_row(row, f"{_REVERSE}{fitted}{_RESET}")

    def size(self) -> Size:
        """Current size of the terminal behind the output stream."""
        try:
            fd = self._stream.fileno()
        except (AttributeError, ValueError) as exc:
            raise OSError("output stream is not a terminal") from exc
        columns, lines = os.get_terminal_size(fd)
        return Size(height=lines, width=columns)

    def execute(self) -> None:
        """Flush everything queued so far."""
        self._stream.flush()

    # input

    def read_event(self) -> Union[KeyEvent, ResizeEvent]:
        """Block until the next key press or resize."""
        while not self._pending:
            self._wait_for_input()
        return self._pending.popleft()

    def _wait_for_input(self) -> None:
        fd = self._input_fd()
        with selectors.DefaultSelector() as selector:
            selector.register(fd, selectors.EVENT_READ)
            if self._wake_read is not None:
                selector.register(self._wake_read, selectors.EVENT_READ)
            ready = selector.select()
        for key, _ in ready:
            if key.fd == self._wake_read:
                self._drain_wake_pipe()
                size = self.size()
                self._pending.append(ResizeEvent(width=size.width, height=size.height))
            else:
                data = os.read(fd, 1024)
                if not data:
                    raise EOFError("input closed")
                self._pending.extend(decode_keys(self._decoder.decode(data)))

    def _drain_wake_pipe(self) -> None:
        try:
            while os.read(self._wake_read, 64):
                pass
        except BlockingIOError:
            pass