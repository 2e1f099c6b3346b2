"""Key events and the editor commands they map to."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag, auto
from typing import Optional, Union

from caretedit.geometry import Size


class UnsupportedEventError(ValueError):
    """Raised when an event does not map to a command."""


class KeyCode(Enum):
    """Keys the editor distinguishes."""

    CHAR = auto()
    TAB = auto()
    ENTER = auto()
    BACKSPACE = auto()
    DELETE = auto()
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    HOME = auto()
    END = auto()
    ESC = auto()
    INSERT = auto()
    BACK_TAB = auto()
    FUNCTION = auto()


class KeyModifiers(Flag):
    """Modifier keys held during a key press."""

    NONE = 0
    SHIFT = auto()
    CONTROL = auto()
    ALT = auto()


@dataclass(frozen=True)
class KeyEvent:
    """A key press; ``char`` holds the character for ``KeyCode.CHAR``."""

    code: KeyCode
    modifiers: KeyModifiers = KeyModifiers.NONE
    char: Optional[str] = None

    def __post_init__(self) -> None:
        if self.code is KeyCode.CHAR and (self.char is None or len(self.char) != 1):
            raise ValueError("a character key needs exactly one character")


@dataclass(frozen=True)
class ResizeEvent:
    """The terminal changed to ``width`` columns and ``height`` rows."""

    width: int
    height: int


@dataclass(frozen=True)
class Insert:
    character: str


@dataclass(frozen=True)
class InsertNewline:
    pass


@dataclass(frozen=True)
class Delete:
    pass


@dataclass(frozen=True)
class DeleteBackward:
    pass


Edit = Union[Insert, InsertNewline, Delete, DeleteBackward]


class Move(Enum):
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    START_OF_LINE = auto()
    END_OF_LINE = auto()
    UP = auto()
    LEFT = auto()
    RIGHT = auto()
    DOWN = auto()


class System(Enum):
    SAVE = auto()
    QUIT = auto()
    DISMISS = auto()
    SEARCH = auto()


@dataclass(frozen=True)
class Resize:
    size: Size


Command = Union[Insert, InsertNewline, Delete, DeleteBackward, Move, System, Resize]

_MOVES = {
    KeyCode.UP: Move.UP,
    KeyCode.DOWN: Move.DOWN,
    KeyCode.LEFT: Move.LEFT,
    KeyCode.RIGHT: Move.RIGHT,
    KeyCode.PAGE_DOWN: Move.PAGE_DOWN,
    KeyCode.PAGE_UP: Move.PAGE_UP,
    KeyCode.HOME: Move.START_OF_LINE,
    KeyCode.END: Move.END_OF_LINE,
}

_CONTROL_KEYS = {"q": System.QUIT, "s": System.SAVE, "k": System.SEARCH}

_PLAIN_EDITS = {
    KeyCode.TAB: Insert("\t"),
    KeyCode.ENTER: InsertNewline(),
    KeyCode.BACKSPACE: DeleteBackward(),
    KeyCode.DELETE: Delete(),
}


def parse_edit(event: KeyEvent) -> Edit:
    """Map a key event to an edit command."""
    if event.code is KeyCode.CHAR and event.modifiers in (
        KeyModifiers.NONE,
        KeyModifiers.SHIFT,
    ):
        return Insert(event.char)
    if event.modifiers == KeyModifiers.NONE and event.code in _PLAIN_EDITS:
        return _PLAIN_EDITS[event.code]
    raise UnsupportedEventError(
        f"Unsupported key code {event.code} with modifiers {event.modifiers}"
    )


def parse_move(event: KeyEvent) -> Move:
    """Map a key event to a movement command."""
    if event.modifiers != KeyModifiers.NONE:
        raise UnsupportedEventError(
            f"Unsupported key code {event.code} or modifier {event.modifiers}"
        )
    try:
        return _MOVES[event.code]
    except KeyError:
        raise UnsupportedEventError(f"Unsupported code: {event.code}") from None


def parse_system(event: KeyEvent) -> System:
    """Map a key event to a system command."""
    if event.modifiers == KeyModifiers.CONTROL:
        if event.code is KeyCode.CHAR and event.char in _CONTROL_KEYS:
            return _CONTROL_KEYS[event.char]
        raise UnsupportedEventError(f"Unsupported CONTROL+{event.code} combination")
    if event.modifiers == KeyModifiers.NONE and event.code is KeyCode.ESC:
        return System.DISMISS
    raise UnsupportedEventError(
        f"Unsupported key code {event.code} or modifier {event.modifiers}"
    )


def parse_command(event: object) -> Command:
    """Map a key or resize event to a command."""
    if isinstance(event, KeyEvent):
        for parse in (parse_edit, parse_move, parse_system):
            try:
                return parse(event)
            except UnsupportedEventError:
                continue
        raise UnsupportedEventError(f"Event not supported: {event!r}")
    if isinstance(event, ResizeEvent):
        return Resize(Size(height=event.height, width=event.width))
    raise UnsupportedEventError(f"Event not supported: {event!r}")