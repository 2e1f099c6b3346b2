import pytest

from caretedit.commands import (
    Delete,
    DeleteBackward,
    Insert,
    InsertNewline,
    KeyCode,
    KeyEvent,
    KeyModifiers,
    Move,
    Resize,
    ResizeEvent,
    System,
    UnsupportedEventError,
    parse_command,
    parse_edit,
    parse_move,
    parse_system,
)
from caretedit.geometry import Size


@pytest.mark.parametrize("modifiers", [KeyModifiers.NONE, KeyModifiers.SHIFT])
def test_character_inserts(modifiers):
    event = KeyEvent(KeyCode.CHAR, modifiers, "a")
    assert parse_command(event) == Insert("a")


@pytest.mark.parametrize(
    "code, expected",
    [
        (KeyCode.TAB, Insert("\t")),
        (KeyCode.ENTER, InsertNewline()),
        (KeyCode.BACKSPACE, DeleteBackward()),
        (KeyCode.DELETE, Delete()),
    ],
)
def test_edit_keys(code, expected):
    assert parse_edit(KeyEvent(code)) == expected
    assert parse_command(KeyEvent(code)) == expected


@pytest.mark.parametrize(
    "code, expected",
    [
        (KeyCode.UP, Move.UP),
        (KeyCode.DOWN, Move.DOWN),
        (KeyCode.LEFT, Move.LEFT),
        (KeyCode.RIGHT, Move.RIGHT),
        (KeyCode.PAGE_UP, Move.PAGE_UP),
        (KeyCode.PAGE_DOWN, Move.PAGE_DOWN),
        (KeyCode.HOME, Move.START_OF_LINE),
        (KeyCode.END, Move.END_OF_LINE),
    ],
)
def test_move_keys(code, expected):
    assert parse_command(KeyEvent(code)) is expected


@pytest.mark.parametrize(
    "char, expected",
    [("q", System.QUIT), ("s", System.SAVE), ("k", System.SEARCH)],
)
def test_control_keys(char, expected):
    event = KeyEvent(KeyCode.CHAR, KeyModifiers.CONTROL, char)
    assert parse_command(event) is expected


def test_escape_dismisses():
    assert parse_system(KeyEvent(KeyCode.ESC)) is System.DISMISS


def test_unknown_control_combination_rejected():
    with pytest.raises(UnsupportedEventError):
        parse_command(KeyEvent(KeyCode.CHAR, KeyModifiers.CONTROL, "x"))


def test_modified_arrow_rejected():
    with pytest.raises(UnsupportedEventError):
        parse_move(KeyEvent(KeyCode.UP, KeyModifiers.ALT))
    with pytest.raises(UnsupportedEventError):
        parse_command(KeyEvent(KeyCode.UP, KeyModifiers.ALT))


def test_control_character_is_not_insert():
    with pytest.raises(UnsupportedEventError):
        parse_edit(KeyEvent(KeyCode.CHAR, KeyModifiers.CONTROL, "q"))


def test_arrow_is_not_edit():
    with pytest.raises(UnsupportedEventError):
        parse_edit(KeyEvent(KeyCode.UP))


def test_resize_event():
    command = parse_command(ResizeEvent(width=80, height=24))
    assert command == Resize(Size(height=24, width=80))


def test_unknown_event_rejected():
    with pytest.raises(UnsupportedEventError):
        parse_command(object())


def test_char_key_requires_character():
    with pytest.raises(ValueError):
        KeyEvent(KeyCode.CHAR)