import io

import pytest

from caretedit.commands import Delete, DeleteBackward, Insert, InsertNewline
from caretedit.components import CommandBar, MessageBar, StatusBar
from caretedit.document import DocumentStatus, FileType
from caretedit.geometry import Size
from caretedit.terminal import Terminal


class RecordingTerminal:
    def __init__(self):
        self.rows = {}
        self.inverted = {}
        self.calls = 0

    def print_row(self, row, text):
        self.rows[row] = text
        self.calls += 1

    def print_inverted_row(self, row, text):
        self.inverted[row] = text
        self.calls += 1


@pytest.fixture
def terminal():
    return RecordingTerminal()


def type_text(bar, text):
    for ch in text:
        bar.handle_edit_command(Insert(ch))


def test_command_bar_collects_input(terminal):
    bar = CommandBar(terminal)
    type_text(bar, "abc")
    bar.handle_edit_command(DeleteBackward())
    bar.handle_edit_command(Delete())
    bar.handle_edit_command(InsertNewline())
    assert bar.value == "ab"


def test_command_bar_clear_value(terminal):
    bar = CommandBar(terminal)
    type_text(bar, "xyz")
    bar.clear_value()
    assert bar.value == ""
    assert bar.needs_redraw


def test_command_bar_caret_column(terminal):
    bar = CommandBar(terminal)
    bar.set_prompt("Save as: ")
    bar.resize(Size(height=1, width=80))
    type_text(bar, "ab")
    assert bar.caret_position_col() == len("Save as: ") + 2


def test_command_bar_caret_clamped_to_width(terminal):
    bar = CommandBar(terminal)
    bar.set_prompt("Save as: ")
    bar.resize(Size(height=1, width=5))
    type_text(bar, "ab")
    assert bar.caret_position_col() == 5


def test_command_bar_renders_prompt_and_value(terminal):
    bar = CommandBar(terminal)
    bar.set_prompt("Save as: ")
    bar.resize(Size(height=1, width=20))
    type_text(bar, "ab")
    bar.render(3)
    assert terminal.rows[3] == "Save as: ab"
    assert not bar.needs_redraw


def test_command_bar_render_skipped_when_clean(terminal):
    bar = CommandBar(terminal)
    bar.resize(Size(height=1, width=20))
    bar.render(0)
    bar.render(0)
    assert terminal.calls == 1


def test_command_bar_shows_tail_of_long_value(terminal):
    bar = CommandBar(terminal)
    bar.set_prompt("Find: ")
    bar.resize(Size(height=1, width=12))
    type_text(bar, "abcdefghij")
    bar.render(0)
    assert terminal.rows[0] == "Find: " + "abcdefghij"[4:]


def test_command_bar_prints_nothing_when_prompt_too_wide(terminal):
    bar = CommandBar(terminal)
    bar.set_prompt("Save as: ")
    bar.resize(Size(height=1, width=4))
    bar.render(0)
    assert terminal.rows[0] == ""


def test_message_bar_shows_then_expires(terminal):
    now = [0.0]
    bar = MessageBar(terminal, clock=lambda: now[0])
    bar.update_message("hello")
    bar.render(0)
    assert terminal.rows[0] == "hello"
    assert not bar.needs_redraw
    now[0] = 5.0
    assert not bar.needs_redraw
    now[0] = 6.0
    assert bar.needs_redraw
    bar.render(0)
    assert terminal.rows[0] == ""
    assert not bar.needs_redraw


def test_message_bar_update_resets_expiry(terminal):
    now = [0.0]
    bar = MessageBar(terminal, clock=lambda: now[0])
    now[0] = 10.0
    bar.render(0)
    bar.update_message("again")
    bar.render(0)
    assert terminal.rows[0] == "again"


def test_status_bar_layout(terminal):
    bar = StatusBar(terminal)
    bar.resize(Size(height=1, width=40))
    bar.update_status(
        DocumentStatus(
            total_lines=3,
            current_line_idx=0,
            is_modified=True,
            file_name="a.rs",
            file_type=FileType.RUST,
        )
    )
    bar.render(1)
    text = terminal.inverted[1]
    assert text.startswith("a.rs - 3 lines (modified)")
    assert text.endswith("Rust - 1/3")
    assert len(text) == 40


def test_status_bar_too_narrow_prints_empty(terminal):
    bar = StatusBar(terminal)
    bar.resize(Size(height=1, width=10))
    bar.update_status(DocumentStatus(total_lines=3, file_name="long_name.txt"))
    bar.render(0)
    assert terminal.inverted[0] == ""


def test_status_bar_same_status_does_not_redraw(terminal):
    bar = StatusBar(terminal)
    bar.resize(Size(height=1, width=40))
    status = DocumentStatus(total_lines=2, file_name="x.txt")
    bar.update_status(status)
    bar.render(0)
    bar.update_status(DocumentStatus(total_lines=2, file_name="x.txt"))
    assert not bar.needs_redraw


def test_failed_draw_keeps_redraw_pending():
    bar = StatusBar(Terminal(io.StringIO()))
    bar.resize(Size(height=1, width=40))
    bar.render(0)
    assert bar.needs_redraw