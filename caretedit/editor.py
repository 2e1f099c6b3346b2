"""The editor: ties the view, the bars and the terminal together."""

from __future__ import annotations

import sys
from contextlib import suppress
from enum import Enum, auto
from typing import Optional

from caretedit.commands import (
    Insert,
    InsertNewline,
    KeyEvent,
    Move,
    Resize,
    ResizeEvent,
    System,
    UnsupportedEventError,
    parse_command,
)
from caretedit.components import CommandBar, MessageBar, StatusBar
from caretedit.geometry import NAME, Position, Size
from caretedit.terminal import Terminal
from caretedit.view import View

QUIT_TIMES = 3

HELP_MESSAGE = "HELP: Ctrl-K = find | Ctrl-S = save | Ctrl-Q = quit"
SEARCH_PROMPT = "Search (Esc to cancel, Arrows to navigate): "
SAVE_PROMPT = "Save as: "

_EDIT_TYPES = (Insert, InsertNewline) + tuple(
    cls for cls in Insert.__mro__[:0]
)


class PromptType(Enum):
    """Which prompt, if any, the command bar is showing."""

    SEARCH = auto()
    SAVE = auto()
    NONE = auto()


def _is_edit(command) -> bool:
    from caretedit.commands import Delete, DeleteBackward

    return isinstance(command, (Insert, InsertNewline, Delete, DeleteBackward))


class Editor:
    """A terminal text editor session."""

    def __init__(self, terminal=None, file_name: Optional[str] = None) -> None:
        self.terminal = terminal if terminal is not None else Terminal()
        self.should_quit = False
        self.view = View(self.terminal)
        self.status_bar = StatusBar(self.terminal)
        self.message_bar = MessageBar(self.terminal)
        self.command_bar = CommandBar(self.terminal)
        self.prompt_type = PromptType.NONE
        self.terminal_size = Size()
        self.title = ""
        self.quit_times = 0
        self._closed = False

        self.terminal.initialize()
        try:
            size = self.terminal.size()
        except OSError:
            size = Size()
        self._handle_resize(size)
        self._update_message(HELP_MESSAGE)

        if file_name is not None:
            try:
                self.view.load(file_name)
            except (OSError, UnicodeDecodeError):
                self._update_message(f"ERR: Could not open file: {file_name}")
        self._refresh_status()

    # lifecycle

    def close(self) -> None:
        """Restore the terminal; say goodbye if the user quit."""
        if self._closed:
            return
        self._closed = True
        with suppress(OSError):
            self.terminal.terminate()
        if self.should_quit:
            with suppress(OSError):
                self.terminal.print("Goodbye.\r\n")
                self.terminal.execute()

    def __enter__(self) -> Editor:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # event loop

    def run(self) -> None:
        """Draw and process events until the user quits or input ends."""
        while True:
            self.refresh_screen()
            if self.should_quit:
                break
            try:
                event = self.terminal.read_event()
            except EOFError:
                break
            except OSError:
                continue
            self._evaluate_event(event)
            self._refresh_status()

    def refresh_screen(self) -> None:
        """Redraw whatever changed and place the caret."""
        height, width = self.terminal_size.height, self.terminal_size.width
        if height == 0 or width == 0:
            return
        bottom_bar_row = height - 1
        with suppress(OSError):
            self.terminal.hide_caret()
        if self._in_prompt():
            self.command_bar.render(bottom_bar_row)
        else:
            self.message_bar.render(bottom_bar_row)
        if height > 1:
            self.status_bar.render(height - 2)
        if height > 2:
            self.view.render(0)
        if self._in_prompt():
            caret = Position(col=self.command_bar.caret_position_col(), row=bottom_bar_row)
        else:
            caret = self.view.caret_position()
        with suppress(OSError):
            self.terminal.move_caret_to(caret)
            self.terminal.show_caret()
            self.terminal.execute()

    def _refresh_status(self) -> None:
        status = self.view.get_status()
        title = f"{status.file_name} - {NAME}"
        self.status_bar.update_status(status)
        if title != self.title:
            try:
                self.terminal.set_title(title)
            except OSError:
                return
            self.title = title

    def _evaluate_event(self, event) -> None:
        if not isinstance(event, (KeyEvent, ResizeEvent)):
            return
        try:
            command = parse_command(event)
        except UnsupportedEventError:
            return
        self.process_command(command)

    # command handling

    def process_command(self, command) -> None:
        """Carry out one command, taking an open prompt into account."""
        if isinstance(command, Resize):
            self._handle_resize(command.size)
            return
        if self.prompt_type is PromptType.SEARCH:
            self._process_during_search(command)
        elif self.prompt_type is PromptType.SAVE:
            self._process_during_save(command)
        else:
            self._process_no_prompt(command)

    def _process_no_prompt(self, command) -> None:
        if command is System.QUIT:
            self._handle_quit()
            return
        self._reset_quit_times()
        if command is System.SEARCH:
            self._set_prompt(PromptType.SEARCH)
        elif command is System.SAVE:
            self._handle_save()
        elif isinstance(command, Move):
            self.view.handle_move_command(command)
        elif _is_edit(command):
            self.view.handle_edit_command(command)

    def _handle_resize(self, size: Size) -> None:
        self.terminal_size = size
        self.view.resize(Size(height=max(0, size.height - 2), width=size.width))
        bar_size = Size(height=1, width=size.width)
        self.message_bar.resize(bar_size)
        self.status_bar.resize(bar_size)
        self.command_bar.resize(bar_size)

    def _handle_quit(self) -> None:
        modified = self.view.get_status().is_modified
        if not modified or self.quit_times + 1 == QUIT_TIMES:
            self.should_quit = True
        else:
            remaining = QUIT_TIMES - self.quit_times - 1
            self._update_message(
                "WARNING! File has unsaved changes. "
                f"Press Ctrl-Q {remaining} more times to quit."
            )
            self.quit_times += 1

    def _reset_quit_times(self) -> None:
        if self.quit_times > 0:
            self.quit_times = 0
            self._update_message("")

    def _handle_save(self) -> None:
        if self.view.is_file_loaded:
            self._save(None)
        else:
            self._set_prompt(PromptType.SAVE)

    def _process_during_save(self, command) -> None:
        if command is System.DISMISS:
            self._set_prompt(PromptType.NONE)
            self._update_message("Save aborted.")
        elif isinstance(command, InsertNewline):
            file_name = self.command_bar.value
            self._save(file_name)
            self._set_prompt(PromptType.NONE)
        elif _is_edit(command):
            self.command_bar.handle_edit_command(command)

    def _save(self, file_name: Optional[str]) -> None:
        try:
            if file_name is not None:
                self.view.save_as(file_name)
            else:
                self.view.save()
        except (OSError, ValueError):
            self._update_message("Error writing file!")
        else:
            self._update_message("File saved successfully.")

    def _process_during_search(self, command) -> None:
        if command is System.DISMISS:
            self._set_prompt(PromptType.NONE)
            self.view.dismiss_search()
        elif isinstance(command, InsertNewline):
            self._set_prompt(PromptType.NONE)
            self.view.exit_search()
        elif _is_edit(command):
            self.command_bar.handle_edit_command(command)
            self.view.search(self.command_bar.value)
        elif command in (Move.RIGHT, Move.DOWN):
            self.view.search_next()
        elif command in (Move.UP, Move.LEFT):
            self.view.search_prev()

    def _update_message(self, new_message: str) -> None:
        self.message_bar.update_message(new_message)

    def _in_prompt(self) -> bool:
        return self.prompt_type is not PromptType.NONE

    def _set_prompt(self, prompt_type: PromptType) -> None:
        if prompt_type is PromptType.NONE:
            self.message_bar.needs_redraw = True
        elif prompt_type is PromptType.SAVE:
            self.command_bar.set_prompt(SAVE_PROMPT)
        else:
            self.view.enter_search()
            self.command_bar.set_prompt(SEARCH_PROMPT)
        self.command_bar.clear_value()
        self.prompt_type = prompt_type


def main(argv=None) -> int:
    """Start the editor, opening the file named by the first argument."""
    args = sys.argv[1:] if argv is None else list(argv)
    file_name = args[0] if args else None
    with Editor(Terminal(), file_name) as editor:
        editor.run()
    return 0