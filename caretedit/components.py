"""Screen components: the command bar, the message bar and the status bar."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from caretedit.commands import Delete, DeleteBackward, Insert, InsertNewline
from caretedit.document import DocumentStatus
from caretedit.geometry import Size
from caretedit.line import Line

DEFAULT_DURATION = 5.0


class UIComponent(ABC):
    """A part of the screen that redraws itself only when needed."""

    def __init__(self, terminal) -> None:
        self.terminal = terminal
        self._needs_redraw = False

    @property
    def needs_redraw(self) -> bool:
        return self._needs_redraw

    @needs_redraw.setter
    def needs_redraw(self, value: bool) -> None:
        self._needs_redraw = value

    def resize(self, size: Size) -> None:
        """Adopt ``size`` and schedule a redraw."""
        self.set_size(size)
        self.needs_redraw = True

    def render(self, origin_row: int) -> None:
        """Draw at ``origin_row`` if needed.

        A failed draw leaves the component marked for redrawing.
        """
        if not self.needs_redraw:
            return
        try:
            self.draw(origin_row)
        except OSError:
            return
        self.needs_redraw = False

    @abstractmethod
    def set_size(self, size: Size) -> None:
        """Store the area the component may draw into."""

    @abstractmethod
    def draw(self, origin_row: int) -> None:
        """Draw the component starting at ``origin_row``."""


class CommandBar(UIComponent):
    """A prompt followed by a single line of input."""

    def __init__(self, terminal) -> None:
        super().__init__(terminal)
        self.prompt = ""
        self._value = Line()
        self.size = Size()

    @property
    def value(self) -> str:
        return str(self._value)

    def handle_edit_command(self, command) -> None:
        """Apply an edit command to the input."""
        match command:
            case Insert(character=character):
                self._value.append_char(character)
            case DeleteBackward():
                self._value.delete_last()
            case Delete() | InsertNewline():
                pass
        self.needs_redraw = True

    def caret_position_col(self) -> int:
        """Column of the caret, clamped to the bar width."""
        return min(len(self.prompt) + self._value.grapheme_count(), self.size.width)

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt
        self.needs_redraw = True

    def clear_value(self) -> None:
        self._value = Line()
        self.needs_redraw = True

    def set_size(self, size: Size) -> None:
        self.size = size

    def draw(self, origin_row: int) -> None:
        area_for_value = max(0, self.size.width - len(self.prompt))
        value_end = self._value.width()
        value_start = max(0, value_end - area_for_value)
        message = self.prompt + self._value.get_visible_graphemes(value_start, value_end)
        to_print = message if len(message) <= self.size.width else ""
        self.terminal.print_row(origin_row, to_print)


@dataclass
class _Message:
    text: str
    time: float


class MessageBar(UIComponent):
    """Shows a message that disappears after a few seconds."""

    def __init__(self, terminal, clock: Callable[[], float] = time.monotonic) -> None:
        super().__init__(terminal)
        self._clock = clock
        self._message = _Message("", clock())
        self._cleared_after_expiry = False

    def _is_expired(self) -> bool:
        return self._clock() - self._message.time > DEFAULT_DURATION

    @property
    def needs_redraw(self) -> bool:
        return (
            not self._cleared_after_expiry and self._is_expired()
        ) or self._needs_redraw

    @needs_redraw.setter
    def needs_redraw(self, value: bool) -> None:
        self._needs_redraw = value

    def update_message(self, new_message: str) -> None:
        """Show ``new_message`` from now on."""
        self._message = _Message(new_message, self._clock())
        self._cleared_after_expiry = False
        self.needs_redraw = True

    def set_size(self, size: Size) -> None:
        pass

    def draw(self, origin_row: int) -> None:
        expired = self._is_expired()
        if expired:
            self._cleared_after_expiry = True
        self.terminal.print_row(origin_row, "" if expired else self._message.text)


class StatusBar(UIComponent):
    """Inverted line describing the open document."""

    def __init__(self, terminal) -> None:
        super().__init__(terminal)
        self.current_status = DocumentStatus()
        self.size = Size()

    def update_status(self, new_status: DocumentStatus) -> None:
        """Adopt ``new_status``, redrawing only if it changed."""
        if new_status != self.current_status:
            self.current_status = new_status
            self.needs_redraw = True

    def set_size(self, size: Size) -> None:
        self.size = size

    def draw(self, origin_row: int) -> None:
        status = self.current_status
        beginning = (
            f"{status.file_name} - {status.line_count_to_string()} "
            f"{status.modified_indicator_to_string()}"
        )
        back_part = (
            f"{status.file_type_to_string()} - {status.position_indicator_to_string()}"
        )
        remainder_len = max(0, self.size.width - len(beginning))
        text = f"{beginning}{back_part:>{remainder_len}}"
        to_print = text if len(text) <= self.size.width else ""
        self.terminal.print_inverted_row(origin_row, to_print)