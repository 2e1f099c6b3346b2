"""The text area: editing, scrolling, searching and drawing the document."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional

from caretedit.buffer import Buffer
from caretedit.commands import Delete, DeleteBackward, Insert, InsertNewline, Move
from caretedit.components import UIComponent
from caretedit.document import DocumentStatus
from caretedit.geometry import NAME, VERSION, Location, Position, Size
from caretedit.highlighter import Highlighter
from caretedit.line import Line


class SearchDirection(Enum):
    FORWARD = auto()
    BACKWARD = auto()


@dataclass
class SearchInfo:
    """State kept while a search prompt is open."""

    prev_location: Location
    prev_scroll_offset: Position
    query: Optional[Line] = None


def _div_ceil(value: int, divisor: int) -> int:
    return -(-value // divisor)


def build_welcome_message(width: int) -> str:
    """The welcome line for an empty document, or just ``~`` if it doesn't fit."""
    if width == 0:
        return ""
    message = f"{NAME} editor -- version {VERSION}"
    remaining_width = width - 1
    if remaining_width < len(message):
        return "~"
    return "~" + format(message, f"^{remaining_width}")


class View(UIComponent):
    """Shows and edits the document held in a buffer."""

    def __init__(self, terminal) -> None:
        super().__init__(terminal)
        self.buffer = Buffer()
        self.size = Size()
        self.text_location = Location()
        self.scroll_offset = Position()
        self.search_info: Optional[SearchInfo] = None

    def get_status(self) -> DocumentStatus:
        file_info = self.buffer.file_info
        return DocumentStatus(
            total_lines=self.buffer.height,
            current_line_idx=self.text_location.line_idx,
            is_modified=self.buffer.is_dirty,
            file_name=str(file_info),
            file_type=file_info.file_type,
        )

    @property
    def is_file_loaded(self) -> bool:
        return self.buffer.is_file_loaded

    # search

    def enter_search(self) -> None:
        self.search_info = SearchInfo(self.text_location, self.scroll_offset)

    def exit_search(self) -> None:
        self.search_info = None
        self.needs_redraw = True

    def dismiss_search(self) -> None:
        """Leave the search, returning to where it started."""
        if self.search_info is not None:
            self.text_location = self.search_info.prev_location
            self.scroll_offset = self.search_info.prev_scroll_offset
            self._scroll_text_location_into_view()
        self.exit_search()

    def search(self, query: str) -> None:
        """Search forward for ``query`` from the current location."""
        if self.search_info is not None:
            self.search_info.query = Line(query)
        self._search_in_direction(self.text_location, SearchDirection.FORWARD)

    def _search_query(self) -> Optional[Line]:
        if self.search_info is None:
            return None
        return self.search_info.query

    def _search_in_direction(self, start: Location, direction: SearchDirection) -> None:
        query = self._search_query()
        location = None
        if query is not None and len(query) > 0:
            if direction is SearchDirection.FORWARD:
                location = self.buffer.search_forward(str(query), start)
            else:
                location = self.buffer.search_backward(str(query), start)
        if location is not None:
            self.text_location = location
            self._center_text_location()
        self.needs_redraw = True

    def search_next(self) -> None:
        query = self._search_query()
        step_right = min(query.grapheme_count(), 1) if query is not None else 1
        start = replace(
            self.text_location, grapheme_idx=self.text_location.grapheme_idx + step_right
        )
        self._search_in_direction(start, SearchDirection.FORWARD)

    def search_prev(self) -> None:
        self._search_in_direction(self.text_location, SearchDirection.BACKWARD)

    # file i/o

    def load(self, file_name: str) -> None:
        self.buffer = Buffer.load(file_name)
        self.needs_redraw = True

    def save(self) -> None:
        self.buffer.save()
        self.needs_redraw = True

    def save_as(self, file_name: str) -> None:
        self.buffer.save_as(file_name)
        self.needs_redraw = True

    # command handling

    def handle_edit_command(self, command) -> None:
        match command:
            case Insert(character=character):
                self._insert_char(character)
            case Delete():
                self._delete()
            case DeleteBackward():
                self._delete_backward()
            case InsertNewline():
                self._insert_newline()

    def handle_move_command(self, command: Move) -> None:
        height = self.size.height
        match command:
            case Move.UP:
                self._move_up(1)
            case Move.DOWN:
                self._move_down(1)
            case Move.LEFT:
                self._move_left()
            case Move.RIGHT:
                self._move_right()
            case Move.PAGE_UP:
                self._move_up(max(0, height - 1))
            case Move.PAGE_DOWN:
                self._move_down(max(0, height - 1))
            case Move.START_OF_LINE:
                self._move_to_start_of_line()
            case Move.END_OF_LINE:
                self._move_to_end_of_line()
        self._scroll_text_location_into_view()

    # text editing

    def _insert_newline(self) -> None:
        self.buffer.insert_newline(self.text_location)
        self.handle_move_command(Move.RIGHT)
        self.needs_redraw = True

    def _delete_backward(self) -> None:
        if self.text_location.line_idx != 0 or self.text_location.grapheme_idx != 0:
            self.handle_move_command(Move.LEFT)
            self._delete()

    def _delete(self) -> None:
        self.buffer.delete(self.text_location)
        self.needs_redraw = True

    def _insert_char(self, character: str) -> None:
        line_idx = self.text_location.line_idx
        old_len = self.buffer.grapheme_count(line_idx)
        self.buffer.insert_char(character, self.text_location)
        if self.buffer.grapheme_count(line_idx) > old_len:
            self.handle_move_command(Move.RIGHT)
        self.needs_redraw = True

    # scrolling

    def _scroll_vertically(self, to: int) -> None:
        height = self.size.height
        row = self.scroll_offset.row
        if to < row:
            self.scroll_offset = replace(self.scroll_offset, row=to)
        elif to >= row + height:
            self.scroll_offset = replace(self.scroll_offset, row=max(0, to - height) + 1)
        else:
            return
        self.needs_redraw = True

    def _scroll_horizontally(self, to: int) -> None:
        width = self.size.width
        col = self.scroll_offset.col
        if to < col:
            self.scroll_offset = replace(self.scroll_offset, col=to)
        elif to >= col + width:
            self.scroll_offset = replace(self.scroll_offset, col=max(0, to - width) + 1)
        else:
            return
        self.needs_redraw = True

    def _scroll_text_location_into_view(self) -> None:
        position = self._text_location_to_position()
        self._scroll_vertically(position.row)
        self._scroll_horizontally(position.col)

    def _center_text_location(self) -> None:
        position = self._text_location_to_position()
        self.scroll_offset = Position(
            col=max(0, position.col - _div_ceil(self.size.width, 2)),
            row=max(0, position.row - _div_ceil(self.size.height, 2)),
        )
        self.needs_redraw = True

    # positions

    def caret_position(self) -> Position:
        """Caret position relative to the visible area."""
        return self._text_location_to_position().saturating_sub(self.scroll_offset)

    def _text_location_to_position(self) -> Position:
        row = self.text_location.line_idx
        col = self.buffer.width_until(row, self.text_location.grapheme_idx)
        return Position(col=col, row=row)

    # movement

    def _move_up(self, step: int) -> None:
        self.text_location = replace(
            self.text_location, line_idx=max(0, self.text_location.line_idx - step)
        )
        self._snap_to_valid_grapheme()

    def _move_down(self, step: int) -> None:
        self.text_location = replace(
            self.text_location, line_idx=self.text_location.line_idx + step
        )
        self._snap_to_valid_grapheme()
        self._snap_to_valid_line()

    def _move_right(self) -> None:
        count = self.buffer.grapheme_count(self.text_location.line_idx)
        if self.text_location.grapheme_idx < count:
            self.text_location = replace(
                self.text_location, grapheme_idx=self.text_location.grapheme_idx + 1
            )
        else:
            self._move_to_start_of_line()
            self._move_down(1)

    def _move_left(self) -> None:
        if self.text_location.grapheme_idx > 0:
            self.text_location = replace(
                self.text_location, grapheme_idx=self.text_location.grapheme_idx - 1
            )
        elif self.text_location.line_idx > 0:
            self._move_up(1)
            self._move_to_end_of_line()

    def _move_to_start_of_line(self) -> None:
        self.text_location = replace(self.text_location, grapheme_idx=0)

    def _move_to_end_of_line(self) -> None:
        self.text_location = replace(
            self.text_location,
            grapheme_idx=self.buffer.grapheme_count(self.text_location.line_idx),
        )

    def _snap_to_valid_grapheme(self) -> None:
        limit = self.buffer.grapheme_count(self.text_location.line_idx)
        self.text_location = replace(
            self.text_location, grapheme_idx=min(self.text_location.grapheme_idx, limit)
        )

    def _snap_to_valid_line(self) -> None:
        self.text_location = replace(
            self.text_location,
            line_idx=min(self.text_location.line_idx, self.buffer.height),
        )

    # component

    def set_size(self, size: Size) -> None:
        self.size = size
        self._scroll_text_location_into_view()

    def draw(self, origin_row: int) -> None:
        height, width = self.size.height, self.size.width
        end_y = origin_row + height
        top_third = _div_ceil(height, 3)
        scroll_top = self.scroll_offset.row

        query_line = self._search_query()
        query = str(query_line) if query_line is not None else None
        selected_match = self.text_location if query is not None else None
        highlighter = Highlighter(query, selected_match, self.buffer.file_info.file_type)

        for row in range(end_y + scroll_top):
            self.buffer.highlight(row, highlighter)

        left = self.scroll_offset.col
        right = left + width
        for current_row in range(origin_row, end_y):
            line_idx = current_row - origin_row + scroll_top
            annotated = self.buffer.get_highlighted_substring(
                line_idx, left, right, highlighter
            )
            if annotated is not None:
                self.terminal.print_annotated_row(current_row, annotated)
            elif current_row == top_third and self.buffer.is_empty:
                self.terminal.print_row(current_row, build_welcome_message(width))
            else:
                self.terminal.print_row(current_row, "~")