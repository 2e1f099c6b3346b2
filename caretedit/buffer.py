"""The lines of a document together with the file they belong to."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

from caretedit.annotated_string import AnnotatedString
from caretedit.document import FileType
from caretedit.geometry import Location
from caretedit.line import Line

if TYPE_CHECKING:
    from caretedit.highlighter import Highlighter

_NO_NAME = "[No Name]"


class FileInfo:
    """Path of a document, if any, and the file type derived from it."""

    def __init__(self, file_name: Optional[str] = None) -> None:
        self.path: Optional[Path] = Path(file_name) if file_name is not None else None
        if self.path is not None and self.path.suffix.lower() == ".rs":
            self.file_type = FileType.RUST
        else:
            self.file_type = FileType.TEXT

    def __repr__(self) -> str:
        return f"FileInfo({self.path!r})"

    @property
    def has_path(self) -> bool:
        return self.path is not None

    def __str__(self) -> str:
        if self.path is None or not self.path.name:
            return _NO_NAME
        return self.path.name


def _split_lines(content: str) -> list[str]:
    """Split on newlines, dropping one trailing newline and any trailing CR."""
    if not content:
        return []
    if content.endswith("\n"):
        content = content[:-1]
    return [
        text[:-1] if text.endswith("\r") else text for text in content.split("\n")
    ]


class Buffer:
    """Editable lines of a document."""

    def __init__(
        self, lines: Iterable[Line] = (), file_info: Optional[FileInfo] = None
    ) -> None:
        self.lines: list[Line] = list(lines)
        self.file_info = file_info if file_info is not None else FileInfo()
        self.is_dirty = False

    @classmethod
    def load(cls, file_name: str) -> Buffer:
        """Read ``file_name`` as UTF-8 into a new buffer."""
        with open(file_name, encoding="utf-8", newline="") as handle:
            content = handle.read()
        return cls((Line(text) for text in _split_lines(content)), FileInfo(file_name))

    @property
    def is_file_loaded(self) -> bool:
        return self.file_info.has_path

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def height(self) -> int:
        return len(self.lines)

    def _line(self, idx: int) -> Optional[Line]:
        if 0 <= idx < len(self.lines):
            return self.lines[idx]
        return None

    def grapheme_count(self, idx: int) -> int:
        """Graphemes on line ``idx``; zero past the end."""
        line = self._line(idx)
        return line.grapheme_count() if line is not None else 0

    def width_until(self, idx: int, until: int) -> int:
        """Columns taken by the first ``until`` graphemes of line ``idx``."""
        line = self._line(idx)
        return line.width_until(until) if line is not None else 0

    def get_highlighted_substring(
        self, line_idx: int, start: int, end: int, highlighter: Highlighter
    ) -> Optional[AnnotatedString]:
        """Annotated columns [start, end) of a line, or None past the end."""
        line = self._line(line_idx)
        if line is None:
            return None
        return line.get_annotated_visible_substr(
            start, end, highlighter.get_annotations(line_idx)
        )

    def highlight(self, idx: int, highlighter: Highlighter) -> None:
        """Let ``highlighter`` annotate line ``idx`` if it exists."""
        line = self._line(idx)
        if line is not None:
            highlighter.highlight(idx, line)

    def search_forward(self, query: str, start: Location) -> Optional[Location]:
        """Next match at or after ``start``, wrapping around the document."""
        if not query or not self.lines:
            return None
        count = len(self.lines)
        for step in range(count + 1):
            line_idx = (start.line_idx + step) % count
            from_idx = start.grapheme_idx if step == 0 else 0
            found = self.lines[line_idx].search_forward(query, from_idx)
            if found is not None:
                return Location(grapheme_idx=found, line_idx=line_idx)
        return None

    def search_backward(self, query: str, start: Location) -> Optional[Location]:
        """Previous match before ``start``, wrapping around the document."""
        if not query or not self.lines:
            return None
        count = len(self.lines)
        skip = max(0, count - start.line_idx - 1)
        for step in range(count + 1):
            line_idx = count - 1 - (skip + step) % count
            line = self.lines[line_idx]
            from_idx = start.grapheme_idx if step == 0 else line.grapheme_count()
            found = line.search_backward(query, from_idx)
            if found is not None:
                return Location(grapheme_idx=found, line_idx=line_idx)
        return None

    def _save_to_file(self, file_info: FileInfo) -> None:
        if file_info.path is None:
            raise ValueError("cannot save a document that has no file name")
        with open(file_info.path, "w", encoding="utf-8", newline="") as handle:
            for line in self.lines:
                handle.write(f"{line}\n")

    def save_as(self, file_name: str) -> None:
        """Write the document to ``file_name`` and adopt that name."""
        file_info = FileInfo(file_name)
        self._save_to_file(file_info)
        self.file_info = file_info
        self.is_dirty = False

    def save(self) -> None:
        """Write the document to its file."""
        self._save_to_file(self.file_info)
        self.is_dirty = False

    def insert_char(self, character: str, at: Location) -> None:
        """Insert ``character`` at ``at``; one past the last line starts a new line."""
        if at.line_idx > self.height:
            return
        if at.line_idx == self.height:
            self.lines.append(Line(character))
        else:
            self.lines[at.line_idx].insert_char(character, at.grapheme_idx)
        self.is_dirty = True

    def delete(self, at: Location) -> None:
        """Delete the grapheme at ``at``, joining the next line at line end."""
        line = self._line(at.line_idx)
        if line is None:
            return
        if at.grapheme_idx >= line.grapheme_count() and self.height > at.line_idx + 1:
            line.append(self.lines.pop(at.line_idx + 1))
            self.is_dirty = True
        elif at.grapheme_idx < line.grapheme_count():
            line.delete(at.grapheme_idx)
            self.is_dirty = True

    def insert_newline(self, at: Location) -> None:
        """Split the line at ``at``, or add an empty line after the last one."""
        if at.line_idx == self.height:
            self.lines.append(Line())
            self.is_dirty = True
        elif 0 <= at.line_idx < self.height:
            remainder = self.lines[at.line_idx].split(at.grapheme_idx)
            self.lines.insert(at.line_idx + 1, remainder)
            self.is_dirty = True