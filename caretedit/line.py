"""A single line of text, segmented into grapheme clusters."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator, Optional

import regex
from wcwidth import wcswidth, wcwidth

from caretedit.annotated_string import AnnotatedString
from caretedit.annotation import Annotation

_GRAPHEME = regex.compile(r"\X")
_ELLIPSIS = "⋯"


class GraphemeWidth(IntEnum):
    """Number of screen columns a grapheme occupies."""

    HALF = 1
    FULL = 2


@dataclass(frozen=True)
class TextFragment:
    """One grapheme of a line, with its rendering information."""

    grapheme: str
    rendered_width: GraphemeWidth
    replacement: Optional[str]
    start: int

    @property
    def end(self) -> int:
        return self.start + len(self.grapheme)


def _graphemes(text: str) -> Iterator[tuple[int, str]]:
    for match in _GRAPHEME.finditer(text):
        yield match.start(), match.group()


def _grapheme_width(grapheme: str) -> int:
    width = wcswidth(grapheme)
    if width >= 0:
        return width
    return sum(max(0, wcwidth(ch)) for ch in grapheme)


def _replacement_character(grapheme: str) -> Optional[str]:
    width = _grapheme_width(grapheme)
    if grapheme == " ":
        return None
    if grapheme == "\t":
        return " "
    if width > 0 and not grapheme.strip():
        return "␣"
    if width == 0:
        if len(grapheme) == 1 and unicodedata.category(grapheme) == "Cc":
            return "▯"
        return "·"
    return None


def _to_fragments(text: str) -> list[TextFragment]:
    fragments = []
    for start, grapheme in _graphemes(text):
        replacement = _replacement_character(grapheme)
        if replacement is not None or _grapheme_width(grapheme) <= 1:
            rendered_width = GraphemeWidth.HALF
        else:
            rendered_width = GraphemeWidth.FULL
        fragments.append(TextFragment(grapheme, rendered_width, replacement, start))
    return fragments


def _match_positions(text: str, query: str) -> Iterator[int]:
    """Yield the starts of non-overlapping occurrences of ``query``."""
    position = 0
    while True:
        found = text.find(query, position)
        if found < 0:
            return
        yield found
        position = found + max(len(query), 1)


class Line:
    """Editable text of one line; indices into the text count characters."""

    def __init__(self, text: str = "") -> None:
        if "\n" in text:
            raise ValueError("a line cannot contain a newline")
        self._string = text
        self._fragments = _to_fragments(text)

    def __repr__(self) -> str:
        return f"Line({self._string!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Line):
            return self._string == other._string
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self._string

    def __len__(self) -> int:
        return len(self._string)

    def _rebuild_fragments(self) -> None:
        self._fragments = _to_fragments(self._string)

    def get_visible_graphemes(self, start: int, end: int) -> str:
        """Text visible in the column range [start, end)."""
        return str(self.get_annotated_visible_substr(start, end, None))

    def get_annotated_visible_substr(
        self,
        start: int,
        end: int,
        annotations: Optional[Iterable[Annotation]] = None,
    ) -> AnnotatedString:
        """Annotated text visible in the column range [start, end).

        Graphemes cut by either edge become an ellipsis; invisible and
        whitespace graphemes are shown by their replacement characters.
        """
        if start >= end:
            return AnnotatedString()
        result = AnnotatedString(self._string)
        for annotation in annotations or ():
            result.add_annotation(
                annotation.annotation_type, annotation.start, annotation.end
            )

        fragment_start = self.width()
        for fragment in reversed(self._fragments):
            fragment_end = fragment_start
            fragment_start = max(0, fragment_start - int(fragment.rendered_width))

            if fragment_start > end:
                continue
            if fragment_start < end < fragment_end:
                result.replace(fragment.start, len(self._string), _ELLIPSIS)
                continue
            if fragment_start == end:
                result.truncate_right_from(fragment.start)
                continue

            if fragment_end <= start:
                result.truncate_left_until(fragment.end)
                break
            if fragment_start < start < fragment_end:
                result.replace(0, fragment.end, _ELLIPSIS)
                break

            if (
                fragment_start >= start
                and fragment_end <= end
                and fragment.replacement is not None
            ):
                result.replace(fragment.start, fragment.end, fragment.replacement)

        return result

    def grapheme_count(self) -> int:
        return len(self._fragments)

    def width_until(self, grapheme_idx: int) -> int:
        """Columns taken by the first ``grapheme_idx`` graphemes."""
        return sum(
            int(fragment.rendered_width)
            for fragment in self._fragments[: max(0, grapheme_idx)]
        )

    def width(self) -> int:
        return self.width_until(self.grapheme_count())

    def insert_char(self, character: str, at: int) -> None:
        """Insert before grapheme ``at``, or append if ``at`` is past the end."""
        if 0 <= at < len(self._fragments):
            position = self._fragments[at].start
            self._string = self._string[:position] + character + self._string[position:]
        else:
            self._string += character
        self._rebuild_fragments()

    def append_char(self, character: str) -> None:
        self.insert_char(character, self.grapheme_count())

    def delete(self, at: int) -> None:
        """Remove grapheme ``at``; nothing happens if there is none."""
        if 0 <= at < len(self._fragments):
            fragment = self._fragments[at]
            self._string = self._string[: fragment.start] + self._string[fragment.end :]
            self._rebuild_fragments()

    def delete_last(self) -> None:
        self.delete(max(0, self.grapheme_count() - 1))

    def append(self, other: Line) -> None:
        self._string += other._string
        self._rebuild_fragments()

    def split(self, at: int) -> Line:
        """Cut the line before grapheme ``at`` and return the remainder."""
        if 0 <= at < len(self._fragments):
            position = self._fragments[at].start
            remainder = self._string[position:]
            self._string = self._string[:position]
            self._rebuild_fragments()
            return Line(remainder)
        return Line()

    def _char_idx_to_grapheme_idx(self, char_idx: int) -> Optional[int]:
        if char_idx > len(self._string):
            return None
        return next(
            (
                idx
                for idx, fragment in enumerate(self._fragments)
                if fragment.start >= char_idx
            ),
            None,
        )

    def _grapheme_idx_to_char_idx(self, grapheme_idx: int) -> int:
        if grapheme_idx == 0 or not self._fragments:
            return 0
        if grapheme_idx >= len(self._fragments):
            raise IndexError(f"no grapheme at index {grapheme_idx}")
        return self._fragments[grapheme_idx].start

    def search_forward(self, query: str, from_grapheme_idx: int) -> Optional[int]:
        """Grapheme index of the first match at or after ``from_grapheme_idx``."""
        if from_grapheme_idx >= self.grapheme_count():
            return None
        start = self._grapheme_idx_to_char_idx(from_grapheme_idx)
        matches = self.find_all(query, start, len(self._string))
        return matches[0][1] if matches else None

    def search_backward(self, query: str, from_grapheme_idx: int) -> Optional[int]:
        """Grapheme index of the last match starting before ``from_grapheme_idx``."""
        if from_grapheme_idx <= 0:
            return None
        if from_grapheme_idx >= self.grapheme_count():
            end = len(self._string)
        else:
            end = self._grapheme_idx_to_char_idx(from_grapheme_idx)
        matches = self.find_all(query, 0, end)
        return matches[-1][1] if matches else None

    def find_all(self, query: str, start: int, end: int) -> list[tuple[int, int]]:
        """All matches in [start, end) aligned with grapheme boundaries.

        Returns (character index, grapheme index) pairs.
        """
        end = min(end, len(self._string))
        if start > end or start < 0:
            return []
        candidates = [
            start + relative
            for relative in _match_positions(self._string[start:end], query)
        ]
        return self._match_grapheme_clusters(candidates, query)

    def _match_grapheme_clusters(
        self, candidates: Iterable[int], query: str
    ) -> list[tuple[int, int]]:
        query_graphemes = sum(1 for _ in _GRAPHEME.finditer(query))
        matches = []
        for char_idx in candidates:
            grapheme_idx = self._char_idx_to_grapheme_idx(char_idx)
            if grapheme_idx is None:
                continue
            stop = grapheme_idx + query_graphemes
            if stop > len(self._fragments):
                continue
            combined = "".join(
                fragment.grapheme for fragment in self._fragments[grapheme_idx:stop]
            )
            if combined == query:
                matches.append((char_idx, grapheme_idx))
        return matches