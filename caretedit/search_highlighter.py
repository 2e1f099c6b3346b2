"""Highlighting of search matches."""

from __future__ import annotations

from typing import Optional

from caretedit.annotation import Annotation, AnnotationType
from caretedit.geometry import Location
from caretedit.line import Line


class SearchResultHighlighter:
    """Marks every occurrence of a word, and the selected match."""

    def __init__(self, matched_word: str, selected_match: Optional[Location] = None) -> None:
        self.matched_word = matched_word
        self.selected_match = selected_match
        self._highlights: dict[int, list[Annotation]] = {}

    def _matched_words(self, line: Line) -> list[Annotation]:
        if not self.matched_word:
            return []
        length = len(self.matched_word)
        return [
            Annotation(AnnotationType.MATCH, start, start + length)
            for start, _ in line.find_all(self.matched_word, 0, len(line))
        ]

    def _selected(self) -> list[Annotation]:
        if self.selected_match is None or not self.matched_word:
            return []
        start = self.selected_match.grapheme_idx
        return [
            Annotation(
                AnnotationType.SELECTED_MATCH, start, start + len(self.matched_word)
            )
        ]

    def highlight(self, idx: int, line: Line) -> None:
        """Annotate the matches on line ``idx``."""
        result = self._matched_words(line)
        if self.selected_match is not None and self.selected_match.line_idx == idx:
            result.extend(self._selected())
        self._highlights[idx] = result

    def get_annotations(self, idx: int) -> Optional[list[Annotation]]:
        """Annotations of line ``idx``, or None if it was not highlighted."""
        return self._highlights.get(idx)