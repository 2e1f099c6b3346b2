"""Combines syntax and search-result highlighting for a document."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Protocol

from caretedit.annotation import Annotation
from caretedit.document import FileType
from caretedit.geometry import Location
from caretedit.line import Line
from caretedit.rust_highlighter import RustSyntaxHighlighter
from caretedit.search_highlighter import SearchResultHighlighter


class SyntaxHighlighter(Protocol):
    """Something that annotates lines by index."""

    def highlight(self, idx: int, line: Line) -> None: ...

    def get_annotations(self, idx: int) -> Optional[list[Annotation]]: ...


def create_syntax_highlighter(file_type: FileType) -> Optional[SyntaxHighlighter]:
    """The syntax highlighter for ``file_type``, if it has one."""
    if file_type is FileType.RUST:
        return RustSyntaxHighlighter()
    return None


class Highlighter:
    """Syntax highlighting followed by search-result highlighting."""

    def __init__(
        self,
        matched_word: Optional[str] = None,
        selected_match: Optional[Location] = None,
        file_type: FileType = FileType.TEXT,
    ) -> None:
        self._syntax = create_syntax_highlighter(file_type)
        self._search = (
            SearchResultHighlighter(matched_word, selected_match)
            if matched_word is not None
            else None
        )

    def get_annotations(self, idx: int) -> list[Annotation]:
        """Copies of all annotations of line ``idx``, syntax ones first."""
        result: list[Annotation] = []
        for highlighter in (self._syntax, self._search):
            if highlighter is None:
                continue
            annotations = highlighter.get_annotations(idx)
            if annotations:
                result.extend(replace(annotation) for annotation in annotations)
        return result

    def highlight(self, idx: int, line: Line) -> None:
        """Annotate line ``idx`` with every active highlighter."""
        if self._syntax is not None:
            self._syntax.highlight(idx, line)
        if self._search is not None:
            self._search.highlight(idx, line)