"""Annotations marking ranges of a string with a highlight type."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class AnnotationType(Enum):
    """Kind of highlight an annotation applies."""

    MATCH = auto()
    SELECTED_MATCH = auto()
    NUMBER = auto()
    KEYWORD = auto()
    TYPE = auto()
    KNOWN_VALUE = auto()
    CHAR = auto()
    LIFETIME_SPECIFIER = auto()
    COMMENT = auto()
    MULTILINE_COMMENT = auto()
    STRING = auto()


@dataclass
class Annotation:
    """A highlight over the half-open character range [start, end)."""

    annotation_type: AnnotationType
    start: int
    end: int

    def shift(self, offset: int) -> None:
        """Move the annotated range right by ``offset``."""
        self.start += offset
        self.end += offset