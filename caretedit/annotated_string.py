"""A string carrying highlight annotations over character ranges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from caretedit.annotation import Annotation, AnnotationType


@dataclass(frozen=True)
class AnnotatedStringPart:
    """A run of text sharing one annotation type, or none."""

    string: str
    annotation_type: Optional[AnnotationType] = None


class AnnotatedString:
    """Text plus annotations; indices count characters."""

    def __init__(self, string: str = "") -> None:
        self.string = string
        self.annotations: list[Annotation] = []

    def __repr__(self) -> str:
        return f"AnnotatedString({self.string!r}, {self.annotations!r})"

    def add_annotation(
        self, annotation_type: AnnotationType, start: int, end: int
    ) -> None:
        """Annotate the range [start, end)."""
        if start > end:
            raise ValueError(f"annotation start {start} is after end {end}")
        self.annotations.append(Annotation(annotation_type, start, end))

    def truncate_left_until(self, until: int) -> None:
        """Remove everything before ``until``."""
        self.replace(0, until, "")

    def truncate_right_from(self, start: int) -> None:
        """Remove everything from ``start`` on."""
        self.replace(start, len(self.string), "")

    def replace(self, start: int, end: int, new_string: str) -> None:
        """Replace [start, end) with ``new_string`` and adjust annotations."""
        end = min(end, len(self.string))
        if start > end:
            return
        self.string = self.string[:start] + new_string + self.string[end:]
        replaced_len = end - start
        shortened = len(new_string) < replaced_len
        diff = abs(len(new_string) - replaced_len)
        if diff == 0:
            return

        def moved(index: int) -> int:
            if index >= end:
                return max(0, index - diff) if shortened else index + diff
            if index >= start:
                if shortened:
                    return max(start, index - diff)
                return min(end, index + diff)
            return index

        for annotation in self.annotations:
            annotation.start = moved(annotation.start)
            annotation.end = moved(annotation.end)

        length = len(self.string)
        self.annotations = [
            a for a in self.annotations if a.start < a.end and a.start < length
        ]

    def __str__(self) -> str:
        return self.string

    def __iter__(self) -> Iterator[AnnotatedStringPart]:
        length = len(self.string)
        current = 0
        while current < length:
            covering = [
                a for a in self.annotations if a.start <= current < a.end
            ]
            if covering:
                annotation = covering[-1]
                end = min(annotation.end, length)
                yield AnnotatedStringPart(
                    self.string[current:end], annotation.annotation_type
                )
            else:
                end = min(
                    (a.start for a in self.annotations if current < a.start < length),
                    default=length,
                )
                yield AnnotatedStringPart(self.string[current:end], None)
            current = end