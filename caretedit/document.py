"""File type and the document status shown in the status bar."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FileType(Enum):
    """Kind of file being edited."""

    RUST = "Rust"
    TEXT = "Text"

    def __str__(self) -> str:
        return self.value


@dataclass
class DocumentStatus:
    """Summary of the open document."""

    total_lines: int = 0
    current_line_idx: int = 0
    is_modified: bool = False
    file_name: str = ""
    file_type: FileType = FileType.TEXT

    def modified_indicator_to_string(self) -> str:
        return "(modified)" if self.is_modified else ""

    def line_count_to_string(self) -> str:
        return f"{self.total_lines} lines"

    def position_indicator_to_string(self) -> str:
        return f"{self.current_line_idx + 1}/{self.total_lines}"

    def file_type_to_string(self) -> str:
        return str(self.file_type)