"""A terminal text editor with grapheme-aware editing, incremental search and Rust syntax highlighting."""

__version__ = "0.1.0"