# caretedit

A small text editor that runs in your terminal. It works on Unicode text by
grapheme cluster, so wide characters and combined characters move and delete
as one. It has incremental search and syntax highlighting for Rust source.

## Installation

```
pip install .
```

The editor needs a POSIX terminal: it switches standard input into raw mode
with `termios` and reacts to window resizes through `SIGWINCH`.

## Usage

Open a file:

```
caretedit notes.txt
```

Or start with an empty, unnamed buffer:

```
caretedit
```

If the file cannot be read, the editor starts with an empty buffer and shows
`ERR: Could not open file: <name>` in the message bar.

### Keys

| Key                 | Action                                          |
|---------------------|-------------------------------------------------|
| Arrow keys          | Move the caret                                  |
| Home / End          | Start / end of the line                         |
| Page Up / Page Down | Move by one screen                              |
| Enter               | Split the line                                  |
| Tab                 | Insert a tab character                          |
| Backspace / Delete  | Delete before / at the caret                    |
| Ctrl-S              | Save (asks for a name if the buffer has none)   |
| Ctrl-K              | Search                                          |
| Ctrl-Q              | Quit                                            |
| Esc                 | Cancel a prompt                                 |

While searching, each key you type updates the query and jumps to the next
match from the caret. The arrow keys move between matches: Right and Down go
forward, Left and Up go back; the search wraps around the end of the
document. Enter leaves the caret on the current match. Esc returns the caret
to where it was before the search began.

If the buffer has unsaved changes, press Ctrl-Q three times in a row to quit
without saving. Any other key in between resets the count.

Files are read as UTF-8. Lines are saved with `\n` endings, each line
followed by a newline.

### Screen

The bottom row shows messages (they disappear after five seconds) or the
active prompt. Above it, the status bar shows the file name, the line count,
`(modified)` when there are unsaved changes, the file type and the current
line. Files whose names end in `.rs` are highlighted as Rust; all other files
are treated as plain text. Tabs are shown as a space, other whitespace as
`␣`, and invisible characters as `·` or `▯`. A character cut off at the edge
of the screen is shown as `⋯`.

## Using it from Python

The parts of the editor can be used on their own:

```python
from caretedit.line import Line

line = Line("héllo wörld")
line.grapheme_count()             # 11
line.search_forward("wörld", 0)   # 6
```

- `caretedit.buffer.Buffer` holds a document of lines. `Buffer.load` reads a
  file and `Buffer.save_as` writes one; `search_forward` and `search_backward`
  return a `caretedit.geometry.Location`.
- `caretedit.rust_highlighter.RustSyntaxHighlighter` annotates lines of Rust
  source in order with `highlight(idx, line)`; `get_annotations(idx)` returns
  the `caretedit.annotation.Annotation` spans of a line.
- `caretedit.annotated_string.AnnotatedString` is text with highlight spans;
  iterating over it yields runs of text with their annotation type.
- `caretedit.commands.parse_command` maps `KeyEvent` and `ResizeEvent` values
  to editor commands, and `caretedit.terminal.decode_keys` turns raw terminal
  input into `KeyEvent` values.
- `caretedit.editor.main` starts the editor, as the `caretedit` command does.

## What it does not do

There is no undo, no selection or clipboard, no mouse support, no soft
wrapping of long lines, and no highlighting for languages other than Rust.
It does not run on terminals without `termios`, such as the Windows console.