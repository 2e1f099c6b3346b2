import pytest

from caretedit.annotated_string import AnnotatedStringPart
from caretedit.annotation import Annotation, AnnotationType
from caretedit.buffer import Buffer, FileInfo
from caretedit.document import FileType
from caretedit.geometry import Location
from caretedit.highlighter import Highlighter
from caretedit.line import Line


def make_buffer(*texts):
    return Buffer(Line(text) for text in texts)


def texts(buffer):
    return [str(line) for line in buffer.lines]


@pytest.mark.parametrize(
    "name, expected",
    [
        ("main.rs", FileType.RUST),
        ("MAIN.RS", FileType.RUST),
        ("notes.txt", FileType.TEXT),
        ("rs", FileType.TEXT),
    ],
)
def test_file_type_from_extension(name, expected):
    assert FileInfo(name).file_type is expected


def test_file_info_display_uses_file_name():
    info = FileInfo("some/dir/notes.txt")
    assert str(info) == "notes.txt"
    assert info.has_path


def test_file_info_without_path():
    info = FileInfo()
    assert str(info) == "[No Name]"
    assert not info.has_path
    assert info.file_type is FileType.TEXT


def test_load_splits_lines(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_bytes(b"alpha\r\nbeta\n\ngamma")
    buffer = Buffer.load(str(path))
    assert texts(buffer) == ["alpha", "beta", "", "gamma"]
    assert buffer.height == 4
    assert not buffer.is_dirty
    assert buffer.is_file_loaded


def test_load_empty_file(tmp_path):
    path = tmp_path / "empty.rs"
    path.write_text("")
    buffer = Buffer.load(str(path))
    assert buffer.is_empty
    assert buffer.file_info.file_type is FileType.RUST


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Buffer.load(str(tmp_path / "missing.txt"))


def test_save_round_trip(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_bytes(b"alpha\nbeta\n")
    buffer = Buffer.load(str(path))
    buffer.insert_char("!", Location(grapheme_idx=5, line_idx=0))
    assert buffer.is_dirty
    buffer.save()
    assert not buffer.is_dirty
    assert texts(Buffer.load(str(path))) == ["alpha!", "beta"]


def test_save_as_adopts_name(tmp_path):
    buffer = make_buffer("one", "two")
    buffer.insert_newline(Location(0, 2))
    target = tmp_path / "out.rs"
    buffer.save_as(str(target))
    assert buffer.is_file_loaded
    assert str(buffer.file_info) == "out.rs"
    assert buffer.file_info.file_type is FileType.RUST
    assert not buffer.is_dirty
    assert texts(Buffer.load(str(target))) == texts(buffer)


def test_save_without_name_fails():
    buffer = make_buffer("text")
    with pytest.raises(ValueError):
        buffer.save()


def test_grapheme_count_and_width():
    buffer = make_buffer("abc", "日本")
    assert buffer.grapheme_count(0) == 3
    assert buffer.grapheme_count(5) == 0
    assert buffer.width_until(1, 2) == 2 * buffer.grapheme_count(1)
    assert buffer.width_until(9, 2) == 0


def test_insert_char_past_last_line_adds_line():
    buffer = make_buffer("a")
    buffer.insert_char("z", Location(0, 1))
    assert texts(buffer) == ["a", "z"]
    buffer.insert_char("q", Location(0, 5))
    assert texts(buffer) == ["a", "z"]


def test_delete_joins_next_line():
    buffer = make_buffer("ab", "cd")
    buffer.delete(Location(2, 0))
    assert texts(buffer) == ["abcd"]
    assert buffer.is_dirty


def test_delete_grapheme_and_noop_at_end():
    buffer = make_buffer("ab")
    buffer.delete(Location(0, 0))
    assert texts(buffer) == ["b"]
    fresh = make_buffer("ab")
    fresh.delete(Location(2, 0))
    assert texts(fresh) == ["ab"]
    assert not fresh.is_dirty


def test_insert_newline_splits_line():
    buffer = make_buffer("hello")
    buffer.insert_newline(Location(2, 0))
    assert texts(buffer) == ["he", "llo"]
    buffer.insert_newline(Location(0, 2))
    assert texts(buffer) == ["he", "llo", ""]


def test_search_forward_wraps():
    buffer = make_buffer("foo", "bar", "foo")
    assert buffer.search_forward("foo", Location(1, 0)) == Location(0, 2)
    assert buffer.search_forward("foo", Location(1, 2)) == Location(0, 0)
    assert buffer.search_forward("bar", Location(0, 0)) == Location(0, 1)


def test_search_backward_wraps():
    buffer = make_buffer("foo", "bar", "foo")
    assert buffer.search_backward("foo", Location(0, 2)) == Location(0, 0)
    assert buffer.search_backward("foo", Location(3, 2)) == Location(0, 2)
    assert buffer.search_backward("bar", Location(0, 0)) == Location(0, 1)


def test_search_empty_query_or_no_match():
    buffer = make_buffer("foo")
    assert buffer.search_forward("", Location()) is None
    assert buffer.search_backward("", Location()) is None
    assert buffer.search_forward("zzz", Location()) is None
    assert Buffer().search_forward("foo", Location()) is None


def test_highlighted_substring_with_matches():
    buffer = make_buffer("foobar")
    highlighter = Highlighter("bar", None, FileType.TEXT)
    buffer.highlight(0, highlighter)
    result = buffer.get_highlighted_substring(0, 0, 10, highlighter)
    assert str(result) == "foobar"
    assert list(result) == [
        AnnotatedStringPart("foo", None),
        AnnotatedStringPart("bar", AnnotationType.MATCH),
    ]
    assert str(buffer.get_highlighted_substring(0, 0, 3, highlighter)) == "foo"
    assert buffer.get_highlighted_substring(1, 0, 10, highlighter) is None


def test_highlight_rust_line():
    buffer = Buffer([Line("fn main")], FileInfo("main.rs"))
    highlighter = Highlighter(None, None, buffer.file_info.file_type)
    buffer.highlight(0, highlighter)
    assert highlighter.get_annotations(0) == [Annotation(AnnotationType.KEYWORD, 0, 2)]