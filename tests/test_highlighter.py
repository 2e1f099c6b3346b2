from caretedit.annotation import AnnotationType
from caretedit.document import FileType
from caretedit.geometry import Location
from caretedit.highlighter import Highlighter, create_syntax_highlighter
from caretedit.line import Line


def test_rust_file_gets_a_working_syntax_highlighter():
    syntax = create_syntax_highlighter(FileType.RUST)
    syntax.highlight(0, Line("fn"))
    assert [a.annotation_type for a in syntax.get_annotations(0)] == [
        AnnotationType.KEYWORD
    ]


def test_text_file_has_no_syntax_highlighter():
    assert create_syntax_highlighter(FileType.TEXT) is None


def test_plain_text_without_query_has_no_annotations():
    highlighter = Highlighter(None, None, FileType.TEXT)
    highlighter.highlight(0, Line("fn main"))
    assert highlighter.get_annotations(0) == []


def test_text_file_with_query_only_matches():
    highlighter = Highlighter("ab", None, FileType.TEXT)
    highlighter.highlight(0, Line("ab ab"))
    assert [a.annotation_type for a in highlighter.get_annotations(0)] == [
        AnnotationType.MATCH,
        AnnotationType.MATCH,
    ]


def test_syntax_annotations_come_before_search_ones():
    highlighter = Highlighter("fn", Location(grapheme_idx=0, line_idx=0), FileType.RUST)
    highlighter.highlight(0, Line("fn fn"))
    assert [a.annotation_type for a in highlighter.get_annotations(0)] == [
        AnnotationType.KEYWORD,
        AnnotationType.KEYWORD,
        AnnotationType.MATCH,
        AnnotationType.MATCH,
        AnnotationType.SELECTED_MATCH,
    ]


def test_returned_annotations_are_copies():
    highlighter = Highlighter("ab", None, FileType.TEXT)
    highlighter.highlight(0, Line("ab"))
    first = highlighter.get_annotations(0)
    first[0].shift(10)
    second = highlighter.get_annotations(0)
    assert second[0].start == 0
    assert first[0].start != second[0].start


def test_unhighlighted_line_is_empty():
    highlighter = Highlighter("ab", None, FileType.RUST)
    highlighter.highlight(0, Line("ab"))
    assert highlighter.get_annotations(5) == []