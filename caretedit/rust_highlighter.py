"""Syntax highlighting for Rust source, one line at a time."""

from __future__ import annotations

import unicodedata
from typing import Optional

from caretedit.annotation import Annotation, AnnotationType
from caretedit.line import Line

KEYWORDS = frozenset(
    {
        "async", "await", "as", "break", "const", "continue", "crate", "dyn",
        "else", "enum", "extern", "false", "fn", "for", "if", "impl", "in",
        "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
        "self", "Self", "static", "struct", "super", "trait", "true", "type",
        "unsafe", "use", "where", "while", "abstract", "become", "box", "do",
        "final", "macro", "override", "priv", "typeof", "unsized", "virtual",
        "yield", "union", "macro_rules", "include", "include_str", "option_env",
    }
)

TYPES = frozenset(
    {
        "i8", "i16", "i32", "i64", "i128", "isize", "u8", "u16", "u32", "u64",
        "u128", "usize", "f32", "f64", "bool", "char", "Option", "Result",
        "String", "str", "Vec", "HashMap",
    }
)

KNOWN_VALUES = frozenset({"Some", "None", "true", "false", "Ok", "Err"})

# Word-break classes of the Unicode text segmentation rules.
_CR = "CR"
_LF = "LF"
_NEWLINE = "Newline"
_EXTEND = "Extend"
_KATAKANA = "Katakana"
_ALETTER = "ALetter"
_NUMERIC = "Numeric"
_MIDLETTER = "MidLetter"
_MIDNUM = "MidNum"
_MIDNUMLET = "MidNumLet"
_SINGLE_QUOTE = "Single_Quote"
_EXTENDNUMLET = "ExtendNumLet"
_WSEGSPACE = "WSegSpace"
_OTHER = "Other"

_NEWLINES = frozenset((_CR, _LF, _NEWLINE))
_MIDNUMLETQ = frozenset((_MIDNUMLET, _SINGLE_QUOTE))
_MID_LETTERLIKE = frozenset((_MIDLETTER, _MIDNUMLET, _SINGLE_QUOTE))
_MID_NUMLIKE = frozenset((_MIDNUM, _MIDNUMLET, _SINGLE_QUOTE))
_WORDLIKE = frozenset((_ALETTER, _NUMERIC, _KATAKANA))

_MIDNUMLET_CHARS = frozenset(".\u2018\u2019\u2024\ufe52\uff07\uff0e")
_MIDLETTER_CHARS = frozenset(":\u00b7\u0387\u05f4\u2027\ufe13\ufe55\uff1a")
_MIDNUM_CHARS = frozenset(
    ",;\u037e\u0589\u060c\u060d\u066c\u07f8\u2044\ufe10\ufe14\ufe50\ufe54\uff0c\uff1b"
)
_NON_SEGMENT_SPACES = frozenset("\u00a0\u2007\u202f")


def _is_ideographic(ch: str) -> bool:
    code = ord(ch)
    return (
        0x3040 <= code <= 0x309F
        or 0x3400 <= code <= 0x4DBF
        or 0x4E00 <= code <= 0x9FFF
        or 0xF900 <= code <= 0xFAFF
        or 0x20000 <= code <= 0x3FFFF
    )


def _is_katakana(ch: str) -> bool:
    code = ord(ch)
    return 0x30A0 <= code <= 0x30FF or 0x31F0 <= code <= 0x31FF or 0xFF66 <= code <= 0xFF9D


def _word_class(ch: str) -> str:
    if ch == "\r":
        return _CR
    if ch == "\n":
        return _LF
    if ch in "\x0b\x0c\x85\u2028\u2029":
        return _NEWLINE
    category = unicodedata.category(ch)
    if category in ("Mn", "Me", "Mc", "Cf") or ch in "\u200c\u200d":
        return _EXTEND
    if ch == "'":
        return _SINGLE_QUOTE
    if ch in _MIDNUMLET_CHARS:
        return _MIDNUMLET
    if ch in _MIDLETTER_CHARS:
        return _MIDLETTER
    if ch in _MIDNUM_CHARS:
        return _MIDNUM
    if category == "Nd":
        return _NUMERIC
    if category == "Pc":
        return _EXTENDNUMLET
    if category == "Zs" and ch not in _NON_SEGMENT_SPACES:
        return _WSEGSPACE
    if _is_katakana(ch):
        return _KATAKANA
    if ch.isalpha() and not _is_ideographic(ch):
        return _ALETTER
    return _OTHER


def _is_break(classes: list[str], i: int) -> bool:
    """Whether a word boundary lies between unit ``i - 1`` and unit ``i``."""
    prev = classes[i - 1]
    cur = classes[i]
    before = classes[i - 2] if i >= 2 else None
    after = classes[i + 1] if i + 1 < len(classes) else None

    if prev == _CR and cur == _LF:
        return False
    if prev in _NEWLINES or cur in _NEWLINES:
        return True
    if prev == _WSEGSPACE and cur == _WSEGSPACE:
        return False
    if prev == _ALETTER and cur == _ALETTER:
        return False
    if prev == _ALETTER and cur in _MID_LETTERLIKE and after == _ALETTER:
        return False
    if before == _ALETTER and prev in _MID_LETTERLIKE and cur == _ALETTER:
        return False
    if prev == _NUMERIC and cur == _NUMERIC:
        return False
    if prev == _ALETTER and cur == _NUMERIC:
        return False
    if prev == _NUMERIC and cur == _ALETTER:
        return False
    if before == _NUMERIC and prev in _MID_NUMLIKE and cur == _NUMERIC:
        return False
    if prev == _NUMERIC and cur in _MID_NUMLIKE and after == _NUMERIC:
        return False
    if prev == _KATAKANA and cur == _KATAKANA:
        return False
    if cur == _EXTENDNUMLET and (prev in _WORDLIKE or prev == _EXTENDNUMLET):
        return False
    if prev == _EXTENDNUMLET and cur in _WORDLIKE:
        return False
    return True


def split_word_bound_indices(text: str) -> list[tuple[int, str]]:
    """Split ``text`` at Unicode word boundaries.

    Returns (character index, segment) pairs; the segments cover the whole
    text, including runs of whitespace and single punctuation characters.
    """
    units: list[list] = []  # [start, end, class]
    for index, ch in enumerate(text):
        cls = _word_class(ch)
        if cls == _EXTEND and units and units[-1][2] not in _NEWLINES:
            units[-1][1] = index + 1
            continue
        units.append([index, index + 1, cls])

    if not units:
        return []
    classes = [unit[2] for unit in units]
    segments = []
    segment_start = 0
    for i in range(1, len(units)):
        if _is_break(classes, i):
            boundary = units[i][0]
            segments.append((segment_start, text[segment_start:boundary]))
            segment_start = boundary
    segments.append((segment_start, text[segment_start:]))
    return segments


def _words(text: str) -> list[str]:
    return [word for _, word in split_word_bound_indices(text)]


def is_numeric_literal(word: str) -> bool:
    """Whether ``word`` is a binary, octal or hex literal such as ``0x1F``."""
    if len(word) < 3 or word[0] != "0":
        return False
    digits = {
        "b": "01",
        "o": "01234567",
        "x": "0123456789abcdefABCDEF",
    }.get(word[1].lower())
    if digits is None:
        return False
    return all(ch in digits for ch in word[2:])


def is_valid_number(word: str) -> bool:
    """Whether ``word`` is a decimal number, possibly with ``_``, ``.`` and an exponent."""
    if not word:
        return False
    if is_numeric_literal(word):
        return True
    if word[0] not in "0123456789":
        return False

    seen_dot = False
    seen_e = False
    prev_was_digit = True
    for ch in word[1:]:
        if ch in "0123456789":
            prev_was_digit = True
        elif ch == "_":
            if not prev_was_digit:
                return False
            prev_was_digit = False
        elif ch == ".":
            if seen_dot or seen_e or not prev_was_digit:
                return False
            seen_dot = True
            prev_was_digit = False
        elif ch in "eE":
            if seen_e or not prev_was_digit:
                return False
            seen_e = True
            prev_was_digit = False
        else:
            return False
    return prev_was_digit


def _annotate_next_word(
    text: str, annotation_type: AnnotationType, accept
) -> Optional[Annotation]:
    words = _words(text)
    if words and accept(words[0]):
        return Annotation(annotation_type, 0, len(words[0]))
    return None


def _annotate_number(text: str) -> Optional[Annotation]:
    return _annotate_next_word(text, AnnotationType.NUMBER, is_valid_number)


def _annotate_keyword(text: str) -> Optional[Annotation]:
    return _annotate_next_word(text, AnnotationType.KEYWORD, KEYWORDS.__contains__)


def _annotate_type(text: str) -> Optional[Annotation]:
    return _annotate_next_word(text, AnnotationType.TYPE, TYPES.__contains__)


def _annotate_known_value(text: str) -> Optional[Annotation]:
    return _annotate_next_word(
        text, AnnotationType.KNOWN_VALUE, KNOWN_VALUES.__contains__
    )


def _annotate_char(text: str) -> Optional[Annotation]:
    segments = split_word_bound_indices(text)
    if not segments or segments[0][1] != "'":
        return None
    position = 1
    if position < len(segments) and segments[position][1] == "\\":
        position += 1
    position += 1
    if position < len(segments) and segments[position][1] == "'":
        return Annotation(AnnotationType.CHAR, 0, segments[position][0] + 1)
    return None


def _annotate_lifetime_specifier(text: str) -> Optional[Annotation]:
    segments = split_word_bound_indices(text)
    if len(segments) >= 2 and segments[0][1] == "'":
        index, word = segments[1]
        return Annotation(AnnotationType.LIFETIME_SPECIFIER, 0, index + len(word))
    return None


def _annotate_comment(text: str) -> Optional[Annotation]:
    words = _words(text)
    if len(words) >= 2 and words[0] == "/" and words[1] == "/":
        return Annotation(AnnotationType.COMMENT, 0, len(text))
    return None


class RustSyntaxHighlighter:
    """Annotates lines of Rust code; lines must be highlighted in order."""

    def __init__(self) -> None:
        self._highlights: list[list[Annotation]] = []
        self._ml_comment_balance = 0
        self._in_ml_string = False

    def _annotate_ml_comment(self, text: str) -> Optional[Annotation]:
        length = len(text)
        i = 0
        while i < length:
            ch = text[i]
            following = text[i + 1] if i + 1 < length else None
            if ch == "/":
                if following == "*":
                    self._ml_comment_balance += 1
                    i += 1
            elif self._ml_comment_balance == 0:
                return None
            elif ch == "*" and following == "/":
                self._ml_comment_balance -= 1
                if self._ml_comment_balance == 0:
                    return Annotation(AnnotationType.MULTILINE_COMMENT, 0, i + 2)
                i += 1
            i += 1
        if self._ml_comment_balance > 0:
            return Annotation(AnnotationType.MULTILINE_COMMENT, 0, length)
        return None

    def _annotate_string(self, text: str) -> Optional[Annotation]:
        chars = iter(enumerate(text))
        for index, ch in chars:
            if ch == "\\" and self._in_ml_string:
                next(chars, None)
                continue
            if ch == '"':
                if self._in_ml_string:
                    self._in_ml_string = False
                    return Annotation(AnnotationType.STRING, 0, index + 1)
                self._in_ml_string = True
            if not self._in_ml_string:
                return None
        if self._in_ml_string:
            return Annotation(AnnotationType.STRING, 0, len(text))
        return None

    def _initial_annotation(self, text: str) -> Optional[Annotation]:
        if self._in_ml_string:
            return self._annotate_string(text)
        if self._ml_comment_balance > 0:
            return self._annotate_ml_comment(text)
        return None

    def _annotate_remainder(self, remainder: str) -> Optional[Annotation]:
        return (
            self._annotate_ml_comment(remainder)
            or self._annotate_string(remainder)
            or _annotate_comment(remainder)
            or _annotate_char(remainder)
            or _annotate_lifetime_specifier(remainder)
            or _annotate_number(remainder)
            or _annotate_keyword(remainder)
            or _annotate_type(remainder)
            or _annotate_known_value(remainder)
        )

    def highlight(self, idx: int, line: Line) -> None:
        """Annotate line ``idx``, which must follow the last highlighted line."""
        if idx != len(self._highlights):
            raise ValueError(
                f"line {idx} highlighted out of order; expected line {len(self._highlights)}"
            )
        text = str(line)
        segments = split_word_bound_indices(text)
        result: list[Annotation] = []
        position = 0

        def skip_until(end: int) -> int:
            pos = position
            while pos < len(segments) and segments[pos][0] < end:
                pos += 1
            return pos

        initial = self._initial_annotation(text)
        if initial is not None:
            result.append(initial)
            position = skip_until(initial.end)

        while position < len(segments):
            start_idx = segments[position][0]
            position += 1
            annotation = self._annotate_remainder(text[start_idx:])
            if annotation is not None:
                annotation.shift(start_idx)
                result.append(annotation)
                position = skip_until(annotation.end)

        self._highlights.append(result)

    def get_annotations(self, idx: int) -> Optional[list[Annotation]]:
        """Annotations of line ``idx``, or None if it was not highlighted."""
        if 0 <= idx < len(self._highlights):
            return self._highlights[idx]
        return None