import pytest

from caretedit.geometry import Location, Position, Size


def test_saturating_sub_clamps_at_zero():
    small = Position(col=1, row=1)
    big = Position(col=4, row=9)
    assert small.saturating_sub(big) == Position()


def test_saturating_sub_of_default_is_identity():
    p = Position(col=7, row=3)
    assert p.saturating_sub(Position()) == p


def test_saturating_sub_of_self_is_origin():
    p = Position(col=12, row=40)
    result = p.saturating_sub(p)
    assert (result.col, result.row) == (0, 0)


@pytest.mark.parametrize(
    "col,row,ocol,orow",
    [(10, 10, 3, 4), (5, 8, 5, 0), (100, 1, 99, 1)],
)
def test_saturating_sub_inverts_addition_when_no_clamp(col, row, ocol, orow):
    p = Position(col=col, row=row)
    o = Position(col=ocol, row=orow)
    result = p.saturating_sub(o)
    assert result.col + o.col == p.col
    assert result.row + o.row == p.row


def test_saturating_sub_clamps_each_component_independently():
    p = Position(col=10, row=2)
    result = p.saturating_sub(Position(col=3, row=5))
    assert result.row == 0
    assert result.col + 3 == p.col


def test_size_default_is_empty():
    assert Size() == Size(height=0, width=0)


def test_location_default_and_equality():
    assert Location() == Location(grapheme_idx=0, line_idx=0)
    assert Location(grapheme_idx=2, line_idx=1) != Location(grapheme_idx=1, line_idx=2)