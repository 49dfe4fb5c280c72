from __future__ import annotations

from retroboard.engine.bitboard import (
    BACKRANKS,
    EMPTY,
    FULL,
    RANKS,
    Bitboard,
    flip_square,
    relative_rank,
)
from retroboard.engine.piece import BLACK, WHITE
from retroboard.engine.unmove import str_to_square


def test_named_set_operations() -> None:
    a = Bitboard.from_squares([0, 1, 2])
    b = Bitboard.from_squares([2, 3])
    assert list(a.union(b)) == [0, 1, 2, 3]
    assert list(a.intersect(b)) == [2]
    assert list(a.without(b)) == [0, 1]
    assert a.complement().count() == 61
    assert EMPTY.complement() == FULL
    assert a.with_square(9).contains(9)
    assert not a.without_square(1).contains(1)


def test_first_and_count() -> None:
    assert EMPTY.first() is None
    assert EMPTY.is_empty()
    bb = Bitboard.from_squares([str_to_square("e4"), str_to_square("a1")])
    assert bb.first() == 0
    assert bb.count() == 2
    assert FULL.count() == 64


def test_iteration_is_ascending_and_restartable() -> None:
    bb = Bitboard.from_squares([63, 5, 17])
    assert list(bb) == [5, 17, 63]
    assert list(bb) == [5, 17, 63]


def test_shift_drops_squares_off_the_board() -> None:
    assert RANKS[1].shift(8) == RANKS[2]
    assert RANKS[7].shift(8).is_empty()
    assert RANKS[0].shift(-8).is_empty()
    assert RANKS[3].shift(-16) == RANKS[1]


def test_relative_rank_and_backranks() -> None:
    assert relative_rank(WHITE, 1) == RANKS[1]
    assert relative_rank(BLACK, 1) == RANKS[6]
    assert relative_rank(BLACK, 7) == RANKS[0]
    assert BACKRANKS.count() == 16
    assert BACKRANKS.contains(str_to_square("h8"))
    assert not BACKRANKS.contains(str_to_square("h7"))


def test_flip_vertical() -> None:
    assert flip_square(str_to_square("a1")) == str_to_square("a8")
    assert flip_square(str_to_square("e3")) == str_to_square("e6")
    assert Bitboard.from_square(0).flip_vertical() == Bitboard.from_square(56)
    assert RANKS[1].flip_vertical() == RANKS[6]
