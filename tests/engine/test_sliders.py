from __future__ import annotations

from retroboard.engine.attacks import (
    aligned,
    attacks,
    between,
    bishop_attacks,
    distance,
    knight_attacks,
    pawn_attacks,
    rook_attacks,
)
from retroboard.engine.bitboard import EMPTY, Bitboard
from retroboard.engine.piece import BLACK, WHITE, Piece
from retroboard.engine.unmove import square_to_str, str_to_square


def squares(bb: Bitboard) -> set[str]:
    return {square_to_str(sq) for sq in bb}


def sq(s: str) -> int:
    return str_to_square(s)


def test_knight_and_pawn_tables() -> None:
    assert squares(knight_attacks(sq("a1"))) == {"b3", "c2"}
    assert squares(pawn_attacks(WHITE, sq("e4"))) == {"d5", "f5"}
    assert squares(pawn_attacks(BLACK, sq("e4"))) == {"d3", "f3"}
    assert squares(pawn_attacks(WHITE, sq("h2"))) == {"g3"}


def test_rook_stops_at_first_blocker() -> None:
    occ = Bitboard.from_square(sq("a4"))
    assert squares(rook_attacks(sq("a1"), occ)) == {
        "a2", "a3", "a4", "b1", "c1", "d1", "e1", "f1", "g1", "h1",
    }


def test_bishop_on_empty_board() -> None:
    assert bishop_attacks(sq("d4"), EMPTY).count() == 13
    assert bishop_attacks(sq("a1"), EMPTY).count() == 7


def test_attacks_dispatches_on_role() -> None:
    occ = Bitboard.from_square(sq("d2"))
    queen = attacks(sq("d1"), Piece(WHITE, "q"), occ)
    assert queen.contains(sq("d2"))
    assert not queen.contains(sq("d3"))
    assert queen.contains(sq("h5"))
    assert squares(attacks(sq("a8"), Piece(BLACK, "k"))) == {"a7", "b7", "b8"}


def test_between_is_strict_and_empty_when_not_aligned() -> None:
    assert squares(between(sq("a1"), sq("h8"))) == {"b2", "c3", "d4", "e5", "f6", "g7"}
    assert between(sq("e1"), sq("e8")).count() == 6
    assert between(sq("a1"), sq("b3")).is_empty()
    assert between(sq("d8"), sq("d7")).is_empty()


def test_aligned_and_distance() -> None:
    assert aligned(sq("a1"), sq("c3"), sq("h8"))
    assert aligned(sq("e8"), sq("e4"), sq("e1"))
    assert not aligned(sq("a1"), sq("b3"), sq("c5"))
    assert distance(sq("a1"), sq("h8")) == 7
    assert distance(sq("d8"), sq("h4")) == 4
    assert distance(sq("e8"), sq("f6")) == 2
