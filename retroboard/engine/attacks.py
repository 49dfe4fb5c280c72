from __future__ import annotations

from typing import List, Sequence, Tuple

from .bitboard import Bitboard, EMPTY
from .piece import BISHOP, BLACK, KING, KNIGHT, PAWN, QUEEN, ROOK, WHITE, Piece


KNIGHT_DELTAS = ((-1, 2), (1, 2), (-2, 1), (2, 1), (-2, -1), (2, -1), (-1, -2), (1, -2))
KING_DELTAS = ((-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1))
ROOK_DIRS = ((-1, 0), (1, 0), (0, -1), (0, 1))
BISHOP_DIRS = ((-1, -1), (1, -1), (-1, 1), (1, 1))


def _step_table(deltas: Sequence[Tuple[int, int]]) -> List[int]:
    table: List[int] = []
    for sq in range(64):
        f, r = sq % 8, sq // 8
        mask = 0
        for df, dr in deltas:
            tf, tr = f + df, r + dr
            if 0 <= tf < 8 and 0 <= tr < 8:
                mask |= 1 << (tr * 8 + tf)
        table.append(mask)
    return table


def _line_tables() -> Tuple[List[List[int]], List[List[int]]]:
    # between[a][b]: squares strictly between a and b; line[a][b]: full line through both.
    between = [[0] * 64 for _ in range(64)]
    line = [[0] * 64 for _ in range(64)]
    for a in range(64):
        for df, dr in ROOK_DIRS + BISHOP_DIRS:
            full = 1 << a
            for sign in (1, -1):
                tf, tr = a % 8, a // 8
                while True:
                    tf += sign * df
                    tr += sign * dr
                    if not (0 <= tf < 8 and 0 <= tr < 8):
                        break
                    full |= 1 << (tr * 8 + tf)
            tf, tr = a % 8, a // 8
            passed = 0
            while True:
                tf += df
                tr += dr
                if not (0 <= tf < 8 and 0 <= tr < 8):
                    break
                b = tr * 8 + tf
                between[a][b] = passed
                line[a][b] = full
                passed |= 1 << b
    return between, line


_KNIGHT = _step_table(KNIGHT_DELTAS)
_KING = _step_table(KING_DELTAS)
_PAWN = {
    WHITE: _step_table(((-1, 1), (1, 1))),
    BLACK: _step_table(((-1, -1), (1, -1))),
}
_BETWEEN, _LINE = _line_tables()


def _ray_scan(sq: int, dirs: Sequence[Tuple[int, int]], occupied: int) -> int:
    mask = 0
    for df, dr in dirs:
        tf, tr = sq % 8, sq // 8
        while True:
            tf += df
            tr += dr
            if not (0 <= tf < 8 and 0 <= tr < 8):
                break
            to = tr * 8 + tf
            mask |= 1 << to
            if (occupied >> to) & 1:
                break
    return mask


def knight_attacks(sq: int) -> Bitboard:
    return Bitboard(_KNIGHT[sq])


def king_attacks(sq: int) -> Bitboard:
    return Bitboard(_KING[sq])


def pawn_attacks(color: str, sq: int) -> Bitboard:
    """Squares a ``color`` pawn on ``sq`` attacks (diagonally forward for that color)."""
    return Bitboard(_PAWN[color][sq])


def bishop_attacks(sq: int, occupied: Bitboard) -> Bitboard:
    return Bitboard(_ray_scan(sq, BISHOP_DIRS, occupied.mask))


def rook_attacks(sq: int, occupied: Bitboard) -> Bitboard:
    return Bitboard(_ray_scan(sq, ROOK_DIRS, occupied.mask))


def queen_attacks(sq: int, occupied: Bitboard) -> Bitboard:
    return bishop_attacks(sq, occupied).union(rook_attacks(sq, occupied))


def attacks(sq: int, piece: Piece, occupied: Bitboard = EMPTY) -> Bitboard:
    """Attack pattern of ``piece`` standing on ``sq`` given ``occupied``.

    Args:
        sq (int): Square the piece stands on.
        piece (Piece): Attacking piece; pawns attack toward their own color's
            promotion rank.
        occupied (Bitboard): Occupancy blocking slider rays.

    Returns:
        Bitboard: Attacked squares, occupied or not.
    """
    role = piece.role
    if role == PAWN:
        return pawn_attacks(piece.color, sq)
    if role == KNIGHT:
        return knight_attacks(sq)
    if role == BISHOP:
        return bishop_attacks(sq, occupied)
    if role == ROOK:
        return rook_attacks(sq, occupied)
    if role == QUEEN:
        return queen_attacks(sq, occupied)
    if role == KING:
        return king_attacks(sq)
    raise ValueError(f"unknown role: {role!r}")


def between(a: int, b: int) -> Bitboard:
    """Squares strictly between ``a`` and ``b``; empty unless they share a line."""
    return Bitboard(_BETWEEN[a][b])


def line(a: int, b: int) -> Bitboard:
    """Full edge-to-edge line through ``a`` and ``b``; empty unless aligned."""
    return Bitboard(_LINE[a][b])


def aligned(a: int, b: int, c: int) -> bool:
    """Return True if ``a``, ``b`` and ``c`` lie on one rank, file or diagonal."""
    return line(a, b).contains(c)


def distance(a: int, b: int) -> int:
    """Chebyshev (king-step) distance between two squares."""
    return max(abs(a % 8 - b % 8), abs(a // 8 - b // 8))
