from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from .piece import WHITE


FULL_MASK = (1 << 64) - 1


@dataclass(frozen=True)
class Bitboard:
    """Immutable set of squares over the 64-square universe.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), rank-major from white's perspective.
    - Every combination is a named method; no operator overloading.
    """

    mask: int = 0

    @classmethod
    def from_square(cls, sq: int) -> "Bitboard":
        return cls(1 << sq)

    @classmethod
    def from_squares(cls, squares: Iterable[int]) -> "Bitboard":
        mask = 0
        for sq in squares:
            mask |= 1 << sq
        return cls(mask)

    def union(self, other: "Bitboard") -> "Bitboard":
        return Bitboard(self.mask | other.mask)

    def intersect(self, other: "Bitboard") -> "Bitboard":
        return Bitboard(self.mask & other.mask)

    def without(self, other: "Bitboard") -> "Bitboard":
        return Bitboard(self.mask & ~other.mask)

    def complement(self) -> "Bitboard":
        return Bitboard(self.mask ^ FULL_MASK)

    def with_square(self, sq: int) -> "Bitboard":
        return Bitboard(self.mask | (1 << sq))

    def without_square(self, sq: int) -> "Bitboard":
        return Bitboard(self.mask & ~(1 << sq))

    def contains(self, sq: int) -> bool:
        return (self.mask >> sq) & 1 == 1

    def is_empty(self) -> bool:
        return self.mask == 0

    def count(self) -> int:
        return bin(self.mask).count("1")

    def first(self) -> Optional[int]:
        """Return the lowest square in the set, or ``None`` when empty."""
        if self.mask == 0:
            return None
        return (self.mask & -self.mask).bit_length() - 1

    def shift(self, delta: int) -> "Bitboard":
        """Shift every square by ``delta`` indices, dropping squares off the board.

        Only multiples of 8 (whole ranks) keep files intact.
        """
        if delta >= 0:
            return Bitboard((self.mask << delta) & FULL_MASK)
        return Bitboard(self.mask >> -delta)

    def flip_vertical(self) -> "Bitboard":
        return Bitboard.from_squares(flip_square(sq) for sq in self)

    def __iter__(self) -> Iterator[int]:
        mask = self.mask
        while mask:
            lsb = mask & -mask
            yield lsb.bit_length() - 1
            mask ^= lsb


def square(file_idx: int, rank_idx: int) -> int:
    return rank_idx * 8 + file_idx


def square_file(sq: int) -> int:
    return sq % 8


def square_rank(sq: int) -> int:
    return sq // 8


def flip_square(sq: int) -> int:
    """Mirror a square vertically (a1 <-> a8)."""
    return sq ^ 56


EMPTY = Bitboard(0)
FULL = Bitboard(FULL_MASK)
RANKS = tuple(Bitboard(0xFF << (8 * r)) for r in range(8))
BACKRANKS = RANKS[0].union(RANKS[7])


def relative_rank(color: str, rank_idx: int) -> Bitboard:
    """Return rank ``rank_idx`` (0-based) as seen from ``color``'s side."""
    return RANKS[rank_idx] if color == WHITE else RANKS[7 - rank_idx]
