from __future__ import annotations

from dataclasses import dataclass


WHITE = "w"
BLACK = "b"
COLORS = (WHITE, BLACK)

PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING = "p", "n", "b", "r", "q", "k"
ROLES = (PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING)
SLIDERS = (BISHOP, ROOK, QUEEN)

COLOR_NAMES = {WHITE: "White", BLACK: "Black"}

UNICODE_PIECES = {
    "R": "♖",
    "r": "♜",
    "N": "♘",
    "n": "♞",
    "B": "♗",
    "b": "♝",
    "Q": "♕",
    "q": "♛",
    "K": "♔",
    "k": "♚",
    "P": "♙",
    "p": "♟",
}


def opposite(color: str) -> str:
    return BLACK if color == WHITE else WHITE


def is_slider(role: str) -> bool:
    return role in SLIDERS


@dataclass(frozen=True)
class Piece:
    """A colored piece.

    Attributes:
        color (str): ``"w"`` or ``"b"``.
        role (str): Lowercase role letter, one of ``"pnbrqk"``.
    """

    color: str
    role: str

    @classmethod
    def from_char(cls, ch: str) -> "Piece":
        """Build a piece from its FEN letter (uppercase is white).

        Raises:
            ValueError: If ``ch`` is not a piece letter.
        """
        if len(ch) != 1 or ch.lower() not in ROLES:
            raise ValueError(f"invalid piece letter: {ch!r}")
        return cls(WHITE if ch.isupper() else BLACK, ch.lower())

    def char(self) -> str:
        return self.role.upper() if self.color == WHITE else self.role

    def unicode(self) -> str:
        return UNICODE_PIECES[self.char()]
