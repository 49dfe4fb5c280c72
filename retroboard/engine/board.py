from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .attacks import attacks, bishop_attacks, king_attacks, knight_attacks, pawn_attacks, rook_attacks
from .bitboard import EMPTY, Bitboard
from .errors import ParseFenError
from .piece import (
    BISHOP,
    COLORS,
    KING,
    KNIGHT,
    PAWN,
    QUEEN,
    ROLES,
    ROOK,
    Piece,
    opposite,
)


# Piece indices for bitboards
WP, WN, WB, WR, WQ, WK, BP, BN, BB, BR, BQ, BK = range(12)
PIECE_ORDER = [WP, WN, WB, WR, WQ, WK, BP, BN, BB, BR, BQ, BK]
PIECE_TO_CHAR = {
    WP: "P",
    WN: "N",
    WB: "B",
    WR: "R",
    WQ: "Q",
    WK: "K",
    BP: "p",
    BN: "n",
    BB: "b",
    BR: "r",
    BQ: "q",
    BK: "k",
}
CHAR_TO_PIECE = {v: k for k, v in PIECE_TO_CHAR.items()}


def _piece_index(piece: Piece) -> int:
    return COLORS.index(piece.color) * 6 + ROLES.index(piece.role)


def _index_piece(idx: int) -> Piece:
    return Piece.from_char(PIECE_TO_CHAR[idx])


@dataclass
class Board:
    """Piece placement only: no side to move, castling or counters.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), rank-major from white's perspective.
    - 12 piece bitboards, indexed by the constants above.
    """

    bb: List[int] = field(default_factory=lambda: [0] * 12)

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def from_board_fen(cls, placement: str) -> "Board":
        """Create a board from the placement field of a FEN string.

        Args:
            placement (str): Placement such as ``"4k3/8/8/8/8/8/8/4K3"``.

        Returns:
            Board: Board holding the described pieces.

        Raises:
            ParseFenError: If the placement does not have 8 ranks of 8 squares
                or contains an unknown piece letter.
        """
        if not placement or not isinstance(placement, str):
            raise ParseFenError("board placement must be a non-empty string")
        ranks = placement.split("/")
        if len(ranks) != 8:
            raise ParseFenError("FEN board must have 8 ranks")
        bb = [0] * 12
        for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
            file_idx = 0
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ParseFenError("invalid empty count in FEN rank")
                    file_idx += n
                else:
                    if ch not in CHAR_TO_PIECE:
                        raise ParseFenError(f"invalid piece in FEN: {ch!r}")
                    if file_idx >= 8:
                        raise ParseFenError("too many squares in FEN rank")
                    sq = rank_idx * 8 + file_idx
                    p = CHAR_TO_PIECE[ch]
                    bb[p] |= 1 << sq
                    file_idx += 1
            if file_idx != 8:
                raise ParseFenError("rank does not sum to 8 squares in FEN")
        return cls(bb=bb)

    def board_fen(self) -> str:
        """Serialize the placement into the first field of a FEN string."""
        ranks_str: List[str] = []
        for rank_idx in range(7, -1, -1):  # 7..0 maps to ranks 8..1
            run = 0
            row = []
            for file_idx in range(8):
                piece = self.piece_at(rank_idx * 8 + file_idx)
                if piece is None:
                    run += 1
                else:
                    if run > 0:
                        row.append(str(run))
                        run = 0
                    row.append(piece.char())
            if run > 0:
                row.append(str(run))
            ranks_str.append("".join(row))
        return "/".join(ranks_str)

    def _index_at(self, sq: int) -> Optional[int]:
        for p in PIECE_ORDER:
            if (self.bb[p] >> sq) & 1:
                return p
        return None

    def piece_at(self, sq: int) -> Optional[Piece]:
        idx = self._index_at(sq)
        return None if idx is None else _index_piece(idx)

    def set_piece_at(self, sq: int, piece: Piece) -> None:
        """Put ``piece`` on ``sq``, replacing whatever stood there."""
        self.remove_piece_at(sq)
        self.bb[_piece_index(piece)] |= 1 << sq

    def remove_piece_at(self, sq: int) -> Optional[Piece]:
        idx = self._index_at(sq)
        if idx is None:
            return None
        self.bb[idx] &= ~(1 << sq)
        return _index_piece(idx)

    def by_piece(self, piece: Piece) -> Bitboard:
        return Bitboard(self.bb[_piece_index(piece)])

    def by_color(self, color: str) -> Bitboard:
        offset = COLORS.index(color) * 6
        mask = 0
        for b in self.bb[offset : offset + 6]:
            mask |= b
        return Bitboard(mask)

    def by_role(self, role: str) -> Bitboard:
        idx = ROLES.index(role)
        return Bitboard(self.bb[idx] | self.bb[idx + 6])

    def occupied(self) -> Bitboard:
        mask = 0
        for b in self.bb:
            mask |= b
        return Bitboard(mask)

    def king_of(self, color: str) -> Optional[int]:
        return self.by_piece(Piece(color, KING)).first()

    def attacks_from(self, sq: int, occupied: Optional[Bitboard] = None) -> Bitboard:
        """Attack pattern of the piece on ``sq``; empty if the square is empty."""
        piece = self.piece_at(sq)
        if piece is None:
            return EMPTY
        return attacks(sq, piece, self.occupied() if occupied is None else occupied)

    def attackers(self, sq: int, color: str, occupied: Optional[Bitboard] = None) -> Bitboard:
        """Pieces of ``color`` attacking ``sq`` given ``occupied``.

        Covers: pawns, knights, king, and slider rays for bishops/rooks/queens.
        """
        if occupied is None:
            occupied = self.occupied()
        own = self.by_color(color)
        queens = self.by_role(QUEEN)
        rooks_queens = self.by_role(ROOK).union(queens)
        bishops_queens = self.by_role(BISHOP).union(queens)
        found = (
            pawn_attacks(opposite(color), sq)
            .intersect(self.by_role(PAWN))
            .union(knight_attacks(sq).intersect(self.by_role(KNIGHT)))
            .union(king_attacks(sq).intersect(self.by_role(KING)))
            .union(rook_attacks(sq, occupied).intersect(rooks_queens))
            .union(bishop_attacks(sq, occupied).intersect(bishops_queens))
        )
        return found.intersect(own)

    def copy(self) -> "Board":
        return Board(bb=list(self.bb))

    def pretty(self) -> str:
        """Unicode diagram, rank 8 on top, ``.`` for empty squares."""
        lines: List[str] = []
        for rank_idx in range(7, -1, -1):
            row = []
            for file_idx in range(8):
                piece = self.piece_at(rank_idx * 8 + file_idx)
                row.append("." if piece is None else piece.unicode())
            lines.append(" ".join(row))
        return "\n".join(lines)
