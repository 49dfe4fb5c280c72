from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .attacks import aligned, attacks, between, bishop_attacks, distance, pawn_attacks, rook_attacks
from .bitboard import BACKRANKS, EMPTY, FULL, Bitboard, relative_rank
from .board import Board
from .errors import ParseFenError, RetroInvariantError
from .piece import (
    BISHOP,
    BLACK,
    COLOR_NAMES,
    COLORS,
    KING,
    PAWN,
    QUEEN,
    ROOK,
    WHITE,
    Piece,
    is_slider,
    opposite,
)
from .pocket import RetroPockets
from .unmove import MoveKind, UnMove, square_to_str, str_to_square


logger = logging.getLogger(__name__)


def _check_ep_square(board: Board, side_to_move: str, ep_square: int) -> None:
    # The double-stepped pawn stands in front of the target; the target and the
    # square the pawn started from are empty.
    if not 0 <= ep_square < 64 or not relative_rank(side_to_move, 5).contains(ep_square):
        raise ParseFenError(f"en passant square must be on the sixth rank of side {side_to_move!r}")
    forward = 8 if side_to_move == BLACK else -8
    pawn = Piece(opposite(side_to_move), PAWN)
    if board.piece_at(ep_square + forward) != pawn:
        raise ParseFenError(f"no pawn in front of en passant square {square_to_str(ep_square)}")
    occupied = board.occupied()
    if occupied.contains(ep_square) or occupied.contains(ep_square - forward):
        raise ParseFenError(f"en passant square {square_to_str(ep_square)} has a blocked double step")


@dataclass(eq=False)
class RetroBoard:
    """A position where unmoves are played and generated.

    Attributes:
        board (Board): Piece placement.
        retro_turn (str): Color whose unmove is generated next, i.e. the side
            that made the last move (the opposite of the side to move).
        pockets (RetroPockets): Uncapturable pieces and unpromotion allowances.
        halfmoves (int): Plies since the last uncapture or unpromotion.
        ep_square (Optional[int]): Pending en passant target left by an en
            passant unmove; forces the next unmove.

    Notes:
    - Equality and hashing ignore ``halfmoves``.
    - Generation never mutates; callers exploring branches ``copy()`` first.
    """

    board: Board
    retro_turn: str
    pockets: RetroPockets = field(default_factory=RetroPockets)
    halfmoves: int = 0
    ep_square: Optional[int] = None

    @classmethod
    def new(
        cls,
        board: Board,
        side_to_move: str,
        pockets: Optional[RetroPockets] = None,
        ep_square: Optional[int] = None,
    ) -> "RetroBoard":
        """Create a retro position from already parsed parts.

        Args:
            board (Board): Piece placement.
            side_to_move (str): ``"w"`` or ``"b"``; the side to unmove is the
                other one.
            pockets (Optional[RetroPockets]): Defaults to empty pockets.
            ep_square (Optional[int]): Pending en passant target, if any.

        Raises:
            ValueError: If ``side_to_move`` is not ``"w"`` or ``"b"``.
            ParseFenError: If ``ep_square`` is not a target a double step of
                the side to unmove could have left.
        """
        if side_to_move not in COLORS:
            raise ValueError(f"side to move must be 'w' or 'b', got {side_to_move!r}")
        if ep_square is not None:
            _check_ep_square(board, side_to_move, ep_square)
        return cls(
            board=board,
            retro_turn=opposite(side_to_move),
            pockets=pockets if pockets is not None else RetroPockets(),
            ep_square=ep_square,
        )

    @classmethod
    def from_fen(cls, fen: str, pocket_white: str = "", pocket_black: str = "") -> "RetroBoard":
        """Create a retro position from a FEN and two pocket descriptors.

        Only the placement, side-to-move and en passant fields are read;
        missing fields default to white to move and no en passant target.
        Castling rights and move counters are irrelevant when going backwards.

        Raises:
            ParseFenError: On a malformed placement, side or en passant field.
            ParseRetroPocketError: On a malformed pocket descriptor.
        """
        parts = fen.strip().split()
        if not parts:
            raise ParseFenError("FEN must be a non-empty string")
        board = Board.from_board_fen(parts[0])
        stm = parts[1] if len(parts) > 1 else WHITE
        if stm not in COLORS:
            raise ParseFenError("side to move must be 'w' or 'b'")
        ep_square: Optional[int] = None
        if len(parts) > 3 and parts[3] != "-":
            try:
                ep_square = str_to_square(parts[3])
            except ValueError as e:
                raise ParseFenError("invalid en passant square") from e
        return cls.new(board, stm, RetroPockets.from_str(pocket_white, pocket_black), ep_square)

    # --- Accessors ---
    def us(self) -> Bitboard:
        return self.board.by_color(self.retro_turn)

    def our(self, role: str) -> Bitboard:
        return self.board.by_piece(Piece(self.retro_turn, role))

    def them(self) -> Bitboard:
        return self.board.by_color(opposite(self.retro_turn))

    def their(self, role: str) -> Bitboard:
        return self.board.by_piece(Piece(opposite(self.retro_turn), role))

    def king_of(self, color: str) -> Optional[int]:
        return self.board.king_of(color)

    def side_to_move(self) -> str:
        return opposite(self.retro_turn)

    # --- Transition ---
    def push(self, unmove: UnMove) -> None:
        """Play ``unmove`` in place.

        Raises:
            RetroInvariantError: If the origin square is empty or the pockets
                cannot pay for the uncapture / unpromotion. The state is then
                undefined; this only happens for unmoves the generator did not
                produce for this exact position.
        """
        moved = self.board.remove_piece_at(unmove.from_sq)
        if moved is None:
            logger.debug("push %s on empty origin", unmove.to_retro_uci())
            raise RetroInvariantError(
                f"unmove {unmove.to_retro_uci()}: no piece on {square_to_str(unmove.from_sq)}"
            )
        self.halfmoves += 1
        self.ep_square = None

        role = unmove.uncapture()
        if role is not None:
            self.halfmoves = 0
            uncapture_sq = unmove.uncapture_square()
            if uncapture_sq is None:
                raise RetroInvariantError(f"unmove {unmove.to_retro_uci()}: no uncapture square")
            self.board.set_piece_at(uncapture_sq, Piece(opposite(self.retro_turn), role))
            self.pockets.color(opposite(self.retro_turn)).decr(role)

        if unmove.is_unpromotion():
            self.halfmoves = 0
            self.board.set_piece_at(unmove.to_sq, Piece(self.retro_turn, PAWN))
            self.pockets.color(self.retro_turn).decr_unpromotion()
        else:
            self.board.set_piece_at(unmove.to_sq, moved)

        if unmove.is_en_passant():
            self.ep_square = unmove.from_sq
        self.retro_turn = opposite(self.retro_turn)

    # --- Pseudo-legal generation ---
    def pseudo_legal_unmoves(self) -> List[UnMove]:
        """All structurally possible unmoves, ignoring whether they leave a king in check."""
        moves: List[UnMove] = []
        self._gen_unmoves(FULL, FULL, moves)
        return moves

    def _gen_unmoves(self, from_mask: Bitboard, to_mask: Bitboard, moves: List[UnMove]) -> None:
        if self.ep_square is not None:
            self._gen_forced_double_push(self.ep_square, from_mask, to_mask, moves)
            return
        self.gen_pieces(moves, from_mask, to_mask)
        self.gen_unpromotion(moves, from_mask, to_mask)
        self.gen_pawns(moves, from_mask, to_mask)
        self.gen_en_passant(moves, from_mask, to_mask)

    def _gen_forced_double_push(
        self, ep_square: int, from_mask: Bitboard, to_mask: Bitboard, moves: List[UnMove]
    ) -> None:
        # The opponent's en passant unmove put our pawn right behind the target:
        # the only way back is the double step that created the target.
        forward = 8 if self.retro_turn == WHITE else -8
        from_sq = ep_square + forward
        to_sq = ep_square - forward
        if from_mask.contains(from_sq) and to_mask.contains(to_sq):
            moves.append(UnMove(from_sq, to_sq))

    def gen_pieces(self, moves: List[UnMove], from_mask: Bitboard = FULL, to_mask: Bitboard = FULL) -> None:
        occupied = self.board.occupied()
        empty = occupied.complement()
        for from_sq in self.us().without(self.our(PAWN)).intersect(from_mask):
            piece = self._piece_on(from_sq)
            for to_sq in attacks(from_sq, piece, occupied).intersect(empty).intersect(to_mask):
                moves.append(UnMove(from_sq, to_sq))
                self._gen_uncaptures(from_sq, to_sq, False, moves)

    def gen_unpromotion(self, moves: List[UnMove], from_mask: Bitboard = FULL, to_mask: Bitboard = FULL) -> None:
        if self.pockets.color(self.retro_turn).unpromotion <= 0:
            return
        occupied = self.board.occupied()
        back = -8 if self.retro_turn == WHITE else 8
        promoted = self.us().without(self.our(KING)).without(self.our(PAWN))
        for from_sq in promoted.intersect(relative_rank(self.retro_turn, 7)).intersect(from_mask):
            to_sq = from_sq + back
            if not occupied.contains(to_sq) and to_mask.contains(to_sq):
                moves.append(UnMove(from_sq, to_sq, MoveKind.unpromotion()))
            self._gen_pawn_uncaptures(from_sq, True, to_mask, moves)

    def gen_pawns(self, moves: List[UnMove], from_mask: Bitboard = FULL, to_mask: Bitboard = FULL) -> None:
        pawns = self.our(PAWN).intersect(from_mask)
        for from_sq in pawns.without(relative_rank(self.retro_turn, 1)):
            self._gen_pawn_uncaptures(from_sq, False, to_mask, moves)

        occupied = self.board.occupied()
        back = -8 if self.retro_turn == WHITE else 8
        single_moves = pawns.shift(back).without(occupied)
        double_moves = (
            single_moves.shift(back).intersect(relative_rank(self.retro_turn, 1)).without(occupied)
        )
        for to_sq in single_moves.without(BACKRANKS).intersect(to_mask):
            moves.append(UnMove(to_sq - back, to_sq))
        for to_sq in double_moves.intersect(to_mask):
            moves.append(UnMove(to_sq - 2 * back, to_sq))

    def gen_en_passant(self, moves: List[UnMove], from_mask: Bitboard = FULL, to_mask: Bitboard = FULL) -> None:
        if self.pockets.color(opposite(self.retro_turn)).pawn <= 0:
            return
        occupied = self.board.occupied()
        forward = 8 if self.retro_turn == WHITE else -8
        candidates = self.our(PAWN).intersect(relative_rank(self.retro_turn, 5)).intersect(from_mask)
        for from_sq in candidates:
            # The captured pawn reappears behind us and came from the square ahead of us.
            if occupied.contains(from_sq - forward) or occupied.contains(from_sq + forward):
                continue
            targets = pawn_attacks(opposite(self.retro_turn), from_sq).without(occupied)
            for to_sq in targets.intersect(to_mask):
                moves.append(UnMove(from_sq, to_sq, MoveKind.en_passant()))

    def _gen_pawn_uncaptures(
        self, from_sq: int, unpromotion: bool, to_mask: Bitboard, moves: List[UnMove]
    ) -> None:
        occupied = self.board.occupied()
        targets = pawn_attacks(opposite(self.retro_turn), from_sq).without(occupied)
        for to_sq in targets.intersect(to_mask):
            self._gen_uncaptures(from_sq, to_sq, unpromotion, moves)

    def _gen_uncaptures(self, from_sq: int, to_sq: int, unpromotion: bool, moves: List[UnMove]) -> None:
        for role in self.pockets.color(opposite(self.retro_turn)):
            if role == PAWN and BACKRANKS.contains(from_sq):
                # pawns cannot be uncaptured on a backrank
                continue
            kind = MoveKind.unpromotion(role) if unpromotion else MoveKind.uncapture(role)
            moves.append(UnMove(from_sq, to_sq, kind))

    # --- Legal generation ---
    def legal_unmoves(self) -> List[UnMove]:
        """Pseudo-legal unmoves after which the side to move is not left in check.

        The king of the side *not* unmoving must end up safe, since in the
        earlier position it is not that side's turn.
        """
        king = self.board.king_of(opposite(self.retro_turn))
        if king is None:
            return self.pseudo_legal_unmoves()
        checkers = self.board.attackers(king, self.retro_turn)
        n_checkers = checkers.count()
        if n_checkers > 2:
            logger.debug("%d checkers on %s, no unmove possible", n_checkers, square_to_str(king))
            return []
        blockers = self.slider_blockers(king)
        if n_checkers == 2:
            return self._double_check_unmoves(king, checkers, blockers)
        checker = checkers.first()
        return [m for m in self.pseudo_legal_unmoves() if self._is_safe(m, king, checker, blockers)]

    def slider_blockers(self, king: int) -> Bitboard:
        """Our pieces that alone shield ``king`` from one of our sliders."""
        queens = self.our(QUEEN)
        snipers = (
            rook_attacks(king, EMPTY)
            .intersect(self.our(ROOK).union(queens))
            .union(bishop_attacks(king, EMPTY).intersect(self.our(BISHOP).union(queens)))
        )
        occupied = self.board.occupied()
        us = self.us()
        blockers = EMPTY
        for sniper in snipers:
            b = between(king, sniper).intersect(occupied)
            if b.count() == 1 and us.contains(b.first()):
                blockers = blockers.union(b)
        return blockers

    def double_check_movers(self, king: int, checkers: Bitboard) -> List[Tuple[int, int]]:
        """Return ``(mover, further)`` pairs explaining a double check.

        A double check comes from one checker moving (the mover) and thereby
        uncovering a slider (the further checker). The mover is the checker
        closer to ``king``; on equal distance a stepper is the mover, and two
        equidistant sliders are both tried.
        """
        first, second = list(checkers)
        first_slider = is_slider(self._piece_on(first).role)
        second_slider = is_slider(self._piece_on(second).role)
        if not first_slider and not second_slider:
            return []
        d_first = distance(king, first)
        d_second = distance(king, second)
        if d_first < d_second:
            return [(first, second)]
        if d_second < d_first:
            return [(second, first)]
        if first_slider and second_slider:
            return [(first, second), (second, first)]
        return [(first, second)] if not first_slider else [(second, first)]

    def _double_check_unmoves(self, king: int, checkers: Bitboard, blockers: Bitboard) -> List[UnMove]:
        candidates: List[UnMove] = []
        for mover, further in self.double_check_movers(king, checkers):
            self._gen_unmoves(Bitboard.from_square(mover), between(king, further), candidates)
        logger.debug("double check on %s: %d interposing candidates", square_to_str(king), len(candidates))
        return [
            m
            for m in candidates
            if not self._gives_check(m, king) and not self._uncovers_check(m, king, blockers)
        ]

    def _is_safe(self, unmove: UnMove, king: int, checker: Optional[int], blockers: Bitboard) -> bool:
        if self._uncovers_check(unmove, king, blockers):
            return False
        if self._gives_check(unmove, king):
            return False
        if checker is None or unmove.from_sq == checker:
            return True
        if not is_slider(self._piece_on(checker).role):
            return False
        return between(checker, king).contains(unmove.to_sq)

    @staticmethod
    def _refills_origin(unmove: UnMove) -> bool:
        return unmove.uncapture_square() == unmove.from_sq

    def _uncovers_check(self, unmove: UnMove, king: int, blockers: Bitboard) -> bool:
        if self._refills_origin(unmove) or not blockers.contains(unmove.from_sq):
            return False
        return not aligned(king, unmove.from_sq, unmove.to_sq)

    def _gives_check(self, unmove: UnMove, king: int) -> bool:
        role = PAWN if unmove.is_unpromotion() else self._piece_on(unmove.from_sq).role
        occupied = self.board.occupied()
        if not self._refills_origin(unmove):
            occupied = occupied.without_square(unmove.from_sq)
        return attacks(unmove.to_sq, Piece(self.retro_turn, role), occupied).contains(king)

    def _piece_on(self, sq: int) -> Piece:
        piece = self.board.piece_at(sq)
        if piece is None:
            raise RetroInvariantError(f"no piece on {square_to_str(sq)}")
        return piece

    # --- Misc ---
    def copy(self) -> "RetroBoard":
        return RetroBoard(
            board=self.board.copy(),
            retro_turn=self.retro_turn,
            pockets=self.pockets.copy(),
            halfmoves=self.halfmoves,
            ep_square=self.ep_square,
        )

    def _key(self) -> tuple:
        return (tuple(self.board.bb), self.retro_turn, self.pockets.as_tuple(), self.ep_square)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RetroBoard):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        ep = "-" if self.ep_square is None else square_to_str(self.ep_square)
        return (
            f"RetroBoard({self.board.board_fen()!r}, retro_turn={self.retro_turn!r}, "
            f"pockets=({self.pockets}), ep={ep}, halfmoves={self.halfmoves})"
        )

    def pretty(self) -> str:
        """Board diagram followed by retro turn, pockets and half-move counter."""
        lines = [
            self.board.pretty(),
            "",
            f"retro_turn = {COLOR_NAMES[self.retro_turn]}",
            f"pockets = {self.pockets}",
            f"halfmoves: {self.halfmoves}",
        ]
        if self.ep_square is not None:
            lines.append(f"ep: {square_to_str(self.ep_square)}")
        return "\n".join(lines)
