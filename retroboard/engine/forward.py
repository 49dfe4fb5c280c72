from __future__ import annotations

import chess

from .piece import WHITE
from .retroboard import RetroBoard
from .unmove import UnMove


# The side to move may be in any check configuration after an unmove; the
# side that just moved may not.
TOLERATED_STATUS = chess.STATUS_IMPOSSIBLE_CHECK | chess.STATUS_TOO_MANY_CHECKERS


def to_chess_board(retro: RetroBoard) -> chess.Board:
    """Convert into a forward ``python-chess`` board.

    The side to move is the opposite of the retro turn, the en passant square
    is the pending target, castling rights are cleared and the half-move
    clock is carried over.
    """
    board = chess.Board(None)
    for sq in range(64):
        piece = retro.board.piece_at(sq)
        if piece is not None:
            board.set_piece_at(sq, chess.Piece.from_symbol(piece.char()))
    board.turn = chess.WHITE if retro.side_to_move() == WHITE else chess.BLACK
    board.castling_rights = chess.BB_EMPTY
    board.ep_square = retro.ep_square
    board.halfmove_clock = retro.halfmoves
    return board


def is_valid_retro(board: chess.Board) -> bool:
    """True if ``board`` is valid up to checks against the side to move."""
    return board.status() & ~TOLERATED_STATUS == chess.STATUS_VALID


def forward_move(retro: RetroBoard, unmove: UnMove) -> chess.Move:
    """The forward move that ``unmove`` takes back, from the position before ``push``.

    Args:
        retro (RetroBoard): Position the unmove is generated from (not yet
            pushed); needed to know which piece a pawn promoted to.
        unmove (UnMove): Unmove to reverse.

    Returns:
        chess.Move: Move from ``unmove.to_sq`` to ``unmove.from_sq``.
    """
    promotion = None
    if unmove.is_unpromotion():
        piece = retro.board.piece_at(unmove.from_sq)
        if piece is None:
            raise ValueError(f"no piece on origin of {unmove.to_retro_uci()}")
        promotion = chess.Piece.from_symbol(piece.role).piece_type
    return chess.Move(unmove.to_sq, unmove.from_sq, promotion=promotion)
