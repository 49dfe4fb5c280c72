"""Retrograde chess move generation: which moves could have led to this position."""

from __future__ import annotations

from .engine.board import Board
from .engine.errors import ParseFenError, ParseRetroPocketError, ParseRetroUciError, RetroInvariantError
from .engine.perft import divide, perft
from .engine.pocket import RetroPocket, RetroPockets
from .engine.retroboard import RetroBoard
from .engine.unmove import MoveKind, RetroUciParser, UnMove, parse_retro_uci

__all__ = [
    "Board",
    "MoveKind",
    "ParseFenError",
    "ParseRetroPocketError",
    "ParseRetroUciError",
    "RetroBoard",
    "RetroInvariantError",
    "RetroPocket",
    "RetroPockets",
    "RetroUciParser",
    "UnMove",
    "divide",
    "parse_retro_uci",
    "perft",
]
