from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..engine.board import Board
from ..engine.piece import COLORS
from ..engine.pocket import RetroPocket
from ..engine.retroboard import RetroBoard


class PositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string; placement, side to move and ep fields are used")
    white_pocket: str = Field(default="", description="White pocket, e.g. PPNQ2")
    black_pocket: str = Field(default="", description="Black pocket, e.g. RB1")

    @field_validator("fen")
    @classmethod
    def _check_fen(cls, v: str) -> str:
        parts = v.split()
        if not parts:
            raise ValueError("FEN must be a non-empty string")
        Board.from_board_fen(parts[0])
        if len(parts) > 1 and parts[1] not in COLORS:
            raise ValueError("side to move must be 'w' or 'b'")
        return v

    @field_validator("white_pocket", "black_pocket")
    @classmethod
    def _check_pocket(cls, v: str) -> str:
        RetroPocket.from_str(v)
        return v

    def to_retroboard(self) -> RetroBoard:
        return RetroBoard.from_fen(self.fen, self.white_pocket, self.black_pocket)


class UnmovesResponse(BaseModel):
    fen: str
    retro_turn: str
    legal: bool
    count: int
    unmoves: List[str]


class PerftResponse(BaseModel):
    fen: str
    depth: int = Field(..., ge=0)
    nodes: int
    time_ms: int
    divide: Optional[Dict[str, int]] = None
