from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .bitboard import flip_square, square, square_file, square_rank
from .errors import ParseRetroUciError
from .piece import PAWN


NORMAL = "normal"
UNCAPTURE = "uncapture"
UNPROMOTION = "unpromotion"
EN_PASSANT = "en_passant"

UNCAPTURE_ROLES = {"p", "n", "b", "r", "q"}


@dataclass(frozen=True)
class MoveKind:
    """What else happens when an unmove is played besides the piece moving.

    Attributes:
        name (str): One of ``normal``, ``uncapture``, ``unpromotion``,
            ``en_passant``.
        role (Optional[str]): Uncaptured role for ``uncapture`` (always set)
            and ``unpromotion`` (optional).
    """

    name: str = NORMAL
    role: Optional[str] = None

    @classmethod
    def normal(cls) -> "MoveKind":
        return cls(NORMAL)

    @classmethod
    def uncapture(cls, role: str) -> "MoveKind":
        return cls(UNCAPTURE, role)

    @classmethod
    def unpromotion(cls, role: Optional[str] = None) -> "MoveKind":
        return cls(UNPROMOTION, role)

    @classmethod
    def en_passant(cls) -> "MoveKind":
        return cls(EN_PASSANT)

    def to_retro_uci(self) -> str:
        if self.name == EN_PASSANT:
            return "E"
        if self.name == UNCAPTURE:
            return (self.role or "").upper()
        if self.name == UNPROMOTION:
            return "U" + (self.role or "").upper()
        return ""


@dataclass(frozen=True)
class UnMove:
    """A move played backwards: the piece on ``from_sq`` goes back to ``to_sq``.

    Attributes:
        from_sq (int): Square the piece stands on now (0-based).
        to_sq (int): Square the piece came from.
        kind (MoveKind): Uncapture / unpromotion / en passant details.

    No validation happens here; only the generator knows which unmoves make
    sense for a position.
    """

    from_sq: int
    to_sq: int
    kind: MoveKind = MoveKind()

    @classmethod
    def from_retro_uci(cls, retro_uci: str) -> "UnMove":
        return parse_retro_uci(retro_uci)

    def to_retro_uci(self) -> str:
        """Serialize into retro UCI, e.g. ``"e2e4"``, ``"Pe2e4"``, ``"UNa8b7"``, ``"Ed6e5"``."""
        return self.kind.to_retro_uci() + square_to_str(self.from_sq) + square_to_str(self.to_sq)

    def is_uncapture(self) -> bool:
        return self.kind.name == UNCAPTURE

    def is_unpromotion(self) -> bool:
        return self.kind.name == UNPROMOTION

    def is_en_passant(self) -> bool:
        return self.kind.name == EN_PASSANT

    def uncapture(self) -> Optional[str]:
        """Role of the opponent piece that reappears, if any (pawn for en passant)."""
        if self.kind.name == EN_PASSANT:
            return PAWN
        return self.kind.role

    def uncapture_square(self) -> Optional[int]:
        """Square the uncaptured piece lands on.

        It is ``from_sq``, except for en passant where the pawn reappears on
        ``from_sq``'s file and ``to_sq``'s rank.
        """
        if self.uncapture() is None:
            return None
        if self.is_en_passant():
            return square(square_file(self.from_sq), square_rank(self.to_sq))
        return self.from_sq

    def mirror(self) -> "UnMove":
        """Same unmove with colors swapped: both squares flipped vertically."""
        return UnMove(flip_square(self.from_sq), flip_square(self.to_sq), self.kind)

    def __str__(self) -> str:
        return self.to_retro_uci()


class RetroUciParser:
    """Parser for retro UCI strings.

    Grammar: ``[U|E]?[PNBRQ]?<from><to>``. ``U`` marks an unpromotion (the
    optional role is then uncaptured too), ``E`` an en passant unmove, a bare
    role letter a plain uncapture.
    """

    def __init__(self) -> None:
        self._pattern = re.compile(
            r"(?P<special>[UE]?)(?P<uncapture>[PNBRQ]?)(?P<from>[a-h][1-8])(?P<to>[a-h][1-8])"
        )

    def parse(self, retro_uci: str) -> UnMove:
        """Parse a retro UCI string.

        Raises:
            ParseRetroUciError: If the string does not follow the grammar.
        """
        match = self._pattern.fullmatch(retro_uci)
        if match is None:
            raise ParseRetroUciError(f"invalid retro UCI: {retro_uci!r}")
        special = match.group("special")
        role = match.group("uncapture").lower() or None
        if special == "U":
            kind = MoveKind.unpromotion(role)
        elif special == "E":
            if role is not None:
                raise ParseRetroUciError(f"en passant cannot name an uncaptured role: {retro_uci!r}")
            kind = MoveKind.en_passant()
        elif role is not None:
            kind = MoveKind.uncapture(role)
        else:
            kind = MoveKind.normal()
        return UnMove(str_to_square(match.group("from")), str_to_square(match.group("to")), kind)


_PARSER = RetroUciParser()


def parse_retro_uci(retro_uci: str) -> UnMove:
    return _PARSER.parse(retro_uci)


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Zero-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    rank = int(s[1]) - 1
    return rank * 8 + file


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    file = idx % 8
    rank = idx // 8
    return chr(ord("a") + file) + str(rank + 1)
