from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Tuple

from .errors import ParseRetroPocketError, RetroInvariantError
from .piece import BISHOP, KING, KNIGHT, PAWN, QUEEN, ROOK, WHITE


# Fixed iteration order for uncapture candidates
POCKET_ROLES = (PAWN, KNIGHT, BISHOP, ROOK, QUEEN)
_ROLE_FIELDS = {PAWN: "pawn", KNIGHT: "knight", BISHOP: "bishop", ROOK: "rook", QUEEN: "queen"}


@dataclass
class RetroPocket:
    """Pieces one color can still have uncaptured, plus its unpromotion allowance.

    Attributes:
        pawn, knight, bishop, rook, queen (int): Pieces of that role that can
            reappear on the board.
        unpromotion (int): How many pieces of this color may still turn back
            into a pawn.
    """

    pawn: int = 0
    knight: int = 0
    bishop: int = 0
    rook: int = 0
    queen: int = 0
    unpromotion: int = 0

    @classmethod
    def from_str(cls, s: str) -> "RetroPocket":
        """Parse a pocket descriptor such as ``"PPNBRQ2"``.

        Letters are case-insensitive and may repeat; a single digit anywhere
        gives the unpromotion allowance.

        Raises:
            ParseRetroPocketError: On an unknown letter or a second digit.
        """
        pocket = cls()
        seen_digit = False
        for ch in s:
            if ch.isdigit():
                if seen_digit:
                    raise ParseRetroPocketError(f"pocket has more than one digit: {s!r}")
                seen_digit = True
                pocket.unpromotion = int(ch)
                continue
            name = _ROLE_FIELDS.get(ch.lower())
            if name is None:
                raise ParseRetroPocketError(f"invalid pocket letter {ch!r} in {s!r}")
            setattr(pocket, name, getattr(pocket, name) + 1)
        return pocket

    def count(self, role: str) -> int:
        name = _ROLE_FIELDS.get(role)
        return 0 if name is None else getattr(self, name)

    def decr(self, role: str) -> None:
        """Consume one piece of ``role``.

        Raises:
            RetroInvariantError: If ``role`` is king or none is left.
        """
        if role == KING:
            raise RetroInvariantError("cannot uncapture a king")
        name = _ROLE_FIELDS.get(role)
        if name is None:
            raise RetroInvariantError(f"unknown role: {role!r}")
        current = getattr(self, name)
        if current <= 0:
            raise RetroInvariantError(f"no {name} left to uncapture")
        setattr(self, name, current - 1)

    def decr_unpromotion(self) -> None:
        if self.unpromotion <= 0:
            raise RetroInvariantError("no unpromotion left")
        self.unpromotion -= 1

    def roles(self) -> Iterator[str]:
        """Yield each role present at least once, in pawn..queen order."""
        for role in POCKET_ROLES:
            if getattr(self, _ROLE_FIELDS[role]) > 0:
                yield role

    def __iter__(self) -> Iterator[str]:
        return self.roles()

    def as_tuple(self) -> Tuple[int, ...]:
        return (self.pawn, self.knight, self.bishop, self.rook, self.queen, self.unpromotion)

    def copy(self) -> "RetroPocket":
        return RetroPocket(*self.as_tuple())

    def __str__(self) -> str:
        s = "".join(role.upper() * self.count(role) for role in POCKET_ROLES)
        if self.unpromotion > 0:
            s += str(self.unpromotion)
        return s


@dataclass
class RetroPockets:
    """One :class:`RetroPocket` per color."""

    white: RetroPocket = field(default_factory=RetroPocket)
    black: RetroPocket = field(default_factory=RetroPocket)

    @classmethod
    def from_str(cls, white: str, black: str) -> "RetroPockets":
        return cls(white=RetroPocket.from_str(white), black=RetroPocket.from_str(black))

    def color(self, color: str) -> RetroPocket:
        return self.white if color == WHITE else self.black

    def copy(self) -> "RetroPockets":
        return RetroPockets(white=self.white.copy(), black=self.black.copy())

    def as_tuple(self) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
        return (self.white.as_tuple(), self.black.as_tuple())

    def __str__(self) -> str:
        return f'white: "{self.white}", black: "{self.black}"'
