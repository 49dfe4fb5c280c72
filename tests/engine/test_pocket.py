from __future__ import annotations

import pytest

from retroboard.engine.errors import ParseRetroPocketError, RetroInvariantError
from retroboard.engine.piece import BLACK, WHITE
from retroboard.engine.pocket import RetroPocket, RetroPockets


def test_from_str_counts_roles() -> None:
    assert RetroPocket.from_str("").as_tuple() == (0, 0, 0, 0, 0, 0)
    assert RetroPocket.from_str("PNBRQ").as_tuple() == (1, 1, 1, 1, 1, 0)
    assert RetroPocket.from_str("ppQq").as_tuple() == (2, 0, 0, 0, 2, 0)


@pytest.mark.parametrize("digit", range(1, 10))
def test_from_str_reads_unpromotion_digit(digit: int) -> None:
    p = RetroPocket.from_str("PNBRQ" + str(digit))
    assert p.as_tuple() == (1, 1, 1, 1, 1, digit)


@pytest.mark.parametrize("text", ["PNBRQ12", "K", "PX", "1 "])
def test_from_str_rejects_bad_descriptors(text: str) -> None:
    with pytest.raises(ParseRetroPocketError):
        RetroPocket.from_str(text)


def test_equality_ignores_letter_order() -> None:
    assert RetroPocket.from_str("PQP") == RetroPocket.from_str("PPQ")
    assert RetroPocket() == RetroPocket()
    assert RetroPocket.from_str("2NBRQ") != RetroPocket.from_str("NBRQ6")


@pytest.mark.parametrize("conf", ["PNB", "BRQ", "PNBRQ", "Q"])
def test_roles_in_fixed_order(conf: str) -> None:
    assert list(RetroPocket.from_str(conf)) == list(conf.lower())


def test_roles_are_deduplicated_and_restartable() -> None:
    p = RetroPocket.from_str("QQPPPN")
    assert list(p.roles()) == ["p", "n", "q"]
    assert list(p.roles()) == ["p", "n", "q"]


def test_decr() -> None:
    p = RetroPocket.from_str("PPN")
    p.decr("p")
    assert p.pawn == 1
    p.decr("n")
    assert list(p) == ["p"]


def test_decr_king_is_a_fault() -> None:
    with pytest.raises(RetroInvariantError):
        RetroPocket.from_str("PNBRQ").decr("k")


def test_decr_empty_role_is_a_fault() -> None:
    p = RetroPocket.from_str("N")
    with pytest.raises(RetroInvariantError):
        p.decr("q")
    assert p.queen == 0


def test_decr_unpromotion() -> None:
    p = RetroPocket.from_str("1")
    p.decr_unpromotion()
    assert p.unpromotion == 0
    with pytest.raises(RetroInvariantError):
        p.decr_unpromotion()


def test_str_is_canonical() -> None:
    assert str(RetroPocket.from_str("qPp2")) == "PPQ2"
    assert str(RetroPocket.from_str("0")) == ""


def test_pockets_by_color() -> None:
    pockets = RetroPockets.from_str("2PPN", "Q")
    assert pockets.color(WHITE).unpromotion == 2
    assert pockets.color(BLACK).queen == 1
    other = pockets.copy()
    other.color(BLACK).decr("q")
    assert pockets.color(BLACK).queen == 1
    assert pockets != other
