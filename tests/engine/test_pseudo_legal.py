from __future__ import annotations

from typing import List

import pytest

from retroboard.engine.retroboard import RetroBoard
from retroboard.engine.unmove import UnMove

from symmetry import retroboards, unmove_set


def generate(r: RetroBoard, gen_type: str) -> List[UnMove]:
    moves: List[UnMove] = []
    if gen_type == "pawn":
        r.gen_pawns(moves)
    elif gen_type == "piece":
        r.gen_pieces(moves)
    elif gen_type == "unpromotion":
        r.gen_unpromotion(moves)
    else:
        moves = r.pseudo_legal_unmoves()
    return moves


GEN_CASES = [
    # fen, white pocket, black pocket, generator, expected
    ("2k5/8/8/5P2/8/8/8/K7 b - - 0 1", "", "", "pawn", "f5f4"),
    ("2k5/8/8/8/5P2/8/nn6/Kn6 b - - 0 1", "", "", "pawn", "f4f3 f4f2"),
    ("1k6/8/8/8/8/8/3P2nn/6nK b - - 0 1", "", "", "pawn", ""),
    ("1k6/8/8/8/8/8/nn6/Kn6 b - - 0 1", "", "", "piece", ""),
    (
        "1k6/8/8/8/8/5N2/nn6/Kn6 b - - 0 1",
        "",
        "",
        "piece",
        "f3e1 f3g1 f3h2 f3h4 f3g5 f3e5 f3d4 f3d2",
    ),
    ("1k6/8/8/8/3r4/8/nn3B2/Kn6 b - - 0 1", "", "", "piece", "f2e1 f2g1 f2g3 f2h4 f2e3"),
    ("1k6/8/8/8/8/5nnn/nn3n2/Kn3n1R b - - 0 1", "", "", "piece", "h1h2 h1g1"),
    ("1k6/8/8/8/8/5nnn/nn3n2/Kn3n1Q b - - 0 1", "", "", "piece", "h1h2 h1g1 h1g2"),
    (
        "3k4/8/8/8/4K3/7P/8/8 b - - 0 1",
        "",
        "PNBRQ",
        "pawn",
        "h3h2 Ph3g2 Nh3g2 Bh3g2 Rh3g2 Qh3g2",
    ),
    ("2k5/8/8/8/5P2/4q1q1/nn6/Kn6 b - - 0 1", "", "PNBRQ", "pawn", "f4f3 f4f2"),
    (
        "1k6/8/8/8/8/5nnn/nn3n2/Kn3n1R b - - 0 1",
        "",
        "PBNRQ",
        "piece",
        "h1h2 h1g1 Bh1h2 Bh1g1 Nh1h2 Nh1g1 Rh1h2 Rh1g1 Qh1h2 Qh1g1",
    ),
    (
        "1k6/8/8/8/8/5nnn/nn3n2/Kn3n1Q b - - 0 1",
        "",
        "PN",
        "piece",
        "h1h2 h1g1 h1g2 Nh1h2 Nh1g1 Nh1g2",
    ),
    ("1k6/8/8/8/8/5nnn/nn3n2/Kn3n1B b - - 0 1", "", "PN", "piece", "h1g2 Nh1g2"),
    ("1k6/8/8/8/8/8/nn6/Kn5N b - - 0 1", "", "PQ", "piece", "h1g3 h1f2 Qh1g3 Qh1f2"),
    (
        "k7/8/8/8/8/8/nn5N/Kn6 b - - 0 1",
        "",
        "PQ",
        "piece",
        "h2g4 h2f3 h2f1 Qh2g4 Qh2f3 Qh2f1 Ph2g4 Ph2f3 Ph2f1",
    ),
    ("6N1/k3n3/5n1n/8/8/8/nn6/Kn6 b - - 0 1", "1", "PR", "unpromotion", "Ug8g7 URg8f7 URg8h7"),
    ("6N1/k3n3/5n1n/8/8/8/nn6/Kn6 b - - 0 1", "1", "", "unpromotion", "Ug8g7"),
    ("6N1/k3n3/5n1n/8/8/8/nn6/Kn6 b - - 0 1", "", "PQ", "unpromotion", ""),
    (
        "5BN1/k3n3/5n1n/8/5P2/8/nn6/K7 b - - 0 1",
        "1",
        "PQ",
        "pseudo",
        "a1b1 Qa1b1 Ug8g7 UQg8f7 UQg8h7 Uf8f7 UQf8g7 Qf8g7 f8g7 "
        "f4f2 f4f3 Pf4g3 Pf4e3 Qf4g3 Qf4e3",
    ),
]


@pytest.mark.parametrize("fen,white_p,black_p,gen_type,expected", GEN_CASES)
def test_generators(fen: str, white_p: str, black_p: str, gen_type: str, expected: str) -> None:
    for mirrored, r in retroboards(fen, white_p, black_p):
        moves = generate(r, gen_type)
        assert len(moves) == len(set(moves)), f"duplicates (mirrored={mirrored})"
        assert set(moves) == unmove_set(expected, mirrored), f"mirrored={mirrored}"


def test_generation_does_not_mutate() -> None:
    r = RetroBoard.from_fen("5BN1/k3n3/5n1n/8/5P2/8/nn6/K7 b - - 0 1", "1", "PQ")
    before = r.copy()
    r.pseudo_legal_unmoves()
    r.legal_unmoves()
    assert r == before


def test_unpromotion_skips_the_king() -> None:
    r = RetroBoard.from_fen("1K6/8/8/8/8/8/8/k7 b - - 0 1", "3", "")
    moves: List[UnMove] = []
    r.gen_unpromotion(moves)
    assert moves == []


def test_pawn_uncapture_never_lands_on_backrank() -> None:
    r = RetroBoard.from_fen("1R6/7k/8/8/8/8/8/1K6 b - - 0 1", "1", "PN")
    assert unmove_set("Ub8b7 UNb8a7 UNb8c7") == {
        m for m in r.pseudo_legal_unmoves() if m.is_unpromotion()
    }
    assert all(m.uncapture() != "p" for m in r.pseudo_legal_unmoves())


def test_pseudo_legal_two_plies() -> None:
    for _, r in retroboards("1N6/1r5k/8/8/2P5/8/1Q2P3/n5Kb w - - 0 1", "2PNBRQ", "3NBRQP"):
        counter = 0
        for m in r.pseudo_legal_unmoves():
            counter += 1
            r2 = r.copy()
            r2.push(m)
            counter += len(r2.pseudo_legal_unmoves())
        assert counter == 22952
