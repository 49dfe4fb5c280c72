#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import time
import os
import sys

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo root (which contains `retroboard/`) to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from retroboard.engine.perft import perft
from retroboard.engine.retroboard import RetroBoard


# Benchmark position with well-stocked pockets on both sides
BENCH_FEN = "q4N2/1p5k/8/8/6P1/4Q3/1K1PB3/7r b - - 0 1"
BENCH_WHITE = "2PNBRQ"
BENCH_BLACK = "3NBRQP"


def main() -> None:
    parser = argparse.ArgumentParser(description="Run retro perft on a given FEN and depth")
    parser.add_argument("--fen", type=str, default=BENCH_FEN, help="FEN string (default: bench position)")
    parser.add_argument("--white", type=str, default=BENCH_WHITE, help="White pocket")
    parser.add_argument("--black", type=str, default=BENCH_BLACK, help="Black pocket")
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    args = parser.parse_args()

    board = RetroBoard.from_fen(args.fen, args.white, args.black)
    start = time.perf_counter()
    nodes = perft(board, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
