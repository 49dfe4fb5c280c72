from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from pydantic import ValidationError

from ..engine.perft import divide, perft
from ..engine.piece import COLOR_NAMES
from .models import PerftResponse, PositionRequest, UnmovesResponse


logger = logging.getLogger(__name__)

MAX_PERFT_DEPTH = 10


def _add_position_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--fen", type=str, required=True, help="FEN string of the current position")
    parser.add_argument("--white", type=str, default="", help="White pocket, e.g. PPNQ2 (default: empty)")
    parser.add_argument("--black", type=str, default="", help="Black pocket (default: empty)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retroboard", description="Retrograde chess move generator")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_unmoves = sub.add_parser("unmoves", help="List the unmoves of a position")
    _add_position_args(p_unmoves)
    p_unmoves.add_argument("--pseudo", action="store_true", help="Skip the legality filter")
    p_unmoves.add_argument("--json", action="store_true", help="Print a JSON document")

    p_perft = sub.add_parser("perft", help="Count legal unmove paths")
    _add_position_args(p_perft)
    p_perft.add_argument("--depth", type=int, default=2, help="Perft depth (default: 2)")
    p_perft.add_argument("--divide", action="store_true", help="Break the count down per first unmove")
    p_perft.add_argument("--json", action="store_true", help="Print a JSON document")

    p_show = sub.add_parser("show", help="Print the position")
    _add_position_args(p_show)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    try:
        request = PositionRequest(fen=args.fen, white_pocket=args.white, black_pocket=args.black)
        retro = request.to_retroboard()
    except (ValidationError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.command == "show":
        print(retro.pretty())
        return 0

    if args.command == "unmoves":
        unmoves = retro.pseudo_legal_unmoves() if args.pseudo else retro.legal_unmoves()
        response = UnmovesResponse(
            fen=args.fen,
            retro_turn=COLOR_NAMES[retro.retro_turn],
            legal=not args.pseudo,
            count=len(unmoves),
            unmoves=[m.to_retro_uci() for m in unmoves],
        )
        if args.json:
            print(response.model_dump_json())
        else:
            for uci in response.unmoves:
                print(uci)
        return 0

    if args.depth < 0 or args.depth > MAX_PERFT_DEPTH:
        print(f"error: depth must be between 0 and {MAX_PERFT_DEPTH}", file=sys.stderr)
        return 2
    start = time.perf_counter()
    counts = divide(retro, args.depth) if args.divide and args.depth >= 1 else None
    nodes = sum(counts.values()) if counts is not None else perft(retro, args.depth)
    dt = time.perf_counter() - start
    logger.info("perft", extra={"depth": args.depth, "nodes": nodes, "time_ms": int(dt * 1000)})
    response = PerftResponse(
        fen=args.fen, depth=args.depth, nodes=nodes, time_ms=int(dt * 1000), divide=counts
    )
    if args.json:
        print(response.model_dump_json())
    else:
        if counts is not None:
            for uci, n in counts.items():
                print(f"{uci}: {n}")
        print(f"nodes={nodes} depth={args.depth} time_ms={response.time_ms} nps={int(nodes/max(dt,1e-9))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
