from __future__ import annotations

from typing import Dict

from .retroboard import RetroBoard


def perft(board: RetroBoard, depth: int) -> int:
    """Count legal unmove paths of length ``depth`` from ``board``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Shorter paths (positions with no legal unmove) are not counted. Each
    child is a ``copy()`` of its parent, so sibling branches never share
    state. Recursion depth equals ``depth``.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    moves = board.legal_unmoves()
    if depth == 1:
        return len(moves)
    nodes = 0
    for m in moves:
        child = board.copy()
        child.push(m)
        nodes += perft(child, depth - 1)
    return nodes


def divide(board: RetroBoard, depth: int) -> Dict[str, int]:
    """Per-first-unmove perft counts, keyed by retro UCI."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    counts: Dict[str, int] = {}
    for m in board.legal_unmoves():
        child = board.copy()
        child.push(m)
        counts[m.to_retro_uci()] = perft(child, depth - 1)
    return counts
