from __future__ import annotations

from typing import Any, Iterable

from .board import as_board


def verify_solution(board: Any, solution: Iterable[Any]) -> bool:
    """Replay `solution` on a copy of `board` and report whether every cell ends on.

    Moves are applied in order; each may be a Move, a (row, col) pair or an
    {"x": row, "y": col} mapping. An empty solution checks the board as given.
    """
    return as_board(board).pressed(solution).is_all_on()
