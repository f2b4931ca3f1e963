from __future__ import annotations

from typing import Sequence

import numpy as np

from ..board import BoardState


def lit_ratio(board: BoardState) -> float:
    return board.count_on() / board.n_cells


def difficulty(board: BoardState) -> str:
    ratio = lit_ratio(board)
    if ratio <= 0.3:
        return "easy"
    if ratio <= 0.6:
        return "medium"
    return "hard"


def analyze_pattern(board: BoardState) -> list[str]:
    """Tag a board as empty/full/symmetric (180° rotation), or random."""
    grid = board.state
    patterns = []
    if not grid.any():
        patterns.append("empty")
    if grid.all():
        patterns.append("full")
    if np.array_equal(grid, grid[::-1, ::-1]):
        patterns.append("symmetric")
    return patterns or ["random"]


def solution_weight(solution: Sequence) -> int:
    # number of presses in a plan
    return len(solution)
