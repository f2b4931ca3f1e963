from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from .board import BoardState
from .config import SolverConfig
from .diagnostics import RecordingListener
from .solver import SolveResult, solve

logger = logging.getLogger(__name__)


def sample_board(rows: int, cols: int, rng: np.random.Generator) -> BoardState:
    """Board with a uniformly drawn number of lit cells (1..rows*cols) in random places."""
    max_lights = rows * cols
    num_on = rng.integers(1, max_lights + 1)

    flat = np.zeros(max_lights, dtype=bool)
    flat[:num_on] = True
    rng.shuffle(flat)
    return BoardState.from_flat(rows, cols, flat)


def scrambled_board(
    rows: int, cols: int, rng: np.random.Generator, presses: int | None = None
) -> BoardState:
    """Press random cells on an all-on board, so the result is always solvable."""
    if presses is None:
        presses = int(rng.integers(1, rows * cols + 1))
    board = BoardState.all_on(rows, cols)
    for k in rng.integers(0, rows * cols, size=presses):
        board.press(*divmod(int(k), cols))
    return board


def _coin_board(rows: int, cols: int, rng: np.random.Generator) -> BoardState:
    return BoardState(rows, cols, rng.random((rows, cols)) < 0.5)


def random_solved_board(
    rows: int,
    cols: int,
    rng: np.random.Generator,
    config: SolverConfig | None = None,
) -> Tuple[BoardState, SolveResult]:
    """Random solvable board together with its solve result.

    Fair coin per cell; an unsolvable draw falls back to a scrambled board.
    """
    board = _coin_board(rows, cols, rng)
    result = solve(board, config=config, listener=RecordingListener())
    if result.is_solvable:
        return board, result
    logger.info("random %s board has no solution, scrambling instead", board.size_label)
    board = scrambled_board(rows, cols, rng)
    return board, solve(board, config=config, listener=RecordingListener())


def random_board(
    rows: int,
    cols: int,
    rng: np.random.Generator,
    ensure_solvable: bool = True,
    config: SolverConfig | None = None,
) -> BoardState:
    if not ensure_solvable:
        return _coin_board(rows, cols, rng)
    board, _ = random_solved_board(rows, cols, rng, config=config)
    return board
