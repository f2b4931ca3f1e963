from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .algebra import (
    EliminationResult,
    build_system,
    gf2_eliminate,
    gf2_eliminate_packed,
    gf2_min_weight_solution,
    gf2_nullspace,
)
from .board import BoardState, Move, as_board
from .config import SolverConfig
from .diagnostics import LoggingListener, SolveListener

logger = logging.getLogger(__name__)

UNSOLVABLE_MESSAGE = "This configuration has no solution."

ELIMINATORS: Dict[str, Callable[[np.ndarray, np.ndarray], EliminationResult]] = {
    "optimized": gf2_eliminate_packed,
    "standard": gf2_eliminate,
}


@dataclass(frozen=True)
class SolveResult:
    status: str
    solution: Optional[List[Move]] = None
    solving_time_ms: Optional[float] = None
    matrix_size: Optional[str] = None
    algorithm: Optional[str] = None
    message: Optional[str] = None
    max_size: Optional[int] = None
    max_cells: Optional[int] = None

    @property
    def is_solvable(self) -> bool:
        return self.status == "solvable"

    def to_dict(self) -> dict:
        if self.status == "solvable":
            return {
                "status": self.status,
                "solution": [m.to_dict() for m in self.solution],
                "solvingTimeMs": self.solving_time_ms,
                "matrixSize": self.matrix_size,
                "algorithm": self.algorithm,
            }
        if self.status == "unsolvable":
            return {"status": self.status, "message": self.message}
        return {
            "status": self.status,
            "message": self.message,
            "maxSize": self.max_size,
            "maxCells": self.max_cells,
        }


def choose_algorithm(n_cells: int, config: SolverConfig) -> Tuple[str, str]:
    """Return (algorithm, reason) for a board of n_cells."""
    if config.algorithm != "auto":
        return config.algorithm, "requested"
    if n_cells <= config.optimized_max_cells:
        return "optimized", f"{n_cells} <= {config.optimized_max_cells} cells"
    return "standard", f"{n_cells} > {config.optimized_max_cells} cells"


def decode_solution(x: np.ndarray, cols: int) -> List[Move]:
    """Turn a solved unknown vector into row-major press coordinates."""
    return [Move(*divmod(int(k), cols)) for k in np.flatnonzero(x)]


def _lighten(A: np.ndarray, x: np.ndarray, max_nullity: int) -> np.ndarray:
    basis = gf2_nullspace(A)
    if len(basis) > max_nullity:
        logger.warning(
            "nullity %d exceeds max_nullity %d; keeping particular solution",
            len(basis),
            max_nullity,
        )
        return x
    return gf2_min_weight_solution(x, basis)


def solve(
    board: Any,
    *,
    config: SolverConfig | None = None,
    algorithm: str | None = None,
    minimize: bool | None = None,
    listener: SolveListener | None = None,
) -> SolveResult:
    """Find presses that turn every cell of `board` on.

    `board` is a BoardState or nested 0/1 rows. `algorithm` and `minimize`
    override the matching config fields. Oversized boards and unsolvable
    boards are reported through the result status, never raised.
    """
    config = (config or SolverConfig()).with_overrides(
        algorithm=algorithm, minimize=minimize
    )
    listener = listener or LoggingListener()
    board = as_board(board)
    listener.on_start(board)

    n = board.n_cells
    if n > config.max_cells:
        result = SolveResult(
            status="error",
            message=(
                "Matrix too large for practical solving. "
                f"Maximum is {config.max_cells} cells (about {config.max_size}x{config.max_size})."
            ),
            max_size=config.max_size,
            max_cells=config.max_cells,
        )
        listener.on_result(result)
        return result

    start = time.perf_counter()
    A, b = build_system(board)
    name, reason = choose_algorithm(n, config)
    listener.on_algorithm(name, reason)
    elim = ELIMINATORS[name](A, b)

    if not elim.has_solution or elim.solution is None:
        result = SolveResult(status="unsolvable", message=UNSOLVABLE_MESSAGE)
        listener.on_result(result)
        return result

    x = elim.solution
    if config.minimize:
        x = _lighten(A, x, config.max_nullity)

    elapsed_ms = (time.perf_counter() - start) * 1000
    result = SolveResult(
        status="solvable",
        solution=decode_solution(x, board.cols),
        solving_time_ms=elapsed_ms,
        matrix_size=board.size_label,
        algorithm=name,
    )
    listener.on_result(result)
    return result


def hint(board: Any, **kwargs) -> Move | None:
    """First press of a solution, or None when there is nothing to suggest."""
    result = solve(board, **kwargs)
    if not result.is_solvable or not result.solution:
        return None
    return result.solution[0]
