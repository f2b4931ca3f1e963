from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from .board import BoardState
from .evaluation.metrics import analyze_pattern, lit_ratio

if TYPE_CHECKING:
    from .solver import SolveResult

logger = logging.getLogger("lightsmatrix.solver")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class SolveListener(Protocol):
    def on_start(self, board: BoardState) -> None: ...
    def on_algorithm(self, algorithm: str, reason: str) -> None: ...
    def on_result(self, result: "SolveResult") -> None: ...


class LoggingListener:
    """Default listener: reports each solve through the `logging` module."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def on_start(self, board: BoardState) -> None:
        self.log.info(
            "solving %s board (%d cells)", board.size_label, board.n_cells
        )
        if self.log.isEnabledFor(logging.DEBUG):
            self.log.debug(
                "board stats: lit=%d (%.1f%%) pattern=%s",
                board.count_on(),
                lit_ratio(board) * 100,
                ",".join(analyze_pattern(board)),
            )

    def on_algorithm(self, algorithm: str, reason: str) -> None:
        self.log.info("algorithm: %s (%s)", algorithm, reason)

    def on_result(self, result: "SolveResult") -> None:
        if result.status == "error":
            self.log.error("solve rejected: %s", result.message)
        elif result.status == "unsolvable":
            self.log.info("no solution")
        else:
            self.log.info(
                "solved in %.2f ms with %d presses",
                result.solving_time_ms,
                len(result.solution),
            )


class RecordingListener:
    """Keeps every event in memory; handy for tests and batch tools."""

    def __init__(self):
        self.events: list[tuple] = []

    def on_start(self, board: BoardState) -> None:
        self.events.append(("start", board.size_label))

    def on_algorithm(self, algorithm: str, reason: str) -> None:
        self.events.append(("algorithm", algorithm, reason))

    def on_result(self, result: "SolveResult") -> None:
        self.events.append(("result", result.status))


def setup_logging(level: int | str = logging.INFO, log_file: str | None = None) -> None:
    """Configure root logging; records also go to log_file when given."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
