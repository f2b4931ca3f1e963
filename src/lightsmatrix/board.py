from __future__ import annotations

from typing import Any, Iterable, NamedTuple

import numpy as np


class InvalidBoardError(ValueError):
    """Raised when a board is not a non-empty rectangular grid of 0/1 cells."""

    pass


class Move(NamedTuple):
    row: int
    col: int

    def to_dict(self) -> dict:
        return {"x": self.row, "y": self.col}

    @staticmethod
    def coerce(step: Any) -> "Move":
        """Accept a Move, a (row, col) pair, or a mapping with x/y or row/col keys."""
        if isinstance(step, Move):
            return step
        if isinstance(step, dict):
            if "x" in step and "y" in step:
                return Move(int(step["x"]), int(step["y"]))
            if "row" in step and "col" in step:
                return Move(int(step["row"]), int(step["col"]))
            raise ValueError(f"Move mapping needs x/y keys, got {step!r}")
        row, col = step
        return Move(int(row), int(col))


class BoardState:
    def __init__(self, rows: int, cols: int, state: np.ndarray | None = None):
        if rows < 1 or cols < 1:
            raise InvalidBoardError(
                f"Board must be at least 1x1, got {rows}x{cols}"
            )
        self.rows = rows
        self.cols = cols
        if state is None:
            self.state = np.zeros((rows, cols), dtype=bool)
        else:
            state = np.asarray(state)
            if state.shape != (rows, cols):
                raise InvalidBoardError(
                    f"Expected board of shape {(rows, cols)}, got {state.shape}"
                )
            if not np.isin(state, (0, 1)).all():
                raise InvalidBoardError("Board cells must be 0 or 1")
            self.state = state.astype(bool, copy=True)

    @staticmethod
    def from_grid(grid: Any) -> "BoardState":
        """Build a board from nested rows (lists, tuples or a 2-D array)."""
        if isinstance(grid, BoardState):
            return grid.copy()
        try:
            arr = np.asarray(grid)
        except ValueError as exc:
            raise InvalidBoardError("Board rows must all have the same length") from exc
        if arr.ndim != 2 or arr.dtype == object:
            raise InvalidBoardError(
                "Board must be a non-empty rectangular grid of 0/1 cells"
            )
        return BoardState(arr.shape[0], arr.shape[1], arr)

    @staticmethod
    def all_on(rows: int, cols: int) -> "BoardState":
        return BoardState(rows, cols, np.ones((rows, cols), dtype=bool))

    @property
    def n_cells(self) -> int:
        return self.rows * self.cols

    @property
    def size_label(self) -> str:
        return f"{self.rows}x{self.cols}"

    def copy(self) -> "BoardState":
        return BoardState(self.rows, self.cols, self.state.copy())

    def to_flat(self) -> np.ndarray:
        return self.state.reshape(-1)

    @staticmethod
    def from_flat(rows: int, cols: int, flat: np.ndarray) -> "BoardState":
        return BoardState(rows, cols, np.asarray(flat).reshape(rows, cols))

    def to_list(self) -> list[list[int]]:
        return self.state.astype(int).tolist()

    def to_string(self) -> str:
        return "".join("1" if cell else "0" for cell in self.to_flat())

    @staticmethod
    def from_string(text: str, cols: int) -> "BoardState":
        """Inverse of to_string; a short final row is padded with 0 cells."""
        if cols < 1 or not text:
            raise InvalidBoardError("Board string and column count must be non-empty")
        if set(text) - {"0", "1"}:
            raise InvalidBoardError("Board string may only contain 0 and 1")
        rows = -(-len(text) // cols)
        flat = np.zeros(rows * cols, dtype=bool)
        flat[: len(text)] = [ch == "1" for ch in text]
        return BoardState.from_flat(rows, cols, flat)

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def press(self, r: int, c: int) -> None:
        """Toggle cell (r, c) and its in-bounds up/down/left/right neighbors in place."""
        if not self.in_bounds(r, c):
            raise ValueError(
                f"Move ({r}, {c}) is outside the {self.size_label} board"
            )
        grid = self.state
        grid[r, c] ^= True
        if r > 0:
            grid[r - 1, c] ^= True
        if r < self.rows - 1:
            grid[r + 1, c] ^= True
        if c > 0:
            grid[r, c - 1] ^= True
        if c < self.cols - 1:
            grid[r, c + 1] ^= True

    def pressed(self, moves: Iterable[Any]) -> "BoardState":
        """Return a copy with every move applied in order."""
        out = self.copy()
        for step in moves:
            move = Move.coerce(step)
            out.press(move.row, move.col)
        return out

    def count_on(self) -> int:
        return int(self.state.sum())

    def is_all_on(self) -> bool:
        return bool(self.state.all())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardState):
            return NotImplemented
        return self.state.shape == other.state.shape and bool(
            (self.state == other.state).all()
        )

    def __repr__(self):
        return f"BoardState(rows={self.rows}, cols={self.cols}, on={self.count_on()})"

    def __str__(self) -> str:
        return "\n".join(
            "".join("1" if cell else "0" for cell in row) for row in self.state
        )


def as_board(board: Any) -> BoardState:
    """Wrap nested rows as a BoardState; an existing BoardState is used as is."""
    if isinstance(board, BoardState):
        return board
    return BoardState.from_grid(board)
