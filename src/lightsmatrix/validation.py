from __future__ import annotations

from typing import Any

from .board import BoardState, InvalidBoardError

DEFAULT_MAX_DIMENSION = 30


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_payload(payload: Any, max_dimension: int = DEFAULT_MAX_DIMENSION) -> BoardState:
    """Check a submitted board and return it as a BoardState.

    Two shapes are accepted: {"rows": R, "cols": C, "board": [[...], ...]}
    or the bare list of rows. Every failure raises InvalidBoardError with a
    message naming what is wrong.
    """
    if isinstance(payload, dict) and "board" in payload and "rows" in payload and "cols" in payload:
        rows, cols, board = payload["rows"], payload["cols"], payload["board"]
    elif isinstance(payload, list) and payload:
        board = payload
        rows = len(board)
        cols = len(board[0]) if isinstance(board[0], list) else 0
    else:
        raise InvalidBoardError(
            "Invalid board format. Expected {rows, cols, board} or board array"
        )

    if not _is_int(rows) or not _is_int(cols):
        raise InvalidBoardError("Rows and cols must be integers")
    if rows <= 0 or cols <= 0:
        raise InvalidBoardError("Rows and cols must be positive integers")
    if rows > max_dimension or cols > max_dimension:
        raise InvalidBoardError(
            f"Board size too large (maximum {max_dimension}x{max_dimension})"
        )
    if not isinstance(board, list) or len(board) != rows:
        raise InvalidBoardError("Board must be an array with correct number of rows")

    for i, row in enumerate(board):
        if not isinstance(row, list) or len(row) != cols:
            raise InvalidBoardError(f"Row {i} must be an array with {cols} elements")
        for j, cell in enumerate(row):
            if not _is_int(cell) or cell not in (0, 1):
                raise InvalidBoardError(
                    f"Board cells must be 0 or 1, found {cell!r} at position [{i}][{j}]"
                )

    return BoardState.from_grid(board)
