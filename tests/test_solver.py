import numpy as np
import pytest

import lightsmatrix.solver as solver
from lightsmatrix.board import BoardState, Move
from lightsmatrix.config import SolverConfig
from lightsmatrix.diagnostics import RecordingListener
from lightsmatrix.verifier import verify_solution

from conftest import grid


def quiet_solve(board, **kwargs):
    return solver.solve(board, listener=RecordingListener(), **kwargs)


def test_all_off_3x3_is_solvable():
    board = [[0, 0, 0], [0, 0, 0], [0, 0, 0]]
    result = quiet_solve(board)
    assert result.status == "solvable"
    assert verify_solution(board, result.solution)


def test_checkerboard_corners_3x3():
    board = grid("101", "010", "101")
    result = quiet_solve(board)
    assert result.is_solvable
    assert verify_solution(board, result.solution)


def test_all_on_board_needs_no_presses():
    result = quiet_solve(BoardState.all_on(4, 6))
    assert result.is_solvable
    assert result.solution == []


def test_single_lit_center_5x5():
    board = [[0] * 5 for _ in range(5)]
    board[2][2] = 1
    result = quiet_solve(board)
    assert result.is_solvable
    assert verify_solution(board, result.solution)
    assert result.matrix_size == "5x5"
    assert result.algorithm == "optimized"


def test_known_unsolvable_5x5():
    board = [[1] * 5 for _ in range(5)]
    board[0][0] = 0
    result = quiet_solve(board)
    assert result.status == "unsolvable"
    assert result.to_dict() == {
        "status": "unsolvable",
        "message": "This configuration has no solution.",
    }


def test_solver_does_not_mutate_board():
    board = BoardState.from_grid(grid("0110", "1001", "0000"))
    before = board.copy()
    quiet_solve(board)
    assert board == before


def test_size_cap_is_checked_before_elimination(monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("elimination must not run")

    monkeypatch.setattr(solver, "build_system", boom)
    result = quiet_solve(np.zeros((32, 32), dtype=int))
    assert result.status == "error"
    data = result.to_dict()
    assert data["maxSize"] == 32
    assert data["maxCells"] == 1000
    assert "too large" in data["message"]


def test_boundary_of_size_cap():
    # 25x40 is exactly 1000 cells and is still accepted
    result = quiet_solve(BoardState.all_on(25, 40))
    assert result.is_solvable
    assert quiet_solve(BoardState.all_on(1, 1001)).status == "error"


@pytest.mark.parametrize(
    ("shape", "expected"),
    [((20, 20), "optimized"), ((1, 400), "optimized"), ((21, 20), "standard")],
)
def test_dispatch_threshold(shape, expected):
    listener = RecordingListener()
    result = solver.solve(np.ones(shape, dtype=int), listener=listener)
    assert result.algorithm == expected
    assert ("algorithm", expected, listener.events[1][2]) in listener.events


def test_algorithm_override():
    result = quiet_solve(grid("010", "111", "010"), algorithm="standard")
    assert result.algorithm == "standard"
    config = SolverConfig(algorithm="optimized", optimized_max_cells=1)
    assert quiet_solve(grid("010", "111", "010"), config=config).algorithm == "optimized"


def test_solvable_dict_shape():
    data = quiet_solve(grid("00", "00")).to_dict()
    assert set(data) == {"status", "solution", "solvingTimeMs", "matrixSize", "algorithm"}
    assert data["matrixSize"] == "2x2"
    assert data["solvingTimeMs"] >= 0
    assert sorted((m["x"], m["y"]) for m in data["solution"]) == [
        (0, 0),
        (0, 1),
        (1, 0),
        (1, 1),
    ]


def scrambled(rows, cols, moves):
    return BoardState.all_on(rows, cols).pressed(moves)


def test_solution_is_row_major():
    board = scrambled(4, 3, [Move(3, 2), Move(0, 1), Move(2, 0), Move(1, 1)])
    result = quiet_solve(board)
    keys = [m.row * 3 + m.col for m in result.solution]
    assert keys == sorted(keys)
    assert verify_solution(board, result.solution)


def test_decode_solution():
    x = np.array([0, 1, 0, 0, 0, 1], dtype=np.uint8)
    assert solver.decode_solution(x, 3) == [Move(0, 1), Move(1, 2)]


@pytest.mark.parametrize(("rows", "cols"), [(1, 1), (2, 7), (4, 4), (5, 5), (6, 3), (9, 9)])
def test_solver_and_verifier_agree(fx_rng, rows, cols):
    for _ in range(10):
        board = (fx_rng.random((rows, cols)) < 0.5).astype(int)
        result = quiet_solve(board)
        if result.is_solvable:
            assert verify_solution(board, result.solution)
        else:
            assert result.status == "unsolvable"


def test_variants_agree_on_boards(fx_rng):
    for _ in range(20):
        board = (fx_rng.random((6, 6)) < 0.5).astype(int)
        opt = quiet_solve(board, algorithm="optimized")
        std = quiet_solve(board, algorithm="standard")
        assert opt.status == std.status
        if opt.is_solvable:
            assert opt.solution == std.solution
            assert verify_solution(board, opt.solution)
            assert verify_solution(board, std.solution)


def test_minimize_finds_lighter_plan():
    # 4x4 has a 4-dimensional nullspace, so the particular solution is rarely lightest
    moves = [Move(0, 0), Move(1, 3), Move(3, 1)]
    board = scrambled(4, 4, moves)
    plain = quiet_solve(board)
    light = quiet_solve(board, minimize=True)
    assert verify_solution(board, light.solution)
    assert len(light.solution) <= len(plain.solution)
    assert len(light.solution) <= len(moves)


def test_minimize_skips_large_nullspace(caplog):
    config = SolverConfig(max_nullity=1)
    board = scrambled(4, 4, [Move(2, 2)])
    with caplog.at_level("WARNING", logger="lightsmatrix.solver"):
        light = quiet_solve(board, config=config, minimize=True)
    assert light.solution == quiet_solve(board).solution
    assert "max_nullity" in caplog.text


def test_hint():
    board = grid("111", "111", "111")
    assert solver.hint(board, listener=RecordingListener()) is None

    board = BoardState.all_on(3, 3)
    board.press(1, 1)
    move = solver.hint(board, listener=RecordingListener())
    assert move == Move(1, 1)

    unsolvable = [[1] * 5 for _ in range(5)]
    unsolvable[0][0] = 0
    assert solver.hint(unsolvable, listener=RecordingListener()) is None


def test_listener_sees_every_stage():
    listener = RecordingListener()
    solver.solve(grid("01", "10"), listener=listener)
    assert [e[0] for e in listener.events] == ["start", "algorithm", "result"]
    assert listener.events[0] == ("start", "2x2")
