from __future__ import annotations

import argparse
import json
import logging
import sys

import numpy as np
import yaml

from .board import InvalidBoardError, Move
from .config import ALGORITHM_CHOICES, load_config
from .diagnostics import setup_logging
from .evaluation.metrics import difficulty, solution_weight
from .generator import random_solved_board
from .solver import hint, solve
from .validation import validate_payload
from .verifier import verify_solution

logger = logging.getLogger(__name__)

EXIT_INVALID = 2


def _read_payload(path: str | None):
    if path in (None, "-"):
        return json.load(sys.stdin)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _emit(data) -> None:
    print(json.dumps(data))


def cmd_solve(args, config) -> int:
    board = validate_payload(_read_payload(args.input), config.max_dimension)
    result = solve(
        board,
        config=config,
        algorithm=args.algorithm,
        minimize=True if args.minimize else None,
    )
    _emit(result.to_dict())
    return 0


def cmd_verify(args, config) -> int:
    payload = _read_payload(args.input)
    board = validate_payload(payload, config.max_dimension)
    solution = payload.get("solution") if isinstance(payload, dict) else None
    if not isinstance(solution, list):
        raise InvalidBoardError("Solution must be an array of coordinates")
    try:
        moves = [Move.coerce(step) for step in solution]
        is_valid = verify_solution(board, moves)
    except (TypeError, ValueError) as exc:
        raise InvalidBoardError(f"Invalid solution: {exc}") from exc
    _emit(
        {
            "status": "valid",
            "isValid": is_valid,
            "message": "Solution is correct" if is_valid else "Solution is incorrect",
        }
    )
    return 0


def cmd_hint(args, config) -> int:
    board = validate_payload(_read_payload(args.input), config.max_dimension)
    move = hint(board, config=config)
    _emit({"hint": move.to_dict() if move is not None else None})
    return 0


def cmd_random(args, config) -> int:
    if not (0 < args.rows <= config.max_dimension and 0 < args.cols <= config.max_dimension):
        raise InvalidBoardError("Invalid board size")
    rng = np.random.default_rng(args.seed)
    board, result = random_solved_board(args.rows, args.cols, rng, config=config)
    _emit(
        {
            "status": "success",
            "rows": args.rows,
            "cols": args.cols,
            "board": board.to_list(),
            "hasSolution": result.is_solvable,
            "solutionSteps": solution_weight(result.solution) if result.is_solvable else 0,
            "difficulty": difficulty(board),
        }
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="lightsmatrix", description="Lights Out solver over GF(2)"
    )
    ap.add_argument("--config", default=None, help="YAML config path")
    ap.add_argument("--log-level", default=None, help="Override logging level")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("solve", help="Solve a board")
    p.add_argument("input", nargs="?", default=None, help="JSON file, '-' for stdin")
    p.add_argument("--algorithm", choices=ALGORITHM_CHOICES, default=None)
    p.add_argument("--minimize", action="store_true", help="Search for fewest presses")
    p.set_defaults(func=cmd_solve)

    p = sub.add_parser("verify", help="Check a proposed solution")
    p.add_argument("input", nargs="?", default=None)
    p.set_defaults(func=cmd_verify)

    p = sub.add_parser("hint", help="Suggest the next press")
    p.add_argument("input", nargs="?", default=None)
    p.set_defaults(func=cmd_hint)

    p = sub.add_parser("random", help="Generate a solvable random board")
    p.add_argument("--rows", type=int, default=5)
    p.add_argument("--cols", type=int, default=5)
    p.add_argument("--seed", type=int, default=None)
    p.set_defaults(func=cmd_random)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.config)
        config = config.with_overrides(log_level=args.log_level)
        setup_logging(config.log_level, config.log_file)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        _emit({"status": "error", "message": str(exc)})
        return EXIT_INVALID

    try:
        return args.func(args, config)
    except InvalidBoardError as exc:
        logger.warning("rejected input: %s", exc)
        _emit({"status": "error", "message": str(exc)})
        return EXIT_INVALID
    except json.JSONDecodeError as exc:
        _emit({"status": "error", "message": f"Invalid JSON: {exc.msg}"})
        return EXIT_INVALID
    except OSError as exc:
        _emit({"status": "error", "message": f"Cannot read input: {exc}"})
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
