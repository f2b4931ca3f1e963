import argparse
import csv
import multiprocessing as mp
import os
import sys
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

import numpy as np
import yaml

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lightsmatrix.algebra import build_system  # noqa: E402
from lightsmatrix.evaluation.metrics import solution_weight  # noqa: E402
from lightsmatrix.generator import sample_board  # noqa: E402
from lightsmatrix.solver import ELIMINATORS, decode_solution  # noqa: E402
from lightsmatrix.verifier import verify_solution  # noqa: E402

# Limit threads per worker
os.environ["OMP_NUM_THREADS"] = "1"
os.environ["OPENBLAS_NUM_THREADS"] = "1"
os.environ["MKL_NUM_THREADS"] = "1"

FIELDNAMES = [
    "rows",
    "cols",
    "cells",
    "board_id",
    "seed",
    "algorithm",
    "initial_on",
    "solvable",
    "rank",
    "presses",
    "verified",
    "time_ms",
]


def _task_seed(base_seed: int, *coords: int) -> int:
    """Generate deterministic seed for each task."""
    ss = np.random.SeedSequence([int(base_seed)] + [int(c) for c in coords])

    return int(
        ss.generate_state(1, dtype=np.uint64)[0] & np.uint64((1 << 63) - 1)
    )


def make_jobs(sizes, n_samples, algorithms, base_seed):
    """One job per (size, sample); each job times every algorithm on the same board."""
    for rows, cols in sizes:
        for board_id in range(n_samples):
            yield {
                "rows": int(rows),
                "cols": int(cols),
                "board_id": board_id,
                "algorithms": list(algorithms),
                "seed": _task_seed(base_seed, rows, cols, board_id),
            }


def _run_job(job):
    """Solve one random board with every requested algorithm."""
    rows, cols = job["rows"], job["cols"]
    rng = np.random.default_rng(job["seed"])
    board = sample_board(rows, cols, rng)
    A, b = build_system(board)

    out = []
    for name in job["algorithms"]:
        start = time.perf_counter()
        res = ELIMINATORS[name](A, b)
        time_ms = (time.perf_counter() - start) * 1000

        presses = 0
        verified = ""
        if res.has_solution:
            moves = decode_solution(res.solution, cols)
            presses = solution_weight(moves)
            verified = int(verify_solution(board, moves))
        out.append(
            {
                "rows": rows,
                "cols": cols,
                "cells": rows * cols,
                "board_id": job["board_id"],
                "seed": job["seed"],
                "algorithm": name,
                "initial_on": board.count_on(),
                "solvable": int(res.has_solution),
                "rank": res.rank,
                "presses": presses,
                "verified": verified,
                "time_ms": time_ms,
            }
        )
    return out


def run_pool(jobs, writer, workers, max_inflight=None, total_jobs=None):
    """Run jobs in parallel and write results as they complete."""
    ctx = mp.get_context("spawn")
    if max_inflight is None:
        max_inflight = workers * 3

    inflight = set()
    done = 0
    start_time = time.time()

    with ProcessPoolExecutor(max_workers=workers, mp_context=ctx) as ex:
        jobs_iter = iter(jobs)
        for j in jobs_iter:
            inflight.add(ex.submit(_run_job, j))
            if len(inflight) >= max_inflight:
                break

        while inflight:
            fut = next(as_completed(inflight))
            inflight.remove(fut)
            writer.writerows(fut.result())
            done += 1

            elapsed = time.time() - start_time
            if total_jobs:
                print(
                    f"\r[progress] {done}/{total_jobs} boards ({done / total_jobs:>6.1%}) | "
                    f"elapsed: {int(elapsed // 60)}m {int(elapsed % 60)}s",
                    end="",
                    flush=True,
                )

            # Submit next job to keep inflight bounded
            j = next(jobs_iter, None)
            if j is not None:
                inflight.add(ex.submit(_run_job, j))
    print()


def main():
    n_cpus = os.cpu_count() or 1
    default_workers = max(n_cpus - 1, 1)

    ap = argparse.ArgumentParser()
    ap.add_argument(
        "--config",
        default=str(ROOT / "configs" / "benchmark.yaml"),
    )
    ap.add_argument("--out", default=None, help="Output CSV path")
    ap.add_argument(
        "--workers", type=int, default=default_workers, help="Number of workers"
    )
    args = ap.parse_args()

    with open(args.config, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)["benchmark"]

    sizes = [tuple(s) for s in cfg["sizes"]]
    n_samples = int(cfg["n_samples"])
    algorithms = list(cfg.get("algorithms", ["optimized", "standard"]))
    unknown = set(algorithms) - set(ELIMINATORS)
    if unknown:
        raise ValueError(f"Unknown algorithms: {sorted(unknown)}")
    base_seed = int(cfg.get("seed", 0))
    out_dir = Path(cfg.get("output_dir", "results/benchmarks"))
    out_dir.mkdir(parents=True, exist_ok=True)
    out_csv = args.out or str(out_dir / "benchmark.csv")

    total_jobs = len(sizes) * n_samples
    print(
        f"\nBenchmarking {total_jobs:,} boards x {len(algorithms)} algorithms "
        f"with {args.workers} workers...\n"
    )

    start_time = time.time()
    with open(out_csv, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        run_pool(
            make_jobs(sizes, n_samples, algorithms, base_seed),
            writer,
            workers=args.workers,
            total_jobs=total_jobs,
        )

    elapsed = time.time() - start_time
    print(f"\nDone in {int(elapsed/60)}m {int(elapsed%60)}s")
    print(f"Output: {out_csv}\n")


if __name__ == "__main__":
    mp.freeze_support()
    main()
