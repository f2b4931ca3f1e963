from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .board import BoardState

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 100
WORD_BITS = 64


def _neighbors_open(rows, cols, r, c):
    neigh = [(r, c)]
    if r > 0:
        neigh.append((r - 1, c))
    if r < rows - 1:
        neigh.append((r + 1, c))
    if c > 0:
        neigh.append((r, c - 1))
    if c < cols - 1:
        neigh.append((r, c + 1))
    return neigh


def build_A(rows: int, cols: int) -> np.ndarray:
    """Return the N×N lights-out adjacency matrix over GF(2), N = rows*cols.

    Row k (cell k = r*cols + c) has a 1 in column k and in the column of every
    in-bounds neighbor. The matrix is symmetric, so row k also describes which
    cells a press of cell k toggles.
    """
    N = rows * cols
    A = np.zeros((N, N), dtype=np.uint8)

    def idx(r, c):
        return r * cols + c

    for r in range(rows):
        for c in range(cols):
            k = idx(r, c)
            for rr, cc in _neighbors_open(rows, cols, r, c):
                A[k, idx(rr, cc)] = 1
    return A


def build_system(board: BoardState) -> Tuple[np.ndarray, np.ndarray]:
    """Return (A, b) with b[k] = 1 when cell k starts off and must flip to reach all-on."""
    A = build_A(board.rows, board.cols)
    b = (~board.to_flat()).astype(np.uint8)
    return A, b


@dataclass
class EliminationResult:
    has_solution: bool
    solution: Optional[np.ndarray]
    rank: int
    pivot_cols: List[int] = field(default_factory=list)


def _check_shapes(A: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    A = (np.asarray(A) % 2).astype(np.uint8)
    b = (np.asarray(b) % 2).astype(np.uint8).reshape(-1)
    if A.ndim != 2 or A.shape[0] != b.shape[0]:
        raise ValueError(
            f"Coefficient matrix {A.shape} does not match constants {b.shape}"
        )
    return A, b


def _forward_eliminate(M: np.ndarray, n: int) -> Tuple[np.ndarray, int, List[int]]:
    """Row-reduce the first n columns of M in place (row echelon form).

    Pivot rows are the first at or below the current rank with a 1 in the
    column; any extra columns of M (constants) are XORed along.
    """
    m = M.shape[0]
    rank = 0
    pivcols: list[int] = []
    for col in range(n):
        if rank == m:
            break
        pivot = None
        for r in range(rank, m):
            if M[r, col]:
                pivot = r
                break
        if pivot is None:
            continue
        if pivot != rank:
            M[[rank, pivot]] = M[[pivot, rank]]
        for r in range(rank + 1, m):
            if M[r, col]:
                M[r, col:] ^= M[rank, col:]
        pivcols.append(col)
        rank += 1
        if col % PROGRESS_EVERY == 0:
            logger.debug("standard elimination: column %d/%d, rank %d", col, n, rank)
    return M, rank, pivcols


def gf2_eliminate(A: np.ndarray, b: np.ndarray) -> EliminationResult:
    """Solve A x = b over GF(2) on explicit per-row coefficient arrays.

    Forward elimination picks the first row at or below the current rank with
    a 1 in the column, clears that column from the rows below it, then
    back-substitutes. Free variables stay 0.
    """
    A, b = _check_shapes(A, b)
    n = A.shape[1]
    M = np.concatenate([A, b.reshape(-1, 1)], axis=1)  # shape (m, n+1)
    M, rank, pivcols = _forward_eliminate(M, n)

    R_A = M[:, :n]
    R_b = M[:, n]

    # Rows that never became pivots are all-zero on the left side.
    if np.any(R_b[rank:]):
        return EliminationResult(False, None, rank, pivcols)

    x = np.zeros((n,), dtype=np.uint8)
    for ri in range(rank - 1, -1, -1):
        pc = pivcols[ri]
        rhs = R_b[ri]
        if pc + 1 < n:
            rhs ^= int(np.bitwise_and(R_A[ri, pc + 1 :], x[pc + 1 :]).sum() % 2)
        x[pc] = rhs
    return EliminationResult(True, x, rank, pivcols)


def pack_rows(A: np.ndarray) -> np.ndarray:
    """Pack each row of a 0/1 matrix into little-endian 64-bit words.

    Bit j of a packed row (word j // 64, bit j % 64) is column j.
    """
    m, n = A.shape
    n_words = max(1, -(-n // WORD_BITS))
    packed = np.zeros((m, n_words * 8), dtype=np.uint8)
    if n:
        packed[:, : -(-n // 8)] = np.packbits(A, axis=1, bitorder="little")
    return packed.view("<u8")


def _column_mask(col: int) -> Tuple[int, np.uint64]:
    return col // WORD_BITS, np.uint64(1) << np.uint64(col % WORD_BITS)


def gf2_eliminate_packed(A: np.ndarray, b: np.ndarray) -> EliminationResult:
    """Bit-packed variant of gf2_eliminate with the same pivot rule.

    Each equation lives in a row of 64-bit words, so testing a column is a
    single word/mask test and clearing it from every affected row is one XOR
    of whole word rows.
    """
    A, b = _check_shapes(A, b)
    m, n = A.shape
    words = pack_rows(A)
    consts = b.copy()

    rank = 0
    pivcols: list[int] = []
    for col in range(n):
        if rank == m:
            break
        w, mask = _column_mask(col)
        hits = np.flatnonzero(words[rank:, w] & mask)
        if hits.size == 0:
            continue
        pivot = rank + int(hits[0])
        if pivot != rank:
            words[[rank, pivot]] = words[[pivot, rank]]
            consts[[rank, pivot]] = consts[[pivot, rank]]
        below = rank + 1 + np.flatnonzero(words[rank + 1 :, w] & mask)
        if below.size:
            words[below] ^= words[rank]
            consts[below] ^= consts[rank]
        pivcols.append(col)
        rank += 1
        if col % PROGRESS_EVERY == 0:
            logger.debug("packed elimination: column %d/%d, rank %d", col, n, rank)

    if np.any(consts[rank:]):
        return EliminationResult(False, None, rank, pivcols)

    # Solution bits are kept packed too; the pivot bit is still 0 when its row
    # is processed, so the parity of (row & solved) covers only columns > pivot.
    solved = np.zeros(words.shape[1], dtype="<u8")
    for ri in range(rank - 1, -1, -1):
        pc = pivcols[ri]
        acc = int(np.bitwise_xor.reduce(words[ri] & solved))
        if consts[ri] ^ (acc.bit_count() & 1):
            w, mask = _column_mask(pc)
            solved[w] |= mask

    bits = np.unpackbits(solved.view(np.uint8), bitorder="little")[:n]
    return EliminationResult(True, bits.astype(np.uint8), rank, pivcols)


def gf2_nullspace(A: np.ndarray) -> List[np.ndarray]:
    """Return a basis of {v : A v = 0} over GF(2).

    For each free column f, set v_f = 1 and every other free variable to 0,
    then back-substitute the pivot variables.
    """
    A = (np.asarray(A) % 2).astype(np.uint8)
    n = A.shape[1]
    M, rank, pivcols = _forward_eliminate(A.copy(), n)

    pivset = set(pivcols)
    frees = [j for j in range(n) if j not in pivset]
    basis: list[np.ndarray] = []
    for f in frees:
        v = np.zeros((n,), dtype=np.uint8)
        v[f] = 1
        for ri in range(rank - 1, -1, -1):
            pc = pivcols[ri]
            v[pc] = int(np.bitwise_and(M[ri, pc + 1 :], v[pc + 1 :]).sum() % 2)
        basis.append(v)
    return basis


def gf2_min_weight_solution(
    x0: np.ndarray, basis: List[np.ndarray]
) -> np.ndarray:
    """Return the lightest vector in the coset x0 + span(basis).

    Tries all 2^k combinations of the k basis vectors; callers bound k.
    """
    best = x0.copy()
    best_w = int(best.sum())
    k = len(basis)
    for r in range(1, k + 1):
        for combo in itertools.combinations(range(k), r):
            cand = x0.copy()
            for idx in combo:
                cand ^= basis[idx]
            w = int(cand.sum())
            if w < best_w:
                best, best_w = cand, w
    return best
