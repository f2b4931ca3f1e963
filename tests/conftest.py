from __future__ import annotations

import numpy as np
import pytest


@pytest.fixture
def fx_rng() -> np.random.Generator:
    return np.random.default_rng(seed=25)


def grid(*rows: str) -> list[list[int]]:
    """Build nested 0/1 rows from strings like "0110"."""
    return [[int(ch) for ch in row] for row in rows]
