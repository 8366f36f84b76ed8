"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest


# Sample category files in PSB CLA format

# 2 top-level categories + 1 child, one empty parent, 7 models
SMALL_CLA = """PSB 1
3 7

animal 0 0

quadruped animal 3
m101
m102
m103

bird animal 2
m201

m202
vehicle 0 2
m301
m302
"""

# Six models in one category of 3 and one of 3, plus miscellaneous
TIERED_CLA = """PSB 1
3 8
chair 0 3
c1
c2
c3
table 0 3
t1
t2
t3
-1 0 2
x1
x2
"""

FLAT_CLA = """PSB 1
2 3
a 0 2
m0
m1
b 0 1
m2
"""


def matrix_bytes(values) -> bytes:
    """Little-endian float32 bytes of a square matrix, row-major."""
    return np.asarray(values, dtype="<f4").tobytes()


def line_distances(n: int) -> np.ndarray:
    """|i - j| distances: every model's nearest neighbours are its index neighbours."""
    idx = np.arange(n)
    return np.abs(idx[:, None] - idx[None, :]).astype(np.float32)


@pytest.fixture
def small_cla() -> str:
    return SMALL_CLA


@pytest.fixture
def tiered_cla() -> str:
    return TIERED_CLA


@pytest.fixture
def flat_cla() -> str:
    return FLAT_CLA


@pytest.fixture
def benchmark_files(tmp_path):
    """SMALL_CLA on disk with a matching |i - j| matrix."""
    cla = tmp_path / "small.cla"
    cla.write_text(SMALL_CLA, encoding="utf-8")
    matrix = tmp_path / "small.matrix"
    matrix.write_bytes(matrix_bytes(line_distances(7)))
    return cla, matrix
