"""Dissimilarity matrix loading and canonical reordering.

The matrix file is ``numModels² × 4`` bytes of little-endian float32, row-major,
in the order the models were laid out when the matrix was computed. 0 means
identical. Symmetry is assumed but never checked.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from simmat.engine.errors import ReadError

logger = logging.getLogger(__name__)

_FLOAT_DTYPE = np.dtype("<f4")
_BYTES_PER_VALUE = _FLOAT_DTYPE.itemsize

_GRAY_MAX = 255


def _frozen(values: NDArray[np.float32]) -> NDArray[np.float32]:
    values.setflags(write=False)
    return values


@dataclass(frozen=True)
class DissimilarityMatrix:
    """Square, read-only ``numModels × numModels`` float32 matrix."""

    values: NDArray[np.float32]
    total_value: float

    @property
    def num_models(self) -> int:
        return int(self.values.shape[0])

    def row(self, i: int) -> NDArray[np.float32]:
        return self.values[i]

    def __getitem__(self, key):
        return self.values[key]


def load_matrix(data: bytes, num_models: int, source: str = "<input>") -> DissimilarityMatrix:
    """Decode raw matrix bytes; rows stay in the matrix file's own order."""
    count = num_models * num_models
    needed = count * _BYTES_PER_VALUE
    if len(data) < needed:
        raise ReadError(
            f"expected {needed} bytes for {num_models} models, got {len(data)}",
            source=source,
        )
    if len(data) > needed:
        logger.warning("%s: ignoring %d trailing bytes", source, len(data) - needed)

    values = np.frombuffer(data, dtype=_FLOAT_DTYPE, count=count)
    values = values.astype(np.float32).reshape(num_models, num_models)
    total = float(values.sum(dtype=np.float64))

    logger.info("Read matrix file, total size %d entries.", count)
    return DissimilarityMatrix(values=_frozen(values), total_value=total)


def read_matrix_file(path: str | Path, num_models: int) -> DissimilarityMatrix:
    path = Path(path)
    logger.info("Reading matrix file %s", path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ReadError(f"unable to read matrix file: {e.strerror or e}", source=str(path)) from e
    return load_matrix(data, num_models, source=str(path))


def reorder(matrix: DissimilarityMatrix, positions: Sequence[int]) -> DissimilarityMatrix:
    """Permute rows/columns into canonical order and reverse the row axis.

    ``result[n-1-i][j] == matrix[positions[i]][positions[j]]`` so category
    blocks run bottom to top on the row axis.
    """
    n = matrix.num_models
    if len(positions) != n:
        raise ValueError(f"{len(positions)} positions for a {n}x{n} matrix")
    idx = np.asarray(positions, dtype=np.intp)
    values = matrix.values[np.ix_(idx, idx)][::-1].copy()
    return DissimilarityMatrix(values=_frozen(values), total_value=matrix.total_value)


def grayscale_scale(total_value: float, num_models: int) -> float:
    """Scale so the average cell lands at mid-gray: ``255/2 · n² / total``."""
    if total_value == 0:
        logger.warning("Total dissimilarity is 0, grayscale image will be black")
        return 0.0
    return _GRAY_MAX / 2.0 * num_models * num_models / total_value


def grayscale_intensities(matrix: DissimilarityMatrix, scale: float) -> NDArray[np.uint8]:
    """``min(255, scale · distance)`` per cell, truncated to integers."""
    scaled = np.clip(np.nan_to_num(matrix.values.astype(np.float64) * scale), 0, _GRAY_MAX)
    return scaled.astype(np.uint8)
