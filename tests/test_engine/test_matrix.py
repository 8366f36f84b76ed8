"""Tests for matrix loading, reordering and grayscale scaling."""

from __future__ import annotations

import numpy as np
import pytest

from simmat.engine.errors import ReadError
from simmat.engine.matrix import (
    DissimilarityMatrix,
    grayscale_intensities,
    grayscale_scale,
    load_matrix,
    read_matrix_file,
    reorder,
)
from tests.conftest import matrix_bytes


def _matrix(values) -> DissimilarityMatrix:
    return load_matrix(matrix_bytes(values), len(values))


class TestLoad:
    def test_decodes_little_endian_floats(self):
        data = bytes([0x00, 0x00, 0x80, 0x3F]) * 4  # 1.0f
        m = load_matrix(data, 2)
        assert m.values.dtype == np.float32
        assert m.values.tolist() == [[1.0, 1.0], [1.0, 1.0]]

    def test_row_major(self):
        m = _matrix([[0.0, 1.5], [2.5, 0.0]])
        assert m[0, 1] == pytest.approx(1.5)
        assert m[1, 0] == pytest.approx(2.5)

    def test_total_value(self):
        m = _matrix([[0.0, 1.5], [2.5, 0.25]])
        assert m.total_value == pytest.approx(4.25)

    def test_truncated_input(self):
        data = matrix_bytes(np.zeros((3, 3)))[:-1]
        with pytest.raises(ReadError):
            load_matrix(data, 3)

    def test_trailing_bytes_ignored(self):
        data = matrix_bytes([[0.0, 1.0], [1.0, 0.0]]) + b"\x00" * 8
        m = load_matrix(data, 2)
        assert m.num_models == 2
        assert m.total_value == pytest.approx(2.0)

    def test_result_is_read_only(self):
        m = _matrix([[0.0, 1.0], [1.0, 0.0]])
        with pytest.raises(ValueError):
            m.values[0, 0] = 5.0

    def test_does_not_alias_input_buffer(self):
        data = bytearray(matrix_bytes([[0.0, 1.0], [1.0, 0.0]]))
        m = load_matrix(data, 2)
        data[:4] = matrix_bytes([[9.0]])
        assert m[0, 0] == 0.0

    def test_read_matrix_file(self, tmp_path):
        path = tmp_path / "m.matrix"
        path.write_bytes(matrix_bytes(np.eye(3)))
        m = read_matrix_file(path, 3)
        assert m.total_value == pytest.approx(3.0)

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(ReadError):
            read_matrix_file(tmp_path / "missing.matrix", 3)


class TestReorder:
    def test_permutes_then_reverses_rows(self):
        # Entry encodes its own (row, col): 10 * row + col
        original = _matrix([[10 * r + c for c in range(3)] for r in range(3)])
        out = reorder(original, [2, 0, 1])

        permuted = [[10 * r + c for c in (2, 0, 1)] for r in (2, 0, 1)]
        assert out.values.tolist() == permuted[::-1]

    def test_formula(self):
        rng = np.random.default_rng(7)
        values = rng.random((5, 5)).astype(np.float32)
        positions = [3, 1, 4, 0, 2]
        out = reorder(_matrix(values), positions)
        n = 5
        for i in range(n):
            for j in range(n):
                assert out[n - 1 - i, j] == values[positions[i], positions[j]]

    def test_identity_round_trip(self):
        values = np.arange(16, dtype=np.float32).reshape(4, 4)
        original = _matrix(values)
        out = reorder(original, [0, 1, 2, 3])
        np.testing.assert_array_equal(out.values[::-1], original.values)

    def test_returns_new_matrix(self):
        original = _matrix(np.arange(4, dtype=np.float32).reshape(2, 2))
        out = reorder(original, [0, 1])
        assert out is not original
        assert not np.shares_memory(out.values, original.values)
        assert not out.values.flags.writeable
        assert out.total_value == original.total_value

    def test_position_count_mismatch(self):
        with pytest.raises(ValueError):
            reorder(_matrix(np.zeros((2, 2))), [0, 1, 2])


class TestGrayscale:
    def test_midpoint_calibration(self):
        total, n = 123.5, 7
        scale = grayscale_scale(total, n)
        assert scale * total == pytest.approx(255 * n * n / 2)

    def test_average_cell_is_mid_gray(self):
        m = _matrix(np.full((4, 4), 2.0))
        scale = grayscale_scale(m.total_value, m.num_models)
        assert grayscale_intensities(m, scale).tolist() == [[127] * 4] * 4

    def test_intensities_clamped(self):
        m = _matrix([[0.0, 100.0], [1.0, 0.0]])
        out = grayscale_intensities(m, 10.0)
        assert out.dtype == np.uint8
        assert out.tolist() == [[0, 255], [10, 0]]

    def test_zero_total(self):
        assert grayscale_scale(0.0, 3) == 0.0
