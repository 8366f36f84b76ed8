"""End-to-end pipeline tests."""

from __future__ import annotations

import pytest
from PIL import Image

from simmat.engine.errors import FormatError, ReadError
from simmat.engine.grid import GridMode
from simmat.engine.pipeline import SimMatPipeline, create_pipeline
from simmat.engine.tiers import Tier
from tests.conftest import SMALL_CLA, TIERED_CLA, line_distances, matrix_bytes


def test_load_reorders_matrix(benchmark_files):
    cla, matrix = benchmark_files
    benchmark = create_pipeline().load(cla, matrix)
    assert benchmark.num_models == 7
    # Row axis reversed: first row now holds the last canonical model
    assert benchmark.matrix[0].tolist() == line_distances(7)[6].tolist()


def test_run_writes_color_gif(benchmark_files, tmp_path):
    cla, matrix = benchmark_files
    result = create_pipeline().run(cla, matrix, tmp_path / "out")
    assert result.output == tmp_path / "out.gif"
    assert result.output.exists()
    assert result.grid.mode is GridMode.TIERS
    assert result.elapsed_s >= 0


def test_run_writes_distance_gif(benchmark_files, tmp_path):
    cla, matrix = benchmark_files
    result = create_pipeline().run(cla, matrix, tmp_path / "dist.gif", distance=True)
    assert result.output == tmp_path / "dist.gif"
    assert result.grid.mode is GridMode.DISTANCE
    with Image.open(result.output) as saved:
        assert saved.format == "GIF"


def test_failed_load_writes_nothing(tmp_path):
    cla = tmp_path / "bench.cla"
    cla.write_text(SMALL_CLA, encoding="utf-8")
    matrix = tmp_path / "short.matrix"
    matrix.write_bytes(matrix_bytes(line_distances(6)))
    with pytest.raises(ReadError):
        SimMatPipeline().run(cla, matrix, tmp_path / "out")
    assert not (tmp_path / "out.gif").exists()


def test_load_bytes_and_classify():
    pipeline = SimMatPipeline()
    benchmark = pipeline.load_bytes(TIERED_CLA, matrix_bytes(line_distances(8)))
    tiers = pipeline.classify(benchmark)
    assert tiers.shape == (8, 8)
    assert tiers[0, 0] == Tier.BEST_MATCH
    assert not tiers[7].any()


def test_render_without_saving():
    pipeline = SimMatPipeline()
    benchmark = pipeline.load_bytes(SMALL_CLA, matrix_bytes(line_distances(7)))
    result = pipeline.render(benchmark, paper=True)
    assert result.output is None
    assert result.image.mode == "RGB"


def test_no_models_rejected():
    with pytest.raises(FormatError):
        SimMatPipeline().load_bytes("PSB 1\n1 0\nA 0 0\n", b"")
