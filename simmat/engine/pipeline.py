"""Pipeline orchestrator: category file + matrix file → similarity image."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from simmat.engine.categories import CategoryTree, ModelIndex, parse_category_text, read_category_file
from simmat.engine.config import RenderConfig
from simmat.engine.errors import FormatError
from simmat.engine.grid import GridLayout, RenderGrid, build_distance_grid, build_tier_grid
from simmat.engine.matrix import DissimilarityMatrix, load_matrix, read_matrix_file, reorder
from simmat.engine.tiers import classify
from simmat.render.canvas import render, save_gif
from simmat.render.palette import palette_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Benchmark:
    """Loaded inputs: category tree, canonical index, reordered matrix."""

    tree: CategoryTree
    index: ModelIndex
    matrix: DissimilarityMatrix

    @property
    def num_models(self) -> int:
        return self.index.num_models


@dataclass(frozen=True)
class SimMatResult:
    benchmark: Benchmark
    grid: RenderGrid
    image: Image.Image
    elapsed_s: float
    output: Path | None = None


def _require_models(index: ModelIndex, source: str) -> None:
    if index.num_models == 0:
        raise FormatError("category file lists no models", source=source)


class SimMatPipeline:
    """Runs parse → load → reorder → classify/scale → render."""

    def __init__(self, config: RenderConfig | None = None) -> None:
        self.config = config or RenderConfig()

    def load(self, category_file: str | Path, matrix_file: str | Path) -> Benchmark:
        tree, index = read_category_file(category_file)
        _require_models(index, str(category_file))
        matrix = read_matrix_file(matrix_file, index.num_models)
        return Benchmark(tree, index, reorder(matrix, index.positions))

    def load_bytes(self, category_text: str, matrix_data: bytes) -> Benchmark:
        tree, index = parse_category_text(category_text)
        _require_models(index, "<input>")
        matrix = load_matrix(matrix_data, index.num_models)
        return Benchmark(tree, index, reorder(matrix, index.positions))

    def classify(self, benchmark: Benchmark) -> NDArray[np.int8]:
        return classify(benchmark.matrix, benchmark.tree, benchmark.index)

    def build_grid(self, benchmark: Benchmark, distance: bool = False) -> RenderGrid:
        layout = GridLayout.from_tree(benchmark.tree)
        if distance:
            logger.info("Creating grayscale image.")
            return build_distance_grid(benchmark.matrix, benchmark.tree, benchmark.index, layout)
        logger.info("Creating color image.")
        tiers = self.classify(benchmark)
        return build_tier_grid(tiers, benchmark.tree, benchmark.index, layout)

    def render(self, benchmark: Benchmark, distance: bool = False, paper: bool = False) -> SimMatResult:
        start = time.perf_counter()
        grid = self.build_grid(benchmark, distance)
        image = render(grid, palette_for(paper), self.config)
        elapsed = time.perf_counter() - start
        logger.info("%.3f seconds.", elapsed)
        return SimMatResult(benchmark=benchmark, grid=grid, image=image, elapsed_s=elapsed)

    def run(
        self,
        category_file: str | Path,
        matrix_file: str | Path,
        output: str | Path,
        distance: bool = False,
        paper: bool = False,
    ) -> SimMatResult:
        """Full batch run; nothing is written unless every stage succeeds."""
        benchmark = self.load(category_file, matrix_file)
        result = self.render(benchmark, distance=distance, paper=paper)
        target = save_gif(result.image, output, self.config)
        return replace(result, output=target)


def create_pipeline(config: RenderConfig | None = None) -> SimMatPipeline:
    """Factory function for creating a pipeline instance."""
    return SimMatPipeline(config=config)
