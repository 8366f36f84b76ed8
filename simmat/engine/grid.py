"""Grid builder: maps classified or scaled matrix cells onto grid coordinates.

Grid units: one cell per model, one divider cell between adjacent category
blocks, so a grid side is ``numModels + numCategories - 1``. Along the column
(target) axis blocks run in canonical order; along the row (query) axis they
run reversed, so the grid is symmetric about the anti-diagonal.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from simmat.engine.categories import CategoryTree, ModelIndex
from simmat.engine.matrix import DissimilarityMatrix, grayscale_intensities, grayscale_scale
from simmat.engine.tiers import Tier


class GridMode(str, enum.Enum):
    TIERS = "tiers"
    DISTANCE = "distance"


@dataclass(frozen=True)
class BlockLabel:
    name: str
    full_name: str
    model_count: int
    # First grid index of the block along the column axis
    start: int


@dataclass(frozen=True)
class GridLayout:
    labels: tuple[BlockLabel, ...] = ()

    @classmethod
    def from_tree(cls, tree: CategoryTree) -> GridLayout:
        labels: list[BlockLabel] = []
        start = 0
        for category in tree.category_order:
            labels.append(BlockLabel(category.name, category.full_name, len(category.models), start))
            start += len(category.models) + 1
        return cls(labels=tuple(labels))

    @property
    def block_sizes(self) -> tuple[int, ...]:
        return tuple(label.model_count for label in self.labels)

    @property
    def num_models(self) -> int:
        return sum(self.block_sizes)

    @property
    def num_categories(self) -> int:
        return len(self.labels)

    @property
    def size(self) -> int:
        return max(self.num_models + self.num_categories - 1, 0)

    @property
    def divider_offsets(self) -> tuple[int, ...]:
        """Column-axis index of each divider (one fewer than blocks)."""
        return tuple(label.start + label.model_count for label in self.labels[:-1])

    def column_of(self, position: int, category_position: int) -> int:
        return position + category_position

    def row_of(self, position: int, category_position: int) -> int:
        return self.size - 1 - self.column_of(position, category_position)

    def divider_columns(self) -> NDArray[np.bool_]:
        is_divider = np.zeros(self.size, dtype=bool)
        is_divider[list(self.divider_offsets)] = True
        return is_divider

    def divider_mask(self) -> NDArray[np.bool_]:
        """``mask[row, col]`` true on every cell of a divider line."""
        cols = self.divider_columns()
        rows = cols[::-1]
        return rows[:, None] | cols[None, :]


@dataclass(frozen=True)
class RenderGrid:
    """What the renderer consumes: cells in grid coordinates plus the layout."""

    mode: GridMode
    # Tier codes (TIERS) or 0-255 intensities (DISTANCE), indexed [row, col]
    cells: NDArray
    layout: GridLayout

    @property
    def size(self) -> int:
        return self.layout.size


def model_columns(tree: CategoryTree, index: ModelIndex, layout: GridLayout) -> NDArray[np.intp]:
    """Column-axis grid index of every model in ``index`` order."""
    return np.array(
        [
            layout.column_of(record.canonical_position, tree.require(record.category_name).position)
            for record in index
        ],
        dtype=np.intp,
    )


def build_tier_grid(
    tiers: NDArray[np.int8],
    tree: CategoryTree,
    index: ModelIndex,
    layout: GridLayout | None = None,
) -> RenderGrid:
    layout = layout or GridLayout.from_tree(tree)
    cells = np.full((layout.size, layout.size), Tier.UNCLASSIFIED, dtype=np.int8)
    cols = model_columns(tree, index, layout)
    rows = layout.size - 1 - cols
    cells[np.ix_(rows, cols)] = tiers
    return RenderGrid(mode=GridMode.TIERS, cells=cells, layout=layout)


def build_distance_grid(
    reordered: DissimilarityMatrix,
    tree: CategoryTree,
    index: ModelIndex,
    layout: GridLayout | None = None,
) -> RenderGrid:
    layout = layout or GridLayout.from_tree(tree)
    scale = grayscale_scale(reordered.total_value, reordered.num_models)
    cells = np.zeros((layout.size, layout.size), dtype=np.uint8)
    cols = model_columns(tree, index, layout)
    # Reordered row k holds canonical query n-1-k
    rows = layout.size - 1 - cols[::-1]
    cells[np.ix_(rows, cols)] = grayscale_intensities(reordered, scale)
    return RenderGrid(mode=GridMode.DISTANCE, cells=cells, layout=layout)
