"""Similarity matrix engine: category parsing, matrix reordering, tier grids."""

from simmat.engine.categories import (
    Category,
    CategoryTree,
    ModelIndex,
    ModelRecord,
    parse_category_text,
    read_category_file,
)
from simmat.engine.matrix import DissimilarityMatrix, load_matrix, read_matrix_file, reorder
from simmat.engine.tiers import Tier, classify, rank_row
from simmat.engine.grid import GridLayout, GridMode, RenderGrid
from simmat.engine.pipeline import SimMatPipeline, create_pipeline

__all__ = [
    "Category",
    "CategoryTree",
    "ModelIndex",
    "ModelRecord",
    "parse_category_text",
    "read_category_file",
    "DissimilarityMatrix",
    "load_matrix",
    "read_matrix_file",
    "reorder",
    "Tier",
    "classify",
    "rank_row",
    "GridLayout",
    "GridMode",
    "RenderGrid",
    "SimMatPipeline",
    "create_pipeline",
]
