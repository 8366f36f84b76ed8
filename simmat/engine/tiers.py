"""Retrieval tier classification per query row.

For a query whose category has C models, candidates sorted by ascending
distance are labelled by rank k:

    k == 0              best match (usually the query itself)
    1 <= k < C          first tier
    C <= k < 2C - 1     second tier
    otherwise           unclassified

Equal distances keep canonical column order (stable sort).
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from simmat.engine.categories import CategoryTree, ModelIndex
from simmat.engine.matrix import DissimilarityMatrix

logger = logging.getLogger(__name__)


class Tier(enum.IntEnum):
    UNCLASSIFIED = 0
    BEST_MATCH = 1
    FIRST = 2
    SECOND = 3


@dataclass(frozen=True)
class RankedMatch:
    model_id: str
    position: int
    distance: float
    rank: int
    tier: Tier


def tier_for_rank(rank: int, class_size: int, num_models: int) -> Tier:
    if rank == 0:
        return Tier.BEST_MATCH
    if rank < class_size:
        return Tier.FIRST
    if rank < min(2 * class_size - 1, num_models):
        return Tier.SECOND
    return Tier.UNCLASSIFIED


def tiers_by_rank(class_size: int, num_models: int) -> NDArray[np.int8]:
    """Tier label for every rank 0..num_models-1 of a query with ``class_size``."""
    tiers = np.full(num_models, Tier.UNCLASSIFIED, dtype=np.int8)
    if num_models == 0:
        return tiers
    tiers[0] = Tier.BEST_MATCH
    tiers[1:class_size] = Tier.FIRST
    tiers[class_size:min(2 * class_size - 1, num_models)] = Tier.SECOND
    return tiers


def _query_row(reordered: DissimilarityMatrix, i: int) -> NDArray[np.float32]:
    # Row axis of the reordered matrix is reversed
    return reordered.row(reordered.num_models - 1 - i)


def _class_size(tree: CategoryTree, index: ModelIndex, i: int) -> int:
    return len(tree.require(index[i].category_name).models)


def rank_row(
    reordered: DissimilarityMatrix,
    tree: CategoryTree,
    index: ModelIndex,
    i: int,
) -> list[RankedMatch]:
    """All candidates for canonical query ``i``, nearest first, with tiers."""
    row = _query_row(reordered, i)
    order = np.argsort(row, kind="stable")
    class_size = _class_size(tree, index, i)
    n = index.num_models
    return [
        RankedMatch(
            model_id=index[j].id,
            position=index[j].canonical_position,
            distance=float(row[j]),
            rank=k,
            tier=tier_for_rank(k, class_size, n),
        )
        for k, j in enumerate(order)
    ]


def classify(
    reordered: DissimilarityMatrix,
    tree: CategoryTree,
    index: ModelIndex,
) -> NDArray[np.int8]:
    """Tier matrix ``tiers[i, j]`` for canonical query ``i`` and candidate ``j``.

    Rows of the miscellaneous category stay unclassified.
    """
    n = index.num_models
    tiers = np.full((n, n), Tier.UNCLASSIFIED, dtype=np.int8)
    by_size: dict[int, NDArray[np.int8]] = {}
    skipped = 0

    for i, record in enumerate(index):
        category = tree.require(record.category_name)
        if category.is_misc:
            skipped += 1
            continue
        class_size = len(category.models)
        if class_size not in by_size:
            by_size[class_size] = tiers_by_rank(class_size, n)
        order = np.argsort(_query_row(reordered, i), kind="stable")
        tiers[i, order] = by_size[class_size]

    logger.debug("Classified %d query rows (%d miscellaneous skipped)", n - skipped, skipped)
    return tiers
