"""Colour palettes for the tier image."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from simmat.engine.tiers import Tier

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class Palette:
    name: str
    line: RGB
    background: RGB
    best_match: RGB
    first_tier: RGB
    second_tier: RGB

    def tier_lut(self) -> NDArray[np.uint8]:
        """RGB per tier code, indexable by a tier array."""
        lut = np.zeros((len(Tier), 3), dtype=np.uint8)
        lut[Tier.UNCLASSIFIED] = self.background
        lut[Tier.BEST_MATCH] = self.best_match
        lut[Tier.FIRST] = self.first_tier
        lut[Tier.SECOND] = self.second_tier
        return lut


# Dark background for on-screen viewing
SCREEN = Palette(
    name="screen",
    line=(30, 144, 255),  # DodgerBlue1
    background=(0, 0, 0),
    best_match=(255, 255, 255),
    first_tier=(255, 255, 128),
    second_tier=(255, 128, 25),
)

# White background for print
PAPER = Palette(
    name="paper",
    line=(30, 30, 30),
    background=(255, 255, 255),
    best_match=(0, 0, 0),
    first_tier=(255, 0, 0),
    second_tier=(0, 0, 255),
)


def palette_for(paper: bool) -> Palette:
    return PAPER if paper else SCREEN
