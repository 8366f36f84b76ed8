"""Pixel painting, label layout and GIF encoding for a RenderGrid.

Image orientation: x runs along the grid's row (query) axis, y along its
column (target) axis. Model cells expand to ``cell_size`` pixels, dividers
stay ``divider_width`` pixels.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageDraw, ImageFont

from simmat.engine.config import RenderConfig
from simmat.engine.errors import WriteError
from simmat.engine.grid import BlockLabel, GridLayout, GridMode, RenderGrid
from simmat.render.palette import Palette, SCREEN

logger = logging.getLogger(__name__)

_LABEL_BACKGROUND = (255, 255, 255)
_LABEL_COLOR = (0, 0, 0)
# Distance between a left label's right edge and the grid offset
_LABEL_INSET = 2

Font = ImageFont.ImageFont | ImageFont.FreeTypeFont


def _repeats(layout: GridLayout, config: RenderConfig) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
    """Pixel widths of each grid index along the column and row axes."""
    cols = np.where(layout.divider_columns(), config.divider_width, config.cell_size).astype(np.intp)
    return cols, cols[::-1]


def _pixel_starts(repeats: NDArray[np.intp]) -> NDArray[np.intp]:
    return np.concatenate([[0], np.cumsum(repeats)]).astype(np.intp)


def expand(cells: NDArray, layout: GridLayout, config: RenderConfig) -> NDArray:
    """Grid cells ``[row, col]`` → pixel array ``[y, x]``."""
    col_rep, row_rep = _repeats(layout, config)
    pixels = np.repeat(cells.T, col_rep, axis=0)
    return np.repeat(pixels, row_rep, axis=1)


def grid_image(grid: RenderGrid, palette: Palette = SCREEN, config: RenderConfig | None = None) -> Image.Image:
    """Paint the bare grid without labels."""
    config = config or RenderConfig()
    layout = grid.layout
    if grid.mode is GridMode.DISTANCE:
        # Dividers are already 0 in the intensity grid
        return Image.fromarray(expand(grid.cells.astype(np.uint8), layout, config))

    rgb = palette.tier_lut()[expand(grid.cells, layout, config)]
    lines = expand(layout.divider_mask(), layout, config)
    rgb[lines] = palette.line
    return Image.fromarray(rgb)


def _font() -> Font:
    return ImageFont.load_default()


def _label_text(label: BlockLabel, config: RenderConfig) -> str:
    return label.full_name if config.full_names else label.name


def label_width(text: str, font: Font, config: RenderConfig) -> int:
    return int(font.getlength(text)) + config.label_text_padding


def max_label_width(layout: GridLayout, config: RenderConfig, font: Font | None = None) -> int:
    font = font or _font()
    return max((label_width(_label_text(lb, config), font, config) for lb in layout.labels), default=0)


def _rotated_text(text: str, font: Font) -> Image.Image:
    _, _, right, bottom = font.getbbox(text)
    tile = Image.new("L", (max(int(right), 1), max(int(bottom), 1)), 0)
    ImageDraw.Draw(tile).text((0, 0), text, fill=255, font=font)
    # Reads top to bottom
    return tile.rotate(-90, expand=True)


def add_labels(image: Image.Image, layout: GridLayout, config: RenderConfig | None = None) -> Image.Image:
    """Place the grid on a white canvas with category names along two edges."""
    config = config or RenderConfig()
    font = _font()
    max_label = max_label_width(layout, config, font)
    offset = max_label + config.label_gap
    side = image.width + max_label + config.label_padding

    canvas = Image.new("RGB", (side, side), _LABEL_BACKGROUND)
    canvas.paste(image.convert("RGB"), (offset, offset))
    draw = ImageDraw.Draw(canvas)

    col_rep, row_rep = _repeats(layout, config)
    y_starts = _pixel_starts(col_rep)
    x_starts = _pixel_starts(row_rep)

    for label in layout.labels:
        text = _label_text(label, config)
        width = label_width(text, font, config)
        inset = max(max_label - width - _LABEL_INSET, 0)

        # Left edge, canonical order top to bottom
        draw.text((inset, offset + int(y_starts[label.start])), text, fill=_LABEL_COLOR, font=font)

        # Top edge, reversed order left to right
        reversed_start = layout.size - label.start - label.model_count
        rotated = _rotated_text(text, font)
        canvas.paste(_LABEL_COLOR, (offset + int(x_starts[reversed_start]), inset), rotated)

    return canvas


def render(grid: RenderGrid, palette: Palette = SCREEN, config: RenderConfig | None = None) -> Image.Image:
    config = config or RenderConfig()
    return add_labels(grid_image(grid, palette, config), grid.layout, config)


def output_path(path: str | Path, extension: str = ".gif") -> Path:
    name = str(path)
    if not name.endswith(extension):
        name += extension
    return Path(name)


def save_gif(image: Image.Image, path: str | Path, config: RenderConfig | None = None) -> Path:
    config = config or RenderConfig()
    target = output_path(path, config.output_extension)
    try:
        image.save(target, format="GIF")
    except OSError as e:
        raise WriteError(f"unable to write image: {e}", source=str(target)) from e
    logger.info("Wrote %dx%d image to %s", image.width, image.height, target)
    return target
