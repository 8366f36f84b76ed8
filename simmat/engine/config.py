"""Render configuration: per-run tunables handed to the renderer."""

from __future__ import annotations

from dataclasses import dataclass

from simmat.config import Settings, settings as default_settings


@dataclass
class RenderConfig:
    """Pixel geometry of the similarity image."""

    # Pixels per model cell along each axis
    cell_size: int = 2
    # Dividers between category blocks are one pixel wide
    divider_width: int = 1

    # Gap between the longest label and the grid
    label_gap: int = 8
    # Extra canvas beyond grid + labels
    label_padding: int = 50
    # Added to measured text width
    label_text_padding: int = 5
    # Label blocks with "parent__child" names instead of the bare name
    full_names: bool = False

    output_extension: str = ".gif"

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> RenderConfig:
        settings = settings or default_settings
        return cls(
            cell_size=settings.cell_size,
            label_padding=settings.label_padding,
            full_names=settings.label_full_names,
            output_extension=settings.output_extension,
        )
