"""Region decomposition strategy interface.

AIDEV-NOTE: Scanline merges exact quantized colors, quadtree merges within a
tolerance. Keep them as separate strategies selected by GenerationMode.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from models import GenerationMode, GenerationOptions

if TYPE_CHECKING:
    from models import RectangleCommand

    from .preprocessing import CleanedGrid


class RegionDecomposer(ABC):
    """Turns a cleaned sample grid into an ordered list of rectangles."""

    @abstractmethod
    def decompose(self, grid: "CleanedGrid") -> "list[RectangleCommand]":
        """Emit non-overlapping rectangles covering the grid's opaque area."""


def get_decomposer(options: GenerationOptions) -> RegionDecomposer:
    """Build the decomposer selected by options.mode."""
    from .quadtree import QuadtreeDecomposer
    from .scanline import ScanlineDecomposer

    if options.mode is GenerationMode.SCANLINE:
        return ScanlineDecomposer(options.color_buckets)
    elif options.mode is GenerationMode.QUADTREE:
        return QuadtreeDecomposer(
            tolerance=options.quadtree_tolerance,
            min_size=options.quadtree_min_size,
        )
    raise NotImplementedError(f"Decomposition mode {options.mode} not implemented.")
