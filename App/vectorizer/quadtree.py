"""Quadtree decomposition: recursive adaptive subdivision.

AIDEV-NOTE: Works on the blurred, alpha-gated grid without quantization.
Blocks are plain (x, y, width, height) tuples on an explicit stack, so deep
images cannot hit the recursion limit and no node objects are kept around.
Odd sizes split with the floor half on the top/left and the remainder on the
bottom/right; zero-area quadrants are dropped.
"""

import numpy as np

from models import RectangleCommand, format_fill_style

from .decomposition import RegionDecomposer
from .preprocessing import CleanedGrid

Block = tuple[int, int, int, int]  # (x, y, width, height)


def split_block(block: Block) -> "list[Block]":
    """Quadrants of a block in top-left, top-right, bottom-left, bottom-right order."""
    x, y, width, height = block
    half_w = width // 2
    half_h = height // 2

    quadrants = [
        (x, y, half_w, half_h),
        (x + half_w, y, width - half_w, half_h),
        (x, y + half_h, half_w, height - half_h),
        (x + half_w, y + half_h, width - half_w, height - half_h),
    ]
    return [q for q in quadrants if q[2] > 0 and q[3] > 0]


def mean_fill_style(pixels: np.ndarray) -> str:
    """Fill style for the mean color of an (n, 3) pixel array, rounded half up."""
    mean = np.clip(np.floor(pixels.mean(axis=0) + 0.5), 0, 255).astype(int)
    return format_fill_style(*mean)


class QuadtreeDecomposer(RegionDecomposer):
    """Subdivide until each block's color spread is within tolerance."""

    def __init__(self, tolerance: float, min_size: int):
        self.tolerance = tolerance
        self.min_size = min_size

    def is_leaf(self, block: Block, pixels: np.ndarray, partial: bool = False) -> bool:
        """Whether a block with these opaque pixels stops subdividing.

        Args:
            block: Block being tested
            pixels: (n, 3) colors of the block's opaque samples
            partial: True when some samples in the block are skipped

        AIDEV-NOTE: A partially skipped block keeps splitting until it hits
        the minimum size, otherwise its leaf would paint over skipped pixels.
        """
        _, _, width, height = block
        if max(width, height) <= self.min_size:
            return True
        if partial:
            return False
        spread = pixels.max(axis=0) - pixels.min(axis=0)
        return bool(np.all(spread <= self.tolerance))

    def decompose(self, grid: CleanedGrid) -> "list[RectangleCommand]":
        rectangles: list[RectangleCommand] = []
        stack: list[Block] = [(0, 0, grid.width, grid.height)]

        while stack:
            block = stack.pop()
            x, y, width, height = block

            mask = grid.opaque[y : y + height, x : x + width]
            if not mask.any():
                # Fully skipped region contributes nothing
                continue

            pixels = grid.rgb[y : y + height, x : x + width][mask]

            if self.is_leaf(block, pixels, partial=not mask.all()):
                rectangles.append(
                    RectangleCommand(
                        x=x,
                        y=y,
                        width=width,
                        height=height,
                        fill_style=mean_fill_style(pixels),
                    )
                )
                continue

            # Reversed so the top-left quadrant is processed first
            stack.extend(reversed(split_block(block)))

        return rectangles
