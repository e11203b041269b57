"""Scanline decomposition: horizontal run merge plus exact vertical coalesce.

AIDEV-NOTE: Merge keys are exact (start_x, end_x, packed color) tuples, so the
output is fully determined by the quantized grid. A rectangle only grows
downward while the next row has an identical run; a wider or narrower run in
the next row seals it.
"""

import numpy as np

from models import RectangleCommand

from .decomposition import RegionDecomposer
from .preprocessing import CleanedGrid
from .quantization import pack_colors, quantize_grid, unpack_color

SKIPPED = -1  # Key for samples removed by the alpha gate

Run = tuple[int, int, int]  # (start_x, end_x exclusive, color key)


def color_keys(grid: CleanedGrid, color_buckets: int) -> np.ndarray:
    """Packed quantized color per sample, SKIPPED where not opaque."""
    keys = pack_colors(quantize_grid(grid.rgb, color_buckets))
    return np.where(grid.opaque, keys, SKIPPED)


def find_runs(row_keys: np.ndarray) -> "list[Run]":
    """Split one row into maximal runs of equal, non-skipped keys."""
    width = row_keys.shape[0]
    breaks = np.flatnonzero(row_keys[1:] != row_keys[:-1]) + 1
    starts = np.concatenate(([0], breaks))
    ends = np.concatenate((breaks, [width]))

    return [
        (int(start), int(end), int(row_keys[start]))
        for start, end in zip(starts, ends)
        if row_keys[start] != SKIPPED
    ]


class ScanlineDecomposer(RegionDecomposer):
    """Greedy two-pass run-length merge over quantized colors."""

    def __init__(self, color_buckets: int):
        self.color_buckets = color_buckets

    def decompose(self, grid: CleanedGrid) -> "list[RectangleCommand]":
        keys = color_keys(grid, self.color_buckets)
        rectangles: list[RectangleCommand] = []

        # Runs still growing downward: run -> (top row, height)
        open_runs: dict[Run, tuple[int, int]] = {}

        for y in range(grid.height):
            next_open: dict[Run, tuple[int, int]] = {}
            for run in find_runs(keys[y]):
                if run in open_runs:
                    top, height = open_runs.pop(run)
                    next_open[run] = (top, height + 1)
                else:
                    next_open[run] = (y, 1)

            # Anything not continued by this row is sealed, left to right
            self._seal(open_runs, rectangles)
            open_runs = next_open

        self._seal(open_runs, rectangles)
        return rectangles

    @staticmethod
    def _seal(
        open_runs: "dict[Run, tuple[int, int]]",
        rectangles: "list[RectangleCommand]",
    ) -> None:
        for (start_x, end_x, key), (top, height) in open_runs.items():
            rectangles.append(
                RectangleCommand(
                    x=start_x,
                    y=top,
                    width=end_x - start_x,
                    height=height,
                    fill_style=unpack_color(key),
                )
            )
