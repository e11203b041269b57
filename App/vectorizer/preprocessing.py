"""Noise reduction and alpha gating applied before decomposition.

AIDEV-NOTE: The box blur uses a summed-area table so the cost does not grow
with the radius. Windows are clamped at the image border: edge samples average
over the in-bounds part of the window only (no padding, no wraparound).
"""

from dataclasses import dataclass

import numpy as np

from models import PixelBuffer


@dataclass(frozen=True, eq=False)
class CleanedGrid:
    """Blurred, alpha-gated samples ready for quantization or quadtree stats."""

    rgb: np.ndarray  # (height, width, 3) float, 0-255
    alpha: np.ndarray  # (height, width) float, normalized 0-1
    opaque: np.ndarray  # (height, width) bool, False for skipped samples

    @property
    def width(self) -> int:
        return self.rgb.shape[1]

    @property
    def height(self) -> int:
        return self.rgb.shape[0]


def box_blur(values: np.ndarray, radius: int) -> np.ndarray:
    """Average each sample over a clamped (2r+1) x (2r+1) window.

    Args:
        values: (height, width, channels) array
        radius: Window half-width in pixels

    Returns:
        Float64 array of the same shape
    """
    values = values.astype(np.float64)
    if radius <= 0:
        return values

    height, width = values.shape[:2]

    # Summed-area table with a leading row/column of zeros
    table = np.zeros((height + 1, width + 1) + values.shape[2:], dtype=np.float64)
    table[1:, 1:] = values.cumsum(axis=0).cumsum(axis=1)

    rows = np.arange(height)
    cols = np.arange(width)
    y0 = np.maximum(rows - radius, 0)
    y1 = np.minimum(rows + radius + 1, height)
    x0 = np.maximum(cols - radius, 0)
    x1 = np.minimum(cols + radius + 1, width)

    sums = (
        table[y1][:, x1]
        - table[y0][:, x1]
        - table[y1][:, x0]
        + table[y0][:, x0]
    )
    counts = np.outer(y1 - y0, x1 - x0).astype(np.float64)
    return sums / counts[:, :, np.newaxis]


def preprocess(
    buffer: PixelBuffer,
    blur_radius: int,
    alpha_threshold: float,
) -> CleanedGrid:
    """Blur the buffer and mark samples below the alpha threshold as skipped.

    Args:
        buffer: Source pixels (not modified)
        blur_radius: Box blur half-width, 0 for pass-through
        alpha_threshold: Minimum normalized alpha for a sample to stay opaque

    Returns:
        CleanedGrid with float channels and an opacity mask
    """
    blurred = box_blur(buffer.grid, blur_radius)

    rgb = blurred[:, :, :3]
    alpha = blurred[:, :, 3] / 255.0
    opaque = ~(alpha < alpha_threshold)

    return CleanedGrid(rgb=rgb, alpha=alpha, opaque=opaque)
