"""Fixed per-channel color quantization.

AIDEV-NOTE: Each channel range 0-255 is split into equal-width buckets and
values snap to the bucket midpoint (floored). With 256 buckets this is the
identity on integer channels. No clustering is involved.
"""

import math

import numpy as np

from models import format_fill_style


def quantize_channel(value: float, color_buckets: int) -> int:
    """Snap one 0-255 channel value to its bucket representative."""
    bucket_width = 256.0 / color_buckets
    level = min(int(math.floor(value / bucket_width)), color_buckets - 1)
    return min(int(math.floor(level * bucket_width + bucket_width / 2)), 255)


def quantize(sample, color_buckets: int) -> str:
    """Quantize one sample and return its canonical fill style.

    Args:
        sample: Sequence of at least three channel values (0-255); alpha,
            if present, is ignored
        color_buckets: Levels per channel

    Returns:
        Canonical color string, e.g. "rgb(64,192,64)"
    """
    r, g, b = (quantize_channel(float(v), color_buckets) for v in sample[:3])
    return format_fill_style(r, g, b)


def quantize_grid(rgb: np.ndarray, color_buckets: int) -> np.ndarray:
    """Vectorised quantize over a (height, width, 3) array.

    Returns:
        Int array of representative channel values, same shape as rgb
    """
    bucket_width = 256.0 / color_buckets
    levels = np.minimum(np.floor(rgb / bucket_width), color_buckets - 1)
    representatives = np.floor(levels * bucket_width + bucket_width / 2)
    return np.minimum(representatives, 255).astype(np.int64)


def pack_colors(quantized: np.ndarray) -> np.ndarray:
    """Pack quantized (r, g, b) triples into single ints (0xRRGGBB).

    Used as an exact, totally ordered merge key.
    """
    return (quantized[..., 0] << 16) | (quantized[..., 1] << 8) | quantized[..., 2]


def unpack_color(key: int) -> str:
    """Fill style for a packed color key."""
    key = int(key)
    return format_fill_style((key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF)
