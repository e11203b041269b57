"""Shared pytest fixtures for rectcanvas tests."""

import os

# Qt needs a platform plugin even for QThread-only tests
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import numpy as np
import pytest

from models import PixelBuffer

RED = (220, 30, 40, 255)
GREEN = (20, 200, 60, 255)
BLUE = (30, 60, 210, 255)
WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
CLEAR = (0, 0, 0, 0)


def make_buffer(rows) -> PixelBuffer:
    """Build a buffer from rows of (r, g, b, a) tuples."""
    array = np.array(rows, dtype=np.uint8)
    height, width = array.shape[:2]
    return PixelBuffer(width, height, array)


@pytest.fixture
def buffer_factory():
    return make_buffer


@pytest.fixture
def uniform_buffer() -> PixelBuffer:
    """7x5 image of one color."""
    return make_buffer([[(200, 40, 90, 255)] * 7 for _ in range(5)])


@pytest.fixture
def half_transparent_buffer() -> PixelBuffer:
    """8x4 image: left half fully transparent, right half opaque blue."""
    row = [CLEAR] * 4 + [BLUE] * 4
    return make_buffer([row for _ in range(4)])


@pytest.fixture
def palette_noise_buffer() -> PixelBuffer:
    """16x12 image drawn from a small palette with some transparent holes."""
    rng = np.random.default_rng(1234)
    palette = np.array([RED, GREEN, BLUE, WHITE, CLEAR], dtype=np.uint8)
    # Blocky noise so that runs and vertical merges actually happen
    coarse = rng.integers(0, len(palette), size=(6, 8))
    indices = np.repeat(np.repeat(coarse, 2, axis=0), 2, axis=1)
    indices[5, 3] = 4
    indices[0, 0] = 0
    return PixelBuffer(16, 12, palette[indices])


@pytest.fixture
def gradient_buffer() -> PixelBuffer:
    """16x16 opaque gradient where every pixel differs."""
    ys, xs = np.mgrid[0:16, 0:16]
    array = np.zeros((16, 16, 4), dtype=np.uint8)
    array[..., 0] = xs * 16
    array[..., 1] = ys * 16
    array[..., 2] = (xs + ys) * 7
    array[..., 3] = 255
    return PixelBuffer(16, 16, array)
