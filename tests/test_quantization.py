"""Tests for per-channel color bucketing."""

import numpy as np
import pytest

from models import format_fill_style, parse_fill_style
from vectorizer.quantization import (
    pack_colors,
    quantize,
    quantize_channel,
    quantize_grid,
    unpack_color,
)


@pytest.mark.parametrize("value", [0, 1, 17, 127, 128, 200, 254, 255])
def test_256_buckets_is_identity(value):
    assert quantize_channel(value, 256) == value


@pytest.mark.parametrize(
    "value, expected",
    [(0, 64), (127, 64), (127.9, 64), (128, 192), (255, 192)],
)
def test_two_buckets_snap_to_midpoints(value, expected):
    assert quantize_channel(value, 2) == expected


def test_representatives_stay_in_range():
    for buckets in (2, 3, 7, 96, 160, 255, 256):
        reps = {quantize_channel(v, buckets) for v in range(256)}
        assert len(reps) == buckets
        assert min(reps) >= 0
        assert max(reps) <= 255


def test_quantize_formats_canonical_string():
    assert quantize((10, 130, 250, 0), 2) == "rgb(64,192,192)"


def test_grid_matches_scalar_quantize():
    rng = np.random.default_rng(7)
    rgb = rng.uniform(0, 255, size=(6, 5, 3))

    grid = quantize_grid(rgb, 96)

    for y in range(6):
        for x in range(5):
            expected = [quantize_channel(v, 96) for v in rgb[y, x]]
            assert grid[y, x].tolist() == expected


def test_packed_keys_round_trip_to_fill_style():
    quantized = np.array([[[1, 2, 3], [255, 0, 128]]])

    keys = pack_colors(quantized)

    assert [unpack_color(k) for k in keys[0]] == ["rgb(1,2,3)", "rgb(255,0,128)"]


def test_equal_quantized_colors_share_a_key():
    rgb = np.array([[[100.0, 100.0, 100.0], [101.0, 101.5, 100.2]]])

    keys = pack_colors(quantize_grid(rgb, 16))

    assert keys[0, 0] == keys[0, 1]


def test_parse_fill_style():
    assert parse_fill_style(format_fill_style(4, 5, 6)) == (4, 5, 6)


@pytest.mark.parametrize("text", ["#ffffff", "rgb(1, 2, 3)", "rgb(300,0,0)", "rgba(1,2,3,1)"])
def test_parse_fill_style_rejects_other_notations(text):
    with pytest.raises(ValueError):
        parse_fill_style(text)
