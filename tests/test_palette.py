"""Tests for the palette summarizer."""

import pytest

from models import GenerationOptions, PaletteEntry, RectangleCommand
from vectorizer import generate, summarize


def rect(width, height, fill):
    return RectangleCommand(0, 0, width, height, fill)


def test_groups_by_fill_and_sorts_by_area():
    rectangles = [
        rect(1, 1, "rgb(1,1,1)"),
        rect(2, 3, "rgb(2,2,2)"),
        rect(1, 2, "rgb(1,1,1)"),
    ]

    palette = summarize(rectangles)

    assert palette == [
        PaletteEntry("rgb(2,2,2)", 6, pytest.approx(66.666, abs=1e-2)),
        PaletteEntry("rgb(1,1,1)", 3, pytest.approx(33.333, abs=1e-2)),
    ]


def test_ties_keep_first_encountered_order():
    rectangles = [
        rect(1, 2, "rgb(9,9,9)"),
        rect(2, 1, "rgb(3,3,3)"),
        rect(1, 4, "rgb(5,5,5)"),
    ]

    palette = summarize(rectangles)

    assert [e.color for e in palette] == ["rgb(5,5,5)", "rgb(9,9,9)", "rgb(3,3,3)"]


def test_top_n_limits_entries():
    rectangles = [rect(1, i + 1, f"rgb({i},0,0)") for i in range(10)]

    palette = summarize(rectangles, top_n=3)

    assert [e.area for e in palette] == [10, 9, 8]


def test_empty_rectangles_give_empty_palette():
    assert summarize([]) == []
    assert summarize([], top_n=6) == []


def test_full_palette_sums_to_100(palette_noise_buffer):
    result = generate(palette_noise_buffer, GenerationOptions(color_buckets=32))

    palette = summarize(list(result.rectangles))

    assert sum(e.percent for e in palette) == pytest.approx(100.0)
    assert sum(e.area for e in palette) == sum(r.area for r in result.rectangles)
