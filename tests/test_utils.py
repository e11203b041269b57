"""Tests for image loading and fitting helpers."""

import pytest
from PIL import Image

from errors import InvalidInputError
from vectorizer.utils import fit_image_to_bounds, image_to_buffer, load_image


def test_load_image_converts_to_rgba(tmp_path):
    path = tmp_path / "gray.png"
    Image.new("L", (5, 3), 80).save(path)

    image = load_image(path)

    assert image.mode == "RGBA"
    assert image.size == (5, 3)
    assert image.getpixel((0, 0)) == (80, 80, 80, 255)


def test_load_missing_file(tmp_path):
    with pytest.raises(InvalidInputError, match="Failed to load image"):
        load_image(tmp_path / "nope.png")


def test_fit_never_upscales():
    image = Image.new("RGBA", (20, 10))

    assert fit_image_to_bounds(image, 800, 600) is image


@pytest.mark.parametrize(
    "size, bounds, expected",
    [
        ((1600, 1200), (800, 600), (800, 600)),
        ((1000, 200), (800, 600), (800, 160)),
        ((300, 1200), (800, 600), (150, 600)),
        ((5000, 1), (10, 10), (10, 1)),
    ],
)
def test_fit_keeps_aspect_ratio(size, bounds, expected):
    image = Image.new("RGBA", size)

    assert fit_image_to_bounds(image, *bounds).size == expected


def test_image_to_buffer():
    image = Image.new("RGBA", (2, 3), (1, 2, 3, 4))

    buffer = image_to_buffer(image)

    assert (buffer.width, buffer.height) == (2, 3)
    assert buffer.samples.tolist() == [1, 2, 3, 4] * 6
