"""Tests for SVG export."""

import xml.etree.ElementTree as ET

from models import RectangleCommand
from vectorizer.svg_export import rectangles_to_svg


def local_name(element):
    return element.tag.rsplit("}", 1)[-1]


def test_root_declares_size_and_viewbox():
    root = ET.fromstring(rectangles_to_svg([], 40, 30).encode("utf-8"))

    assert local_name(root) == "svg"
    assert root.get("width") == "40"
    assert root.get("height") == "30"
    assert root.get("viewBox") == "0 0 40 30"
    assert list(root) == []


def test_one_rect_per_rectangle_in_order():
    rectangles = [
        RectangleCommand(0, 0, 4, 1, "rgb(1,2,3)"),
        RectangleCommand(2, 1, 1, 3, "rgb(250,0,9)"),
    ]

    root = ET.fromstring(rectangles_to_svg(rectangles, 4, 4).encode("utf-8"))
    rects = [child for child in root if local_name(child) == "rect"]

    assert [
        (r.get("x"), r.get("y"), r.get("width"), r.get("height"), r.get("fill"))
        for r in rects
    ] == [
        ("0", "0", "4", "1", "rgb(1,2,3)"),
        ("2", "1", "1", "3", "rgb(250,0,9)"),
    ]


def test_svg_starts_with_xml_declaration():
    assert rectangles_to_svg([], 1, 1).startswith('<?xml version="1.0" encoding="UTF-8"?>')
