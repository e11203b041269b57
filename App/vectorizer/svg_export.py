"""SVG export of rectangle lists."""

import svg

from models import RectangleCommand

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def rectangles_to_svg(
    rectangles: "list[RectangleCommand]",
    width: int,
    height: int,
) -> str:
    """Convert rectangles to an SVG document string.

    Args:
        rectangles: Rectangles in draw order
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        SVG content as string, one <rect> per rectangle in list order

    AIDEV-NOTE: The viewBox always matches the image size so the export
    lines up pixel-for-pixel with the draw program.
    """
    elements: list[svg.Element] = [
        svg.Rect(
            x=rect.x,
            y=rect.y,
            width=rect.width,
            height=rect.height,
            fill=rect.fill_style,
        )
        for rect in rectangles
    ]

    document = svg.SVG(
        width=width,
        height=height,
        viewBox=svg.ViewBoxSpec(0, 0, width, height),
        elements=elements,
    )
    return XML_DECLARATION + document.as_str()
