"""Dominant-color summary of a rectangle list."""

from models import PaletteEntry, RectangleCommand


def summarize(
    rectangles: "list[RectangleCommand]",
    top_n: int | None = None,
) -> "list[PaletteEntry]":
    """Group rectangles by fill style and rank colors by covered area.

    Args:
        rectangles: Rectangles from a generation result
        top_n: Number of entries to return, None for all colors

    Returns:
        Entries sorted by descending area; ties keep first-encountered order.
        Empty when the rectangles cover no area.

    AIDEV-NOTE: Percentages are relative to the total rectangle area, not the
    image area, since skipped pixels are not covered by any rectangle.
    """
    totals: dict[str, int] = {}
    total_area = 0

    for rect in rectangles:
        area = rect.width * rect.height
        total_area += area
        totals[rect.fill_style] = totals.get(rect.fill_style, 0) + area

    if total_area == 0:
        return []

    # sorted() is stable and dicts keep insertion order
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    if top_n is not None:
        ranked = ranked[: max(top_n, 0)]

    return [
        PaletteEntry(color=color, area=area, percent=area / total_area * 100.0)
        for color, area in ranked
    ]
