"""Convert rectangle lists to canvas draw programs and back.

AIDEV-NOTE: The draw program is JavaScript for an HTML canvas 2D context.
Each rectangle becomes exactly one instruction pair:
    ctx.fillStyle = 'rgb(r,g,b)';
    ctx.fillRect(x, y, w, h);
The output must stay byte-for-byte deterministic for a given rectangle list,
so there is no timestamp, no color grouping and no reordering here.
"""

import re

from PIL import Image, ImageDraw

from models import RectangleCommand, parse_fill_style

_WIDTH_RE = re.compile(r"^canvas\.width\s*=\s*(\d+);$")
_HEIGHT_RE = re.compile(r"^canvas\.height\s*=\s*(\d+);$")
_FILL_STYLE_RE = re.compile(r"^ctx\.fillStyle\s*=\s*'([^']*)';$")
_FILL_RECT_RE = re.compile(r"^ctx\.fillRect\((\d+),\s*(\d+),\s*(\d+),\s*(\d+)\);$")

# Canvas 2D contexts start with an opaque black fill
DEFAULT_FILL_STYLE = "rgb(0,0,0)"

HTML_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<title>Canvas Code Preview</title>
<style>
  body {{ font-family: system-ui, sans-serif; display:flex; justify-content:center; align-items:center; min-height:100vh; background:#0f172a; }}
</style>
</head>
<body>
<script>
{code}
</script>
</body>
</html>
"""


def rectangles_to_code(
    rectangles: "list[RectangleCommand]",
    width: int,
    height: int,
) -> str:
    """Build the canvas draw program.

    Args:
        rectangles: Rectangles in draw order
        width: Canvas width in pixels
        height: Canvas height in pixels

    Returns:
        JavaScript source that creates a width x height canvas and fills
        every rectangle in list order
    """
    lines = [
        "const canvas = document.createElement('canvas');",
        f"canvas.width = {width};",
        f"canvas.height = {height};",
        "document.body.appendChild(canvas);",
        "const ctx = canvas.getContext('2d');",
    ]
    for rect in rectangles:
        lines.append(f"ctx.fillStyle = '{rect.fill_style}';")
        lines.append(f"ctx.fillRect({rect.x}, {rect.y}, {rect.width}, {rect.height});")
    return "\n".join(lines) + "\n"


def build_html_document(code: str) -> str:
    """Wrap a draw program in a standalone HTML page."""
    return HTML_TEMPLATE.format(code=code.rstrip("\n"))


def parse_code(code: str) -> "tuple[int, int, list[RectangleCommand]]":
    """Recover canvas size and rectangles from a draw program.

    Args:
        code: Program produced by rectangles_to_code

    Returns:
        Tuple of (width, height, rectangles in instruction order)

    Raises:
        ValueError: If the canvas size is missing
    """
    width = height = None
    fill_style = DEFAULT_FILL_STYLE
    rectangles = []

    for line in code.splitlines():
        line = line.strip()

        match = _FILL_STYLE_RE.match(line)
        if match:
            fill_style = match.group(1)
            continue

        match = _FILL_RECT_RE.match(line)
        if match:
            x, y, w, h = (int(v) for v in match.groups())
            rectangles.append(RectangleCommand(x, y, w, h, fill_style))
            continue

        match = _WIDTH_RE.match(line)
        if match:
            width = int(match.group(1))
            continue

        match = _HEIGHT_RE.match(line)
        if match:
            height = int(match.group(1))

    if width is None or height is None:
        raise ValueError("Draw program does not declare a canvas size")

    return width, height, rectangles


def render_rectangles(
    rectangles: "list[RectangleCommand]",
    width: int,
    height: int,
) -> Image.Image:
    """Fill rectangles in order onto a fresh transparent RGBA surface."""
    image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    for rect in rectangles:
        r, g, b = parse_fill_style(rect.fill_style)
        # PIL rectangle corners are inclusive
        draw.rectangle(
            [rect.x, rect.y, rect.x + rect.width - 1, rect.y + rect.height - 1],
            fill=(r, g, b, 255),
        )
    return image


def replay(code: str) -> Image.Image:
    """Execute a draw program against a fresh surface of its declared size."""
    width, height, rectangles = parse_code(code)
    return render_rectangles(rectangles, width, height)


def validate_rectangles(
    rectangles: "list[RectangleCommand]",
    width: int,
    height: int,
) -> "tuple[bool, list[str]]":
    """Check that every rectangle is non-empty and inside the canvas.

    Returns:
        Tuple of (all_valid, error_messages)
    """
    errors = []

    for i, rect in enumerate(rectangles):
        if rect.width < 1 or rect.height < 1:
            errors.append(f"Rectangle {i}: empty size {rect.width}x{rect.height}")
        if rect.x < 0 or rect.x + rect.width > width:
            errors.append(
                f"Rectangle {i}: X span {rect.x}..{rect.x + rect.width} out of bounds (0 to {width})"
            )
        if rect.y < 0 or rect.y + rect.height > height:
            errors.append(
                f"Rectangle {i}: Y span {rect.y}..{rect.y + rect.height} out of bounds (0 to {height})"
            )
        try:
            parse_fill_style(rect.fill_style)
        except ValueError:
            errors.append(f"Rectangle {i}: invalid fill style {rect.fill_style!r}")

    return len(errors) == 0, errors
