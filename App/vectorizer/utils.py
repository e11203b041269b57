"""Image file helpers used ahead of the generation pipeline.

AIDEV-NOTE: These are the only pieces that touch Pillow images directly. The
engine itself works on PixelBuffer arrays.
"""

from pathlib import Path

from PIL import Image

from errors import InvalidInputError
from models import PixelBuffer


def load_image(file_path: str | Path) -> Image.Image:
    """Load an image file.

    Args:
        file_path: Path to image file (PNG, JPG, WebP, etc.)

    Returns:
        PIL Image in RGBA mode

    Raises:
        InvalidInputError: If file cannot be loaded or is invalid
    """
    try:
        with Image.open(file_path) as image:
            # AIDEV-NOTE: Always convert to RGBA for consistent processing
            return image.convert("RGBA")
    except (OSError, ValueError) as e:
        raise InvalidInputError(f"Failed to load image: {e}") from e


def fit_image_to_bounds(
    image: Image.Image,
    max_width: int,
    max_height: int,
) -> Image.Image:
    """Scale an image down to fit a bounding box, keeping aspect ratio.

    Args:
        image: Input PIL image
        max_width: Maximum width in pixels
        max_height: Maximum height in pixels

    Returns:
        The original image if it already fits, otherwise a resized copy

    AIDEV-NOTE: Never upscales. Sizes are floored but kept at least 1px.
    """
    orig_width, orig_height = image.size

    scale = min(max_width / orig_width, max_height / orig_height, 1.0)
    if scale >= 1.0:
        return image

    new_width = max(1, int(orig_width * scale))
    new_height = max(1, int(orig_height * scale))
    return image.resize((new_width, new_height), Image.Resampling.LANCZOS)


def image_to_buffer(image: Image.Image) -> PixelBuffer:
    """Snapshot a PIL image as an immutable RGBA pixel buffer."""
    return PixelBuffer.from_image(image)
