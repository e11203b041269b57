"""Main generator orchestrating the complete pipeline.

AIDEV-NOTE: generate() is the pure, silent entry point used by the scheduler
and by background threads. CanvasCodeGenerator wraps it for file-based use
and reports progress to stdout.
"""

from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from errors import ComputeFailure, GenerationError
from models import GenerationOptions, GenerationResult, PixelBuffer, RectangleCommand
from rect_to_code import build_html_document, rectangles_to_code

from .decomposition import get_decomposer
from .preprocessing import preprocess
from .svg_export import rectangles_to_svg
from .utils import fit_image_to_bounds, image_to_buffer, load_image


@dataclass(frozen=True)
class SynthesizedOutput:
    """All text exports for one rectangle list."""

    code: str
    svg: str
    html_document: str


def synthesize(
    rectangles: "list[RectangleCommand]",
    width: int,
    height: int,
) -> SynthesizedOutput:
    """Produce the draw program, SVG and HTML exports together."""
    code = rectangles_to_code(rectangles, width, height)
    return SynthesizedOutput(
        code=code,
        svg=rectangles_to_svg(rectangles, width, height),
        html_document=build_html_document(code),
    )


def generate(
    pixel_buffer: PixelBuffer,
    options: GenerationOptions | None = None,
) -> GenerationResult:
    """Vectorize a pixel buffer into rectangles and a draw program.

    Args:
        pixel_buffer: Source pixels (never modified)
        options: Generation options, defaults if None

    Returns:
        GenerationResult determined entirely by the inputs

    Raises:
        InvalidOptionsError: If options are out of range
        InvalidInputError: If the buffer is malformed
        ComputeFailure: On an unexpected internal fault
    """
    options = options or GenerationOptions()
    options.validate()
    pixel_buffer.validate()

    try:
        grid = preprocess(pixel_buffer, options.blur_radius, options.alpha_threshold)
        rectangles = get_decomposer(options).decompose(grid)
        code = rectangles_to_code(rectangles, pixel_buffer.width, pixel_buffer.height)
    except GenerationError:
        raise
    except Exception as e:
        raise ComputeFailure(str(e) or type(e).__name__) from e

    return GenerationResult(
        code=code,
        rectangles=tuple(rectangles),
        rectangle_count=len(rectangles),
        width=pixel_buffer.width,
        height=pixel_buffer.height,
    )


class CanvasCodeGenerator:
    """Processes image files into canvas draw programs."""

    def __init__(self, options: GenerationOptions | None = None):
        self.options = options or GenerationOptions()

    def load_image(self, file_path: str | Path) -> Image.Image:
        """Load and validate an image file.

        Raises:
            InvalidInputError: If file cannot be loaded or is invalid
        """
        return load_image(file_path)

    def process(
        self,
        file_path: str | Path,
        max_width: int | None = None,
        max_height: int | None = None,
    ) -> GenerationResult:
        """Execute complete generation pipeline for an image file.

        Args:
            file_path: Path to input image
            max_width: Optional bounding box width to fit the image into
            max_height: Optional bounding box height to fit the image into

        Returns:
            GenerationResult for the (possibly scaled) image
        """
        print("Starting canvas code generation...")

        print("Loading image...")
        image = self.load_image(file_path)
        orig_width, orig_height = image.size
        print(f"Loaded image with size: {orig_width}x{orig_height} pixels.")

        if max_width is not None or max_height is not None:
            image = fit_image_to_bounds(
                image,
                max_width or orig_width,
                max_height or orig_height,
            )
            if image.size != (orig_width, orig_height):
                print(f"Scaled image to {image.size[0]}x{image.size[1]} pixels.")

        mode = self.options.mode.value
        print(f"Decomposing with {mode} strategy...")
        result = generate(image_to_buffer(image), self.options)

        print("Generation complete.")
        print(f"Total rectangles: {result.rectangle_count}")
        print(f"Code size: {result.code_bytes / 1024:.1f} KB")

        return result
