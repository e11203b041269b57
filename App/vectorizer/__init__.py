"""Image vectorization pipeline for pixel-to-rectangle conversion.

AIDEV-NOTE: This package handles the pipeline from raw RGBA pixels to filled
rectangles. Organized into modular components:
- preprocessing: Box blur and alpha gating
- quantization: Fixed per-channel color bucketing
- scanline / quadtree: Region decomposition strategies
- svg_export: Vector export of rectangle lists
- palette: Area-weighted dominant colors
- processor: generate() and the file-level CanvasCodeGenerator
"""

from .palette import summarize
from .processor import CanvasCodeGenerator, SynthesizedOutput, generate, synthesize
from .svg_export import rectangles_to_svg

__all__ = [
    "CanvasCodeGenerator",
    "SynthesizedOutput",
    "generate",
    "rectangles_to_svg",
    "summarize",
    "synthesize",
]
