"""Data models and constants for the rectcanvas generator."""

import re
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path

import numpy as np
from PIL import Image

from errors import InvalidInputError, InvalidOptionsError

# Configuration file path
CONFIG_FILE = Path.home() / ".rectcanvas_config.json"

# AIDEV-NOTE: Preview bounds used by the original upload flow. Images larger
# than this are scaled down before generation when fitting is requested.
DEFAULT_MAX_WIDTH = 800
DEFAULT_MAX_HEIGHT = 600

# Number of swatches shown in a palette summary
TOP_PALETTE_COLORS = 6

CHANNELS = 4  # red, green, blue, alpha

_FILL_STYLE_RE = re.compile(r"^rgb\((\d{1,3}),(\d{1,3}),(\d{1,3})\)$")


def format_fill_style(r: int, g: int, b: int) -> str:
    """Canonical color notation used for merge keys and output."""
    return f"rgb({int(r)},{int(g)},{int(b)})"


def parse_fill_style(fill_style: str) -> "tuple[int, int, int]":
    """Inverse of format_fill_style.

    Raises:
        ValueError: If the string is not in canonical notation
    """
    match = _FILL_STYLE_RE.match(fill_style.strip())
    if not match:
        raise ValueError(f"Not a canonical fill style: {fill_style!r}")
    r, g, b = (int(v) for v in match.groups())
    if max(r, g, b) > 255:
        raise ValueError(f"Channel out of range in {fill_style!r}")
    return (r, g, b)


class GenerationMode(Enum):
    """Region decomposition strategies.

    AIDEV-NOTE: The two strategies produce different region shapes and are
    intentionally not interchangeable.
    """

    SCANLINE = "scanline"  # Row run-merge with exact vertical coalesce
    QUADTREE = "quadtree"  # Recursive subdivision with color tolerance


class RequestState(Enum):
    """Lifecycle of a scheduled generation request."""

    ISSUED = "issued"
    COMPUTING = "computing"
    RESOLVED = "resolved"
    SUPERSEDED = "superseded"
    FAILED = "failed"


# --- Input Models ---


def _scale_normalized(values: np.ndarray) -> np.ndarray:
    return np.floor(values * 255.0 + 0.5).astype(np.uint8)


def _to_channel_bytes(samples) -> np.ndarray:
    """Copy channel values into a uint8 array without wrapping or truncating.

    Integers must lie in 0-255. Floats are read as normalized 0-1 channels.

    Raises:
        InvalidInputError: On out-of-range or non-numeric channel values
    """
    try:
        data = np.asarray(samples)
    except ValueError as e:
        raise InvalidInputError(f"Malformed channel data: {e}") from e

    if data.size == 0:
        return np.zeros(0, dtype=np.uint8)

    if data.dtype.kind in "iu":
        if data.min() < 0 or data.max() > 255:
            raise InvalidInputError(
                f"Channel values must be in 0-255, got {data.min()}..{data.max()}"
            )
        return np.array(data, dtype=np.uint8, copy=True)

    if data.dtype.kind == "f":
        # NaN fails both comparisons
        if not np.all((data >= 0.0) & (data <= 1.0)):
            raise InvalidInputError(
                "Float channel values must be normalized to 0-1 "
                "(use PixelBuffer.from_normalized to clip)"
            )
        return _scale_normalized(data)

    raise InvalidInputError(f"Channel values must be numbers, got dtype {data.dtype}")


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Immutable RGBA pixel buffer.

    AIDEV-NOTE: Samples are stored as a read-only uint8 array. The engine
    never writes to it; use copy() to hand a buffer across a thread boundary.
    """

    width: int
    height: int
    samples: np.ndarray = field(repr=False)

    def __post_init__(self):
        data = _to_channel_bytes(self.samples)
        if data.ndim != 1:
            data = data.reshape(-1)
        data.setflags(write=False)
        object.__setattr__(self, "samples", data)

    @classmethod
    def from_normalized(cls, width: int, height: int, samples) -> "PixelBuffer":
        """Build a buffer from channel values normalized to 0-1 (clipped)."""
        values = np.clip(np.asarray(samples, dtype=np.float64), 0.0, 1.0)
        return cls(width, height, _scale_normalized(values))

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        """Build a buffer from a PIL image (converted to RGBA)."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        width, height = image.size
        return cls(width, height, np.asarray(image, dtype=np.uint8))

    def validate(self) -> None:
        """Check dimensions against the sample grid.

        Raises:
            InvalidInputError: On non-positive dimensions, an empty grid or a
                sample count that does not match width x height x 4
        """
        if not isinstance(self.width, int) or not isinstance(self.height, int):
            raise InvalidInputError("Image width and height must be integers")
        if self.width <= 0 or self.height <= 0:
            raise InvalidInputError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.samples.size == 0:
            raise InvalidInputError("Image has no samples")
        expected = self.width * self.height * CHANNELS
        if self.samples.size != expected:
            raise InvalidInputError(
                f"Expected {expected} channel values for a {self.width}x{self.height} "
                f"image, got {self.samples.size}"
            )

    @property
    def grid(self) -> np.ndarray:
        """Samples as a read-only (height, width, 4) array."""
        self.validate()
        return self.samples.reshape(self.height, self.width, CHANNELS)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.samples)

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "data": self.samples.tolist(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PixelBuffer":
        return cls(data["width"], data["height"], data["data"])


@dataclass(frozen=True)
class GenerationOptions:
    """Tuning knobs for a single generation call."""

    # Color quantization
    color_buckets: int = 96  # Levels per channel (>= 2)

    # Noise reduction
    blur_radius: int = 1  # Box blur half-width in pixels (0 disables)
    alpha_threshold: float = 0.02  # Normalized alpha below this is skipped

    # Decomposition
    mode: GenerationMode = GenerationMode.SCANLINE
    quadtree_tolerance: float = 18.0  # Max per-channel spread in a leaf
    quadtree_min_size: int = 2  # Leaf edge length that stops subdivision

    def validate(self) -> None:
        """Reject option values before any pixel work starts.

        Raises:
            InvalidOptionsError: If any option is out of range
        """
        for name in ("color_buckets", "blur_radius", "quadtree_min_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidOptionsError(f"{name} must be an integer, got {value!r}")

        for name in ("alpha_threshold", "quadtree_tolerance"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidOptionsError(f"{name} must be a number, got {value!r}")

        if self.color_buckets < 2:
            raise InvalidOptionsError(
                f"color_buckets must be at least 2, got {self.color_buckets}"
            )
        if self.blur_radius < 0:
            raise InvalidOptionsError(
                f"blur_radius must not be negative, got {self.blur_radius}"
            )
        if not 0 <= self.alpha_threshold < 1:
            raise InvalidOptionsError(
                f"alpha_threshold must be in [0, 1), got {self.alpha_threshold}"
            )
        if self.quadtree_tolerance < 0:
            raise InvalidOptionsError(
                f"quadtree_tolerance must not be negative, got {self.quadtree_tolerance}"
            )
        if self.quadtree_min_size < 1:
            raise InvalidOptionsError(
                f"quadtree_min_size must be at least 1, got {self.quadtree_min_size}"
            )
        if not isinstance(self.mode, GenerationMode):
            raise InvalidOptionsError(f"Unknown mode {self.mode!r}")

    def to_dict(self) -> dict:
        """Serialize using the camelCase keys of the message envelope."""
        return {
            "colorBuckets": self.color_buckets,
            "blurRadius": self.blur_radius,
            "alphaThreshold": self.alpha_threshold,
            "mode": self.mode.value,
            "quadtreeTolerance": self.quadtree_tolerance,
            "quadtreeMinSize": self.quadtree_min_size,
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "GenerationOptions":
        """Build options from camelCase or snake_case keys.

        Missing keys fall back to defaults.

        Raises:
            InvalidOptionsError: If the mode name is unknown
        """
        defaults = cls()
        values = {}
        data = data or {}
        for f in fields(cls):
            camel = _to_camel(f.name)
            if camel in data:
                values[f.name] = data[camel]
            elif f.name in data:
                values[f.name] = data[f.name]
            else:
                values[f.name] = getattr(defaults, f.name)

        mode = values["mode"]
        if not isinstance(mode, GenerationMode):
            try:
                values["mode"] = GenerationMode(str(mode).lower())
            except ValueError as e:
                raise InvalidOptionsError(f"Unknown mode {mode!r}") from e

        return cls(**values)


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass(frozen=True)
class Preset:
    """Named option bundle offered to users."""

    label: str
    description: str
    options: GenerationOptions


PRESETS: "dict[str, Preset]" = {
    "lineart": Preset(
        label="Line Art",
        description="Aggressive merging, best for sketches and logos.",
        options=GenerationOptions(
            color_buckets=24,
            blur_radius=0,
            alpha_threshold=0.01,
            mode=GenerationMode.QUADTREE,
            quadtree_tolerance=10,
            quadtree_min_size=1,
        ),
    ),
    "balanced": Preset(
        label="Balanced",
        description="Good compromise for handwriting or UI screenshots.",
        options=GenerationOptions(
            color_buckets=64,
            blur_radius=1,
            alpha_threshold=0.02,
            mode=GenerationMode.SCANLINE,
            quadtree_tolerance=16,
            quadtree_min_size=2,
        ),
    ),
    "photo": Preset(
        label="Photo",
        description="Preserves gradients for photos/texture references.",
        options=GenerationOptions(
            color_buckets=160,
            blur_radius=2,
            alpha_threshold=0.03,
            mode=GenerationMode.QUADTREE,
            quadtree_tolerance=28,
            quadtree_min_size=3,
        ),
    ),
}


def get_preset(name: str) -> Preset:
    """Look up a preset by name.

    Raises:
        KeyError: If no preset has that name
    """
    try:
        return PRESETS[name]
    except KeyError:
        valid = ", ".join(sorted(PRESETS))
        raise KeyError(f"Unknown preset {name!r} (choose from {valid})") from None


# --- Output Models ---


@dataclass(frozen=True)
class RectangleCommand:
    """A filled axis-aligned rectangle in pixel coordinates.

    AIDEV-NOTE: fill_style is the canonical "rgb(r,g,b)" string. It is both
    the scanline merge key and the serialized color.
    """

    x: int
    y: int
    width: int
    height: int
    fill_style: str

    @property
    def area(self) -> int:
        return self.width * self.height

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "fillStyle": self.fill_style,
        }


@dataclass(frozen=True)
class GenerationResult:
    """Result of one generation call, fully determined by its inputs."""

    code: str
    rectangles: "tuple[RectangleCommand, ...]"
    rectangle_count: int
    width: int
    height: int

    @property
    def code_bytes(self) -> int:
        """Size of the draw program in UTF-8 bytes."""
        return len(self.code.encode("utf-8"))

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "rectangles": [rect.to_dict() for rect in self.rectangles],
            "rectangleCount": self.rectangle_count,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class PaletteEntry:
    """Area-weighted share of one fill color."""

    color: str
    area: int
    percent: float


# --- Scheduling Models ---


@dataclass(frozen=True)
class GenerationRequest:
    """Message sent to a compute backend."""

    sequence_id: int
    image_data: PixelBuffer
    options: GenerationOptions

    def to_dict(self) -> dict:
        return {
            "id": self.sequence_id,
            "imageData": self.image_data.to_dict(),
            "options": self.options.to_dict(),
        }


@dataclass(frozen=True)
class GenerationResponse:
    """Message returned by a compute backend.

    AIDEV-NOTE: Exactly one of result/error is set.
    """

    id: int
    result: GenerationResult | None = None
    error: str | None = None

    def __post_init__(self):
        if (self.result is None) == (self.error is None):
            raise ValueError("GenerationResponse needs exactly one of result or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        if self.result is not None:
            return {"id": self.id, "result": self.result.to_dict()}
        return {"id": self.id, "error": self.error}
