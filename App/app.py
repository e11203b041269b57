"""rectcanvas - command-line entry point."""

import argparse
import dataclasses
import sys
from pathlib import Path

from config_manager import ConfigManager
from errors import GenerationError
from models import (
    CONFIG_FILE,
    PRESETS,
    TOP_PALETTE_COLORS,
    GenerationMode,
    GenerationOptions,
    GenerationResult,
    get_preset,
)
from vectorizer import CanvasCodeGenerator, summarize, synthesize
from vectorizer.utils import fit_image_to_bounds, image_to_buffer, load_image


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rectcanvas",
        description="Convert an image into filled rectangles and a canvas draw program.",
    )
    parser.add_argument("image", type=Path, help="Input image (PNG, JPG, WebP, ...)")

    settings = parser.add_argument_group("generation settings")
    settings.add_argument("--preset", choices=sorted(PRESETS), help="Start from a preset")
    settings.add_argument("--mode", choices=[m.value for m in GenerationMode])
    settings.add_argument("--buckets", type=int, dest="color_buckets", help="Color buckets per channel")
    settings.add_argument("--blur", type=int, dest="blur_radius", help="Box blur radius in pixels")
    settings.add_argument("--alpha", type=float, dest="alpha_threshold", help="Alpha threshold (0-1)")
    settings.add_argument("--tolerance", type=float, dest="quadtree_tolerance", help="Quadtree color tolerance")
    settings.add_argument("--min-size", type=int, dest="quadtree_min_size", help="Quadtree minimum block size")
    settings.add_argument("--max-width", type=int, help="Fit the image inside this width first")
    settings.add_argument("--max-height", type=int, help="Fit the image inside this height first")

    output = parser.add_argument_group("output")
    output.add_argument("--js", type=Path, help="Write the draw program here")
    output.add_argument("--svg", type=Path, help="Write the SVG export here")
    output.add_argument("--html", type=Path, help="Write the standalone HTML document here")
    output.add_argument(
        "--palette",
        type=int,
        default=TOP_PALETTE_COLORS,
        help="Number of dominant colors to print (0 to skip)",
    )

    parser.add_argument(
        "--background",
        action="store_true",
        help="Run generation on a background thread",
    )
    parser.add_argument("--config", type=Path, default=CONFIG_FILE, help="Options file")
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Save the resolved options to the options file",
    )
    return parser


def resolve_options(args: argparse.Namespace, base: GenerationOptions) -> GenerationOptions:
    """Layer preset and command-line overrides on top of saved options."""
    options = get_preset(args.preset).options if args.preset else base

    overrides = {}
    for name in (
        "color_buckets",
        "blur_radius",
        "alpha_threshold",
        "quadtree_tolerance",
        "quadtree_min_size",
    ):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    if args.mode is not None:
        overrides["mode"] = GenerationMode(args.mode)

    return dataclasses.replace(options, **overrides)


def run_in_background(buffer, options: GenerationOptions) -> GenerationResult:
    """Run one generation through the scheduler on a QThread.

    Raises:
        GenerationError: If the background request failed
    """
    from PyQt6.QtCore import QCoreApplication, QEventLoop

    from qt_backend import QtThreadBackend
    from scheduler import GenerationScheduler

    # Queued signal delivery needs an application object and a running loop
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    loop = QEventLoop(app)
    backend = QtThreadBackend()
    scheduler = GenerationScheduler(
        backend,
        on_result=lambda _id, _result: loop.quit(),
        on_error=lambda _id, _message: loop.quit(),
    )
    scheduler.generate(buffer, options)
    if scheduler.pending:
        loop.exec()
    backend.wait_for_all()

    if scheduler.error is not None:
        raise GenerationError(scheduler.error)
    return scheduler.result


def write_outputs(args: argparse.Namespace, result: GenerationResult) -> None:
    exports = synthesize(list(result.rectangles), result.width, result.height)
    for path, content in (
        (args.js, exports.code),
        (args.svg, exports.svg),
        (args.html, exports.html_document),
    ):
        if path is not None:
            path.write_text(content, encoding="utf-8")
            print(f"✓ Wrote {path}")


def main(argv: "list[str] | None" = None) -> int:
    """Generate canvas code for an image file."""
    args = build_parser().parse_args(argv)
    config_manager = ConfigManager(args.config)

    try:
        options = resolve_options(args, config_manager.load())
        options.validate()
    except (KeyError, GenerationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.save_config:
        success, error = config_manager.save(options)
        if not success:
            print(f"Warning: Could not save config file: {error}", file=sys.stderr)

    try:
        if args.background:
            image = load_image(args.image)
            if args.max_width or args.max_height:
                image = fit_image_to_bounds(
                    image,
                    args.max_width or image.size[0],
                    args.max_height or image.size[1],
                )
            result = run_in_background(image_to_buffer(image), options)
        else:
            generator = CanvasCodeGenerator(options)
            result = generator.process(args.image, args.max_width, args.max_height)
    except GenerationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Canvas size: {result.width} x {result.height}px")
    print(f"Rectangles used: {result.rectangle_count}")
    print(f"Code size: {result.code_bytes / 1024:.1f} KB")

    if args.palette > 0:
        print("Dominant colors:")
        for entry in summarize(list(result.rectangles), args.palette):
            print(f"  {entry.color:<18} {entry.percent:5.1f}%")

    write_outputs(args, result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
