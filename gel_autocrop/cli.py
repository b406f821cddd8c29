"""Command-line interface for gel autocropping."""

import argparse
import logging
import sys
from pathlib import Path

DEFAULT_DELIM = "_"


def write_error(output_path: str | None, message: str) -> None:
    """Write error message to error file next to the requested output."""
    if output_path:
        error_path = output_path + ".err"
        with open(error_path, "w") as f:
            f.write(message)


def detect_delim(filename: str) -> str | None:
    """Detect delimiter from filename by finding most common separator."""
    stem = Path(filename).stem
    for delim in ["_", "-", "."]:
        if delim in stem:
            return delim
    return None


def build_output_filename(input_path: str, prefix: str, suffix: str, delim: str) -> str:
    p = Path(input_path)
    parts = []
    if prefix:
        parts.append(prefix)
    parts.append(p.stem)
    if suffix:
        parts.append(suffix)
    return str(p.with_stem(delim.join(parts)))


def build_sequence_filename(output_dir: str, prefix: str, index: int) -> str:
    """Build a numbered file name such as fg_2.png for frame index 2."""
    return str(Path(output_dir) / f"{prefix}{DEFAULT_DELIM}{index}.png")


def parse_config(config_arg: str | None):
    """Parse config from CLI argument.

    Args:
        config_arg: Either inline JSON string or path to .json file

    Returns:
        GelConfig object (defaults if not provided)
    """
    from .models import GelConfig

    if not config_arg:
        return GelConfig()

    config_path = Path(config_arg)
    if config_path.exists() and config_path.suffix == ".json":
        return GelConfig.from_file(config_path)

    try:
        return GelConfig.from_json(config_arg)
    except ValueError as e:
        raise ValueError(f"Invalid --config: {e}") from e


def read_gray(path: str):
    """Read an image from disk as single-channel 8-bit."""
    import cv2

    from .exceptions import ImageReadError

    img = cv2.imread(path, cv2.IMREAD_GRAYSCALE)
    if img is None:
        raise ImageReadError(path)
    return img


def add_locate_arguments(parser: argparse.ArgumentParser) -> None:
    """Add gel locating arguments to a parser."""
    parser.add_argument("input", help="Input image file")
    parser.add_argument("-o", "--output", help="Output filename")
    parser.add_argument("--prefix", default="", help="Prefix for output filename")
    parser.add_argument("--suffix", default="crop", help="Suffix for output filename")
    parser.add_argument(
        "--delim",
        help="Delimiter between prefix/name/suffix (auto-detected from filename if not set)",
    )
    parser.add_argument(
        "--coords",
        action="store_true",
        help="Output 'left top width height' instead of the cropped image",
    )
    parser.add_argument(
        "--method",
        choices=["bounding", "innermost"],
        help="Region method: global extent of edges or nearest edges around the center",
    )
    parser.add_argument(
        "--center-weight",
        action="store_true",
        help="Weight gradients toward the image center before thresholding",
    )
    parser.add_argument(
        "--threshold",
        type=int,
        help="Edge threshold 1-255 (default: Otsu)",
    )
    parser.add_argument(
        "--no-lines",
        action="store_true",
        help="Skip long horizontal/vertical line extraction",
    )
    parser.add_argument(
        "--config",
        help="JSON configuration (inline JSON string or path to .json file). "
        "Command-line options override it.",
    )
    parser.add_argument(
        "--debug-dir",
        help="Directory to save debug visualization images",
    )


def run_locate(args: argparse.Namespace) -> None:
    """Locate the gel in an image and crop it or print its rectangle."""
    import cv2

    from .detection import crop_region, locate_gel
    from .exceptions import GelCropError, NoRegionFoundError

    error_output = args.output if args.output else None

    try:
        config = parse_config(args.config)
        if args.method:
            config.locate.method = args.method
        if args.center_weight:
            config.locate.center_weight = True
        if args.threshold is not None:
            config.locate.threshold = args.threshold
        if args.no_lines:
            config.locate.use_lines = False
        config.validate()

        img = read_gray(args.input)

        visualizer = None
        if args.debug_dir:
            from .visualizer import DebugVisualizer

            visualizer = DebugVisualizer(args.debug_dir)

        rect = locate_gel(img, config, visualizer)
        if rect is None:
            raise NoRegionFoundError()
    except GelCropError as e:
        write_error(error_output, e.user_message)
        sys.exit(e.user_message)
    except ValueError as e:
        write_error(error_output, str(e))
        sys.exit(str(e))

    if args.coords:
        output = " ".join(str(v) for v in rect.as_tuple())
        if args.output:
            with open(args.output, "w") as f:
                f.write(output + "\n")
        else:
            print(output)
        return

    crop = crop_region(img, rect)
    if args.output:
        output_path = args.output
    else:
        delim = args.delim or detect_delim(args.input) or DEFAULT_DELIM
        output_path = build_output_filename(args.input, args.prefix, args.suffix, delim)

    cv2.imwrite(output_path, crop)


def run_histogram(args: argparse.Namespace) -> None:
    """Render the intensity histogram of an image."""
    import cv2

    from .exceptions import GelCropError
    from .histogram import compute_histogram, render_histogram, render_histogram_curve

    try:
        histogram = compute_histogram(read_gray(args.input))
        if args.curve:
            plot = render_histogram_curve(histogram, height=args.height)
        else:
            plot = render_histogram(histogram, height=args.height)
    except GelCropError as e:
        sys.exit(e.user_message)
    except ValueError as e:
        sys.exit(str(e))

    cv2.imwrite(args.output, plot)

    if args.debug_dir:
        from .visualizer import DebugVisualizer

        DebugVisualizer(args.debug_dir).save_histogram(histogram, title=Path(args.input).name)


def run_foreground(args: argparse.Namespace) -> None:
    """Separate foreground frames from an image sequence."""
    import cv2

    from .exceptions import GelCropError
    from .separation import process_sequence

    try:
        config = parse_config(args.config)
        images = [read_gray(path) for path in args.inputs]
        foregrounds = process_sequence(images, config.foreground)
    except GelCropError as e:
        sys.exit(e.user_message)
    except ValueError as e:
        sys.exit(str(e))

    visualizer = None
    if args.debug_dir:
        from .visualizer import DebugVisualizer

        visualizer = DebugVisualizer(args.debug_dir)

    Path(args.output_dir).mkdir(parents=True, exist_ok=True)
    # Output numbering matches input position; frame 1 has no output
    for index, foreground in enumerate(foregrounds, start=2):
        cv2.imwrite(build_sequence_filename(args.output_dir, args.prefix, index), foreground)
        if visualizer:
            visualizer.save_foreground(index, images[index - 1], foreground)


def run_mask(args: argparse.Namespace) -> None:
    """Write a center weight mask as an 8-bit image."""
    import cv2
    import numpy as np

    from .masks import generate_center_mask
    from .models import CenterMaskConfig

    try:
        mask = generate_center_mask((args.width, args.height), CenterMaskConfig(metric=args.metric))
    except ValueError as e:
        sys.exit(str(e))

    cv2.imwrite(args.output, np.clip(np.rint(mask * 255), 0, 255).astype(np.uint8))


def run_config(args: argparse.Namespace) -> None:
    """Print the default configuration."""
    from .models import GelConfig

    print(GelConfig.default_json())


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Gel image autocropping tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gel-autocrop locate gel.png                      Locate and crop the gel
  gel-autocrop locate gel.png --coords             Print left top width height
  gel-autocrop histogram gel.png -o hist.png       Plot intensity histogram
  gel-autocrop foreground a.png b.png c.png --output-dir fg
  gel-autocrop mask 640 480 -o mask.png            Write a center weight mask
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    locate_parser = subparsers.add_parser("locate", help="Locate and crop the gel in an image")
    add_locate_arguments(locate_parser)
    locate_parser.set_defaults(func=run_locate)

    histogram_parser = subparsers.add_parser("histogram", help="Render an intensity histogram")
    histogram_parser.add_argument("input", help="Input image file")
    histogram_parser.add_argument("-o", "--output", required=True, help="Output plot filename")
    histogram_parser.add_argument("--height", type=int, default=256, help="Plot height in pixels")
    histogram_parser.add_argument(
        "--curve", action="store_true", help="Draw a connected curve instead of bars"
    )
    histogram_parser.add_argument("--debug-dir", help="Directory to save a matplotlib histogram plot")
    histogram_parser.set_defaults(func=run_histogram)

    foreground_parser = subparsers.add_parser(
        "foreground", help="Separate foreground from an ordered image sequence"
    )
    foreground_parser.add_argument("inputs", nargs="+", help="Input image files in order")
    foreground_parser.add_argument("--output-dir", required=True, help="Directory for foreground frames")
    foreground_parser.add_argument("--prefix", default="fg", help="Output filename prefix")
    foreground_parser.add_argument("--config", help="JSON configuration (inline or .json path)")
    foreground_parser.add_argument("--debug-dir", help="Directory to save frame/foreground pairs")
    foreground_parser.set_defaults(func=run_foreground)

    mask_parser = subparsers.add_parser("mask", help="Generate a center weight mask")
    mask_parser.add_argument("width", type=int, help="Mask width")
    mask_parser.add_argument("height", type=int, help="Mask height")
    mask_parser.add_argument("-o", "--output", required=True, help="Output filename")
    mask_parser.add_argument(
        "--metric",
        choices=["chebyshev", "manhattan", "euclidean"],
        default="chebyshev",
        help="Distance metric (default: chebyshev)",
    )
    mask_parser.set_defaults(func=run_mask)

    config_parser = subparsers.add_parser("config", help="Print the default JSON configuration")
    config_parser.set_defaults(func=run_config)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)
    args.func(args)


if __name__ == "__main__":
    main()
