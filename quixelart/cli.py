"""Command line interface for QuixelArt."""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from quixelart.pipeline import PixelizePipeline
from quixelart.quantize import extract_palette
from quixelart.types import (
    InvalidParamsError,
    LevelsParams,
    ModulateParams,
    PixelizationError,
    PixelizationParams,
)

DEFAULTS = PixelizationParams.default()


def _int_list(text: str, count: int, name: str) -> list:
    try:
        values = [int(part.strip()) for part in text.split(',')]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid {name} format: {text}")
    if len(values) != count:
        raise argparse.ArgumentTypeError(f"{name} needs {count} comma-separated values, got {text}")
    return values


def parse_levels(text: str) -> LevelsParams:
    """'black,white' in percent, e.g. '10,80'."""
    black, white = _int_list(text, 2, "levels")
    try:
        return LevelsParams(black, white)
    except InvalidParamsError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_modulate(text: str) -> ModulateParams:
    """'brightness,saturation,hue' in percent, e.g. '100,120,100'."""
    brightness, saturation, hue = _int_list(text, 3, "modulate")
    try:
        return ModulateParams(brightness, saturation, hue)
    except InvalidParamsError as e:
        raise argparse.ArgumentTypeError(str(e))


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='quixelart',
        description='Turn a photograph into blocky, palette-reduced pixel art',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  quixelart -i photo.jpg -o art.png
  quixelart -i photo.jpg -o art.png --pixelize 90 --colors 8 --no-levels
  quixelart -i photo.jpg -o art.png --modulate 110,150,100 --save-stages stages/
        """,
    )

    parser.add_argument('-i', '--input', required=True, help='Input image file path')

    parser.add_argument(
        '-o', '--output',
        default=None,
        help='Output image path (default: <input>_pixel.png)'
    )

    parser.add_argument(
        '-p', '--pixelize',
        type=int,
        default=DEFAULTS.pixelize,
        help=f'Shrink percentage before quantization, 0-99 (default: {DEFAULTS.pixelize})'
    )

    parser.add_argument(
        '-c', '--colors',
        type=int,
        default=DEFAULTS.kcolors,
        help=f'Palette size, 1-64 (default: {DEFAULTS.kcolors})'
    )

    levels = parser.add_mutually_exclusive_group()
    levels.add_argument(
        '--levels',
        type=parse_levels,
        default=DEFAULTS.levels,
        help='Black and white points in percent, "black,white" (default: 10,80)'
    )
    levels.add_argument(
        '--no-levels',
        dest='levels',
        action='store_const',
        const=None,
        default=argparse.SUPPRESS,
        help='Skip the levels stage'
    )

    parser.add_argument(
        '--modulate',
        type=parse_modulate,
        default=None,
        help='Brightness, saturation and hue in percent, "b,s,h" (default: off)'
    )

    parser.add_argument(
        '--save-stages',
        type=str,
        default=None,
        help='Directory to save pipeline stage images'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log pipeline progress'
    )

    return parser


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.verbose:
        logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    input_path = Path(parsed.input)
    if parsed.output:
        output_path = Path(parsed.output)
    else:
        output_path = input_path.with_name(f"{input_path.stem}_pixel.png")

    try:
        params = PixelizationParams(
            pixelize=parsed.pixelize,
            kcolors=parsed.colors,
            levels=parsed.levels,
            modulate=parsed.modulate,
        )
    except InvalidParamsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Processing: {input_path}")
    print(f"  Pixelize: {params.pixelize}%")
    print(f"  Colors: {params.kcolors}")
    if params.levels:
        print(f"  Levels: {params.levels.black}%,{params.levels.white}%")
    if params.modulate:
        m = params.modulate
        print(f"  Modulate: {m.brightness},{m.saturation},{m.hue}")

    try:
        pipeline = PixelizePipeline(params)
        result = pipeline.process(input_path, output_path, debug=bool(parsed.save_stages))

        print(f"  Palette: {len(extract_palette(result))} colors")
        print(f"  Output saved: {output_path}")

        if parsed.save_stages:
            for stage_path in pipeline.save_stages(parsed.save_stages):
                print(f"  Saved debug stage: {stage_path}")

        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except PixelizationError as e:
        print(f"Error processing image: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
