import argparse
import logging
import sys
from pathlib import Path

from asciiraster.charsets import RAMPS
from asciiraster.engine import ImageEngine
from asciiraster.errors import RenderError
from asciiraster.ramp import GlyphRamp
from asciiraster.terminal import get_terminal_size


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render an image as coloured text")
    parser.add_argument("image", help="Path to input image")
    parser.add_argument(
        "-W", "--width", type=int, default=None, help="Output width in columns (default: terminal width)"
    )
    parser.add_argument(
        "-H", "--height", type=int, default=None, help="Output height in rows (default: follows the aspect ratio)"
    )
    parser.add_argument(
        "-o", "--offset", type=int, default=0, help="Skip this many source pixel rows from the top (default: 0)"
    )
    parser.add_argument(
        "-r", "--ramp", default="standard", choices=sorted(RAMPS), help="Glyph ramp to use (default: standard)"
    )
    parser.add_argument("-i", "--invert", action="store_true", default=False, help="Map bright pixels to sparse glyphs")
    parser.add_argument(
        "--no-colour", dest="colour", action="store_false", default=True, help="Disable truecolor ANSI output"
    )
    parser.add_argument(
        "-n", "--normalize", action="store_true", default=False, help="Stretch luminance so the brightest cell is densest"
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Log debug output to stderr")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    width = args.width
    if width is None and args.height is None:
        width = get_terminal_size()[0]

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        sys.exit(1)

    ramp = GlyphRamp(RAMPS[args.ramp])
    if args.invert:
        ramp = ramp.inverted()

    try:
        engine = ImageEngine.from_path(image_path, ramp=ramp, colour=args.colour, normalize=args.normalize)
        engine.render_to_text(sys.stdout, args.offset, width, args.height)
    except RenderError as exc:
        print(f"asciiraster: {exc}", file=sys.stderr)
        sys.exit(1)
