"""CLI entry point for forge_donut package.

Invoke as:  python scripts/forge_donut --gif donut.gif
"""

# Bootstrap: when run as `python scripts/forge_donut` (directory path),
# re-execute through runpy so the package machinery resolves relative imports
# correctly and without DeprecationWarning.
if __name__ == "__main__" and not __package__:
    import os
    import runpy
    import sys

    _scripts_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    if _scripts_dir not in sys.path:
        sys.path.insert(0, _scripts_dir)
    runpy.run_module("forge_donut", run_name="__main__", alter_sys=True)
    raise SystemExit(0)  # unreachable, run_module already calls sys.exit()

import argparse
import math
import os
import sys

try:
    import numpy  # noqa: F401
except ImportError:
    sys.exit("Missing dependency: numpy. Install with: pip install numpy")

try:
    import PIL  # noqa: F401
except ImportError:
    sys.exit("Missing dependency: Pillow. Install with: pip install Pillow")

try:
    import matplotlib  # noqa: F401
except ImportError:
    sys.exit("Missing dependency: matplotlib. Install with: pip install matplotlib")

from PIL import Image

from ._common import DEFAULT_CONFIG
from .animation import State, advance, frames, run
from .output import ascii_sink, preview, save_gif, save_png, show_frame, terminal
from .raster import render

DEFAULT_GIF_FRAMES = 60


def build_parser():
    parser = argparse.ArgumentParser(
        description="Render a spinning torus as text, an image, or an animation."
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--ascii", action="store_true", help="Animate in the terminal (default)"
    )
    group.add_argument(
        "--show", action="store_true", help="Animate in a matplotlib window"
    )
    group.add_argument("--png", metavar="PATH", help="Write a single frame as PNG")
    group.add_argument(
        "--gif", metavar="PATH", help="Write --frames frames as an animated GIF"
    )
    group.add_argument(
        "--thumbnail", metavar="PATH", help="Write a styled figure of a single frame"
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=None,
        help=f"Frame count; 0 runs until interrupted (GIF default: {DEFAULT_GIF_FRAMES})",
    )
    parser.add_argument(
        "--start",
        type=int,
        default=0,
        help="Advance this many frames before the first one (default: 0)",
    )
    parser.add_argument(
        "--fps", type=float, default=30.0, help="Frames per second (default: 30)"
    )
    parser.add_argument(
        "--no-wrap",
        action="store_true",
        help="Let rotation angles grow without reducing them mod 2pi",
    )
    return parser


def validate(args):
    """Return an error message for bad argument values, or None."""
    if args.frames is not None and args.frames < 0:
        return f"Frame count must be zero or positive, got: {args.frames}"
    if args.gif and args.frames == 0:
        return "A GIF needs at least one frame"
    if args.start < 0:
        return f"Start frame must be zero or positive, got: {args.start}"
    if not (math.isfinite(args.fps) and args.fps > 0):
        return f"Frame rate must be a positive number, got: {args.fps}"
    for path in (args.png, args.gif, args.thumbnail):
        if path:
            out_dir = os.path.dirname(os.path.abspath(path))
            if not os.path.isdir(out_dir):
                return f"Output directory not found: {out_dir}"
    for path in (args.png, args.gif):
        if path:
            ext = os.path.splitext(path)[1].lower()
            if ext not in Image.registered_extensions():
                return f"Unsupported image extension for {path}: {ext or '(none)'}"
    return None


def main(argv=None):
    args = build_parser().parse_args(argv)

    error = validate(args)
    if error:
        print(error, file=sys.stderr)
        return 1

    config = DEFAULT_CONFIG
    wrap = not args.no_wrap
    state = advance(State(), config, steps=args.start)
    if wrap:
        state = state.wrapped()
    # 0 and "not given" both mean forever for the animated modes
    count = args.frames or None

    try:
        if args.png or args.thumbnail:
            buffer = render(state, config)
            if args.png:
                save_png(buffer, args.png)
            else:
                show_frame(
                    buffer,
                    args.thumbnail,
                    title=f"A={state.angle_a:.2f}  B={state.angle_b:.2f}",
                )
            return 0

        if args.gif:
            total = args.frames or DEFAULT_GIF_FRAMES
            print(f"Rendering {total} frames...")
            buffers = (buffer for _, buffer in frames(state, config, total, wrap))
            save_gif(buffers, args.gif, duration_ms=round(1000.0 / args.fps))
            return 0

        if args.show:
            preview(frames(state, config, count, wrap), config, args.fps)
            return 0

        with terminal() as out:
            run(ascii_sink(out), state, config, count, args.fps, wrap)
    except (OSError, ValueError) as exc:
        print(f"Could not write output: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
