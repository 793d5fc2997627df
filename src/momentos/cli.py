import argparse
import asyncio
import logging
import os
from typing import Optional

from momentos.api.preferences import JSONPreferenceStore, PinnedFrame, initial_state
from momentos.api.state import STICKERS, CustomFrame, Frame, get_sticker
from momentos.composite.pipeline import CompositionPipeline
from momentos.constants import (
    FILTER_LABELS,
    FRAME_LABELS,
    JPEG_QUALITY,
    Filter,
    FrameType,
)
from momentos.errors import MomentosError
from momentos.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_PREFS = os.path.join("~", ".config", "momentos", "preferences.json")


def get_prefs_path(path: Optional[str]) -> str:
    path = path or os.environ.get("MOMENTOS_PREFS") or DEFAULT_PREFS
    return os.path.expanduser(path)


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="momentos photo composer.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--prefs",
        help="Preference file (default: $MOMENTOS_PREFS or %s)" % DEFAULT_PREFS,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser("render", help="Compose a photo as JPEG")
    render_parser.add_argument("input_file", help="Input photo")
    render_parser.add_argument("output_file", help="Output JPEG file")
    render_parser.add_argument(
        "--filter", default=Filter.NONE.value, choices=[f.value for f in Filter]
    )
    render_parser.add_argument(
        "--frame",
        choices=[f.value for f in FrameType],
        help="Frame (default: the pinned frame)",
    )
    render_parser.add_argument(
        "--sticker", default="none", choices=["none"] + list(STICKERS)
    )
    render_parser.add_argument(
        "--custom-frame", help="Frame image, implies --frame custom"
    )
    render_parser.add_argument(
        "--quality", type=float, default=JPEG_QUALITY, help="JPEG quality in (0, 1]"
    )

    pin_parser = subparsers.add_parser("pin", help="Pin the default frame")
    pin_parser.add_argument("frame", choices=[f.value for f in FrameType])

    subparsers.add_parser("unpin", help="Clear the default frame")
    subparsers.add_parser("show-pin", help="Show the default frame")
    subparsers.add_parser("list", help="List filters, frames and stickers")

    return parser.parse_args(argv)


def render(args: argparse.Namespace, store: JSONPreferenceStore) -> None:
    state = initial_state(store)
    state = state.evolve(
        filter=Filter(args.filter), sticker=get_sticker(args.sticker)
    )
    if args.custom_frame:
        if args.frame not in (None, FrameType.CUSTOM.value):
            raise ValueError("--custom-frame cannot be combined with --frame %s" % args.frame)
        with open(args.custom_frame, "rb") as f:
            state = state.evolve(frame=CustomFrame(f.read()))
    elif args.frame == FrameType.CUSTOM.value:
        raise ValueError("--frame custom requires --custom-frame")
    elif args.frame is not None:
        state = state.evolve(frame=Frame(args.frame))

    with open(args.input_file, "rb") as f:
        source = f.read()
    pipeline = CompositionPipeline(quality=args.quality)
    encoded = asyncio.run(pipeline.render(source, state))
    with open(args.output_file, "wb") as f:
        f.write(encoded.data)
    logger.info("Wrote %s (%dx%d)" % (args.output_file, encoded.width, encoded.height))


def main(argv: Optional[list] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    package_logger = logging.getLogger("momentos")
    if args.verbose:
        package_logger.setLevel(logging.DEBUG)
    else:
        package_logger.setLevel(logging.INFO)

    store = JSONPreferenceStore(get_prefs_path(args.prefs))
    pinned = PinnedFrame(store)
    try:
        if args.command == "render":
            render(args, store)

        elif args.command == "pin":
            pinned.pin(args.frame)

        elif args.command == "unpin":
            pinned.unpin()

        elif args.command == "show-pin":
            kind = pinned.get()
            print(kind.value if kind else "none")

        elif args.command == "list":
            print("Filters:")
            for f in Filter:
                print("  %-12s %s" % (f.value, FILTER_LABELS[f]))
            print("Frames:")
            for frame in FrameType:
                print("  %-12s %s" % (frame.value, FRAME_LABELS[frame]))
            print("Stickers:")
            for sticker in STICKERS.values():
                print("  %-12s %s" % (sticker.name, sticker.text))

    except (MomentosError, OSError, ValueError) as e:
        logger.error(str(e))
        return 1

    return None


if __name__ == "__main__":
    main()
