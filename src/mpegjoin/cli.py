from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Sequence

from mutagen import MutagenError

from mpegjoin import __version__, config, helpers
from mpegjoin import logger as logger_mod
from mpegjoin.errors import MergeError
from mpegjoin.mp3.events import EventBus, EventKind, MergeEvent
from mpegjoin.mp3.merge import Mp3Merger
from mpegjoin.mp3.probe import summarize

log = logger_mod.get_logger()

DESCRIPTION = """\
Concatenate MP3 files without re-encoding. Both constant bit rate (CBR) and
variable bit rate (VBR) files are supported. ID3 tags and garbage data are
stripped from the output; when the merged frames do not share one bit rate an
Xing VBR header is added.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mpegjoin", description=DESCRIPTION)
    parser.add_argument("files", nargs="*", help="input files to merge, in order")
    parser.add_argument("-d", "--dir", help="merge every .mp3 file in this directory")
    parser.add_argument(
        "-o",
        "--out",
        default=config.DEFAULT_OUTPUT_NAME,
        help=f"output filename (default: {config.DEFAULT_OUTPUT_NAME})",
    )
    parser.add_argument(
        "-f", "--force", action="store_true", help="overwrite an existing output file"
    )
    tag = parser.add_mutually_exclusive_group()
    tag.add_argument(
        "-t", "--tag", action="store_true", help="copy the ID3v2 tag from the first input file"
    )
    tag.add_argument(
        "--tag-from",
        type=int,
        metavar="N",
        help="copy the ID3v2 tag from input file N (1-based)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="report progress")
    parser.add_argument("--debug", action="store_true", help="log debugging information")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _resolve_inputs(args: argparse.Namespace) -> List[str]:
    if args.dir:
        return helpers.collect_inputs(args.dir)
    return list(args.files)


def _tag_source(args: argparse.Namespace) -> Optional[int]:
    """Map the 1-based tag options onto a 0-based input index."""
    if args.tag_from is not None:
        return args.tag_from - 1
    if args.tag:
        return 0
    return None


def _progress_printer(event: MergeEvent) -> None:
    if event.kind == EventKind.INPUT_STARTED:
        print(f"+ {event.path}")
    elif event.kind == EventKind.VBR_DETECTED:
        print("• Multiple bitrates detected. Adding VBR header.")
    elif event.kind == EventKind.TAG_TRANSPLANTED:
        print(f"• Added ID3 tag from {event.detail.get('source')}.")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logger_mod.set_logging_level("DEBUG")

    events = EventBus()
    if args.verbose:
        events.subscribe(_progress_printer)

    try:
        inputs = _resolve_inputs(args)
        tag_source = _tag_source(args)
        result = Mp3Merger(events=events).merge(
            args.out, inputs, tag_source=tag_source, force=args.force
        )
    except MergeError as e:
        log.debug(f"merge failed: {e!r}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"• {result.total_files} files merged ({result.total_frames} frames).")
        try:
            summary = summarize(result.output_path)
        except MutagenError as e:
            log.warning(f"could not read back '{result.output_path}': {e}")
        else:
            print(
                f"• {summary.length_seconds:.1f}s, {summary.bitrate_bps // 1000} kbps "
                f"({summary.bitrate_mode.lower()})"
            )

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
