import argparse
import logging
import sys
from pathlib import Path

from .errors import JFIFError
from .integrity import pixels_unchanged
from .markers import COM, is_app
from .reader import decode_segments
from .signatures import clean_signature, match_signature
from .splice import add_segment
from .xmp import extract_xmp

logger = logging.getLogger("jfif")


def _signature(seg) -> str:
    if not is_app(seg.marker):
        return ""
    match = match_signature(seg)
    if match is None:
        return ""
    return clean_signature(match[0])


def cmd_stat(args, stdin, stdout) -> int:
    for path in args.files:
        for seg in decode_segments(path):
            fields = [seg.name, str(seg.payload_size)]
            sig = _signature(seg)
            if sig:
                fields.append(sig)
            if len(args.files) > 1:
                fields.insert(0, path)
            print("\t".join(fields), file=stdout)
    return 0


def cmd_sig(args, stdin, stdout) -> int:
    for path in args.files:
        for seg in decode_segments(path):
            if not is_app(seg.marker):
                continue
            sig = _signature(seg)
            fields = ["match", seg.name, sig] if sig else ["unknown", seg.name]
            if len(args.files) > 1:
                fields.insert(0, path)
            print("\t".join(fields), file=stdout)
    return 0


def cmd_com(args, stdin, stdout) -> int:
    comment = stdin.read()
    for path in args.files:
        before = Path(path).read_bytes() if args.verify else None
        add_segment(path, COM, comment)
        logger.info("Added %d byte comment to %s", len(comment), path)
        if args.verify and not pixels_unchanged(before, path):
            print(f"jfif: {path}: image data changed", file=sys.stderr)
            return 1
    return 0


def cmd_xmp(args, stdin, stdout) -> int:
    for path in args.files:
        for packet in extract_xmp(decode_segments(path)):
            print(packet.decode("utf-8", "replace"), file=stdout)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jfif", description="JPEG/JFIF segment tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")

    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("stat", help="Print marker, payload size and APPn signature of each segment")
    p.add_argument("files", nargs="+", metavar="jpeg")
    p.set_defaults(func=cmd_stat)

    p = subparsers.add_parser("sig", help="Print the known signature of each APPn segment")
    p.add_argument("files", nargs="+", metavar="jpeg")
    p.set_defaults(func=cmd_sig)

    p = subparsers.add_parser("com", help="Embed stdin as a comment segment before the start of scan")
    p.add_argument("files", nargs="+", metavar="jpeg")
    p.add_argument("--verify", action="store_true",
                   help="Decode the image before and after and fail if the pixels differ")
    p.set_defaults(func=cmd_com)

    p = subparsers.add_parser("xmp", help="Print XMP packets from APP1 segments")
    p.add_argument("files", nargs="+", metavar="jpeg")
    p.set_defaults(func=cmd_xmp)

    return parser


def main(argv=None, stdin=None, stdout=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )
    if stdin is None:
        stdin = sys.stdin.buffer
    if stdout is None:
        stdout = sys.stdout

    try:
        return args.func(args, stdin, stdout)
    # ValueError comes from OpenCV failing to decode during --verify
    except (JFIFError, OSError, ValueError) as e:
        print(f"jfif: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
