"""
Snapshot CLI

Command-line interface for compressing saved pages and restoring snapshots.

Usage:
    tinyshot compress page.html --max-text 2000 --max-elems 30
    tinyshot compress - < page.html > snapshot.json
    tinyshot restore snapshot.json
"""

import argparse
import json
import logging
import sys


def _read(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8", errors="replace") as f:
        return f.read()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinyshot",
        description="Compress page HTML into a compact snapshot for LLM prompts"
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Compress command
    compress_parser = subparsers.add_parser("compress", help="Compress an HTML file")
    compress_parser.add_argument("file", help="HTML file ('-' for stdin)")
    compress_parser.add_argument("-t", "--max-text", type=int, default=None,
                                 help="Maximum visible text characters")
    compress_parser.add_argument("-n", "--max-elems", type=int, default=None,
                                 help="Maximum interactive elements")
    compress_parser.add_argument("--xpath", action="store_true",
                                 help="Include absolute XPath for each element")
    compress_parser.add_argument("--compact", action="store_true",
                                 help="Print JSON on one line")

    # Restore command
    restore_parser = subparsers.add_parser("restore", help="Restore HTML from snapshot JSON")
    restore_parser.add_argument("file", help="Snapshot JSON file ('-' for stdin)")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Import here so --help works without the parser stack configured
    from tinyshot_core.config import config
    from tinyshot_core.error_handler import format_user_friendly_error
    from tinyshot_core.extractor import Tinyshot
    from tinyshot_core.snapshot_types import CompactSnapshot

    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or config.enable_debug) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    tinyshot = Tinyshot()

    try:
        if args.command == "compress":
            options = {
                "maxText": args.max_text,
                "maxElems": args.max_elems,
                "include_xpath": args.xpath,
            }
            snapshot = tinyshot.compress(_read(args.file), options)
            print(snapshot.to_json(indent=None if args.compact else 2))

        elif args.command == "restore":
            snapshot = CompactSnapshot.from_dict(json.loads(_read(args.file)))
            print(tinyshot.restore(snapshot))

    except Exception as e:
        friendly = format_user_friendly_error(e)
        print(f"❌ {friendly['message']}", file=sys.stderr)
        print(f"💡 {friendly['suggestion']}", file=sys.stderr)
        logging.getLogger(__name__).debug(f"Technical: {friendly['technical']}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
