"""Sanitize an HTML file (or stdin) with the default policy."""

import argparse
import sys

from .sanitize import sanitize_html


def _split(value: str) -> list[str]:
    return [name.strip() for name in value.split(",") if name.strip()]


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="python -m sanehtml", description=__doc__)
    parser.add_argument("file", nargs="?", help="HTML file to read (default: stdin)")
    parser.add_argument(
        "--allowed-tags",
        type=str,
        help="Comma-separated tags to allow instead of the defaults",
    )
    parser.add_argument(
        "--self-closing",
        type=str,
        help="Comma-separated tags to write as <tag /> instead of the defaults",
    )
    parser.add_argument(
        "--dont-parse",
        type=str,
        help="Comma-separated tags whose content is escaped verbatim",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Print parse errors and removed markup to stderr",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    options = {}
    if args.allowed_tags is not None:
        options["allowed_tags"] = _split(args.allowed_tags)
    if args.self_closing is not None:
        options["self_closing"] = _split(args.self_closing)
    if args.dont_parse is not None:
        options["dont_parse"] = _split(args.dont_parse)

    if args.file:
        with open(args.file, encoding="utf-8") as f:
            html = f.read()
    else:
        html = sys.stdin.read()

    errors = []
    result = sanitize_html(html, options, on_error=errors.append if args.report else None)
    sys.stdout.write(result)

    for error in errors:
        print(error, file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
