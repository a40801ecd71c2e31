"""Command line entry point: inspect and normalise FLT files."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

from flt.runtime import telemetry

from .constants import MAX_LINE_LENGTH
from .document import Document
from .errors import FLTError, LineError

Handler = Callable[[Document, argparse.Namespace], int]


def _load(path: str) -> Document:
    return Document(Path(path).read_text(encoding="utf-8"))


def _cmd_check(document: Document, args: argparse.Namespace) -> int:
    print(f"{args.file}: ok ({len(document.lines)} lines, version {document.version})")
    return 0


def _cmd_format(document: Document, args: argparse.Namespace) -> int:
    print(document.to_source(max_line_length=args.width))
    return 0


def _cmd_text(document: Document, args: argparse.Namespace) -> int:
    del args
    print(document.map().text)
    return 0


def _cmd_dc(document: Document, args: argparse.Namespace) -> int:
    for value in document.get_dc(args.term):
        print(value)
    return 0


def _cmd_at(document: Document, args: argparse.Namespace) -> int:
    position = document.map().at(args.offset)
    for kind, point in position:
        if point is None:
            print(f"{kind}: -")
        else:
            print(f"{kind}: offset={point.offset} length={point.length}")
    return 0


_COMMANDS: Dict[str, Handler] = {
    "check": _cmd_check,
    "format": _cmd_format,
    "text": _cmd_text,
    "dc": _cmd_dc,
    "at": _cmd_at,
}


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="flt", description="Inspect FLT documents.")
    parser.add_argument(
        "--log-preset",
        choices=telemetry.PRESETS,
        default=None,
        help="Telemetry preset (default: read FLT_* environment variables)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    check = commands.add_parser("check", help="Parse a file and report errors")
    check.add_argument("file")

    fmt = commands.add_parser("format", help="Print the canonical rendering")
    fmt.add_argument("file")
    fmt.add_argument(
        "--width",
        type=int,
        default=MAX_LINE_LENGTH,
        help="Maximum physical line length (default: 78)",
    )

    text = commands.add_parser("text", help="Print the concatenated document text")
    text.add_argument("file")

    dc = commands.add_parser("dc", help="Print Dublin Core values for a term")
    dc.add_argument("file")
    dc.add_argument("term")

    at = commands.add_parser("at", help="Show the map points containing an offset")
    at.add_argument("file")
    at.add_argument("offset", type=int)

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(args.log_preset)
    try:
        document = _load(args.file)
        return _COMMANDS[args.command](document, args)
    except FLTError as exc:
        if exc.line_no is None:
            print(f"{args.file}: {exc}", file=sys.stderr)
            return 1
        reason = exc.reason if isinstance(exc, LineError) else str(exc)
        print(f"{args.file}:{exc.line_no}: {reason}", file=sys.stderr)
        if exc.content is not None:
            print(f"    {exc.content}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"{args.file}: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual entry point
    sys.exit(main())
