"""
Command line front end.

Maps arguments onto the conversion core, turns its errors into readable
messages with a hint, and owns the exit status.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from .convert import convert_file
from .errors import ConvertError, ErrorKind
from .models import ConvertOptions
from .rules import DEFAULT_DELIMITER, JSON_INDENT

HINTS = {
    ErrorKind.INPUT_NOT_FOUND: "check the path and that the file exists",
    ErrorKind.INPUT_UNREADABLE: "check the file permissions",
    ErrorKind.HEADER_MALFORMED: "the first line must hold the column names (try --encoding if the file is not UTF-8)",
    ErrorKind.RECORD_MALFORMED: "look for an unclosed or misplaced quote on that line",
    ErrorKind.SERIALIZATION_FAILED: "the data contains values that cannot be written as JSON",
    ErrorKind.OUTPUT_WRITE_FAILED: "check that the directory exists and is writable",
}


def format_error(err: ConvertError) -> str:
    if err.kind is ErrorKind.INPUT_NOT_FOUND:
        head = f"input file not found: {err.path}"
    elif err.kind is ErrorKind.INPUT_UNREADABLE:
        head = f"cannot read input file: {err.path}"
    elif err.kind is ErrorKind.HEADER_MALFORMED:
        head = "cannot read the header line"
    elif err.kind is ErrorKind.RECORD_MALFORMED:
        head = f"malformed record on line {err.line_number}"
    elif err.kind is ErrorKind.SERIALIZATION_FAILED:
        head = "cannot render the table as JSON"
    else:
        head = f"cannot write output file: {err.path}"

    msg = f"error: {head}"
    if err.detail:
        msg += f" ({err.detail})"
    return f"{msg}\nhint: {HINTS[err.kind]}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csv-to-json",
        description="Convert a CSV file to a JSON array of records",
    )
    parser.add_argument("-i", "--input", required=True, help="input CSV file")
    parser.add_argument("-o", "--output", help="output JSON file (default: stdout)")
    parser.add_argument("-s", "--stats", action="store_true", help="print column statistics")
    parser.add_argument("-d", "--delimiter", default=DEFAULT_DELIMITER,
                        help="field delimiter (default: ','; use '\\t' for tab)")
    parser.add_argument("--encoding", help="input encoding (default: auto-detect)")
    parser.add_argument("--indent", type=int, default=JSON_INDENT, help="JSON indent width")
    parser.add_argument("--strict-headers", action="store_true",
                        help="reject files with repeated column names")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="log headers and every row")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="only log warnings")
    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    delimiter = "\t" if args.delimiter == "\\t" else args.delimiter
    try:
        options = ConvertOptions(
            delimiter=delimiter,
            encoding=args.encoding,
            indent=args.indent,
            reject_duplicate_headers=args.strict_headers,
        )
    except ValidationError as exc:
        parser.error(exc.errors()[0]["msg"])

    try:
        result = convert_file(args.input, args.output, show_stats=args.stats, options=options)
    except ConvertError as exc:
        print(format_error(exc), file=sys.stderr)
        return 1

    if result.stats is not None:
        print("\n".join(result.stats.summary_lines()), file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
