"""
Conversion pipeline: read, parse, aggregate, serialize, write.

The whole table is built in memory before anything is written, so a bad
input never creates or truncates the output file.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import List, Optional

from .errors import InputNotFound, InputUnreadable, OutputWriteFailed, SerializationFailed
from .models import ConversionResult, ConvertOptions, Row
from .reader import decode_source, parse
from .rules import JSON_INDENT, OUTPUT_ENCODING
from .stats import aggregate

logger = logging.getLogger(__name__)


def serialize(rows: List[Row], indent: int = JSON_INDENT) -> str:
    try:
        return json.dumps(rows, indent=indent, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise SerializationFailed(str(exc)) from exc


def _write_stdout(text: str) -> None:
    try:
        try:
            sys.stdout.write(text)
        except UnicodeEncodeError:
            # console codec cannot hold the data, emit UTF-8 bytes instead
            sys.stdout.flush()
            sys.stdout.buffer.write(text.encode(OUTPUT_ENCODING))
        sys.stdout.flush()
    except BrokenPipeError:
        logger.debug("stdout closed before the document was written")
        # keep the interpreter from failing again on its final flush
        try:
            fd = sys.stdout.fileno()
        except (AttributeError, OSError, ValueError):
            return
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, fd)
        os.close(devnull)


def write(document: str, destination: Optional[str] = None) -> None:
    """Write to a file path (overwriting it), or to stdout when no path is given."""
    if destination is None:
        _write_stdout(document + "\n")
        return

    try:
        with open(destination, "w", encoding=OUTPUT_ENCODING, newline="") as f:
            f.write(document)
    except (OSError, UnicodeEncodeError) as exc:
        raise OutputWriteFailed(destination, str(exc)) from exc
    logger.info("saved JSON file: %s", destination)


def read_input(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
        raise InputNotFound(str(exc), path=path) from exc
    except OSError as exc:
        raise InputUnreadable(str(exc), path=path) from exc


def convert_bytes(
    raw: bytes,
    options: Optional[ConvertOptions] = None,
    show_stats: bool = False,
) -> ConversionResult:
    options = options or ConvertOptions()

    text = decode_source(raw, options.encoding)
    headers, rows = parse(
        text,
        delimiter=options.delimiter,
        reject_duplicate_headers=options.reject_duplicate_headers,
    )
    logger.info("parsed %d rows, %d columns", len(rows), len(headers))

    stats = aggregate(headers, rows) if show_stats else None
    document = serialize(rows, indent=options.indent)

    return ConversionResult(headers=headers, rows=rows, document=document, stats=stats)


def convert_file(
    input_path: str,
    output_path: Optional[str] = None,
    show_stats: bool = False,
    options: Optional[ConvertOptions] = None,
) -> ConversionResult:
    logger.info("reading CSV file: %s", input_path)
    raw = read_input(input_path)

    result = convert_bytes(raw, options, show_stats=show_stats)
    write(result.document, output_path)
    return result
