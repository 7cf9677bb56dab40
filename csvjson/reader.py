"""
Tabular reader.

Turns delimited text into an ordered header list and a list of rows, each
row a dict keyed by header name. Values stay strings.

Rules:
- The first line is the header. It is not trimmed.
- Fields are paired with headers positionally. Extra fields are dropped;
  a short row simply lacks the trailing keys (they are NOT set to "").
- Repeated header names: the later column wins, unless duplicates are
  rejected outright.
- Blank data lines are skipped.
- The first record that breaks the quoting rules aborts the whole parse.
"""

from __future__ import annotations

import csv
import io
import logging
import sys
from typing import List, Optional, TextIO, Tuple, Union

from charset_normalizer import from_bytes

from .errors import HeaderMalformed, RecordMalformed
from .models import Row
from .rules import DEFAULT_DELIMITER, INPUT_ENCODING

logger = logging.getLogger(__name__)


def _lift_field_limit() -> None:
    # cells may be arbitrarily large; shrink until the C long accepts it
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            return
        except OverflowError:
            limit //= 2


_lift_field_limit()


def decode_source(raw: bytes, encoding: Optional[str] = None) -> str:
    """
    Decode input bytes to text.

    An explicit encoding is used strictly. Otherwise UTF-8 (BOM tolerated)
    is tried first, then the best guess of charset-normalizer. Input that
    cannot be decoded at all has no readable header.
    """
    if encoding is not None:
        try:
            return raw.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            raise HeaderMalformed(f"cannot decode input as {encoding}: {exc}") from exc

    try:
        return raw.decode(INPUT_ENCODING)
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    if match is None:
        raise HeaderMalformed("cannot detect input encoding")
    logger.debug("decoded input as %s", match.encoding)
    return str(match)


def _split_header(reader) -> List[str]:
    try:
        headers = next(reader)
    except StopIteration:
        raise HeaderMalformed("input is empty, no header line") from None
    except csv.Error as exc:
        raise HeaderMalformed(str(exc)) from exc

    if not headers:
        raise HeaderMalformed("header line is blank")
    return headers


def parse(
    source: Union[str, TextIO],
    delimiter: str = DEFAULT_DELIMITER,
    reject_duplicate_headers: bool = False,
) -> Tuple[List[str], List[Row]]:
    if isinstance(source, str):
        source = io.StringIO(source, newline="")

    reader = csv.reader(source, delimiter=delimiter, strict=True)
    headers = _split_header(reader)

    if reject_duplicate_headers:
        seen = set()
        for name in headers:
            if name in seen:
                raise HeaderMalformed(f"duplicate header {name!r}")
            seen.add(name)

    logger.debug("headers: %s", headers)

    rows: List[Row] = []
    while True:
        # a quoted field may span lines; report where the record starts
        line_number = reader.line_num + 1
        try:
            fields = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            raise RecordMalformed(line_number, str(exc)) from exc

        if not fields:
            continue

        row: Row = dict(zip(headers, fields))
        rows.append(row)
        logger.debug("row %d (line %d): %s", len(rows), line_number, row)

    return headers, rows
