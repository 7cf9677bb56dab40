from __future__ import annotations

from typing import Dict, List, Sequence, Set

from .models import Row, Stats


def aggregate(headers: Sequence[str], rows: List[Row]) -> Stats:
    """
    Descriptive counts over a parsed table.

    Only cells present in a row are inspected, so keys missing from short
    rows are neither empty cells nor distinct values. A value counts as
    empty when it is blank after stripping; the raw value is what goes
    into the distinct set.
    """
    distinct: Dict[str, Set[str]] = {name: set() for name in headers}
    empty_cells = 0

    for row in rows:
        for column, value in row.items():
            if not value.strip():
                empty_cells += 1
            distinct[column].add(value)

    return Stats(
        total_rows=len(rows),
        total_columns=len(headers),
        empty_cells=empty_cells,
        column_unique_counts={name: len(values) for name, values in distinct.items()},
    )
