from __future__ import annotations

from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from .rules import DEFAULT_DELIMITER, FORBIDDEN_DELIMITERS, JSON_INDENT

Row = Dict[str, str]


class ConvertOptions(BaseModel):
    delimiter: str = Field(default=DEFAULT_DELIMITER, examples=[","])
    encoding: Optional[str] = Field(default=None, examples=[None])
    indent: int = Field(default=JSON_INDENT, ge=0)
    reject_duplicate_headers: bool = False

    @field_validator("delimiter")
    @classmethod
    def _usable_delimiter(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("delimiter must be a single character")
        if v in FORBIDDEN_DELIMITERS:
            raise ValueError(f"delimiter {v!r} clashes with quoting or line breaks")
        return v


class Stats(BaseModel):
    total_rows: int = 0
    total_columns: int = 0
    empty_cells: int = 0
    column_unique_counts: Dict[str, int] = Field(default_factory=dict)

    def summary_lines(self) -> List[str]:
        lines = [
            f"Rows: {self.total_rows}",
            f"Columns: {self.total_columns}",
            f"Empty cells: {self.empty_cells}",
            "Unique values per column:",
        ]
        for column, count in self.column_unique_counts.items():
            lines.append(f"  {column}: {count}")
        return lines


class ConversionResult(BaseModel):
    headers: List[str]
    rows: List[Row]
    document: str
    stats: Optional[Stats] = None


class ConvertResponse(BaseModel):
    rows: List[Row]
    stats: Optional[Stats] = None


class HealthResponse(BaseModel):
    ok: bool = True
