from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INPUT_NOT_FOUND = "input_not_found"
    INPUT_UNREADABLE = "input_unreadable"
    HEADER_MALFORMED = "header_malformed"
    RECORD_MALFORMED = "record_malformed"
    SERIALIZATION_FAILED = "serialization_failed"
    OUTPUT_WRITE_FAILED = "output_write_failed"


class ConvertError(Exception):
    """
    Base for every failure the conversion core reports.

    Carries only what is needed to diagnose the failure: the kind, the
    underlying detail, and the path or line number involved. Message
    wording belongs to whoever presents the error.
    """

    kind: ErrorKind

    def __init__(
        self,
        detail: str = "",
        *,
        path: Optional[str] = None,
        line_number: Optional[int] = None,
    ):
        self.detail = detail
        self.path = path
        self.line_number = line_number
        super().__init__(self._describe())

    def _describe(self) -> str:
        parts = [self.kind.value]
        if self.path is not None:
            parts.append(f"path={self.path}")
        if self.line_number is not None:
            parts.append(f"line={self.line_number}")
        if self.detail:
            parts.append(self.detail)
        return ": ".join(parts)


class InputNotFound(ConvertError):
    kind = ErrorKind.INPUT_NOT_FOUND


class InputUnreadable(ConvertError):
    kind = ErrorKind.INPUT_UNREADABLE


class ReaderError(ConvertError):
    """Raised by the tabular reader."""


class HeaderMalformed(ReaderError):
    kind = ErrorKind.HEADER_MALFORMED


class RecordMalformed(ReaderError):
    kind = ErrorKind.RECORD_MALFORMED

    def __init__(self, line_number: int, detail: str = ""):
        super().__init__(detail, line_number=line_number)


class SerializationFailed(ConvertError):
    kind = ErrorKind.SERIALIZATION_FAILED


class OutputWriteFailed(ConvertError):
    kind = ErrorKind.OUTPUT_WRITE_FAILED

    def __init__(self, path: str, detail: str = ""):
        super().__init__(detail, path=path)


ParseError = HeaderMalformed
RecordError = RecordMalformed
