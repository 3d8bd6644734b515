"""Error types and non-fatal diagnostics raised while building a Model.

Fatal conditions are exceptions (the caller gets no Model).
Recoverable conditions are recorded as Diagnostic values on the Model.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PdbModelError(Exception):
    """Base exception for pdbmodel.

    Carries a stable ``code`` next to the human-readable message.
    """

    code = "pdbmodel_error"

    def __init__(self, message: str, details: Optional[object] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_result(self) -> dict:
        """JSON-ready error payload for callers that report errors as data."""
        return {"ok": False, "error": {"code": self.code, "message": self.message, "details": self.details}}


class SourceUnavailableError(PdbModelError):
    """The input file or stream could not be opened or read."""

    code = "source_unavailable"


class MalformedRecordError(PdbModelError):
    """A single line failed column extraction or numeric conversion."""

    code = "malformed_record"

    def __init__(
        self,
        message: str,
        line: str = "",
        line_number: Optional[int] = None,
        details: Optional[object] = None,
    ) -> None:
        super().__init__(message, details)
        self.line = line
        self.line_number = line_number


class DiagnosticKind(str, Enum):
    MALFORMED_RECORD = "malformed_record"
    UNRESOLVED_ANNOTATION = "unresolved_annotation"
    DUPLICATE_ATOM_NAME = "duplicate_atom_name"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal problem found while parsing or resolving."""

    kind: DiagnosticKind
    message: str
    line_number: Optional[int] = None
    details: Optional[str] = None

    def __str__(self) -> str:
        where = f"line {self.line_number}: " if self.line_number is not None else ""
        return f"[{self.kind.value}] {where}{self.message}"
