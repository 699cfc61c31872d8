"""Exceptions and issue records raised while preparing plot data."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    """How a row issue affects the plot build."""

    ERROR = "error"
    WARNING = "warning"


class RowIssue(BaseModel):
    """A single problem found in one input row.

    ``row_index`` is the zero-based position in the record sequence; the
    human-readable rendering counts rows from one, matching the data rows
    of the source sheet below its header.
    """

    model_config = ConfigDict(frozen=True)

    row_index: int
    field: str
    message: str
    label: Optional[str] = None
    severity: Severity = Severity.ERROR

    @property
    def row_number(self) -> int:
        return self.row_index + 1

    def __str__(self) -> str:
        where = f"Row {self.row_number}"
        if self.label:
            where += f" ({self.label})"
        return f"{where}: {self.field} {self.message}"


class ForestPrepError(Exception):
    """Base class for errors raised by forestprep."""


class RecordValidationError(ForestPrepError, ValueError):
    """Raised when one or more rows cannot be placed on the plot.

    All issues found in a pass are carried together so the source data
    can be corrected in one go.
    """

    def __init__(self, issues: Iterable[RowIssue]) -> None:
        self.issues: List[RowIssue] = list(issues)
        count = len(self.issues)
        lines = [f"{count} invalid row{'s' if count != 1 else ''}:"]
        lines.extend(f"  {issue}" for issue in self.issues)
        super().__init__("\n".join(lines))

    @property
    def row_indices(self) -> List[int]:
        return sorted({issue.row_index for issue in self.issues})


class MissingColumnsError(ForestPrepError, KeyError):
    """Raised when an input table lacks required header columns."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing required columns: {', '.join(self.missing)}")

    def __str__(self) -> str:
        return self.args[0]
