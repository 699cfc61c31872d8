"""Row-level validation of forest plot input.

:class:`RecordValidator` walks the whole record set and accumulates
every problem it finds instead of stopping at the first one, so a
spreadsheet can be corrected in a single pass. Errors make a row
impossible to draw; warnings flag suspicious values that would still
render. In strict mode warnings are recorded as errors.
"""

from __future__ import annotations

import numbers
from typing import Any, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from ..core.errors import RecordValidationError, RowIssue, Severity
from ..core.models import NormalizedRecord, RawRow
from ..core.normalization import is_missing
from ..utils.logging import get_logger

console = Console()
logger = get_logger(__name__)

MAX_WEIGHT = 100.0


def _is_valid_flag(value: Any) -> bool:
    if is_missing(value):
        return True
    if isinstance(value, str):
        return value.strip() in ("", "0", "1")
    if isinstance(value, numbers.Number):
        return value in (0, 1)
    return False


class RecordValidator:
    """Validate normalized records and collect row issues."""

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict
        self.issues: List[RowIssue] = []

    @property
    def errors(self) -> List[RowIssue]:
        return [i for i in self.issues if i.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[RowIssue]:
        return [i for i in self.issues if i.severity is Severity.WARNING]

    def _add(
        self,
        row_index: int,
        record: Optional[NormalizedRecord],
        field: str,
        message: str,
        severity: Severity,
    ) -> None:
        if self.strict:
            severity = Severity.ERROR
        issue = RowIssue(
            row_index=row_index,
            field=field,
            message=message,
            label=record.label if record is not None else None,
            severity=severity,
        )
        self.issues.append(issue)
        logger.debug(str(issue), extra={"row": issue.row_number, "field": field})

    def validate_estimates(self, records: Sequence[NormalizedRecord]) -> bool:
        """Data rows need an effect estimate and both interval bounds."""
        before = len(self.errors)
        for i, record in enumerate(records):
            if record.is_subtitle:
                continue
            missing = [
                name
                for name, value in (("effect", record.effect), ("lower", record.lower), ("upper", record.upper))
                if value is None
            ]
            if missing:
                self._add(i, record, ", ".join(missing), "is missing on a data row", Severity.ERROR)
        return len(self.errors) == before

    def validate_intervals(self, records: Sequence[NormalizedRecord]) -> bool:
        """Bounds should be ordered and enclose the estimate."""
        clean = True
        for i, record in enumerate(records):
            if record.is_subtitle or not record.has_estimate:
                continue
            if record.lower > record.upper:
                clean = False
                self._add(
                    i, record, "lower", f"{record.lower:g} exceeds upper {record.upper:g}", Severity.WARNING
                )
            elif not record.lower <= record.effect <= record.upper:
                clean = False
                self._add(
                    i,
                    record,
                    "effect",
                    f"{record.effect:g} lies outside [{record.lower:g}, {record.upper:g}]",
                    Severity.WARNING,
                )
        return clean

    def validate_log_scale(self, records: Sequence[NormalizedRecord]) -> bool:
        """Values must be positive to be placed on a log axis."""
        clean = True
        for i, record in enumerate(records):
            if record.is_subtitle:
                continue
            for name in ("effect", "lower", "upper"):
                value = getattr(record, name)
                if value is not None and value <= 0:
                    clean = False
                    self._add(
                        i, record, name, f"{value:g} cannot be shown on a log axis", Severity.WARNING
                    )
        return clean

    def validate_weights(self, records: Sequence[NormalizedRecord]) -> bool:
        """Weights are percentages; negative ones cannot be log-scaled."""
        before = len(self.errors)
        for i, record in enumerate(records):
            if record.weight is None:
                continue
            if record.weight < 0:
                self._add(i, record, "weight", f"{record.weight:g} is negative", Severity.ERROR)
            elif record.weight > MAX_WEIGHT:
                self._add(
                    i, record, "weight", f"{record.weight:g} exceeds {MAX_WEIGHT:g}", Severity.WARNING
                )
        return len(self.errors) == before

    def validate_flags(
        self,
        rows: Sequence[RawRow],
        records: Optional[Sequence[NormalizedRecord]] = None,
    ) -> bool:
        """Role flags other than 0, 1 or blank are read as "not flagged"."""
        clean = True
        for i, row in enumerate(rows):
            record = records[i] if records is not None else None
            for name, value in (("IsSubtitle", row.is_subtitle_flag), ("IsSummary", row.is_summary_flag)):
                if not _is_valid_flag(value):
                    clean = False
                    self._add(
                        i, record, name, f"value {value!r} is not 0 or 1; treated as 0", Severity.WARNING
                    )
        return clean

    def raise_for_errors(self) -> None:
        """Raise :class:`RecordValidationError` carrying every error found."""
        if self.errors:
            raise RecordValidationError(self.errors)

    def print_report(self, target: Optional[Console] = None) -> bool:
        """Print a summary table and return True if no errors were found."""
        out = target or console
        if not self.issues:
            out.print("[bold green]✓ All rows valid[/bold green]")
            return True
        table = Table(title="Validation Report")
        table.add_column("Row", style="cyan", justify="right")
        table.add_column("Study", style="white")
        table.add_column("Field", style="magenta")
        table.add_column("Problem")
        table.add_column("Severity")
        for issue in sorted(self.issues, key=lambda i: i.row_index):
            colour = "red" if issue.severity is Severity.ERROR else "yellow"
            table.add_row(
                str(issue.row_number),
                issue.label or "",
                issue.field,
                issue.message,
                f"[{colour}]{issue.severity.value}[/{colour}]",
            )
        out.print(table)
        out.print(f"\n[bold]Summary:[/bold]")
        out.print(f"  Errors: {len(self.errors)}")
        out.print(f"  Warnings: {len(self.warnings)}")
        return not self.errors


def validate_records(
    records: Sequence[NormalizedRecord],
    rows: Optional[Sequence[RawRow]] = None,
    strict: bool = False,
    xlog: bool = True,
) -> RecordValidator:
    """Run every check over ``records`` and return the filled validator.

    Args:
        records: Normalized records in row order.
        rows: The raw rows the records came from; enables role flag checks.
        strict: Record warnings as errors.
        xlog: Whether the plot uses a log axis (enables positivity checks).
    """
    validator = RecordValidator(strict=strict)
    validator.validate_estimates(records)
    validator.validate_intervals(records)
    if xlog:
        validator.validate_log_scale(records)
    validator.validate_weights(records)
    if rows is not None:
        validator.validate_flags(rows, records)
    if validator.issues:
        logger.warning(
            f"Validation found {len(validator.errors)} errors and {len(validator.warnings)} warnings",
            extra={"rows": len(records)},
        )
    return validator
