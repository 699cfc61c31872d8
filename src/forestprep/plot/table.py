"""Text table shown to the left of the forest plot.

The table is built in three steps that each return a new sequence of
rows: base formatting, blanking of numeric columns on subtitle rows,
then blanking of the weight column on summary rows. Both blanking
passes touch only the columns they own, so running them in the fixed
order below yields the same result as any other order.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..core.errors import RecordValidationError, RowIssue
from ..core.models import DisplayRow, NormalizedRecord

DEFAULT_HEADER = DisplayRow("", "Study", "Biomarker", "HR/OR [95% CI]", "Weight")

TableText = Tuple[DisplayRow, ...]


def format_effect(
    effect: Optional[float], lower: Optional[float], upper: Optional[float]
) -> Optional[str]:
    """Render ``"1.23 [0.50, 2.00]"``; ``None`` if any part is absent."""
    if effect is None or lower is None or upper is None:
        return None
    return f"{effect:.2f} [{lower:.2f}, {upper:.2f}]"


def format_weight(weight: Optional[float]) -> str:
    """Two-decimal weight, or an empty string when absent."""
    if weight is None:
        return ""
    return f"{weight:.2f}"


def base_row(record: NormalizedRecord, row_index: int = 0) -> DisplayRow:
    """Format one record before any role-based overrides.

    Raises:
        RecordValidationError: If a non-subtitle row lacks its effect
            estimate or one of its bounds.
    """
    effect_text = format_effect(record.effect, record.lower, record.upper)
    if effect_text is None:
        if not record.is_subtitle:
            missing = [
                name
                for name, value in (("effect", record.effect), ("lower", record.lower), ("upper", record.upper))
                if value is None
            ]
            raise RecordValidationError(
                [
                    RowIssue(
                        row_index=row_index,
                        field=", ".join(missing),
                        message="is missing on a data row",
                        label=record.label,
                    )
                ]
            )
        effect_text = ""
    return DisplayRow(
        category=record.subtitle or "",
        study=record.study or "",
        biomarker=record.biomarker or "",
        effect_text=effect_text,
        weight_text=format_weight(record.weight),
    )


def blank_subtitle_columns(
    rows: Sequence[DisplayRow], records: Sequence[NormalizedRecord]
) -> List[DisplayRow]:
    """Empty the effect and weight columns of subtitle rows."""
    return [
        row._replace(effect_text="", weight_text="") if record.is_subtitle else row
        for row, record in zip(rows, records)
    ]


def blank_summary_weights(
    rows: Sequence[DisplayRow], records: Sequence[NormalizedRecord]
) -> List[DisplayRow]:
    """Empty the weight column of summary rows.

    A summary weight only sizes the diamond and is not shown.
    """
    return [
        row._replace(weight_text="") if record.is_summary else row
        for row, record in zip(rows, records)
    ]


def build_table_text(
    records: Sequence[NormalizedRecord],
    header: Sequence[str] = DEFAULT_HEADER,
) -> TableText:
    """Build the header row followed by one display row per record.

    Formatting errors from every row are collected and raised together.
    """
    if len(header) != len(DisplayRow._fields):
        raise ValueError(f"header needs {len(DisplayRow._fields)} labels, got {len(header)}")
    rows: List[DisplayRow] = []
    issues: List[RowIssue] = []
    for i, record in enumerate(records):
        try:
            rows.append(base_row(record, i))
        except RecordValidationError as exc:
            issues.extend(exc.issues)
    if issues:
        raise RecordValidationError(issues)
    rows = blank_subtitle_columns(rows, records)
    rows = blank_summary_weights(rows, records)
    return (DisplayRow(*header), *rows)
