"""Coercion of raw spreadsheet values into typed records.

Readers hand over heterogeneous cells: numbers, numeric strings, blanks
read as ``NaN`` and so on. The helpers here turn those into the strict
shape of :class:`~forestprep.core.models.NormalizedRecord` without
raising, since blank numeric cells are expected on subtitle rows.
Whether a row is usable is decided later by the validator.
"""

from __future__ import annotations

import math
import numbers
import re
from typing import Any, List, Mapping, Optional, Sequence, Union

import pandas as pd

from .models import NormalizedRecord, RawRow
from ..utils.logging import get_logger

logger = get_logger(__name__)

_LINE_BREAKS = re.compile(r"[\r\n]+")

RowLike = Union[RawRow, Mapping[str, Any]]


def is_missing(value: Any) -> bool:
    """Return True for ``None`` and scalar missing markers (NaN, NA, NaT)."""
    if value is None:
        return True
    return bool(pd.api.types.is_scalar(value) and pd.isna(value))


def coerce_flag(value: Any) -> bool:
    """Resolve a role flag: true only when the raw value equals 1."""
    if is_missing(value):
        return False
    if isinstance(value, str):
        return value.strip() == "1"
    if isinstance(value, numbers.Number):
        return value == 1
    return False


def coerce_number(value: Any) -> Optional[float]:
    """Parse a real number, returning ``None`` when absent or unparseable."""
    if is_missing(value):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def coerce_text(value: Any) -> Optional[str]:
    """Convert a cell to text; integral floats lose their ``.0``."""
    if is_missing(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_line_breaks(text: Optional[str]) -> Optional[str]:
    """Collapse every run of CR/LF characters into a single newline."""
    if text is None:
        return None
    return _LINE_BREAKS.sub("\n", text)


def normalize_row(row: RowLike) -> NormalizedRecord:
    """Build a :class:`NormalizedRecord` from one raw row."""
    if not isinstance(row, RawRow):
        row = RawRow.model_validate(dict(row))
    return NormalizedRecord(
        subtitle=coerce_text(row.subtitle),
        study=coerce_text(row.study),
        biomarker=normalize_line_breaks(coerce_text(row.biomarker)),
        effect=coerce_number(row.effect),
        lower=coerce_number(row.lower),
        upper=coerce_number(row.upper),
        weight=coerce_number(row.weight),
        is_subtitle=coerce_flag(row.is_subtitle_flag),
        is_summary=coerce_flag(row.is_summary_flag),
    )


def normalize_records(rows: Sequence[RowLike]) -> List[NormalizedRecord]:
    """Normalize every row, preserving input order exactly."""
    records = [normalize_row(row) for row in rows]
    logger.debug(
        f"Normalized {len(records)} rows "
        f"({sum(r.is_subtitle for r in records)} subtitle, "
        f"{sum(r.is_summary for r in records)} summary)",
        extra={"rows": len(records)},
    )
    return records
