"""Typed row models, coercion helpers and error types."""

from .errors import (  # noqa: F401
    ForestPrepError,
    MissingColumnsError,
    RecordValidationError,
    RowIssue,
    Severity,
)
from .models import AxisTicks, DisplayRow, NormalizedRecord, RawRow, ScaleParameters  # noqa: F401
from .normalization import normalize_records, normalize_row  # noqa: F401
