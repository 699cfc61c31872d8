"""Reading forest plot rows from spreadsheets and CSV files.

The expected header row is::

    Subtitle  Study  Biomarker  ES  LowerCI  UpperCI  Weight  IsSubtitle  IsSummary

Cells are passed through untouched; coercion happens in
:mod:`forestprep.core.normalization`. Blank separator rows must carry
``IsSubtitle = 1`` to pass validation, as they do in the source
workbooks; only the trailing run of fully empty rows is dropped.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import pandas as pd

from ..config.settings import settings
from ..core.errors import MissingColumnsError
from ..core.models import RawRow
from ..utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_COLUMNS = [
    "Subtitle",
    "Study",
    "Biomarker",
    "ES",
    "LowerCI",
    "UpperCI",
    "Weight",
    "IsSubtitle",
    "IsSummary",
]

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


def read_table(path: Path, sheet: Optional[str] = None) -> pd.DataFrame:
    """Load the raw table from an Excel workbook or a CSV file."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        sheet = sheet or settings.default_sheet
        logger.info(f"Reading sheet {sheet!r} from {path}", extra={"path": str(path), "sheet": sheet})
        return pd.read_excel(path, sheet_name=sheet)
    if suffix == ".csv":
        logger.info(f"Reading {path}", extra={"path": str(path)})
        return pd.read_csv(path)
    raise ValueError(f"Unsupported input format {suffix!r}; expected .xlsx, .xlsm or .csv")


def rows_from_frame(df: pd.DataFrame) -> List[RawRow]:
    """Convert a DataFrame with the expected header into raw rows."""
    columns = [str(c).strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in columns]
    if missing:
        raise MissingColumnsError(missing)
    df = df.copy()
    df.columns = columns
    df = df[REQUIRED_COLUMNS]
    # Only the trailing empty rows go; interior blanks are left for validation.
    filled = df.notna().any(axis=1).to_numpy().nonzero()[0]
    df = df.iloc[: filled[-1] + 1] if len(filled) else df.iloc[0:0]
    rows = [RawRow.model_validate(record) for record in df.to_dict(orient="records")]
    logger.info(f"Loaded {len(rows)} rows", extra={"rows": len(rows)})
    return rows


def load_rows(path: Path, sheet: Optional[str] = None) -> List[RawRow]:
    """Read ``path`` and return its rows in file order."""
    return rows_from_frame(read_table(path, sheet))
