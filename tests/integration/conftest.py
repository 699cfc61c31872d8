"""Shared fixtures for file-based integration tests."""

from pathlib import Path

import pandas as pd
import pytest

COLUMNS = ["Subtitle", "Study", "Biomarker", "ES", "LowerCI", "UpperCI", "Weight", "IsSubtitle", "IsSummary"]


@pytest.fixture
def sheet_frame() -> pd.DataFrame:
    """A small early-biomarker sheet: two sections, each with a pooled row."""
    rows = [
        ["Graft-related", None, None, None, None, None, None, 1, 0],
        [None, "Smith 2020", "IL-6", 2.31, 1.12, 4.75, 18.4, 0, 0],
        [None, "Lee 2019", "NGAL\nKIM-1", 1.45, 0.81, 2.6, 7.25, 0, 0],
        [None, "Overall", None, 1.92, 1.21, 3.05, 100, 0, 1],
        [None, None, None, None, None, None, None, 1, 0],
        ["Mortality", None, None, None, None, None, None, 1, 0],
        [None, "Garcia 2021", "Troponin", 3.8, 1.9, 7.6, None, 0, 0],
        [None, "Overall", None, 3.8, 1.9, 7.6, 100, 0, 1],
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


@pytest.fixture
def sheet_csv(tmp_path: Path, sheet_frame: pd.DataFrame) -> Path:
    path = tmp_path / "early_single.csv"
    sheet_frame.to_csv(path, index=False)
    return path


@pytest.fixture
def broken_csv(tmp_path: Path, sheet_frame: pd.DataFrame) -> Path:
    """Same sheet with two data rows missing their estimates."""
    df = sheet_frame.copy()
    df.loc[1, "ES"] = None
    df.loc[6, "UpperCI"] = None
    path = tmp_path / "broken.csv"
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def interior_blank_csv(tmp_path: Path, sheet_frame: pd.DataFrame) -> Path:
    """Sheet with an unflagged empty row between two studies."""
    blank = pd.DataFrame([[None] * len(COLUMNS)], columns=COLUMNS)
    df = pd.concat([sheet_frame.iloc[:2], blank, sheet_frame.iloc[2:]], ignore_index=True)
    path = tmp_path / "interior_blank.csv"
    df.to_csv(path, index=False)
    return path
