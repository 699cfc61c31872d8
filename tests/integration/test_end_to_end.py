"""End-to-end tests: file rows to render-ready spec."""

from pathlib import Path

import pytest

from forestprep.core.errors import RecordValidationError
from forestprep.io.loader import load_rows
from forestprep.plot.assembler import build_plot_spec


class TestSheetToSpec:
    """Build a spec from a sheet laid out like the source workbooks."""

    def test_spec_properties(self, sheet_csv: Path) -> None:
        rows = load_rows(sheet_csv)
        spec = build_plot_spec(rows)

        assert spec.n_rows == len(rows)
        assert [row.study for row in spec.text[1:]][:4] == ["", "Smith 2020", "Lee 2019", "Overall"]

        subtitle_rows = [1, 5, 6]
        for i in subtitle_rows:
            assert spec.text[i].effect_text == ""
            assert spec.text[i].weight_text == ""

        summary_rows = [4, 8]
        for i in summary_rows:
            assert spec.is_summary[i] is True
            assert spec.text[i].weight_text == ""
        assert spec.is_summary[0] is True
        assert sum(spec.is_summary) == 3

        assert spec.text[2].effect_text == "2.31 [1.12, 4.75]"
        assert spec.text[2].weight_text == "18.40"
        assert spec.text[7].weight_text == ""
        assert spec.text[3].biomarker == "NGAL\nKIM-1"

        assert spec.box_sizes[0] is None
        assert all(0.15 <= s <= 0.25 for s in spec.box_sizes[1:])
        assert spec.mean[0] is None and spec.mean[1] is None

    def test_broken_rows_reported_together(self, broken_csv: Path) -> None:
        with pytest.raises(RecordValidationError) as info:
            build_plot_spec(load_rows(broken_csv))
        assert info.value.row_indices == [1, 6]
        fields = {issue.field for issue in info.value.issues}
        assert fields == {"effect", "upper"}
        assert "Smith 2020" in str(info.value)
        assert "Garcia 2021" in str(info.value)

    def test_unflagged_interior_blank_row_rejected(self, interior_blank_csv: Path) -> None:
        rows = load_rows(interior_blank_csv)
        assert len(rows) == 9
        with pytest.raises(RecordValidationError) as info:
            build_plot_spec(rows)
        assert info.value.row_indices == [2]
        assert info.value.issues[0].field == "effect, lower, upper"
