"""Unit tests for forest plot spec assembly."""

import pytest

from forestprep.config.presentation import PlotConfig, PresentationConfig
from forestprep.core.errors import RecordValidationError
from forestprep.core.models import NormalizedRecord, RawRow
from forestprep.plot.assembler import ForestPlotSpec, PlotSpecAssembler, build_plot_spec
from forestprep.plot.table import DEFAULT_HEADER
from forestprep.plot.ticks import build_axis_ticks


@pytest.fixture
def records():
    """Subtitle, two studies and a pooled summary."""
    return [
        NormalizedRecord(subtitle="Graft-related", is_subtitle=True),
        NormalizedRecord(study="Smith 2020", biomarker="IL-6", effect=2.0, lower=1.2, upper=3.4, weight=60.0),
        NormalizedRecord(study="Lee 2019", biomarker="IL-6", effect=1.5, lower=0.8, upper=2.9, weight=40.0),
        NormalizedRecord(study="Overall", effect=1.8, lower=1.3, upper=2.6, weight=100.0, is_summary=True),
    ]


class TestPlotSpecAssembler:
    """Tests for PlotSpecAssembler."""

    def test_lengths_line_up(self, records) -> None:
        spec = PlotSpecAssembler().assemble(records)
        assert spec.n_rows == len(records)
        for seq in (spec.text, spec.mean, spec.lower, spec.upper, spec.box_sizes, spec.is_summary):
            assert len(seq) == len(records) + 1

    def test_header_slot(self, records) -> None:
        spec = PlotSpecAssembler().assemble(records)
        assert spec.text[0] == DEFAULT_HEADER
        assert (spec.mean[0], spec.lower[0], spec.upper[0], spec.box_sizes[0]) == (None, None, None, None)
        assert spec.is_summary[0] is True

    def test_emphasis_vector(self, records) -> None:
        spec = PlotSpecAssembler().assemble(records)
        assert spec.is_summary == (True, False, False, False, True)

    def test_header_emphasised_without_summary_rows(self) -> None:
        spec = PlotSpecAssembler().assemble([NormalizedRecord(study="A", effect=1, lower=0.5, upper=2)])
        assert spec.is_summary == (True, False)

    def test_estimates_pass_through(self, records) -> None:
        spec = PlotSpecAssembler().assemble(records)
        assert spec.mean == (None, None, 2.0, 1.5, 1.8)
        assert spec.upper[2] == 3.4

    def test_box_sizes_in_range(self, records) -> None:
        spec = PlotSpecAssembler().assemble(records)
        assert all(0.15 <= s <= 0.25 for s in spec.box_sizes[1:])
        assert spec.box_sizes[1] == pytest.approx(0.15)
        assert spec.box_sizes[4] == pytest.approx(0.25)

    def test_table_rules(self, records) -> None:
        spec = PlotSpecAssembler().assemble(records)
        assert spec.text[1].effect_text == "" and spec.text[1].weight_text == ""
        assert spec.text[2].weight_text == "60.00"
        assert spec.text[4].effect_text == "1.80 [1.30, 2.60]"
        assert spec.text[4].weight_text == ""

    def test_custom_ticks_and_presentation(self, records) -> None:
        ticks = build_axis_ticks([0.5, 1, 2, 4])
        presentation = PresentationConfig(title="Custom", clip=(0.5, 4.0))
        spec = PlotSpecAssembler(ticks=ticks, presentation=presentation).assemble(records)
        assert spec.ticks.labels == ("0.5", "1", "2", "4")
        assert spec.presentation.title == "Custom"
        assert spec.scale.ticks == ticks

    def test_ticks_outside_clip_logged(self, records, caplog) -> None:
        presentation = PresentationConfig(clip=(0.5, 10.0))
        with caplog.at_level("WARNING"):
            spec = PlotSpecAssembler(presentation=presentation).assemble(records)
        assert len(spec.ticks.positions) == 7
        assert "outside the clip range" in caplog.text

    def test_malformed_row_rejected(self) -> None:
        with pytest.raises(RecordValidationError):
            PlotSpecAssembler().assemble([NormalizedRecord(study="A", effect=1.0)])

    def test_spec_is_immutable(self, records) -> None:
        spec = PlotSpecAssembler().assemble(records)
        with pytest.raises(Exception):
            spec.title = "x"  # type: ignore[attr-defined]
        with pytest.raises(Exception):
            spec.mean = ()  # type: ignore[misc]


class TestForestPlotSpecExports:
    """Tests for DataFrame and renderer exports."""

    def test_to_frame(self, records) -> None:
        df = PlotSpecAssembler().assemble(records).to_frame()
        assert len(df) == len(records) + 1
        assert list(df["type"]) == ["header", "row", "row", "row", "summary"]
        assert df.loc[2, "study"] == "Smith 2020"
        assert df.loc[2, "effect_text"] == "2.00 [1.20, 3.40]"

    def test_to_renderer_kwargs(self, records) -> None:
        kwargs = PlotSpecAssembler().assemble(records).to_renderer_kwargs()
        assert kwargs["align"] == ["l", "l", "l", "r", "r"]
        assert kwargs["clip"] == [0.02, 1000.0]
        assert kwargs["zero"] == 1.0
        assert kwargs["xticks_labels"][-1] == "1000"
        assert kwargs["labeltext"][0] == list(DEFAULT_HEADER)
        assert kwargs["is_summary"][0] is True

    def test_json_round_trip(self, records) -> None:
        spec = PlotSpecAssembler().assemble(records)
        restored = ForestPlotSpec.model_validate_json(spec.model_dump_json())
        assert restored == spec

    def test_length_mismatch_rejected(self, records) -> None:
        spec = PlotSpecAssembler().assemble(records)
        data = spec.model_dump()
        data["mean"] = data["mean"][:-1]
        with pytest.raises(ValueError):
            ForestPlotSpec.model_validate(data)


class TestBuildPlotSpec:
    """Tests for the end-to-end helper."""

    def test_from_mappings(self) -> None:
        rows = [
            {"Subtitle": "Early", "IsSubtitle": 1},
            {"Study": "Smith 2020", "Biomarker": "NGAL\r\nKIM-1", "ES": "2.5", "LowerCI": 1.1, "UpperCI": 5.0, "Weight": 30},
            {"Study": "Overall", "ES": 2.0, "LowerCI": 1.2, "UpperCI": 3.3, "Weight": 100, "IsSummary": 1},
        ]
        spec = build_plot_spec(rows)
        assert spec.text[2].biomarker == "NGAL\nKIM-1"
        assert spec.text[2].effect_text == "2.50 [1.10, 5.00]"
        assert spec.is_summary == (True, False, False, True)

    def test_collects_all_errors(self) -> None:
        rows = [
            RawRow(study="A", effect=1, lower=0.5, upper=2),
            RawRow(study="B", lower=0.5, upper=2),
            RawRow(study="C", effect=1, lower=0.5, upper=2),
            RawRow(study="D", effect=1, lower=0.5),
        ]
        with pytest.raises(RecordValidationError) as info:
            build_plot_spec(rows)
        assert info.value.row_indices == [1, 3]
        assert "Row 2 (B)" in str(info.value)
        assert "Row 4 (D)" in str(info.value)

    def test_strict_mode(self) -> None:
        rows = [RawRow(study="A", effect=1, lower=0.5, upper=2, is_summary_flag="y")]
        assert build_plot_spec(rows).is_summary == (True, False)
        with pytest.raises(RecordValidationError):
            build_plot_spec(rows, strict=True)

    def test_config_applied(self) -> None:
        config = PlotConfig(header=("", "Trial", "Marker", "OR", "W"), presentation=PresentationConfig(title="T"))
        spec = build_plot_spec([RawRow(study="A", effect=1, lower=0.5, upper=2)], config)
        assert spec.text[0].study == "Trial"
        assert spec.presentation.title == "T"
