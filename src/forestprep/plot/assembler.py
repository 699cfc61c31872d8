"""Assembly of the render-ready forest plot specification.

:class:`PlotSpecAssembler` joins the table text, the per-row
estimates, the box sizes and the axis ticks into one immutable
:class:`ForestPlotSpec`. Every per-row sequence in the spec has the
table header in its first slot, so all of them line up with
``ForestPlotSpec.text``. Nothing is drawn here; the spec is handed to
whichever renderer paints the figure.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict, model_validator

from ..config.presentation import PlotConfig, PresentationConfig
from ..core.models import AxisTicks, DisplayRow, NormalizedRecord, RawRow, ScaleParameters
from ..core.normalization import RowLike, normalize_records
from ..io.validation import validate_records
from ..utils.logging import get_logger
from .table import DEFAULT_HEADER, build_table_text
from .ticks import build_axis_ticks
from .weights import scale_box_sizes

logger = get_logger(__name__)


class ForestPlotSpec(BaseModel):
    """Everything the renderer needs for one forest plot."""

    model_config = ConfigDict(frozen=True)

    text: Tuple[DisplayRow, ...]
    mean: Tuple[Optional[float], ...]
    lower: Tuple[Optional[float], ...]
    upper: Tuple[Optional[float], ...]
    box_sizes: Tuple[Optional[float], ...]
    is_summary: Tuple[bool, ...]
    ticks: AxisTicks
    presentation: PresentationConfig

    @model_validator(mode="after")
    def _check_lengths(self) -> "ForestPlotSpec":
        n = len(self.text)
        for name in ("mean", "lower", "upper", "box_sizes", "is_summary"):
            if len(getattr(self, name)) != n:
                raise ValueError(f"{name} has {len(getattr(self, name))} entries for {n} table rows")
        return self

    @property
    def n_rows(self) -> int:
        """Number of data rows, header excluded."""
        return len(self.text) - 1

    @property
    def scale(self) -> ScaleParameters:
        return ScaleParameters(box_sizes=self.box_sizes, ticks=self.ticks)

    def to_frame(self) -> pd.DataFrame:
        """One DataFrame row per table row, header included."""
        rows = []
        for i, display in enumerate(self.text):
            rows.append({
                **display._asdict(),
                "mean": self.mean[i],
                "lower": self.lower[i],
                "upper": self.upper[i],
                "box_size": self.box_sizes[i],
                "is_summary": self.is_summary[i],
                "type": "header" if i == 0 else ("summary" if self.is_summary[i] else "row"),
            })
        return pd.DataFrame(rows)

    def to_renderer_kwargs(self) -> Dict[str, Any]:
        """Flat keyword mapping named after the forest plot renderer's arguments."""
        p = self.presentation
        return {
            "labeltext": [list(row) for row in self.text],
            "mean": list(self.mean),
            "lower": list(self.lower),
            "upper": list(self.upper),
            "boxsize": list(self.box_sizes),
            "is_summary": list(self.is_summary),
            "xticks": list(self.ticks.positions),
            "xticks_labels": list(self.ticks.labels),
            "clip": list(p.clip),
            "zero": p.zero,
            "xlog": p.xlog,
            "graph_pos": p.graph_pos,
            "align": [a[0] for a in p.align],
            "colgap_mm": p.col_gap_mm,
            "graphwidth_cm": p.graph_width_cm,
            "lwd_ci": p.line_width,
            "lineheight_cm": p.line_height_cm,
            "title": p.title,
            "xlab": p.axis_label,
            "txt_gp": p.text.model_dump(),
        }


class PlotSpecAssembler:
    """Combine normalized records into a :class:`ForestPlotSpec`.

    The header row is always emphasised as if it were a summary row;
    that is a presentation convention, independent of the data.
    """

    def __init__(
        self,
        header: Sequence[str] = DEFAULT_HEADER,
        ticks: Optional[AxisTicks] = None,
        presentation: Optional[PresentationConfig] = None,
    ) -> None:
        self.header = tuple(header)
        self.ticks = ticks or build_axis_ticks()
        self.presentation = presentation or PresentationConfig()

    @classmethod
    def from_config(cls, config: PlotConfig) -> "PlotSpecAssembler":
        return cls(header=config.header, ticks=config.ticks, presentation=config.presentation)

    def scale_parameters(self, records: Sequence[NormalizedRecord]) -> ScaleParameters:
        return ScaleParameters(
            box_sizes=tuple(scale_box_sizes([r.weight for r in records])),
            ticks=self.ticks,
        )

    def _warn_ticks_outside_clip(self) -> None:
        low, high = self.presentation.clip
        outside = [p for p in self.ticks.positions if not low <= p <= high]
        if outside:
            logger.warning(f"Ticks {outside} fall outside the clip range {self.presentation.clip}")

    def assemble(self, records: Sequence[NormalizedRecord]) -> ForestPlotSpec:
        """Build the spec; raises RecordValidationError for undrawable rows."""
        text = build_table_text(records, self.header)
        scale = self.scale_parameters(records)
        self._warn_ticks_outside_clip()
        spec = ForestPlotSpec(
            text=text,
            mean=(None, *(r.effect for r in records)),
            lower=(None, *(r.lower for r in records)),
            upper=(None, *(r.upper for r in records)),
            box_sizes=scale.box_sizes,
            is_summary=(True, *(r.is_summary for r in records)),
            ticks=scale.ticks,
            presentation=self.presentation,
        )
        logger.info(f"Assembled forest plot spec with {spec.n_rows} rows", extra={"rows": spec.n_rows})
        return spec


def build_plot_spec(
    rows: Sequence[RowLike],
    config: Optional[PlotConfig] = None,
    strict: bool = False,
) -> ForestPlotSpec:
    """Run the whole pipeline: normalize, validate, assemble.

    Args:
        rows: Raw rows (models or mappings keyed by field name or header alias).
        config: Header, ticks and presentation options; defaults if omitted.
        strict: Treat validation warnings as errors.

    Raises:
        RecordValidationError: Listing every row that failed validation.
    """
    config = config or PlotConfig()
    raw: List[RawRow] = [r if isinstance(r, RawRow) else RawRow.model_validate(dict(r)) for r in rows]
    records = normalize_records(raw)
    validator = validate_records(records, raw, strict=strict, xlog=config.presentation.xlog)
    validator.raise_for_errors()
    return PlotSpecAssembler.from_config(config).assemble(records)
