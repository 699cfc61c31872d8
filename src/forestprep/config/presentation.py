"""Presentation parameters handed through to the plot renderer.

None of these values is computed by the pipeline. Defaults reproduce
the layout used for the early single-biomarker hazard/odds ratio plots
and can be overridden per plot, either in code or from a YAML file via
:func:`load_plot_config`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional, Sequence, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.models import AxisTicks
from ..utils.logging import get_logger

logger = get_logger(__name__)

Alignment = Literal["left", "right"]


class TextScales(BaseModel):
    """Relative font sizes (1.0 is the renderer's base size)."""

    model_config = ConfigDict(frozen=True)

    label: float = Field(1.0, gt=0)
    ticks: float = Field(1.0, gt=0)
    xlab: float = Field(1.0, gt=0)
    title: float = Field(1.4, gt=0)


class PresentationConfig(BaseModel):
    """Layout options for one forest plot.

    Attributes:
        clip: Axis range ``(min, max)``; intervals beyond it are clipped.
        zero: Position of the no-effect reference line (1 for ratios).
        xlog: Draw the effect axis on a log scale.
        graph_pos: Table column before which the graph is drawn (1-based).
        align: Horizontal alignment of each of the five table columns.
        col_gap_mm: Gap between table columns, in millimetres.
        graph_width_cm: Width of the graph area, in centimetres.
        line_width: Line width of the confidence interval whiskers.
        line_height_cm: Height of one table row, in centimetres.
        title: Plot title.
        axis_label: Label under the effect axis.
        text: Relative font sizes.
    """

    model_config = ConfigDict(frozen=True)

    clip: Tuple[float, float] = (0.02, 1000.0)
    zero: float = 1.0
    xlog: bool = True
    graph_pos: int = Field(4, ge=1)
    align: Tuple[Alignment, Alignment, Alignment, Alignment, Alignment] = (
        "left",
        "left",
        "left",
        "right",
        "right",
    )
    col_gap_mm: float = Field(6.0, ge=0)
    graph_width_cm: float = Field(15.0, gt=0)
    line_width: float = Field(3.0, gt=0)
    line_height_cm: float = Field(0.7, gt=0)
    title: str = "Early Single Biomarkers"
    axis_label: str = "log2"
    text: TextScales = Field(default_factory=TextScales)

    @field_validator("align", mode="before")
    @classmethod
    def _expand_align(cls, v):
        """Accept the short forms ``"l"`` and ``"r"``."""
        if isinstance(v, str):
            v = list(v)
        short = {"l": "left", "r": "right"}
        return tuple(short.get(a, a) for a in v)

    @model_validator(mode="after")
    def _check_axis(self) -> "PresentationConfig":
        low, high = self.clip
        if low >= high:
            raise ValueError(f"clip range must be increasing, got {self.clip}")
        if self.xlog and (low <= 0 or self.zero <= 0):
            raise ValueError("clip range and zero line must be positive on a log axis")
        return self


class PlotConfig(BaseModel):
    """Everything a plot build needs besides the rows themselves."""

    model_config = ConfigDict(frozen=True)

    header: Tuple[str, str, str, str, str] = ("", "Study", "Biomarker", "HR/OR [95% CI]", "Weight")
    ticks: Optional[AxisTicks] = None
    presentation: PresentationConfig = Field(default_factory=PresentationConfig)


def _ticks_from_mapping(data) -> AxisTicks:
    from ..plot.ticks import build_axis_ticks

    if isinstance(data, dict):
        return build_axis_ticks(data.get("positions"), data.get("labels"))
    if isinstance(data, Sequence):
        return build_axis_ticks(data)
    raise ValueError("'ticks' must be a list of positions or a mapping with 'positions'")


def load_plot_config(config_path: Optional[Path]) -> PlotConfig:
    """Load a :class:`PlotConfig` from YAML; defaults when no file is given.

    The file may contain ``presentation``, ``ticks`` and ``header``
    sections, all optional::

        presentation:
          title: Late Combined Biomarkers
          clip: [0.05, 500]
        ticks:
          positions: [0.05, 1, 10, 100, 500]
        header: ["", "Study", "Marker", "OR [95% CI]", "Weight"]
    """
    if config_path is None:
        return PlotConfig()
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a mapping at the top level")
    values = {}
    if "presentation" in data:
        values["presentation"] = PresentationConfig.model_validate(data["presentation"] or {})
    if data.get("ticks") is not None:
        values["ticks"] = _ticks_from_mapping(data["ticks"])
    if data.get("header") is not None:
        values["header"] = tuple(data["header"])
    logger.info(f"Loaded plot configuration from {config_path}", extra={"path": str(config_path)})
    return PlotConfig(**values)
