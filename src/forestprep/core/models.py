"""Core domain models for forest plot rows, table text and axis scales."""

from typing import Any, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RawRow(BaseModel):
    """One already-parsed input row, values exactly as the reader produced them.

    Field aliases match the header row of the source spreadsheet
    (``Subtitle, Study, Biomarker, ES, LowerCI, UpperCI, Weight,
    IsSubtitle, IsSummary``); either spelling may be used.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    subtitle: Any = Field(None, alias="Subtitle")
    study: Any = Field(None, alias="Study")
    biomarker: Any = Field(None, alias="Biomarker")
    effect: Any = Field(None, alias="ES")
    lower: Any = Field(None, alias="LowerCI")
    upper: Any = Field(None, alias="UpperCI")
    weight: Any = Field(None, alias="Weight")
    is_subtitle_flag: Any = Field(None, alias="IsSubtitle")
    is_summary_flag: Any = Field(None, alias="IsSummary")


class NormalizedRecord(BaseModel):
    """A typed row with numbers coerced and role flags resolved."""

    model_config = ConfigDict(frozen=True)

    subtitle: Optional[str] = None
    study: Optional[str] = None
    biomarker: Optional[str] = None
    effect: Optional[float] = None
    lower: Optional[float] = None
    upper: Optional[float] = None
    weight: Optional[float] = None
    is_subtitle: bool = False
    is_summary: bool = False

    @property
    def has_estimate(self) -> bool:
        """True when effect and both bounds are present."""
        return None not in (self.effect, self.lower, self.upper)

    @property
    def label(self) -> Optional[str]:
        """Short identification used in validation messages."""
        parts = [p for p in (self.study, self.biomarker, self.subtitle) if p]
        if not parts:
            return None
        return " / ".join(p.replace("\n", " ") for p in parts[:2])


class DisplayRow(NamedTuple):
    """One row of the text table shown beside the plot."""

    category: str
    study: str
    biomarker: str
    effect_text: str
    weight_text: str


class AxisTicks(BaseModel):
    """Tick positions on the log axis with their display labels."""

    model_config = ConfigDict(frozen=True)

    positions: Tuple[float, ...]
    labels: Tuple[str, ...]

    @model_validator(mode="after")
    def _check_ticks(self) -> "AxisTicks":
        if not self.positions:
            raise ValueError("at least one tick position is required")
        if len(self.positions) != len(self.labels):
            raise ValueError(
                f"{len(self.positions)} tick positions but {len(self.labels)} labels"
            )
        if any(p <= 0 for p in self.positions):
            raise ValueError("tick positions on a log axis must be positive")
        if any(b <= a for a, b in zip(self.positions, self.positions[1:])):
            raise ValueError("tick positions must be strictly increasing")
        return self

    def pairs(self) -> Tuple[Tuple[float, str], ...]:
        return tuple(zip(self.positions, self.labels))


class ScaleParameters(BaseModel):
    """Per-row box sizes (header slot first, always ``None``) and axis ticks."""

    model_config = ConfigDict(frozen=True)

    box_sizes: Tuple[Optional[float], ...]
    ticks: AxisTicks
