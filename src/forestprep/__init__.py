"""Forest plot data preparation.

Turns already-parsed effect-size rows (study estimates, confidence
intervals, weights and role flags) into a render-ready forest plot
specification: the text table, per-row estimates, box sizes scaled
from weights, log-axis ticks and presentation options.
"""

__version__ = "0.1.0"

from .core.errors import ForestPrepError, MissingColumnsError, RecordValidationError  # noqa: F401
from .core.models import NormalizedRecord, RawRow  # noqa: F401
from .plot.assembler import ForestPlotSpec, PlotSpecAssembler, build_plot_spec  # noqa: F401
