"""Data-to-geometry steps of a forest plot build.

Table text, box sizes, axis ticks and the assembled render-ready
specification. The renderer that paints the figure is not part of
this package.
"""

from .assembler import ForestPlotSpec, PlotSpecAssembler, build_plot_spec  # noqa: F401
from .table import DEFAULT_HEADER, build_table_text  # noqa: F401
from .ticks import build_axis_ticks, format_tick_label  # noqa: F401
from .weights import scale_box_sizes  # noqa: F401
