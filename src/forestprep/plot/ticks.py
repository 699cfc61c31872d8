"""Tick positions and labels for the logarithmic effect axis."""

from __future__ import annotations

from typing import Optional, Sequence

from ..core.models import AxisTicks

# Ratio measures from 1/50 up to 1000, doubling twice per step above 1.
DEFAULT_TICK_POSITIONS = (0.02, 1.0, 4.0, 16.0, 64.0, 256.0, 1000.0)
DEFAULT_TICK_LABELS = ("0.02", "1", "4", "16", "64", "256", "1000")


def format_tick_label(position: float, max_decimals: int = 6) -> str:
    """Plain decimal label without trailing zeros.

    Positions too small to show within ``max_decimals`` fall back to
    general format (``1e-07``).
    """
    if float(position).is_integer():
        return str(int(position))
    text = f"{position:.{max_decimals}f}".rstrip("0").rstrip(".")
    if text in ("", "0", "-0"):
        # Too small for max_decimals; a log-axis tick must not read as zero.
        return f"{position:g}"
    return text


def build_axis_ticks(
    positions: Optional[Sequence[float]] = None,
    labels: Optional[Sequence[str]] = None,
) -> AxisTicks:
    """Return the axis tick set.

    With no arguments the default ratio axis is returned. When only
    ``positions`` is given, labels are derived with
    :func:`format_tick_label`.
    """
    if positions is None:
        if labels is not None:
            raise ValueError("tick labels given without positions")
        return AxisTicks(positions=DEFAULT_TICK_POSITIONS, labels=DEFAULT_TICK_LABELS)
    positions = tuple(float(p) for p in positions)
    if labels is None:
        labels = tuple(format_tick_label(p) for p in positions)
    return AxisTicks(positions=positions, labels=tuple(str(label) for label in labels))
