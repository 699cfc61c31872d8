"""Box sizes for study markers, scaled from study weights.

Weights arrive on a 0-100 scale and can span several orders of
magnitude. They are compressed with ``log(weight + offset)`` and then
min-max normalized into a narrow band of box sizes so that large
studies stand out without dwarfing small ones.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from ..utils.logging import get_logger

logger = get_logger(__name__)

MISSING_WEIGHT_FLOOR = 0.1
LOG_OFFSET = 0.1
BOX_SIZE_RANGE: Tuple[float, float] = (0.15, 0.25)


def fill_missing_weights(
    weights: Sequence[Optional[float]], floor: float = MISSING_WEIGHT_FLOOR
) -> List[float]:
    """Replace absent weights with ``floor``."""
    return [floor if w is None else float(w) for w in weights]


def log_transform(values: Sequence[float], offset: float = LOG_OFFSET) -> List[float]:
    """Apply ``log(value + offset)`` element-wise."""
    out: List[float] = []
    for i, value in enumerate(values):
        shifted = value + offset
        if shifted <= 0:
            raise ValueError(
                f"weight {value} at row {i + 1} is too small to log-scale (offset {offset})"
            )
        out.append(math.log(shifted))
    return out


def min_max_normalize(values: Sequence[float]) -> List[float]:
    """Scale values onto [0, 1]; a flat sequence maps to all zeros."""
    if not values:
        return []
    low, high = min(values), max(values)
    if high == low:
        return [0.0] * len(values)
    span = high - low
    return [(v - low) / span for v in values]


def rescale(values: Sequence[float], bounds: Tuple[float, float] = BOX_SIZE_RANGE) -> List[float]:
    """Map unit-interval values linearly onto ``bounds``."""
    low, high = bounds
    return [min(high, max(low, low + v * (high - low))) for v in values]


def scale_box_sizes(
    weights: Sequence[Optional[float]],
    floor: float = MISSING_WEIGHT_FLOOR,
    offset: float = LOG_OFFSET,
    bounds: Tuple[float, float] = BOX_SIZE_RANGE,
) -> List[Optional[float]]:
    """Convert per-row weights into box sizes.

    Args:
        weights: One weight per record in row order; ``None`` when absent.
        floor: Value substituted for absent weights before the log step.
        offset: Added to every weight inside the logarithm.
        bounds: Closed output range for the box sizes.

    Returns:
        A list one longer than ``weights``. The first slot belongs to the
        table header and is always ``None``; every other entry lies
        within ``bounds``. When all (filled) weights are equal every row
        gets the lower bound.
    """
    if bounds[0] > bounds[1]:
        raise ValueError(f"invalid box size range {bounds}")
    filled = fill_missing_weights(weights, floor)
    normalized = min_max_normalize(log_transform(filled, offset))
    sizes = rescale(normalized, bounds)
    logger.debug(f"Scaled {len(sizes)} box sizes", extra={"rows": len(sizes)})
    return [None, *sizes]
