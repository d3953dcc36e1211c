"""Robust summary statistics used by the pace analyzer."""

from __future__ import annotations

import math
from collections.abc import Sequence

# Scales MAD to a standard-deviation equivalent for normal data
MAD_NORMAL_CONSTANT = 1.4826
TRIM_FRACTION = 0.1


def median(values: Sequence[float]) -> float:
    """Middle value; mean of the two middle values for even counts. 0 when empty."""
    if not values:
        return 0.0
    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2
    return float(ordered[middle])


def median_absolute_deviation(values: Sequence[float], center: float | None = None) -> float:
    if not values:
        return 0.0
    if center is None:
        center = median(values)
    return median([abs(v - center) for v in values])


def trimmed_mean(values: Sequence[float], fraction: float = TRIM_FRACTION) -> float:
    """
    Mean after dropping the top and bottom `fraction` of sorted values.

    Fewer than 3 samples use the plain mean.
    """
    if not values:
        return 0.0
    if len(values) < 3:
        return sum(values) / len(values)

    ordered = sorted(values)
    trim = math.floor(len(ordered) * fraction)
    trimmed = ordered[trim : len(ordered) - trim]
    if not trimmed:
        return sum(ordered) / len(ordered)
    return sum(trimmed) / len(trimmed)


def std_dev(values: Sequence[float], mean: float) -> float:
    """Population standard deviation around a given mean."""
    if not values:
        return 0.0
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))
