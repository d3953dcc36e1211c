"""Half-up rounding for reported counts, percentages and day offsets."""

from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round with ties going up (2.5 -> 3, 14.5 -> 15), unlike builtin round().

    Returns an int when digits is 0.
    """
    if digits == 0:
        return math.floor(value + 0.5)
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale
