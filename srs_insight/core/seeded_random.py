"""
Seeded pseudo-random source for reproducible forecasts.

Mulberry32 generator over 32-bit state. The forecast seed combines the learner
id, the UTC calendar date and the lessons-per-day value, so repeated forecasts
on the same day at the same pace are identical, while a new day or a new pace
produces a new stream.
"""

from __future__ import annotations

from datetime import date

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


class SeededRandom:
    """Deterministic stream of floats in [0, 1)."""

    def __init__(self, seed: int):
        self._state = abs(int(seed)) & _MASK32

    def next(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296


def hash_seed(text: str) -> int:
    """32-bit string hash (h * 31 + code unit), returned as a non-negative int."""
    h = 0
    encoded = text.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = (h << 5) - h + code_unit
        h = ((h + 0x80000000) & _MASK32) - 0x80000000
    return abs(h)


def create_forecast_seed(user_id: str, day: date, lessons_per_day: int) -> int:
    """Seed from learner id + YYYY-MM-DD + lessons per day."""
    return hash_seed(f"{user_id}-{day.isoformat()}-{lessons_per_day}")
