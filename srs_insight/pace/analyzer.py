"""
Pace Analyzer - outlier-aware level duration statistics.

Uses the median and MAD (median absolute deviation) to spot levels that took
far longer than usual (vacations, breaks) and excludes them from the pace
average:

    threshold = median + 2 x (MAD x 1.4826)

Outlier detection needs at least 5 completed levels. Alternatively a fixed
custom day threshold can replace the statistical rule.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from loguru import logger

from srs_insight.core.models import LevelProgression
from srs_insight.pace.statistics import (
    MAD_NORMAL_CONSTANT,
    median,
    median_absolute_deviation,
    std_dev,
    trimmed_mean,
)

MIN_LEVELS_FOR_OUTLIERS = 5
OUTLIER_MAD_MULTIPLIER = 2

AveragingMethod = Literal["trimmed_mean", "median"]


class Pace(str, Enum):
    FAST = "fast"
    GOOD = "good"
    SLOW = "slow"
    VERY_SLOW = "very-slow"


class ExclusionReason(str, Enum):
    OUTLIER = "outlier"
    CUSTOM_THRESHOLD = "custom_threshold"

    @property
    def description(self) -> str:
        if self is ExclusionReason.OUTLIER:
            return "Auto-detected break (statistical outlier)"
        return "Exceeded custom day threshold"


@dataclass(frozen=True)
class PaceOptions:
    """Caller preferences for pace analysis."""

    auto_exclude_breaks: bool = True
    custom_threshold_days: int | None = None  # replaces MAD detection when set
    averaging_method: AveragingMethod = "trimmed_mean"


@dataclass
class LevelDuration:
    level: int
    days: int
    seconds: float


@dataclass
class IncludedLevel:
    level: int
    days: int
    seconds: float
    pace: Pace


@dataclass
class ExcludedLevel:
    level: int
    days: int
    reason: ExclusionReason


@dataclass
class PaceBands:
    fast: float  # below avg - 0.5σ
    good: float  # avg
    slow: float  # above avg + 0.5σ
    very_slow: float  # above avg + 1.5σ

    def classify(self, days: float) -> Pace:
        if days < self.fast:
            return Pace.FAST
        if days > self.very_slow:
            return Pace.VERY_SLOW
        if days > self.slow:
            return Pace.SLOW
        return Pace.GOOD


@dataclass
class PaceAnalysis:
    median: float
    mad: float
    normalized_mad: float
    outlier_threshold: float
    average: float  # trimmed mean of included levels
    std_dev: float  # of included levels
    included_levels: list[IncludedLevel] = field(default_factory=list)
    excluded_levels: list[ExcludedLevel] = field(default_factory=list)
    bands: PaceBands = field(default_factory=lambda: PaceBands(0.0, 0.0, 0.0, 0.0))

    @property
    def included_days(self) -> list[int]:
        return [level.days for level in self.included_levels]


def calculate_level_durations(progressions: Iterable[LevelProgression]) -> list[LevelDuration]:
    """Whole days from unlock to pass; incomplete or negative durations are dropped."""
    durations = []
    for progression in progressions:
        if progression.unlocked_at is None or progression.passed_at is None:
            continue
        elapsed = progression.passed_at - progression.unlocked_at
        seconds = elapsed.total_seconds()
        if seconds < 0:
            logger.debug(f"Discarding level {progression.level}: passed before unlocked")
            continue
        durations.append(LevelDuration(level=progression.level, days=elapsed.days, seconds=seconds))
    return durations


def analyze_durations(
    durations: list[LevelDuration],
    auto_exclude_breaks: bool = True,
    custom_threshold_days: int | None = None,
) -> PaceAnalysis:
    """Robust pace statistics over precomputed level durations."""
    if not durations:
        return PaceAnalysis(
            median=0.0,
            mad=0.0,
            normalized_mad=0.0,
            outlier_threshold=0.0,
            average=0.0,
            std_dev=0.0,
        )

    days = [d.days for d in durations]
    mid = median(days)
    mad = median_absolute_deviation(days, mid)
    normalized_mad = mad * MAD_NORMAL_CONSTANT
    outlier_threshold = mid + OUTLIER_MAD_MULTIPLIER * normalized_mad

    included: list[LevelDuration] = []
    excluded: list[ExcludedLevel] = []

    if custom_threshold_days is not None:
        for duration in durations:
            if duration.days >= custom_threshold_days:
                excluded.append(
                    ExcludedLevel(duration.level, duration.days, ExclusionReason.CUSTOM_THRESHOLD)
                )
            else:
                included.append(duration)
    else:
        detect = auto_exclude_breaks and len(durations) >= MIN_LEVELS_FOR_OUTLIERS
        for duration in durations:
            if detect and duration.days > outlier_threshold:
                excluded.append(ExcludedLevel(duration.level, duration.days, ExclusionReason.OUTLIER))
            else:
                included.append(duration)

    if not included:
        included = list(durations)
        excluded = []

    if excluded:
        logger.debug(f"Excluded levels from pace: {[e.level for e in excluded]}")

    included_days = [d.days for d in included]
    average = trimmed_mean(included_days)
    sigma = std_dev(included_days, average)

    bands = PaceBands(
        fast=average - 0.5 * sigma,
        good=average,
        slow=average + 0.5 * sigma,
        very_slow=average + 1.5 * sigma,
    )

    return PaceAnalysis(
        median=mid,
        mad=mad,
        normalized_mad=normalized_mad,
        outlier_threshold=outlier_threshold,
        average=average,
        std_dev=sigma,
        included_levels=[
            IncludedLevel(d.level, d.days, d.seconds, bands.classify(d.days)) for d in included
        ],
        excluded_levels=excluded,
        bands=bands,
    )


def analyze_level_pace(
    progressions: Iterable[LevelProgression],
    options: PaceOptions | None = None,
) -> PaceAnalysis:
    """
    Analyze historical level durations.

    Args:
        progressions: Level progression records
        options: Exclusion preferences (default: auto-exclude, no custom threshold)

    Returns:
        PaceAnalysis with included/excluded levels and pace bands
    """
    options = options or PaceOptions()
    return analyze_durations(
        calculate_level_durations(progressions),
        auto_exclude_breaks=options.auto_exclude_breaks,
        custom_threshold_days=options.custom_threshold_days,
    )
