"""
Level-Completion Projector.

Turns the pace analysis into three level-60 dates:
- Fast track: fixed aggressive pace (8 days/level)
- Expected: trimmed mean or median of included levels
- Conservative: 1.5x expected pace, at least 18 days/level
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from srs_insight.core.models import MAX_LEVEL, LevelProgression
from srs_insight.core.rounding import round_half_up
from srs_insight.pace.analyzer import (
    ExcludedLevel,
    PaceAnalysis,
    PaceOptions,
    analyze_durations,
    calculate_level_durations,
)
from srs_insight.pace.statistics import median

FAST_TRACK_DAYS_PER_LEVEL = 8
CONSERVATIVE_MULTIPLIER = 1.5
CONSERVATIVE_MIN_DAYS_PER_LEVEL = 18

# Used when there is no completed level yet
DEFAULT_EXPECTED_DAYS_PER_LEVEL = 12

MILESTONE_LEVELS = (30, 40, 50, 60)


@dataclass
class LevelExtreme:
    level: int
    days: float


@dataclass
class ExcludedLevelInfo:
    level: int
    days: int
    reason: str


@dataclass
class LevelCompletionProjection:
    expected: datetime
    fast_track: datetime
    conservative: datetime
    expected_all_levels: datetime  # no levels excluded
    days_per_level: float  # pace behind `expected`
    average_days_per_level: float
    median_days_per_level: float
    all_levels_days_per_level: float
    outlier_threshold: float
    fastest_level: LevelExtreme
    slowest_level: LevelExtreme
    excluded_levels: list[ExcludedLevelInfo] = field(default_factory=list)
    analysis: PaceAnalysis | None = None
    is_complete: bool = False


@dataclass
class LevelMilestone:
    level: int
    date: datetime
    status: str  # "completed" | "upcoming"


def _add_days(now: datetime, days_per_level: float, levels: int) -> datetime:
    return now + timedelta(days=round_half_up(days_per_level * levels))


def project_level_completion(
    current_level: int,
    progressions: Iterable[LevelProgression],
    options: PaceOptions | None = None,
    now: datetime | None = None,
) -> LevelCompletionProjection:
    """
    Project the date of reaching the final level from historical pace.

    Args:
        current_level: Learner's current level
        progressions: Level progression records
        options: Outlier exclusion and averaging preferences
        now: Projection anchor (default: current UTC time)

    Returns:
        LevelCompletionProjection with the three scenario dates
    """
    options = options or PaceOptions()
    if now is None:
        now = datetime.now(UTC)

    if current_level >= MAX_LEVEL:
        return LevelCompletionProjection(
            expected=now,
            fast_track=now,
            conservative=now,
            expected_all_levels=now,
            days_per_level=0.0,
            average_days_per_level=0.0,
            median_days_per_level=0.0,
            all_levels_days_per_level=0.0,
            outlier_threshold=0.0,
            fastest_level=LevelExtreme(MAX_LEVEL, 0),
            slowest_level=LevelExtreme(MAX_LEVEL, 0),
            is_complete=True,
        )

    levels_remaining = MAX_LEVEL - current_level
    durations = calculate_level_durations(progressions)
    analysis = analyze_durations(
        durations,
        auto_exclude_breaks=options.auto_exclude_breaks,
        custom_threshold_days=options.custom_threshold_days,
    )

    if not analysis.included_levels:
        expected_pace = DEFAULT_EXPECTED_DAYS_PER_LEVEL
        return LevelCompletionProjection(
            expected=_add_days(now, expected_pace, levels_remaining),
            fast_track=_add_days(now, FAST_TRACK_DAYS_PER_LEVEL, levels_remaining),
            conservative=_add_days(now, CONSERVATIVE_MIN_DAYS_PER_LEVEL, levels_remaining),
            expected_all_levels=_add_days(now, expected_pace, levels_remaining),
            days_per_level=expected_pace,
            average_days_per_level=expected_pace,
            median_days_per_level=expected_pace,
            all_levels_days_per_level=expected_pace,
            outlier_threshold=0.0,
            fastest_level=LevelExtreme(current_level, FAST_TRACK_DAYS_PER_LEVEL),
            slowest_level=LevelExtreme(current_level, CONSERVATIVE_MIN_DAYS_PER_LEVEL),
            analysis=analysis,
        )

    included_median = median(analysis.included_days)
    if options.averaging_method == "median":
        expected_pace = included_median
    else:
        expected_pace = analysis.average

    all_levels = analyze_durations(durations, auto_exclude_breaks=False)
    all_levels_pace = (
        median(all_levels.included_days) if options.averaging_method == "median" else all_levels.average
    )

    # The learner may already be faster than the fast-track constant
    fast_pace = min(FAST_TRACK_DAYS_PER_LEVEL, expected_pace)
    conservative_pace = max(expected_pace * CONSERVATIVE_MULTIPLIER, CONSERVATIVE_MIN_DAYS_PER_LEVEL)

    ordered = sorted(analysis.included_levels, key=lambda level: level.days)

    return LevelCompletionProjection(
        expected=_add_days(now, expected_pace, levels_remaining),
        fast_track=_add_days(now, fast_pace, levels_remaining),
        conservative=_add_days(now, conservative_pace, levels_remaining),
        expected_all_levels=_add_days(now, all_levels_pace, levels_remaining),
        days_per_level=round_half_up(expected_pace, 1),
        average_days_per_level=round_half_up(analysis.average, 1),
        median_days_per_level=analysis.median,
        all_levels_days_per_level=round_half_up(all_levels_pace, 1),
        outlier_threshold=round_half_up(analysis.outlier_threshold, 1),
        fastest_level=LevelExtreme(ordered[0].level, ordered[0].days),
        slowest_level=LevelExtreme(ordered[-1].level, ordered[-1].days),
        excluded_levels=[_describe(e) for e in analysis.excluded_levels],
        analysis=analysis,
    )


def _describe(excluded: ExcludedLevel) -> ExcludedLevelInfo:
    return ExcludedLevelInfo(level=excluded.level, days=excluded.days, reason=excluded.reason.description)


def project_level_milestones(
    current_level: int,
    days_per_level: float,
    now: datetime | None = None,
) -> list[LevelMilestone]:
    """Dates for reaching levels 30, 40, 50 and 60 at a given pace."""
    if now is None:
        now = datetime.now(UTC)

    milestones = []
    for level in MILESTONE_LEVELS:
        if level <= current_level:
            milestones.append(LevelMilestone(level=level, date=now, status="completed"))
        else:
            milestones.append(
                LevelMilestone(
                    level=level,
                    date=_add_days(now, days_per_level, level - current_level),
                    status="upcoming",
                )
            )
    return milestones
