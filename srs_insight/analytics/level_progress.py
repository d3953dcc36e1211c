"""
Per-level progress.

Level-up rule: 90% of the level's kanji at guru or above. Started and guru
counts only include visible assignments; removed subjects do not count toward
any total.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from srs_insight.core.catalog import assignments_by_subject
from srs_insight.core.models import STAGE_GURU_1, Assignment, Subject, SubjectType
from srs_insight.core.rounding import round_half_up

KANJI_PASS_FRACTION = 0.9


@dataclass
class SubjectProgress:
    started: int = 0
    guru: int = 0
    total: int = 0

    @property
    def started_percentage(self) -> int:
        return round_half_up(self.started / self.total * 100) if self.total > 0 else 0

    @property
    def guru_percentage(self) -> int:
        return round_half_up(self.guru / self.total * 100) if self.total > 0 else 0


@dataclass
class LevelProgress:
    level: int
    is_current_level: bool
    by_type: dict[SubjectType, SubjectProgress] = field(default_factory=dict)
    kanji_needed_to_level_up: int = 0
    days_on_level: int = 0
    duration_compact: str | None = None
    duration_verbose: str | None = None  # passed levels only
    passed_at: datetime | None = None


def _hours(elapsed: timedelta) -> int:
    return math.floor(elapsed.total_seconds() / 3600)


def format_duration_compact(elapsed: timedelta) -> str:
    """'9d 4h', '10d' or '18h'."""
    hours = _hours(elapsed)
    days, remaining = divmod(hours, 24)
    if days > 0 and remaining > 0:
        return f"{days}d {remaining}h"
    if days > 0:
        return f"{days}d"
    return f"{hours}h"


def format_duration_verbose(elapsed: timedelta) -> str:
    """'9 days 4 hours', '1 day' or '18 hours'."""
    hours = _hours(elapsed)
    days, remaining = divmod(hours, 24)
    day_text = "day" if days == 1 else "days"
    hour_text = "hour" if remaining == 1 else "hours"
    if days > 0 and remaining > 0:
        return f"{days} {day_text} {remaining} {hour_text}"
    if days > 0:
        return f"{days} {day_text}"
    return f"{hours} {'hour' if hours == 1 else 'hours'}"


def calculate_level_progress(
    assignments: Iterable[Assignment],
    subjects: Iterable[Subject],
    level: int,
    current_level: int,
    unlocked_at: datetime | None = None,
    passed_at: datetime | None = None,
    now: datetime | None = None,
) -> LevelProgress:
    """
    Progress on one level, by subject type.

    Args:
        assignments: Learner assignments
        subjects: Subject catalog
        level: Level to report on
        current_level: Learner's current level
        unlocked_at: When the level was unlocked (enables duration fields)
        passed_at: When the level was passed, if it was
        now: Reference time for a level still in progress
    """
    if now is None:
        now = datetime.now(UTC)

    assignment_map = assignments_by_subject(assignments)
    by_type = {t: SubjectProgress() for t in (SubjectType.RADICAL, SubjectType.KANJI, SubjectType.VOCABULARY)}

    for subject in subjects:
        if subject.level != level or subject.is_removed:
            continue

        progress = by_type[subject.subject_type.category]
        progress.total += 1

        assignment = assignment_map.get(subject.id)
        if assignment is None or assignment.hidden:
            continue
        if assignment.is_started:
            progress.started += 1
        if assignment.srs_stage >= STAGE_GURU_1:
            progress.guru += 1

    kanji = by_type[SubjectType.KANJI]
    kanji_needed = max(0, math.ceil(kanji.total * KANJI_PASS_FRACTION) - kanji.guru)

    result = LevelProgress(
        level=level,
        is_current_level=level == current_level,
        by_type=by_type,
        kanji_needed_to_level_up=kanji_needed,
        passed_at=passed_at,
    )

    if unlocked_at is not None:
        end = passed_at if passed_at is not None else now
        elapsed = abs(end - unlocked_at)
        result.days_on_level = math.ceil(elapsed.total_seconds() / 86400)
        result.duration_compact = format_duration_compact(elapsed)
        if passed_at is not None:
            result.duration_verbose = format_duration_verbose(elapsed)

    return result
