"""
Lesson-Budget Level Forecaster.

Given a lessons-per-day budget, estimates which level the learner reaches by
spending the budget on not-yet-started lessons, level by level.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from srs_insight.core.catalog import assignments_by_subject
from srs_insight.core.models import MAX_LEVEL, Assignment, Subject, SubjectType
from srs_insight.core.rounding import round_half_up


@dataclass
class LevelLessonCounts:
    radicals: int = 0
    kanji: int = 0
    vocabulary: int = 0

    def required(self, include_vocabulary: bool) -> int:
        total = self.radicals + self.kanji
        if include_vocabulary:
            total += self.vocabulary
        return total


@dataclass
class LevelProgressionForecast:
    starting_level: int
    projected_level: int
    lessons_completed: int
    progress_in_final_level: int  # percentage (0-100)
    levels_gained: int
    completed_curriculum: bool


def count_unstarted_lessons(
    subjects: Iterable[Subject],
    assignments: Iterable[Assignment],
) -> dict[int, LevelLessonCounts]:
    """Tally lessons not yet started, per level and subject type."""
    assignment_map = assignments_by_subject(assignments)
    by_level: dict[int, LevelLessonCounts] = {}

    for subject in subjects:
        if subject.is_removed:
            continue
        assignment = assignment_map.get(subject.id)
        if assignment is not None and assignment.is_started:
            continue

        counts = by_level.setdefault(subject.level, LevelLessonCounts())
        category = subject.subject_type.category
        if category is SubjectType.RADICAL:
            counts.radicals += 1
        elif category is SubjectType.KANJI:
            counts.kanji += 1
        else:
            counts.vocabulary += 1

    return by_level


def calculate_level_progression_forecast(
    subjects: Iterable[Subject],
    assignments: Iterable[Assignment],
    current_level: int,
    lessons_per_day: int,
    forecast_days: int,
    include_vocabulary: bool = True,
) -> LevelProgressionForecast:
    """
    Project the level reached after spending lessons_per_day x forecast_days lessons.

    Levels are consumed in order from the current level; a level the budget
    cannot cover fully ends the walk with a partial percentage.
    """
    lessons_by_level = count_unstarted_lessons(subjects, assignments)

    budget = max(0, lessons_per_day) * max(0, forecast_days)
    remaining = budget
    projected_level = current_level
    progress = 0

    for level in range(current_level, MAX_LEVEL + 1):
        counts = lessons_by_level.get(level)
        if counts is None:
            continue

        required = counts.required(include_vocabulary)
        if required == 0:
            continue

        projected_level = level
        if remaining >= required:
            remaining -= required
            progress = 100
        else:
            progress = round_half_up(remaining / required * 100)
            remaining = 0
            break

        if remaining == 0:
            break

    return LevelProgressionForecast(
        starting_level=current_level,
        projected_level=projected_level,
        lessons_completed=budget - remaining,
        progress_in_final_level=progress,
        levels_gained=projected_level - current_level,
        completed_curriculum=projected_level == MAX_LEVEL and progress == 100,
    )
