"""
Lookup maps over the flat entity collections.

Every calculation builds its own maps per call; nothing is cached across calls.
"""

from __future__ import annotations

from collections.abc import Iterable

from srs_insight.core.models import Assignment, LevelProgression, Subject


def subjects_by_id(subjects: Iterable[Subject]) -> dict[int, Subject]:
    return {subject.id: subject for subject in subjects}


def assignments_by_subject(assignments: Iterable[Assignment]) -> dict[int, Assignment]:
    """Map subject id to assignment. Later duplicates win."""
    return {assignment.subject_id: assignment for assignment in assignments}


def preferred_progression(
    progressions: Iterable[LevelProgression],
    level: int,
) -> LevelProgression | None:
    """
    Pick the representative record for a level that may have been reset.

    A record with a passed timestamp beats one without; otherwise the most
    recently created record wins.
    """
    candidates = [p for p in progressions if p.level == level]
    if not candidates:
        return None
    return max(candidates, key=lambda p: (p.passed_at is not None, p.created_at))
