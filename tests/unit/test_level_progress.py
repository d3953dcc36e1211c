"""
Unit tests for per-level progress.
"""

from datetime import timedelta

import pytest

from srs_insight.analytics.level_progress import (
    calculate_level_progress,
    format_duration_compact,
    format_duration_verbose,
)
from srs_insight.core.models import SubjectType


@pytest.fixture
def level_subjects(make_subject, now):
    subjects = [make_subject(i, subject_type=SubjectType.RADICAL, level=5) for i in range(1, 5)]
    subjects += [make_subject(i, subject_type=SubjectType.KANJI, level=5) for i in range(10, 20)]
    subjects += [make_subject(i, subject_type=SubjectType.KANA_VOCABULARY, level=5) for i in range(30, 32)]
    subjects.append(make_subject(40, subject_type=SubjectType.KANJI, level=5, hidden_at=now))
    subjects.append(make_subject(50, subject_type=SubjectType.KANJI, level=6))
    return subjects


class TestLevelProgress:
    """Tests for calculate_level_progress."""

    def test_counts_by_type(self, level_subjects, make_assignment, now):
        assignments = [make_assignment(i, srs_stage=5, started_at=now) for i in range(10, 15)]
        assignments += [make_assignment(15, srs_stage=2, started_at=now)]
        assignments += [make_assignment(16, srs_stage=6, started_at=now, hidden=True)]
        assignments += [make_assignment(1, srs_stage=1, subject_type=SubjectType.RADICAL, started_at=now)]

        result = calculate_level_progress(assignments, level_subjects, level=5, current_level=5, now=now)

        kanji = result.by_type[SubjectType.KANJI]
        assert kanji.total == 10
        assert kanji.started == 6
        assert kanji.guru == 5
        assert kanji.guru_percentage == 50
        assert result.by_type[SubjectType.RADICAL].started_percentage == 25
        assert result.by_type[SubjectType.VOCABULARY].total == 2
        assert result.kanji_needed_to_level_up == 4
        assert result.is_current_level

    def test_half_percentages_round_up(self, make_subject, make_assignment, now):
        """One of eight kanji started is 12.5%, reported as 13%."""
        subjects = [make_subject(i, level=7) for i in range(1, 9)]
        assignments = [make_assignment(1, srs_stage=5, started_at=now)]

        result = calculate_level_progress(assignments, subjects, level=7, current_level=7, now=now)

        assert result.by_type[SubjectType.KANJI].started_percentage == 13
        assert result.by_type[SubjectType.KANJI].guru_percentage == 13

    def test_passed_level_durations(self, level_subjects, now):
        unlocked = now - timedelta(days=9, hours=4)
        result = calculate_level_progress(
            [], level_subjects, level=5, current_level=8, unlocked_at=unlocked, passed_at=now, now=now
        )

        assert result.days_on_level == 10
        assert result.duration_compact == "9d 4h"
        assert result.duration_verbose == "9 days 4 hours"
        assert not result.is_current_level

    def test_current_level_has_no_verbose_duration(self, level_subjects, now):
        result = calculate_level_progress(
            [], level_subjects, level=5, current_level=5, unlocked_at=now - timedelta(hours=18), now=now
        )

        assert result.duration_compact == "18h"
        assert result.duration_verbose is None
        assert result.days_on_level == 1

    def test_no_unlock_time(self, level_subjects, now):
        result = calculate_level_progress([], level_subjects, level=5, current_level=5, now=now)

        assert result.days_on_level == 0
        assert result.duration_compact is None


class TestDurationFormatting:
    """Tests for duration strings."""

    def test_compact(self):
        assert format_duration_compact(timedelta(days=10)) == "10d"
        assert format_duration_compact(timedelta(days=2, hours=1, minutes=59)) == "2d 1h"

    def test_verbose_singular(self):
        assert format_duration_verbose(timedelta(days=1, hours=1)) == "1 day 1 hour"
        assert format_duration_verbose(timedelta(hours=1)) == "1 hour"
