"""
Unit tests for the kanji grid distribution.

Tests:
- Stage to band mapping
- Subjects paired with assignment stages
- Per-level band counts and ordering
"""

import pytest

from srs_insight.analytics.kanji_grid import (
    SrsBand,
    calculate_level_distribution,
    enrich_subjects,
    group_subjects_by_level,
    srs_band,
)
from srs_insight.core.models import ReadingType, SubjectType


class TestSrsBand:
    """Tests for srs_band."""

    @pytest.mark.parametrize(
        "stage, band",
        [
            (0, SrsBand.LOCKED),
            (1, SrsBand.APPRENTICE),
            (4, SrsBand.APPRENTICE),
            (5, SrsBand.GURU),
            (6, SrsBand.GURU),
            (7, SrsBand.MASTER),
            (8, SrsBand.ENLIGHTENED),
            (9, SrsBand.BURNED),
        ],
    )
    def test_bands(self, stage, band):
        assert srs_band(stage) is band


class TestEnrichSubjects:
    """Tests for enrich_subjects."""

    def test_stage_from_assignment(self, make_subject, make_assignment):
        subjects = [make_subject(1), make_subject(2)]
        grid = enrich_subjects(subjects, [make_assignment(1, srs_stage=7)])

        assert [(s.subject_id, s.srs_stage) for s in grid] == [(1, 7), (2, 0)]
        assert grid[0].band is SrsBand.MASTER

    def test_hidden_assignment_is_locked(self, make_subject, make_assignment):
        grid = enrich_subjects([make_subject(1)], [make_assignment(1, srs_stage=9, hidden=True)])

        assert grid[0].band is SrsBand.LOCKED

    def test_removed_subjects(self, make_subject, now):
        subjects = [make_subject(1), make_subject(2, hidden_at=now)]

        assert [s.subject_id for s in enrich_subjects(subjects, [])] == [1]
        assert len(enrich_subjects(subjects, [], include_removed=True)) == 2

    def test_ordered_by_level_then_id(self, make_subject):
        subjects = [make_subject(5, level=2), make_subject(9, level=1), make_subject(3, level=2)]

        assert [s.subject_id for s in enrich_subjects(subjects, [])] == [9, 3, 5]

    def test_primary_readings(self, make_subject):
        kanji = make_subject(
            1,
            readings=[
                {"reading": "ひ", "primary": False, "type": "kunyomi"},
                {"reading": "にち", "primary": True, "type": "onyomi"},
            ],
        )
        vocabulary = make_subject(
            2, subject_type=SubjectType.VOCABULARY, readings=[{"reading": "にほん", "primary": True}]
        )
        radical = make_subject(3, subject_type=SubjectType.RADICAL)

        grid = {s.subject_id: s for s in enrich_subjects([kanji, vocabulary, radical], [])}

        assert (grid[1].primary_reading, grid[1].reading_type) == ("にち", ReadingType.ONYOMI)
        assert (grid[2].primary_reading, grid[2].reading_type) == ("にほん", None)
        assert grid[3].primary_reading is None


class TestGroupSubjectsByLevel:
    """Tests for the per-level distribution."""

    def test_band_counts(self, make_subject, make_assignment):
        subjects = [make_subject(i, level=1) for i in range(1, 7)] + [make_subject(10, level=3)]
        assignments = [
            make_assignment(1, srs_stage=2),
            make_assignment(2, srs_stage=4),
            make_assignment(3, srs_stage=6),
            make_assignment(4, srs_stage=8),
            make_assignment(5, srs_stage=9),
            make_assignment(10, srs_stage=7),
        ]

        levels = group_subjects_by_level(enrich_subjects(subjects, assignments))

        assert [d.level for d in levels] == [1, 3]
        level_1 = levels[0]
        assert level_1.total == 6
        assert level_1.counts == {
            SrsBand.LOCKED: 1,
            SrsBand.APPRENTICE: 2,
            SrsBand.GURU: 1,
            SrsBand.MASTER: 0,
            SrsBand.ENLIGHTENED: 1,
            SrsBand.BURNED: 1,
        }
        assert levels[1].counts[SrsBand.MASTER] == 1

    def test_counts_add_up(self, make_subject, make_assignment):
        subjects = [make_subject(i, level=i % 3 + 1) for i in range(1, 20)]
        assignments = [make_assignment(i, srs_stage=i % 10) for i in range(1, 20)]

        for distribution in calculate_level_distribution(subjects, assignments):
            assert sum(distribution.counts.values()) == distribution.total

    def test_type_filter(self, make_subject):
        subjects = [
            make_subject(1),
            make_subject(2, subject_type=SubjectType.RADICAL),
            make_subject(3, subject_type=SubjectType.VOCABULARY, level=2),
        ]

        levels = calculate_level_distribution(subjects, [], [SubjectType.KANJI])

        assert [(d.level, d.total) for d in levels] == [(1, 1)]

    def test_empty(self):
        assert group_subjects_by_level([]) == []
