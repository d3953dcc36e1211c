"""
Unit tests for leech detection.

Tests:
- Threshold boundaries (inclusive on both bounds)
- Burned / hidden / dangling handling
- Severity score and ordering
- Readings, confusion pairs, root-cause radicals
"""

import pytest

from srs_insight.analytics.leeches import (
    LeechThresholds,
    calculate_severity,
    character_similarity,
    detect_leeches,
    find_confusion_pairs,
    find_root_cause_radicals,
)
from srs_insight.core.models import ReadingType, SubjectType


@pytest.fixture
def kanji(make_subject):
    def _make(subject_id, characters="字", **kwargs):
        return make_subject(subject_id, subject_type=SubjectType.KANJI, characters=characters, **kwargs)

    return _make


def stat_with(make_stat, subject_id, correct, incorrect, **kwargs):
    """Kanji statistic split evenly-ish across meaning and reading."""
    return make_stat(
        subject_id,
        meaning_correct=correct - correct // 2,
        reading_correct=correct // 2,
        meaning_incorrect=incorrect - incorrect // 2,
        reading_incorrect=incorrect // 2,
        **kwargs,
    )


class TestThresholdBoundary:
    """Both thresholds are inclusive."""

    def test_min_reviews_boundary(self, kanji, make_assignment, make_stat):
        """10 reviews at 70% qualifies; 9 reviews does not."""
        subjects = [kanji(1), kanji(2)]
        assignments = [make_assignment(1, srs_stage=3), make_assignment(2, srs_stage=3)]
        stats = [stat_with(make_stat, 1, 7, 3), stat_with(make_stat, 2, 6, 3)]

        leeches = detect_leeches(stats, subjects, assignments)

        assert [l.subject_id for l in leeches] == [1]
        assert leeches[0].accuracy == 70
        assert leeches[0].total_reviews == 10
        assert leeches[0].incorrect_count == 3

    def test_max_accuracy_boundary(self, kanji, make_assignment, make_stat):
        """Exactly 75% qualifies; 76% does not."""
        subjects = [kanji(1), kanji(2)]
        assignments = [make_assignment(1, srs_stage=4), make_assignment(2, srs_stage=4)]
        stats = [stat_with(make_stat, 1, 15, 5), stat_with(make_stat, 2, 19, 6)]

        leeches = detect_leeches(stats, subjects, assignments)

        assert [l.subject_id for l in leeches] == [1]
        assert leeches[0].accuracy == 75

    def test_half_percent_accuracy_rounds_up(self, kanji, make_assignment, make_stat):
        """74.5% counts as 75% and misses a 74% ceiling; 73.5% counts as 74% and qualifies."""
        thresholds = LeechThresholds(min_reviews=10, max_accuracy=74)
        subjects = [kanji(1), kanji(2)]
        assignments = [make_assignment(1, srs_stage=3), make_assignment(2, srs_stage=3)]
        stats = [stat_with(make_stat, 1, 149, 51), stat_with(make_stat, 2, 147, 53)]

        leeches = detect_leeches(stats, subjects, assignments, thresholds)

        assert [l.subject_id for l in leeches] == [2]
        assert leeches[0].accuracy == 74

    def test_custom_thresholds(self, kanji, make_assignment, make_stat):
        thresholds = LeechThresholds(min_reviews=5, max_accuracy=50)
        stats = [stat_with(make_stat, 1, 3, 3)]

        leeches = detect_leeches(stats, [kanji(1)], [make_assignment(1)], thresholds)

        assert len(leeches) == 1


class TestFiltering:
    """Tests for skipped records."""

    def test_burned_excluded_by_default(self, kanji, make_assignment, make_stat):
        stats = [stat_with(make_stat, 1, 5, 10)]
        assignments = [make_assignment(1, srs_stage=9)]

        assert detect_leeches(stats, [kanji(1)], assignments) == []
        assert len(detect_leeches(stats, [kanji(1)], assignments, LeechThresholds(include_burned=True))) == 1

    def test_hidden_statistic_skipped(self, kanji, make_assignment, make_stat):
        stats = [stat_with(make_stat, 1, 5, 10, hidden=True)]

        assert detect_leeches(stats, [kanji(1)], [make_assignment(1)]) == []

    def test_dangling_references_skipped(self, kanji, make_assignment, make_stat):
        """Statistics without subject or assignment are ignored."""
        stats = [stat_with(make_stat, 1, 5, 10), stat_with(make_stat, 2, 5, 10)]

        leeches = detect_leeches(stats, [kanji(1)], [make_assignment(2)])

        assert leeches == []

    def test_radical_reading_artifacts_ignored(self, make_subject, make_assignment, make_stat):
        """Reading counters on a radical do not add reviews or errors."""
        subject = make_subject(1, subject_type=SubjectType.RADICAL, characters="一")
        stats = [
            make_stat(
                1,
                subject_type=SubjectType.RADICAL,
                meaning_correct=6,
                meaning_incorrect=4,
                reading_correct=0,
                reading_incorrect=20,
            )
        ]
        assignments = [make_assignment(1, subject_type=SubjectType.RADICAL)]

        leeches = detect_leeches(stats, [subject], assignments)

        assert leeches[0].total_reviews == 10
        assert leeches[0].accuracy == 60
        assert leeches[0].reading_accuracy == 100


class TestSeverity:
    """Tests for the severity score."""

    def test_formula(self):
        # 0.4 * 6 + 0.3 * 10 + 0.3 * 30
        assert calculate_severity(3, 10, 70) == 14

    def test_half_rounds_up(self):
        """Exact .5 scores round up."""
        # 0.4 * 10 + 0.3 * 10 + 0.3 * 25 = 14.5
        assert calculate_severity(5, 10, 75) == 15
        # 0.3 * 15 = 4.5
        assert calculate_severity(0, 0, 85) == 5

    def test_saturates_at_100(self):
        assert calculate_severity(50, 100, 0) == 100
        assert calculate_severity(500, 1000, 0) == 100

    def test_sorted_by_severity(self, kanji, make_assignment, make_stat):
        subjects = [kanji(1), kanji(2), kanji(3)]
        assignments = [make_assignment(i) for i in (1, 2, 3)]
        stats = [
            stat_with(make_stat, 1, 8, 2),
            stat_with(make_stat, 2, 20, 40),
            stat_with(make_stat, 3, 10, 10),
        ]

        leeches = detect_leeches(stats, subjects, assignments, LeechThresholds(max_accuracy=80))

        assert [l.subject_id for l in leeches] == [2, 3, 1]
        assert leeches[0].severity >= leeches[1].severity >= leeches[2].severity


class TestLeechDetails:
    """Tests for the descriptive fields."""

    def test_kanji_readings(self, kanji, make_assignment, make_stat):
        subject = kanji(
            1,
            characters="人",
            meanings=[
                {"meaning": "Person", "primary": True},
                {"meaning": "Human", "primary": False},
                {"meaning": "Folk", "primary": False, "accepted_answer": False},
            ],
            readings=[
                {"reading": "じん", "primary": True, "type": "onyomi"},
                {"reading": "にん", "primary": False, "type": "onyomi"},
                {"reading": "ひと", "primary": False, "type": "kunyomi"},
            ],
            document_url="https://example.test/kanji/1",
        )
        leech = detect_leeches([stat_with(make_stat, 1, 5, 10)], [subject], [make_assignment(1, srs_stage=2)])[0]

        assert leech.character == "人"
        assert leech.meaning == "Person"
        assert leech.all_meanings == ["Person", "Human"]
        assert leech.readings.primary == "じん"
        assert leech.readings.primary_type is ReadingType.ONYOMI
        assert leech.readings.onyomi == ["じん", "にん"]
        assert leech.readings.kunyomi == ["ひと"]
        assert leech.current_srs_stage == 2
        assert leech.document_url == "https://example.test/kanji/1"

    def test_kana_vocabulary_reported_as_vocabulary(self, make_subject, make_assignment, make_stat):
        subject = make_subject(1, subject_type=SubjectType.KANA_VOCABULARY, characters="ああ")
        stats = [make_stat(1, subject_type=SubjectType.KANA_VOCABULARY, meaning_correct=2, meaning_incorrect=8)]
        assignments = [make_assignment(1, subject_type=SubjectType.KANA_VOCABULARY)]

        leech = detect_leeches(stats, [subject], assignments)[0]

        assert leech.subject_type is SubjectType.VOCABULARY


class TestConfusionPairs:
    """Tests for similarity-based pairs."""

    def test_similarity(self):
        assert character_similarity("人", "人") == 1
        assert character_similarity("大人", "大切") == 0.5
        assert character_similarity("大人", "大人気") == pytest.approx(2 / 3)
        assert character_similarity("日", "月") == 0

    def test_pairs_above_half(self, kanji, make_assignment, make_stat):
        subjects = [kanji(1, characters="大人"), kanji(2, characters="大人気"), kanji(3, characters="大切")]
        assignments = [make_assignment(i) for i in (1, 2, 3)]
        stats = [stat_with(make_stat, i, 5, 10) for i in (1, 2, 3)]

        pairs = find_confusion_pairs(detect_leeches(stats, subjects, assignments))

        assert len(pairs) == 1
        assert {pairs[0].first.character, pairs[0].second.character} == {"大人", "大人気"}


class TestRootCauseRadicals:
    """Tests for shared component radicals."""

    def test_radical_in_three_leeches(self, make_subject, kanji, make_assignment, make_stat):
        radical = make_subject(100, subject_type=SubjectType.RADICAL, characters="口", meaning="Mouth")
        other = make_subject(101, subject_type=SubjectType.RADICAL, characters="木", meaning="Tree")
        subjects = [
            radical,
            other,
            kanji(1, component_subject_ids=[100, 101]),
            kanji(2, component_subject_ids=[100, 101]),
            kanji(3, component_subject_ids=[100]),
        ]
        assignments = [make_assignment(i) for i in (1, 2, 3)]
        stats = [stat_with(make_stat, i, 5, 10) for i in (1, 2, 3)]

        causes = find_root_cause_radicals(detect_leeches(stats, subjects, assignments), subjects)

        assert len(causes) == 1
        assert causes[0].radical == "口"
        assert causes[0].name == "Mouth"
        assert causes[0].affected_count == 3
