"""
Unit tests for knowledge stability.

Tests:
- Solid vs fragile split on passed items
- Burned, hidden, unpassed and dangling items skipped
- At-risk ordering
"""

from datetime import timedelta

import pytest

from srs_insight.analytics.stability import calculate_knowledge_stability
from srs_insight.core.models import SubjectType


@pytest.fixture
def subjects(make_subject):
    return [make_subject(i, subject_type=SubjectType.KANJI, level=i) for i in range(1, 10)]


class TestKnowledgeStability:
    """Tests for calculate_knowledge_stability."""

    def test_solid_and_fragile(self, subjects, make_assignment, now):
        passed = now - timedelta(days=30)
        assignments = [
            make_assignment(1, srs_stage=5, passed_at=passed),
            make_assignment(2, srs_stage=8, passed_at=passed),
            make_assignment(3, srs_stage=7, passed_at=passed),
            make_assignment(4, srs_stage=2, passed_at=passed),
        ]
        result = calculate_knowledge_stability(assignments, subjects)

        assert result.total_passed == 4
        assert result.solid_items == 3
        assert result.fragile_items == 1
        assert result.stability_ratio == pytest.approx(0.75)
        assert result.by_type[SubjectType.KANJI].total == 4

    def test_skipped_items(self, subjects, make_assignment, now):
        passed = now - timedelta(days=30)
        assignments = [
            make_assignment(1, srs_stage=9, passed_at=passed, burned_at=now),
            make_assignment(2, srs_stage=3, passed_at=passed, hidden=True),
            make_assignment(3, srs_stage=4),  # never passed
            make_assignment(99, srs_stage=2, passed_at=passed),  # no subject
        ]
        result = calculate_knowledge_stability(assignments, subjects)

        assert result.total_passed == 0
        assert result.stability_ratio == 1
        assert result.at_risk_items == []

    def test_locked_passed_item_not_counted(self, subjects, make_assignment, now):
        """A passed item back at stage 0 is neither solid nor fragile, and stays out of the type totals."""
        passed = now - timedelta(days=30)
        assignments = [
            make_assignment(1, srs_stage=0, passed_at=passed),
            make_assignment(2, srs_stage=6, passed_at=passed),
        ]
        result = calculate_knowledge_stability(assignments, subjects)

        assert result.total_passed == 1
        assert result.by_type[SubjectType.KANJI].total == 1
        assert sum(breakdown.total for breakdown in result.by_type.values()) == result.total_passed

    def test_at_risk_order(self, subjects, make_assignment, now):
        """Lowest stage first, then longest since passing."""
        assignments = [
            make_assignment(1, srs_stage=3, passed_at=now - timedelta(days=5)),
            make_assignment(2, srs_stage=1, passed_at=now - timedelta(days=1)),
            make_assignment(3, srs_stage=3, passed_at=now - timedelta(days=50)),
            make_assignment(4, srs_stage=6, passed_at=now - timedelta(days=50)),
        ]
        result = calculate_knowledge_stability(assignments, subjects)

        assert [item.subject_id for item in result.at_risk_items] == [2, 3, 1]
        assert result.at_risk_items[0].current_srs_stage == 1

    def test_kana_vocabulary_counted_as_vocabulary(self, make_subject, make_assignment, now):
        subjects = [make_subject(1, subject_type=SubjectType.KANA_VOCABULARY)]
        assignments = [make_assignment(1, srs_stage=6, subject_type=SubjectType.KANA_VOCABULARY, passed_at=now)]

        result = calculate_knowledge_stability(assignments, subjects)

        assert result.by_type[SubjectType.VOCABULARY].solid == 1
