"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared entity factories for all tests.
"""
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from srs_insight.core.models import (  # noqa: E402
    Assignment,
    LevelProgression,
    ReviewStatistic,
    Subject,
    SubjectType,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """Fixed reference time for time-dependent calculations."""
    return NOW


@pytest.fixture
def make_subject():
    """Factory for subjects."""

    def _make(
        subject_id: int,
        subject_type: SubjectType = SubjectType.KANJI,
        level: int = 1,
        characters: str | None = "字",
        meaning: str = "Character",
        **kwargs,
    ) -> Subject:
        return Subject(
            id=subject_id,
            subject_type=subject_type,
            level=level,
            characters=characters,
            meanings=kwargs.pop("meanings", [{"meaning": meaning, "primary": True}]),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_assignment():
    """Factory for assignments."""

    def _make(
        subject_id: int,
        srs_stage: int = 1,
        subject_type: SubjectType = SubjectType.KANJI,
        **kwargs,
    ) -> Assignment:
        return Assignment(
            subject_id=subject_id,
            subject_type=subject_type,
            srs_stage=srs_stage,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_stat():
    """Factory for review statistics."""

    def _make(
        subject_id: int,
        subject_type: SubjectType = SubjectType.KANJI,
        meaning_correct: int = 0,
        meaning_incorrect: int = 0,
        reading_correct: int = 0,
        reading_incorrect: int = 0,
        **kwargs,
    ) -> ReviewStatistic:
        return ReviewStatistic(
            subject_id=subject_id,
            subject_type=subject_type,
            meaning_correct=meaning_correct,
            meaning_incorrect=meaning_incorrect,
            reading_correct=reading_correct,
            reading_incorrect=reading_incorrect,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_progressions():
    """Factory: completed level progressions from a list of durations in days."""

    def _make(days_per_level: list[int], start: datetime = NOW - timedelta(days=1000)) -> list[LevelProgression]:
        progressions = []
        unlocked = start
        for level, days in enumerate(days_per_level, start=1):
            passed = unlocked + timedelta(days=days, hours=1)
            progressions.append(
                LevelProgression(
                    level=level,
                    unlocked_at=unlocked,
                    started_at=unlocked,
                    passed_at=passed,
                    created_at=unlocked,
                )
            )
            unlocked = passed
        return progressions

    return _make
