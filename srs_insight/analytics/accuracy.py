"""
Accuracy Metrics Aggregator.

Reading counts are taken only from subject types that are quizzed on readings
(kanji and vocabulary). Radicals and kana vocabulary are meaning-only even when
their raw records carry reading counters.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from srs_insight.core.catalog import subjects_by_id
from srs_insight.core.models import ReviewStatistic, Subject, SubjectType

LOW_ACCURACY_THRESHOLD = 70


def percentage(correct: int, total: int) -> float:
    """Percent rounded to two decimals, 0 for an empty denominator."""
    if total <= 0:
        return 0.0
    return round(correct / total * 100, 2)


@dataclass
class AnswerCounts:
    correct: int = 0
    incorrect: int = 0

    @property
    def total(self) -> int:
        return self.correct + self.incorrect

    def add(self, correct: int, incorrect: int) -> None:
        self.correct += correct
        self.incorrect += incorrect


@dataclass
class TypeAccuracy:
    overall: float
    meaning: float
    reading: float | None  # None for radicals


@dataclass
class AccuracyMetrics:
    overall: float
    meaning: float
    reading: float
    total_reviews: int
    meaning_counts: AnswerCounts
    reading_counts: AnswerCounts
    total_counts: AnswerCounts
    by_type: dict[SubjectType, TypeAccuracy] = field(default_factory=dict)
    by_level: dict[int, float] = field(default_factory=dict)


def calculate_accuracy_metrics(
    review_statistics: Iterable[ReviewStatistic],
    subjects: Iterable[Subject],
) -> AccuracyMetrics:
    """
    Aggregate overall, per-type and per-level accuracy.

    Args:
        review_statistics: Per-subject answer counts
        subjects: Subject catalog (statistics without a subject are skipped)

    Returns:
        AccuracyMetrics with percentages rounded to two decimals
    """
    subject_map = subjects_by_id(subjects)

    meaning = AnswerCounts()
    reading = AnswerCounts()
    total = AnswerCounts()
    type_meaning = {t: AnswerCounts() for t in (SubjectType.RADICAL, SubjectType.KANJI, SubjectType.VOCABULARY)}
    type_reading = {t: AnswerCounts() for t in (SubjectType.RADICAL, SubjectType.KANJI, SubjectType.VOCABULARY)}
    levels: dict[int, AnswerCounts] = {}

    for stat in review_statistics:
        if stat.hidden:
            continue
        subject = subject_map.get(stat.subject_id)
        if subject is None:
            continue

        reading_correct = stat.effective_reading_correct
        reading_incorrect = stat.effective_reading_incorrect

        meaning.add(stat.meaning_correct, stat.meaning_incorrect)
        reading.add(reading_correct, reading_incorrect)
        total.add(stat.total_correct, stat.total_incorrect)

        category = stat.subject_type.category
        type_meaning[category].add(stat.meaning_correct, stat.meaning_incorrect)
        type_reading[category].add(reading_correct, reading_incorrect)

        levels.setdefault(subject.level, AnswerCounts()).add(stat.total_correct, stat.total_incorrect)

    by_type = {}
    for subject_type, meaning_counts in type_meaning.items():
        reading_counts = type_reading[subject_type]
        by_type[subject_type] = TypeAccuracy(
            overall=percentage(
                meaning_counts.correct + reading_counts.correct,
                meaning_counts.total + reading_counts.total,
            ),
            meaning=percentage(meaning_counts.correct, meaning_counts.total),
            reading=(
                None
                if subject_type is SubjectType.RADICAL
                else percentage(reading_counts.correct, reading_counts.total)
            ),
        )

    by_level = {
        level: percentage(counts.correct, counts.total)
        for level, counts in sorted(levels.items())
        if counts.total > 0
    }

    return AccuracyMetrics(
        overall=percentage(total.correct, total.total),
        meaning=percentage(meaning.correct, meaning.total),
        reading=percentage(reading.correct, reading.total),
        total_reviews=total.total,
        meaning_counts=meaning,
        reading_counts=reading,
        total_counts=total,
        by_type=by_type,
        by_level=by_level,
    )


def get_low_accuracy_items(
    review_statistics: Iterable[ReviewStatistic],
    threshold: int = LOW_ACCURACY_THRESHOLD,
) -> list[ReviewStatistic]:
    """Visible statistics strictly below `threshold` percent, worst first."""
    low = [
        stat
        for stat in review_statistics
        if not stat.hidden and stat.percentage_correct is not None and stat.percentage_correct < threshold
    ]
    return sorted(low, key=lambda stat: stat.percentage_correct)
