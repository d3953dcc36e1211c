"""
Leech Detector for the SRS analytics engine.

A leech is an item that keeps coming back wrong: enough reviews to matter and
accuracy at or below a threshold. Leeches are ranked by a severity score:

    severity = 0.4 x error volume + 0.3 x review volume + 0.3 x (100 - accuracy)

where error volume saturates at 50 incorrect answers and review volume at 100
reviews, both scaled to 0-100.

Two ancillary analyses share the module:
- Confusion pairs: leeches whose characters overlap heavily
- Root-cause radicals: component radicals shared by 3+ leeches
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from loguru import logger

from srs_insight.core.catalog import assignments_by_subject, subjects_by_id
from srs_insight.core.models import (
    Assignment,
    ReadingType,
    ReviewStatistic,
    Subject,
    SubjectType,
)
from srs_insight.core.rounding import round_half_up

# Severity weights
INCORRECT_WEIGHT = 0.4
VOLUME_WEIGHT = 0.3
ACCURACY_WEIGHT = 0.3

INCORRECT_SATURATION = 50
VOLUME_SATURATION = 100

CONFUSION_SIMILARITY_THRESHOLD = 0.5
MAX_CONFUSION_PAIRS = 10
MIN_ROOT_CAUSE_ITEMS = 3


# =============================================================================
# DATA MODELS
# =============================================================================


@dataclass(frozen=True)
class LeechThresholds:
    """Qualification rule for leeches. Both bounds are inclusive."""

    min_reviews: int = 10
    max_accuracy: int = 75
    include_burned: bool = False


@dataclass
class LeechReadings:
    """Readings of a leech, grouped the way they are studied."""

    primary: str | None = None
    primary_type: ReadingType | None = None  # on'yomi / kun'yomi, kanji only
    onyomi: list[str] = field(default_factory=list)
    kunyomi: list[str] = field(default_factory=list)
    vocabulary: list[str] = field(default_factory=list)


@dataclass
class LeechItem:
    subject_id: int
    character: str
    meaning: str
    subject_type: SubjectType  # kana vocabulary reported as vocabulary
    level: int
    accuracy: int
    total_reviews: int
    incorrect_count: int
    severity: int  # 0-100, higher is worse
    meaning_accuracy: int
    reading_accuracy: int
    current_srs_stage: int
    readings: LeechReadings = field(default_factory=LeechReadings)
    all_meanings: list[str] = field(default_factory=list)
    document_url: str | None = None


@dataclass
class ConfusionPair:
    first: LeechItem
    second: LeechItem
    similarity: float


@dataclass
class RootCauseRadical:
    radical: str
    radical_id: int
    name: str
    affected_count: int
    affected_items: list[LeechItem] = field(default_factory=list)


# =============================================================================
# DETECTION
# =============================================================================


def _sub_accuracy(correct: int, incorrect: int) -> int:
    """Rounded percentage; 100 when the category was never asked."""
    total = correct + incorrect
    if total == 0:
        return 100
    return round_half_up(correct / total * 100)


def extract_readings(subject: Subject) -> LeechReadings:
    if subject.subject_type is SubjectType.RADICAL or not subject.readings:
        return LeechReadings()

    primary = next((r for r in subject.readings if r.primary), None)

    if subject.subject_type is SubjectType.KANJI:
        primary_type = None
        if primary is not None and primary.type in (ReadingType.ONYOMI, ReadingType.KUNYOMI):
            primary_type = primary.type
        return LeechReadings(
            primary=primary.reading if primary else None,
            primary_type=primary_type,
            onyomi=[r.reading for r in subject.readings if r.type is ReadingType.ONYOMI],
            kunyomi=[r.reading for r in subject.readings if r.type is ReadingType.KUNYOMI],
        )

    return LeechReadings(
        primary=primary.reading if primary else None,
        vocabulary=[r.reading for r in subject.readings],
    )


def calculate_severity(incorrect_count: int, total_reviews: int, accuracy: float) -> int:
    """Weighted 0-100 severity score, rounded to an integer."""
    incorrect_score = min(incorrect_count / INCORRECT_SATURATION, 1) * 100
    volume_score = min(total_reviews / VOLUME_SATURATION, 1) * 100
    accuracy_score = 100 - accuracy

    severity = (
        incorrect_score * INCORRECT_WEIGHT
        + volume_score * VOLUME_WEIGHT
        + accuracy_score * ACCURACY_WEIGHT
    )
    return round_half_up(severity)


def detect_leeches(
    review_statistics: Iterable[ReviewStatistic],
    subjects: Iterable[Subject],
    assignments: Iterable[Assignment],
    thresholds: LeechThresholds | None = None,
) -> list[LeechItem]:
    """
    Find leeches and rank them by severity.

    Args:
        review_statistics: Per-subject answer counts
        subjects: Subject catalog
        assignments: Learner assignments (for SRS stage and burn status)
        thresholds: Qualification rule (default: 10 reviews, 75% accuracy, no burned)

    Returns:
        Leech items, highest severity first
    """
    thresholds = thresholds or LeechThresholds()
    subject_map = subjects_by_id(subjects)
    assignment_map = assignments_by_subject(assignments)

    leeches: list[LeechItem] = []
    skipped = 0

    for stat in review_statistics:
        if stat.hidden:
            continue

        subject = subject_map.get(stat.subject_id)
        assignment = assignment_map.get(stat.subject_id)
        if subject is None or assignment is None:
            skipped += 1
            continue

        if assignment.is_burned and not thresholds.include_burned:
            continue

        # Reading counters on radicals and kana vocabulary are ignored
        total_reviews = stat.total_reviews
        if total_reviews < thresholds.min_reviews:
            continue

        accuracy = round_half_up(stat.total_correct / total_reviews * 100)
        if accuracy > thresholds.max_accuracy:
            continue

        incorrect_count = stat.total_incorrect
        leeches.append(
            LeechItem(
                subject_id=stat.subject_id,
                character=subject.display_character,
                meaning=subject.primary_meaning,
                subject_type=stat.subject_type.category,
                level=subject.level,
                accuracy=accuracy,
                total_reviews=total_reviews,
                incorrect_count=incorrect_count,
                severity=calculate_severity(incorrect_count, total_reviews, accuracy),
                meaning_accuracy=_sub_accuracy(stat.meaning_correct, stat.meaning_incorrect),
                reading_accuracy=_sub_accuracy(
                    stat.effective_reading_correct, stat.effective_reading_incorrect
                ),
                current_srs_stage=assignment.srs_stage,
                readings=extract_readings(subject),
                all_meanings=[m.meaning for m in subject.meanings if m.accepted_answer],
                document_url=subject.document_url,
            )
        )

    if skipped:
        logger.debug(f"Skipped {skipped} review statistics without subject or assignment")

    leeches.sort(key=lambda item: item.severity, reverse=True)
    logger.info(f"Detected {len(leeches)} leeches")
    return leeches


# =============================================================================
# ANCILLARY ANALYSES
# =============================================================================


def character_similarity(first: str, second: str) -> float:
    """Share of characters of `first` found in `second`, over the longer length."""
    if first == second:
        return 1.0
    longest = max(len(first), len(second))
    if longest == 0:
        return 0.0
    shared = sum(1 for char in first if char in second)
    return shared / longest


def find_confusion_pairs(leeches: list[LeechItem]) -> list[ConfusionPair]:
    """Leech pairs with similar characters, most similar first, top 10."""
    pairs = []
    for i, first in enumerate(leeches):
        for second in leeches[i + 1 :]:
            similarity = character_similarity(first.character, second.character)
            if similarity > CONFUSION_SIMILARITY_THRESHOLD:
                pairs.append(ConfusionPair(first=first, second=second, similarity=similarity))

    pairs.sort(key=lambda pair: pair.similarity, reverse=True)
    return pairs[:MAX_CONFUSION_PAIRS]


def find_root_cause_radicals(
    leeches: list[LeechItem],
    subjects: Iterable[Subject],
) -> list[RootCauseRadical]:
    """Component radicals shared by at least three leeches, most shared first."""
    subject_map = subjects_by_id(subjects)
    affected: dict[int, list[LeechItem]] = {}

    for leech in leeches:
        subject = subject_map.get(leech.subject_id)
        if subject is None:
            continue
        for component_id in subject.component_subject_ids:
            component = subject_map.get(component_id)
            if component is not None and component.subject_type is SubjectType.RADICAL:
                affected.setdefault(component_id, []).append(leech)

    root_causes = []
    for radical_id, items in affected.items():
        if len(items) < MIN_ROOT_CAUSE_ITEMS:
            continue
        radical = subject_map[radical_id]
        root_causes.append(
            RootCauseRadical(
                radical=radical.display_character,
                radical_id=radical_id,
                name=radical.primary_meaning,
                affected_count=len(items),
                affected_items=items,
            )
        )

    root_causes.sort(key=lambda cause: cause.affected_count, reverse=True)
    return root_causes
