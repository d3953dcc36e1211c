"""
Jōyō Kanji Readiness.

Measures how much of each Jōyō school grade the learner knows at a chosen SRS
threshold, and derives two rough indicators from it:
- frequency coverage: share of kanji in everyday text the learner can read
- approximate JLPT level from which grades are complete

The Jōyō list itself is supplied by the caller as grade -> characters.
Only kanji that exist in the curriculum count toward a grade's percentage.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from srs_insight.core.catalog import assignments_by_subject
from srs_insight.core.models import (
    STAGE_APPRENTICE_4,
    STAGE_BURNED,
    STAGE_ENLIGHTENED,
    STAGE_GURU_1,
    STAGE_LOCKED,
    STAGE_MASTER,
    Assignment,
    Subject,
    SubjectType,
)
from srs_insight.core.rounding import round_half_up

GRADE_COMPLETE_PERCENTAGE = 90
MIN_KANJI_FOR_JLPT_ESTIMATE = 50
ALL_JOYO_KANJI = 2136

# (kanji known, coverage %) breakpoints from newspaper frequency counts
FREQUENCY_BREAKPOINTS = ((0, 0.0), (500, 80.0), (1000, 90.0), (1600, 99.0))
MAX_FREQUENCY_COVERAGE = 99.0


class SrsThreshold(str, Enum):
    """Lowest SRS stage that counts as knowing a kanji."""

    APPRENTICE_4 = "apprentice_4"
    GURU = "guru"
    MASTER = "master"
    ENLIGHTENED = "enlightened"
    BURNED = "burned"

    @property
    def min_stage(self) -> int:
        return {
            SrsThreshold.APPRENTICE_4: STAGE_APPRENTICE_4,
            SrsThreshold.GURU: STAGE_GURU_1,
            SrsThreshold.MASTER: STAGE_MASTER,
            SrsThreshold.ENLIGHTENED: STAGE_ENLIGHTENED,
            SrsThreshold.BURNED: STAGE_BURNED,
        }[self]


class JoyoGrade(str, Enum):
    """Jōyō grade, in teaching order."""

    GRADE_1 = "grade_1"
    GRADE_2 = "grade_2"
    GRADE_3 = "grade_3"
    GRADE_4 = "grade_4"
    GRADE_5 = "grade_5"
    GRADE_6 = "grade_6"
    SECONDARY = "secondary"

    @property
    def label(self) -> str:
        if self is JoyoGrade.SECONDARY:
            return "Secondary School"
        return f"Grade {self.value[-1]}"

    @property
    def age_range(self) -> str:
        if self is JoyoGrade.SECONDARY:
            return "Age 12-18"
        start = 5 + int(self.value[-1])
        return f"Age {start}-{start + 1}"


JOYO_GRADES = tuple(JoyoGrade)


class JlptLevel(str, Enum):
    N5 = "N5"
    N4 = "N4"
    N3 = "N3"
    N2 = "N2"
    N1 = "N1"


# Grades that must all be complete for each level, strictest first
JLPT_REQUIREMENTS = (
    (JlptLevel.N1, JOYO_GRADES),
    (JlptLevel.N2, JOYO_GRADES[:6]),
    (JlptLevel.N3, JOYO_GRADES[:4]),
    (JlptLevel.N4, JOYO_GRADES[:2]),
    (JlptLevel.N5, JOYO_GRADES[:1]),
)


@dataclass
class GradeReadiness:
    grade: JoyoGrade
    total: int  # Jōyō kanji in the grade
    known: int  # at or above the threshold
    in_curriculum: int  # Jōyō kanji the curriculum teaches
    percentage: int  # known / in_curriculum
    is_complete: bool

    @property
    def label(self) -> str:
        return self.grade.label

    @property
    def age_range(self) -> str:
        return self.grade.age_range


@dataclass
class JoyoReadiness:
    threshold: SrsThreshold
    grades: list[GradeReadiness] = field(default_factory=list)
    current_grade: JoyoGrade | None = None  # highest complete grade
    frequency_coverage: int = 0
    approximate_jlpt: JlptLevel | None = None
    total_known: int = 0
    total_in_curriculum: int = 0

    def grade(self, grade: JoyoGrade) -> GradeReadiness | None:
        return next((g for g in self.grades if g.grade is grade), None)


@dataclass
class CumulativeCounts:
    known: int
    total: int
    in_curriculum: int
    percentage: int


def frequency_coverage(total_known: int) -> float:
    """Piecewise-linear estimate of text coverage for a number of known kanji."""
    if total_known <= 0:
        return 0.0
    if total_known >= ALL_JOYO_KANJI:
        return MAX_FREQUENCY_COVERAGE

    for (low, low_pct), (high, high_pct) in zip(FREQUENCY_BREAKPOINTS, FREQUENCY_BREAKPOINTS[1:]):
        if total_known <= high:
            return low_pct + (total_known - low) / (high - low) * (high_pct - low_pct)
    return MAX_FREQUENCY_COVERAGE


def approximate_jlpt_level(grades: Iterable[GradeReadiness], total_known: int) -> JlptLevel | None:
    """Rough JLPT equivalent from completed grades; None below 50 known kanji."""
    if total_known < MIN_KANJI_FOR_JLPT_ESTIMATE:
        return None

    complete = {g.grade for g in grades if g.is_complete}
    for level, required in JLPT_REQUIREMENTS:
        if all(grade in complete for grade in required):
            return level
    return None


def _grade_readiness(
    grade: JoyoGrade,
    characters: Iterable[str],
    stage_by_character: Mapping[str, int],
    threshold: SrsThreshold,
) -> GradeReadiness:
    unique = list(dict.fromkeys(characters))
    in_curriculum = [c for c in unique if c in stage_by_character]
    known = sum(1 for c in in_curriculum if stage_by_character[c] >= threshold.min_stage)

    percentage = known * 100 / len(in_curriculum) if in_curriculum else 0.0
    return GradeReadiness(
        grade=grade,
        total=len(unique),
        known=known,
        in_curriculum=len(in_curriculum),
        percentage=round_half_up(percentage),
        is_complete=percentage >= GRADE_COMPLETE_PERCENTAGE,
    )


def calculate_joyo_readiness(
    joyo_kanji: Mapping[JoyoGrade | str, Iterable[str]],
    subjects: Iterable[Subject],
    assignments: Iterable[Assignment],
    threshold: SrsThreshold = SrsThreshold.GURU,
) -> JoyoReadiness:
    """
    Score every Jōyō grade against the learner's kanji.

    Kanji subjects are matched to Jōyō characters by their glyph. A kanji with
    no assignment (or a hidden one) counts as taught but not known.

    Args:
        joyo_kanji: Characters per grade; missing grades are empty
        subjects: Curriculum subjects
        assignments: Learner assignments
        threshold: Lowest stage that counts as known

    Returns:
        JoyoReadiness with one entry per grade, in teaching order
    """
    by_subject = assignments_by_subject(a for a in assignments if not a.hidden)
    stage_by_character: dict[str, int] = {}
    for subject in subjects:
        if subject.subject_type is not SubjectType.KANJI or not subject.characters:
            continue
        assignment = by_subject.get(subject.id)
        stage_by_character[subject.characters] = assignment.srs_stage if assignment else STAGE_LOCKED

    lists = {JoyoGrade(key): chars for key, chars in joyo_kanji.items()}
    grades = [
        _grade_readiness(grade, lists.get(grade, ()), stage_by_character, threshold)
        for grade in JOYO_GRADES
    ]

    total_known = sum(g.known for g in grades)
    complete = [g.grade for g in grades if g.is_complete]

    readiness = JoyoReadiness(
        threshold=threshold,
        grades=grades,
        current_grade=complete[-1] if complete else None,
        frequency_coverage=round_half_up(frequency_coverage(total_known)),
        approximate_jlpt=approximate_jlpt_level(grades, total_known),
        total_known=total_known,
        total_in_curriculum=sum(g.in_curriculum for g in grades),
    )
    logger.debug(
        f"Jōyō readiness at {threshold.value}: {total_known} known, "
        f"current grade {readiness.current_grade}, JLPT ~{readiness.approximate_jlpt}"
    )
    return readiness


def get_cumulative_counts(readiness: JoyoReadiness, target_grade: JoyoGrade) -> CumulativeCounts:
    """Sum the target grade and every grade before it."""
    included = JOYO_GRADES[: JOYO_GRADES.index(target_grade) + 1]
    grades = [g for g in readiness.grades if g.grade in included]

    known = sum(g.known for g in grades)
    in_curriculum = sum(g.in_curriculum for g in grades)
    return CumulativeCounts(
        known=known,
        total=sum(g.total for g in grades),
        in_curriculum=in_curriculum,
        percentage=round_half_up(known * 100 / in_curriculum) if in_curriculum else 0,
    )
