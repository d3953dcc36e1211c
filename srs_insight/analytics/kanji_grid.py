"""
Kanji Grid: per-level SRS band distribution.

Every curriculum item is paired with the learner's current stage and grouped
by level, with a count per band (locked, apprentice, guru, master,
enlightened, burned).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from srs_insight.core.catalog import assignments_by_subject
from srs_insight.core.models import (
    STAGE_APPRENTICE_1,
    STAGE_APPRENTICE_4,
    STAGE_BURNED,
    STAGE_ENLIGHTENED,
    STAGE_GURU_1,
    STAGE_GURU_2,
    STAGE_LOCKED,
    STAGE_MASTER,
    Assignment,
    ReadingType,
    Subject,
    SubjectType,
)


class SrsBand(str, Enum):
    """Named stage group."""

    LOCKED = "locked"
    APPRENTICE = "apprentice"
    GURU = "guru"
    MASTER = "master"
    ENLIGHTENED = "enlightened"
    BURNED = "burned"


def srs_band(stage: int) -> SrsBand:
    if STAGE_APPRENTICE_1 <= stage <= STAGE_APPRENTICE_4:
        return SrsBand.APPRENTICE
    if STAGE_GURU_1 <= stage <= STAGE_GURU_2:
        return SrsBand.GURU
    if stage == STAGE_MASTER:
        return SrsBand.MASTER
    if stage == STAGE_ENLIGHTENED:
        return SrsBand.ENLIGHTENED
    if stage == STAGE_BURNED:
        return SrsBand.BURNED
    return SrsBand.LOCKED


@dataclass
class GridSubject:
    subject_id: int
    character: str | None
    character_image_url: str | None
    level: int
    primary_meaning: str
    primary_reading: str | None
    reading_type: ReadingType | None  # kanji only
    subject_type: SubjectType
    srs_stage: int
    document_url: str | None = None

    @property
    def band(self) -> SrsBand:
        return srs_band(self.srs_stage)


@dataclass
class LevelDistribution:
    level: int
    subjects: list[GridSubject] = field(default_factory=list)
    counts: dict[SrsBand, int] = field(default_factory=lambda: {band: 0 for band in SrsBand})

    @property
    def total(self) -> int:
        return len(self.subjects)


def _primary_reading(subject: Subject) -> tuple[str | None, ReadingType | None]:
    if subject.subject_type is SubjectType.RADICAL or not subject.readings:
        return None, None
    reading = next((r for r in subject.readings if r.primary), subject.readings[0])
    if subject.subject_type is SubjectType.KANJI:
        return reading.reading, reading.type or ReadingType.ONYOMI
    return reading.reading, None


def enrich_subjects(
    subjects: Iterable[Subject],
    assignments: Iterable[Assignment],
    include_removed: bool = False,
) -> list[GridSubject]:
    """
    Pair each subject with its current SRS stage.

    Subjects without an assignment, or with a hidden one, are locked (stage 0).
    Removed subjects are left out unless include_removed is set.

    Returns:
        Grid subjects ordered by level, then id
    """
    by_subject = assignments_by_subject(a for a in assignments if not a.hidden)

    enriched = []
    for subject in subjects:
        if subject.is_removed and not include_removed:
            continue
        assignment = by_subject.get(subject.id)
        reading, reading_type = _primary_reading(subject)
        enriched.append(
            GridSubject(
                subject_id=subject.id,
                character=subject.characters,
                character_image_url=subject.character_image_url,
                level=subject.level,
                primary_meaning=subject.primary_meaning,
                primary_reading=reading,
                reading_type=reading_type,
                subject_type=subject.subject_type,
                srs_stage=assignment.srs_stage if assignment else STAGE_LOCKED,
                document_url=subject.document_url,
            )
        )

    enriched.sort(key=lambda s: (s.level, s.subject_id))
    return enriched


def group_subjects_by_level(grid_subjects: Iterable[GridSubject]) -> list[LevelDistribution]:
    """Group grid subjects by level with a count per SRS band, ascending by level."""
    levels: dict[int, LevelDistribution] = {}
    for subject in grid_subjects:
        distribution = levels.setdefault(subject.level, LevelDistribution(level=subject.level))
        distribution.subjects.append(subject)
        distribution.counts[subject.band] += 1

    return [levels[level] for level in sorted(levels)]


def calculate_level_distribution(
    subjects: Iterable[Subject],
    assignments: Iterable[Assignment],
    subject_types: Iterable[SubjectType] | None = None,
) -> list[LevelDistribution]:
    """Per-level band distribution, optionally limited to some subject types."""
    grid = enrich_subjects(subjects, assignments)
    if subject_types is not None:
        wanted = set(subject_types)
        grid = [s for s in grid if s.subject_type in wanted]
    return group_subjects_by_level(grid)
