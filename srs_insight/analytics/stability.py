"""
Knowledge Stability Analyzer.

An item counts as passed once it has ever reached guru (the passed timestamp
is sticky). Passed items are then split by their current stage:
- solid: guru through enlightened
- fragile: fell back into apprentice

Burned items are terminal and left out of the ratio.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from srs_insight.core.catalog import subjects_by_id
from srs_insight.core.models import (
    STAGE_APPRENTICE_1,
    STAGE_APPRENTICE_4,
    STAGE_ENLIGHTENED,
    STAGE_GURU_1,
    Assignment,
    Subject,
    SubjectType,
)


@dataclass
class TypeBreakdown:
    solid: int = 0
    fragile: int = 0
    total: int = 0


@dataclass
class AtRiskItem:
    subject_id: int
    character: str | None
    meaning: str
    level: int
    subject_type: SubjectType
    current_srs_stage: int
    passed_at: datetime


@dataclass
class KnowledgeStability:
    total_passed: int
    solid_items: int
    fragile_items: int
    stability_ratio: float  # solid / total_passed, 1 when nothing passed
    at_risk_items: list[AtRiskItem] = field(default_factory=list)
    by_type: dict[SubjectType, TypeBreakdown] = field(default_factory=dict)


def calculate_knowledge_stability(
    assignments: Iterable[Assignment],
    subjects: Iterable[Subject],
) -> KnowledgeStability:
    """
    Measure how much passed knowledge is still holding.

    Args:
        assignments: Learner assignments
        subjects: Subject catalog (assignments without a subject are skipped)

    Returns:
        KnowledgeStability with at-risk items, most regressed first
    """
    subject_map = subjects_by_id(subjects)
    by_type = {t: TypeBreakdown() for t in (SubjectType.RADICAL, SubjectType.KANJI, SubjectType.VOCABULARY)}

    solid = 0
    fragile = 0
    at_risk: list[AtRiskItem] = []

    for assignment in assignments:
        if assignment.hidden or not assignment.is_passed or assignment.is_burned:
            continue

        subject = subject_map.get(assignment.subject_id)
        if subject is None:
            logger.debug(f"No subject for assignment {assignment.subject_id}, skipping")
            continue

        is_solid = STAGE_GURU_1 <= assignment.srs_stage <= STAGE_ENLIGHTENED
        is_fragile = STAGE_APPRENTICE_1 <= assignment.srs_stage <= STAGE_APPRENTICE_4

        breakdown = by_type[assignment.subject_type.category]

        if is_solid:
            solid += 1
            breakdown.total += 1
            breakdown.solid += 1
        elif is_fragile:
            fragile += 1
            breakdown.total += 1
            breakdown.fragile += 1
            at_risk.append(
                AtRiskItem(
                    subject_id=subject.id,
                    character=subject.characters,
                    meaning=subject.primary_meaning,
                    level=subject.level,
                    subject_type=assignment.subject_type,
                    current_srs_stage=assignment.srs_stage,
                    passed_at=assignment.passed_at,
                )
            )

    total_passed = solid + fragile
    at_risk.sort(key=lambda item: (item.current_srs_stage, item.passed_at))

    return KnowledgeStability(
        total_passed=total_passed,
        solid_items=solid,
        fragile_items=fragile,
        stability_ratio=solid / total_passed if total_passed else 1.0,
        at_risk_items=at_risk,
        by_type=by_type,
    )
