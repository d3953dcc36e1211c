"""
Milestone Tracker.

Three milestone families:
- burn: number of burned items
- guru: number of items that ever reached guru
- level: levels 10 through 60

Count milestones take their achievement date from the N-th event in
chronological order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from srs_insight.core.catalog import preferred_progression
from srs_insight.core.models import Assignment, LevelProgression, Subject

COUNT_TARGETS = (1, 100, 500, 1000, 2500, 5000)
LEVEL_TARGETS = (10, 20, 30, 40, 50, 60)


class MilestoneType(str, Enum):
    BURN = "burn"
    GURU = "guru"
    LEVEL = "level"


@dataclass
class Milestone:
    id: str
    type: MilestoneType
    label: str
    description: str
    achieved_at: datetime | None
    target: int
    current: int
    is_achieved: bool

    @property
    def progress(self) -> float:
        """Fraction of the target reached (0-1, not capped)."""
        return self.current / self.target if self.target > 0 else 0.0


@dataclass
class MilestoneTimeline:
    achieved: list[Milestone] = field(default_factory=list)
    upcoming: list[Milestone] = field(default_factory=list)

    @property
    def total_achieved(self) -> int:
        return len(self.achieved)

    @property
    def next_milestone(self) -> Milestone | None:
        return self.upcoming[0] if self.upcoming else None


def _count_targets(total_available: int) -> list[int]:
    targets = list(COUNT_TARGETS)
    if total_available > 0 and total_available not in targets:
        targets.append(total_available)
    return targets


def _count_milestones(
    kind: MilestoneType,
    event_times: list[datetime],
    total_available: int,
) -> list[Milestone]:
    events = sorted(event_times)
    current = len(events)
    noun = "Burn" if kind is MilestoneType.BURN else "Guru"

    milestones = []
    for target in _count_targets(total_available):
        is_achieved = current >= target
        if target == 1:
            label = f"First {noun}"
            description = "Burned your first item" if kind is MilestoneType.BURN else "Reached Guru on your first item"
        elif target == total_available:
            label = f"All {'Burned' if kind is MilestoneType.BURN else 'Guru'}"
            description = (
                "Burned all available items"
                if kind is MilestoneType.BURN
                else "Reached Guru on all available items"
            )
        else:
            label = f"{target:,} {noun}s" if kind is MilestoneType.BURN else f"{target:,} Guru"
            description = (
                f"Burned {target:,} items"
                if kind is MilestoneType.BURN
                else f"Reached Guru on {target:,} items"
            )

        milestones.append(
            Milestone(
                id=f"{kind.value}-{target}",
                type=kind,
                label=label,
                description=description,
                achieved_at=events[target - 1] if is_achieved else None,
                target=target,
                current=current,
                is_achieved=is_achieved,
            )
        )
    return milestones


def _level_milestones(
    progressions: list[LevelProgression],
    current_level: int,
) -> list[Milestone]:
    milestones = []
    for target in LEVEL_TARGETS:
        progression = preferred_progression(progressions, target)
        milestones.append(
            Milestone(
                id=f"level-{target}",
                type=MilestoneType.LEVEL,
                label=f"Level {target}",
                description="Reached maximum level" if target == 60 else f"Completed level {target}",
                achieved_at=progression.passed_at if progression is not None else None,
                target=target,
                current=current_level,
                is_achieved=current_level >= target,
            )
        )
    return milestones


def calculate_milestones(
    assignments: Iterable[Assignment],
    level_progressions: Iterable[LevelProgression],
    subjects: Iterable[Subject],
    current_level: int,
) -> MilestoneTimeline:
    """
    Build the achieved/upcoming milestone timeline.

    Achieved milestones are newest first (undated ones keep their relative
    order at the end); upcoming ones are closest to completion first.
    """
    assignments = list(assignments)
    total_available = sum(1 for subject in subjects if not subject.is_removed)

    burned = [a.burned_at for a in assignments if a.burned_at is not None and not a.hidden]
    passed = [a.passed_at for a in assignments if a.passed_at is not None and not a.hidden]

    milestones = (
        _count_milestones(MilestoneType.BURN, burned, total_available)
        + _count_milestones(MilestoneType.GURU, passed, total_available)
        + _level_milestones(list(level_progressions), current_level)
    )

    achieved = [m for m in milestones if m.is_achieved]
    dated = sorted((m for m in achieved if m.achieved_at is not None), key=lambda m: m.achieved_at, reverse=True)
    undated = [m for m in achieved if m.achieved_at is None]

    upcoming = sorted((m for m in milestones if not m.is_achieved), key=lambda m: m.progress, reverse=True)

    return MilestoneTimeline(achieved=dated + undated, upcoming=upcoming)
