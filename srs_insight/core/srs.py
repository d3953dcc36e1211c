"""
SRS Transition Table.

Pure lookup policy consumed by the trajectory simulator:
- stage -> hours until the next review
- stage -> next stage on a correct / incorrect answer
- stage -> whether the item is still in review rotation

The default ladder follows the conventional 9-stage schedule
(4h, 8h, 23h, 47h, 1w-1h, 2w-1h, 1mo-1h, 4mo-1h). The incorrect-answer
drop is a separate pluggable policy.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from srs_insight.core.models import (
    STAGE_APPRENTICE_1,
    STAGE_BURNED,
    STAGE_GURU_1,
    STAGE_LOCKED,
)

DEFAULT_INTERVAL_HOURS: Mapping[int, int] = MappingProxyType(
    {
        1: 4,  # Apprentice I
        2: 8,  # Apprentice II
        3: 23,  # Apprentice III
        4: 47,  # Apprentice IV
        5: 167,  # Guru I
        6: 335,  # Guru II
        7: 719,  # Master
        8: 2879,  # Enlightened
    }
)

IncorrectPolicy = Callable[[int], int]


def penalty_drop(stage: int) -> int:
    """
    Drop one stage below guru, two stages from guru upward.

    Never drops below Apprentice I.
    """
    penalty = 1 if stage < STAGE_GURU_1 else 2
    return max(STAGE_APPRENTICE_1, stage - penalty)


def reset_to_apprentice(stage: int) -> int:
    """Any miss sends the item back to Apprentice I."""
    return STAGE_APPRENTICE_1


@dataclass(frozen=True)
class SrsTransitionTable:
    """Stage ladder and transition policy."""

    interval_hours: Mapping[int, int] = field(default_factory=lambda: DEFAULT_INTERVAL_HOURS)
    incorrect_policy: IncorrectPolicy = penalty_drop
    terminal_stage: int = STAGE_BURNED

    def next_interval_hours(self, stage: int) -> int:
        """Hours until the next review at this stage; 0 for inactive stages."""
        if not self.is_active(stage):
            return 0
        return self.interval_hours.get(stage, 0)

    def next_stage_on_correct(self, stage: int) -> int:
        return min(stage + 1, self.terminal_stage)

    def next_stage_on_incorrect(self, stage: int) -> int:
        return self.incorrect_policy(stage)

    def is_active(self, stage: int) -> bool:
        """Locked and burned items are out of rotation."""
        return STAGE_LOCKED < stage < self.terminal_stage


DEFAULT_TRANSITION_TABLE = SrsTransitionTable()
