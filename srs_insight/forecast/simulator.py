"""
Trajectory Simulator.

Advances a single item through the SRS transition table, recording one review
event per visit into per-day buckets. Several reviews of the same item can land
on the same calendar day (apprentice intervals are shorter than 24h); they all
count toward that day.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo

from srs_insight.core.seeded_random import SeededRandom
from srs_insight.core.srs import SrsTransitionTable

MAX_ITERATIONS = 100


@dataclass
class DayBucket:
    """Review events recorded for one calendar day."""

    existing: int = 0
    new_lessons: int = 0

    @property
    def total(self) -> int:
        return self.existing + self.new_lessons


@dataclass
class ItemTrajectory:
    """What one simulated item did."""

    reviews: int = 0
    stages: list[int] = field(default_factory=list)  # stage at each recorded review
    final_stage: int = 0


def project_item_reviews(
    start: datetime,
    initial_stage: int,
    success_probability: float,
    buckets: dict[date, DayBucket],
    horizon_end: datetime,
    is_new_lesson: bool,
    rng: SeededRandom,
    table: SrsTransitionTable,
    day_tz: tzinfo | None = None,
) -> ItemTrajectory:
    """
    Simulate one item's review path and add its reviews to the day buckets.

    Args:
        start: Time of the first review
        initial_stage: SRS stage the item is in at the first review
        success_probability: Chance of answering correctly (0-1)
        buckets: Per-day accumulator, mutated in place
        horizon_end: No reviews are recorded at or after this time
        is_new_lesson: Count into the new-lesson column instead of existing
        rng: Shared random stream
        table: Stage transition policy
        day_tz: Timezone defining calendar days (default: start's timezone)

    Returns:
        ItemTrajectory with the number of reviews recorded
    """
    tz = day_tz or start.tzinfo
    current = start
    stage = initial_stage
    trajectory = ItemTrajectory(final_stage=stage)

    iterations = 0
    while current < horizon_end and table.is_active(stage) and iterations < MAX_ITERATIONS:
        iterations += 1

        day = current.astimezone(tz).date() if tz is not None else current.date()
        bucket = buckets.setdefault(day, DayBucket())
        if is_new_lesson:
            bucket.new_lessons += 1
        else:
            bucket.existing += 1
        trajectory.reviews += 1
        trajectory.stages.append(stage)

        if rng.next() < success_probability:
            stage = table.next_stage_on_correct(stage)
        else:
            stage = table.next_stage_on_incorrect(stage)
        trajectory.final_stage = stage

        if not table.is_active(stage):
            break

        interval = table.next_interval_hours(stage)
        if interval == 0:
            break
        current = current + timedelta(hours=interval)

    return trajectory
