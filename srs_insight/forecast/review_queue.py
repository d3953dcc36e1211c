"""Short-term review queue forecast (next 24 hours)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from srs_insight.core.models import Assignment
from srs_insight.core.srs import DEFAULT_TRANSITION_TABLE, SrsTransitionTable

HOURS_AHEAD = 24


@dataclass
class HourlyCount:
    time: datetime
    count: int


@dataclass
class ReviewQueueForecast:
    current: int
    next_2h: int
    next_6h: int
    next_12h: int
    next_24h: int
    peak: HourlyCount
    hourly_breakdown: list[HourlyCount] = field(default_factory=list)


def calculate_review_forecast(
    assignments: Iterable[Assignment],
    now: datetime | None = None,
    table: SrsTransitionTable = DEFAULT_TRANSITION_TABLE,
) -> ReviewQueueForecast:
    """
    Count reviews becoming available over the next day.

    Window counts are cumulative: an item available now is also counted in
    every later window. Already-available items land in hour 0.
    """
    if now is None:
        now = datetime.now(UTC)

    windows = {2: 0, 6: 0, 12: 0, 24: 0}
    current = 0
    by_hour = [0] * HOURS_AHEAD

    for assignment in assignments:
        if assignment.hidden or assignment.available_at is None:
            continue
        if not table.is_active(assignment.srs_stage):
            continue

        hours_from_now = (assignment.available_at - now).total_seconds() / 3600
        if hours_from_now <= 0:
            current += 1
        for limit in windows:
            if hours_from_now < limit:
                windows[limit] += 1

        hour = 0 if hours_from_now <= 0 else int(hours_from_now)
        if hour < HOURS_AHEAD:
            by_hour[hour] += 1

    hourly = [HourlyCount(time=now + timedelta(hours=i), count=c) for i, c in enumerate(by_hour)]
    peak_count = max(by_hour)
    peak_hour = by_hour.index(peak_count)

    return ReviewQueueForecast(
        current=current,
        next_2h=windows[2],
        next_6h=windows[6],
        next_12h=windows[12],
        next_24h=windows[24],
        peak=HourlyCount(time=now + timedelta(hours=peak_hour), count=peak_count),
        hourly_breakdown=hourly,
    )
