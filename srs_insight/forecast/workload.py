"""
Workload Forecaster.

Projects daily review counts for the next N days by simulating:
1. Every active assignment from its next availability time ("existing")
2. A fixed number of new lessons per day, starting tomorrow ("new lessons")

The random stream is seeded from learner id + date + lessons per day, so the
same inputs on the same day give the same forecast.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta

from loguru import logger

from srs_insight.core.models import STAGE_APPRENTICE_1, Assignment, ReviewStatistic
from srs_insight.core.rounding import round_half_up
from srs_insight.core.seeded_random import SeededRandom, create_forecast_seed
from srs_insight.core.srs import DEFAULT_TRANSITION_TABLE, SrsTransitionTable
from srs_insight.forecast.simulator import DayBucket, project_item_reviews

DEFAULT_ACCURACY = 0.85

# Stabilization detection
STABILIZATION_WINDOW = 7
STABILIZATION_MIN_MEAN = 10
STABILIZATION_MAX_CV = 0.15  # std dev / mean


@dataclass
class DailyForecast:
    date: date
    existing_reviews: int  # from items already in rotation
    new_lesson_reviews: int  # from simulated lessons
    total_reviews: int


@dataclass
class PeakDay:
    date: date
    count: int
    day_index: int


@dataclass
class StabilizationDay:
    date: date
    day_index: int


@dataclass
class WorkloadMetrics:
    peak_day: PeakDay | None
    stabilization_day: StabilizationDay | None
    total_reviews: int
    average_daily: int
    max_daily: int
    min_daily: int


@dataclass
class WorkloadBreakdown:
    from_existing: int
    from_new_lessons: int
    existing_percentage: int
    new_lessons_percentage: int


@dataclass
class WorkloadForecastResult:
    daily_forecast: list[DailyForecast]
    metrics: WorkloadMetrics
    breakdown: WorkloadBreakdown
    accuracy: float  # success probability used for the simulation
    simulated_reviews: int  # review events produced by the simulator


def calculate_user_accuracy(review_statistics: Iterable[ReviewStatistic]) -> float:
    """
    Overall share of correct answers across non-hidden statistics.

    Returns a value between 0 and 1, or 0.85 when there is no data.
    """
    total_correct = 0
    total_incorrect = 0

    for stat in review_statistics:
        if stat.hidden:
            continue
        total_correct += stat.total_correct
        total_incorrect += stat.total_incorrect

    total = total_correct + total_incorrect
    if total == 0:
        return DEFAULT_ACCURACY
    return total_correct / total


def calculate_stabilization_point(daily_forecast: list[DailyForecast]) -> int | None:
    """
    First day index whose trailing 7-day window is steady.

    Steady means a mean of at least 10 reviews and a coefficient of variation
    below 15%. Returns None when no window qualifies.
    """
    for i in range(STABILIZATION_WINDOW - 1, len(daily_forecast)):
        counts = [d.total_reviews for d in daily_forecast[i - STABILIZATION_WINDOW + 1 : i + 1]]
        mean = sum(counts) / STABILIZATION_WINDOW

        if mean < STABILIZATION_MIN_MEAN:
            continue

        variance = sum((c - mean) ** 2 for c in counts) / STABILIZATION_WINDOW
        if math.sqrt(variance) / mean < STABILIZATION_MAX_CV:
            return i

    return None


def calculate_workload_forecast(
    assignments: Iterable[Assignment],
    review_statistics: Iterable[ReviewStatistic],
    lessons_per_day: int,
    forecast_days: int = 30,
    user_id: str = "",
    now: datetime | None = None,
    table: SrsTransitionTable = DEFAULT_TRANSITION_TABLE,
) -> WorkloadForecastResult:
    """
    Calculate the daily review workload forecast.

    Args:
        assignments: Learner assignments
        review_statistics: Learner review statistics (for the success rate)
        lessons_per_day: New lessons started each day from tomorrow on
        forecast_days: Number of days to forecast (day 0 is today)
        user_id: Learner id, part of the random seed
        now: Forecast anchor time (default: current UTC time)
        table: SRS transition policy

    Returns:
        WorkloadForecastResult with daily counts, metrics and breakdown

    Raises:
        ValueError: If lessons_per_day is negative or forecast_days < 1
    """
    if lessons_per_day < 0:
        raise ValueError(f"lessons_per_day must be >= 0, got {lessons_per_day}")
    if forecast_days < 1:
        raise ValueError(f"forecast_days must be >= 1, got {forecast_days}")

    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    tz = now.tzinfo

    accuracy = calculate_user_accuracy(review_statistics)
    rng = SeededRandom(create_forecast_seed(user_id, now.astimezone(UTC).date(), lessons_per_day))

    buckets: dict[date, DayBucket] = {}
    today_start = datetime.combine(now.date(), time.min, tzinfo=tz)
    horizon_end = today_start + timedelta(days=forecast_days)
    simulated = 0

    # Existing items; overdue reviews are done from now on
    for assignment in assignments:
        if assignment.hidden or assignment.available_at is None:
            continue
        if not table.is_active(assignment.srs_stage):
            continue
        if assignment.available_at >= horizon_end:
            continue

        trajectory = project_item_reviews(
            start=max(assignment.available_at, now),
            initial_stage=assignment.srs_stage,
            success_probability=accuracy,
            buckets=buckets,
            horizon_end=horizon_end,
            is_new_lesson=False,
            rng=rng,
            table=table,
            day_tz=tz,
        )
        simulated += trajectory.reviews

    # New lessons start tomorrow; today's lessons may already be done
    for day_offset in range(1, forecast_days + 1):
        lesson_start = today_start + timedelta(days=day_offset)
        for _ in range(lessons_per_day):
            trajectory = project_item_reviews(
                start=lesson_start,
                initial_stage=STAGE_APPRENTICE_1,
                success_probability=accuracy,
                buckets=buckets,
                horizon_end=horizon_end,
                is_new_lesson=True,
                rng=rng,
                table=table,
                day_tz=tz,
            )
            simulated += trajectory.reviews

    daily_forecast = []
    for i in range(forecast_days):
        day = (today_start + timedelta(days=i)).date()
        bucket = buckets.get(day, DayBucket())
        daily_forecast.append(
            DailyForecast(
                date=day,
                existing_reviews=bucket.existing,
                new_lesson_reviews=bucket.new_lessons,
                total_reviews=bucket.total,
            )
        )

    metrics = _calculate_metrics(daily_forecast)
    breakdown = _calculate_breakdown(daily_forecast, metrics.total_reviews)

    logger.info(
        f"Workload forecast: {forecast_days} days, {lessons_per_day} lessons/day, "
        f"{metrics.total_reviews} reviews (accuracy {accuracy:.2f})"
    )
    logger.debug(f"Simulator produced {simulated} review events")

    return WorkloadForecastResult(
        daily_forecast=daily_forecast,
        metrics=metrics,
        breakdown=breakdown,
        accuracy=accuracy,
        simulated_reviews=simulated,
    )


def _calculate_metrics(daily_forecast: list[DailyForecast]) -> WorkloadMetrics:
    counts = [d.total_reviews for d in daily_forecast]
    total = sum(counts)

    if not counts:
        return WorkloadMetrics(
            peak_day=None,
            stabilization_day=None,
            total_reviews=0,
            average_daily=0,
            max_daily=0,
            min_daily=0,
        )

    max_daily = max(counts)
    peak_index = counts.index(max_daily)

    stabilization_index = calculate_stabilization_point(daily_forecast)
    stabilization_day = None
    if stabilization_index is not None:
        stabilization_day = StabilizationDay(
            date=daily_forecast[stabilization_index].date,
            day_index=stabilization_index,
        )

    return WorkloadMetrics(
        peak_day=PeakDay(
            date=daily_forecast[peak_index].date,
            count=max_daily,
            day_index=peak_index,
        ),
        stabilization_day=stabilization_day,
        total_reviews=total,
        average_daily=round_half_up(total / len(counts)),
        max_daily=max_daily,
        min_daily=min(counts),
    )


def _calculate_breakdown(daily_forecast: list[DailyForecast], total: int) -> WorkloadBreakdown:
    from_existing = sum(d.existing_reviews for d in daily_forecast)
    from_new = sum(d.new_lesson_reviews for d in daily_forecast)

    return WorkloadBreakdown(
        from_existing=from_existing,
        from_new_lessons=from_new,
        existing_percentage=round_half_up(from_existing / total * 100) if total > 0 else 0,
        new_lessons_percentage=round_half_up(from_new / total * 100) if total > 0 else 0,
    )
