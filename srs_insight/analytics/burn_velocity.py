"""Burn velocity: how fast items are being burned, and when everything will be."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum

from srs_insight.core.models import Assignment, Subject

# Rates below this (burns/day) in both windows count as no trend
LOW_RATE = 0.1
TREND_CHANGE_PERCENT = 10


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass
class BurnPeriod:
    count: int
    rate: float  # burns per day


@dataclass
class BurnVelocity:
    total_burned: int
    total_items: int
    burn_percentage: float
    last_7_days: BurnPeriod
    last_30_days: BurnPeriod
    last_90_days: BurnPeriod
    trend_7_days: Trend
    trend_30_days: Trend
    projected_burn_date: datetime | None
    days_to_complete: int | None


def burn_period(burned_at: list[datetime], end: datetime, days: int) -> BurnPeriod:
    """Burns within [end - days, end], both bounds inclusive."""
    start = end - timedelta(days=days)
    count = sum(1 for moment in burned_at if start <= moment <= end)
    return BurnPeriod(count=count, rate=count / days)


def calculate_trend(current_rate: float, previous_rate: float) -> Trend:
    if current_rate < LOW_RATE and previous_rate < LOW_RATE:
        return Trend.STABLE
    if previous_rate == 0:
        return Trend.UP if current_rate > 0 else Trend.STABLE

    change = (current_rate - previous_rate) / previous_rate * 100
    if change > TREND_CHANGE_PERCENT:
        return Trend.UP
    if change < -TREND_CHANGE_PERCENT:
        return Trend.DOWN
    return Trend.STABLE


def calculate_burn_velocity(
    assignments: Iterable[Assignment],
    subjects: Iterable[Subject],
    now: datetime | None = None,
) -> BurnVelocity:
    """
    Burn counts and rates over trailing windows, with a completion projection.

    The projection uses the 30-day rate and is None while that rate is 0.
    """
    if now is None:
        now = datetime.now(UTC)

    total_items = sum(1 for subject in subjects if not subject.is_removed)
    burned_at = [a.burned_at for a in assignments if a.burned_at is not None and not a.hidden]
    total_burned = len(burned_at)

    last_7 = burn_period(burned_at, now, 7)
    last_30 = burn_period(burned_at, now, 30)
    last_90 = burn_period(burned_at, now, 90)
    previous_7 = burn_period(burned_at, now - timedelta(days=7), 7)
    previous_30 = burn_period(burned_at, now - timedelta(days=30), 30)

    projected_burn_date = None
    days_to_complete = None
    if last_30.rate > 0:
        remaining = max(total_items - total_burned, 0)
        days_to_complete = math.ceil(remaining / last_30.rate)
        projected_burn_date = now + timedelta(days=days_to_complete)

    return BurnVelocity(
        total_burned=total_burned,
        total_items=total_items,
        burn_percentage=total_burned / total_items * 100 if total_items > 0 else 0.0,
        last_7_days=last_7,
        last_30_days=last_30,
        last_90_days=last_90,
        trend_7_days=calculate_trend(last_7.rate, previous_7.rate),
        trend_30_days=calculate_trend(last_30.rate, previous_30.rate),
        projected_burn_date=projected_burn_date,
        days_to_complete=days_to_complete,
    )
