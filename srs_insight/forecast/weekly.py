"""Roll daily forecasts up into calendar weeks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from srs_insight.core.rounding import round_half_up
from srs_insight.forecast.workload import DailyForecast

SUNDAY = 6


@dataclass
class WeeklyForecast:
    week_number: int
    start_date: date  # first day of the calendar week
    end_date: date  # last day of the calendar week
    days_covered: int  # forecast days that fall inside the week
    existing_reviews: int
    new_lesson_reviews: int
    total_reviews: int
    daily_average: int


def start_of_week(day: date, week_start: int = SUNDAY) -> date:
    """First day of the week containing `day` (week_start is a Python weekday)."""
    return day - timedelta(days=(day.weekday() - week_start) % 7)


def aggregate_to_weekly(
    daily_forecast: list[DailyForecast],
    week_start: int = SUNDAY,
) -> list[WeeklyForecast]:
    """
    Group daily forecasts into calendar weeks and sum their reviews.

    Partial first and last weeks are kept; their daily average is taken over the
    days actually present.
    """
    weeks: list[list[DailyForecast]] = []
    current_start: date | None = None

    for day in daily_forecast:
        week = start_of_week(day.date, week_start)
        if week != current_start:
            weeks.append([])
            current_start = week
        weeks[-1].append(day)

    weekly = []
    for index, days in enumerate(weeks, start=1):
        existing = sum(d.existing_reviews for d in days)
        new_lessons = sum(d.new_lesson_reviews for d in days)
        total = existing + new_lessons
        week = start_of_week(days[0].date, week_start)
        weekly.append(
            WeeklyForecast(
                week_number=index,
                start_date=week,
                end_date=week + timedelta(days=6),
                days_covered=len(days),
                existing_reviews=existing,
                new_lesson_reviews=new_lessons,
                total_reviews=total,
                daily_average=round_half_up(total / len(days)),
            )
        )

    return weekly
