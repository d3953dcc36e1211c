"""
Forecast: simulation-based workload and level projections.

- simulator: per-item review trajectory over the SRS ladder
- workload: daily review forecast, metrics and breakdown
- weekly: calendar-week rollup of the daily forecast
- level_progression: level reached for a lessons/day budget
- review_queue: reviews becoming available in the next 24 hours
"""

from srs_insight.forecast.level_progression import (
    LevelProgressionForecast,
    calculate_level_progression_forecast,
)
from srs_insight.forecast.review_queue import ReviewQueueForecast, calculate_review_forecast
from srs_insight.forecast.simulator import DayBucket, ItemTrajectory, project_item_reviews
from srs_insight.forecast.weekly import WeeklyForecast, aggregate_to_weekly
from srs_insight.forecast.workload import (
    DailyForecast,
    WorkloadForecastResult,
    WorkloadMetrics,
    calculate_workload_forecast,
)

__all__ = [
    "DailyForecast",
    "DayBucket",
    "ItemTrajectory",
    "LevelProgressionForecast",
    "ReviewQueueForecast",
    "WeeklyForecast",
    "WorkloadForecastResult",
    "WorkloadMetrics",
    "aggregate_to_weekly",
    "calculate_level_progression_forecast",
    "calculate_review_forecast",
    "calculate_workload_forecast",
    "project_item_reviews",
]
