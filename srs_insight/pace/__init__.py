"""
Pace: robust level-duration statistics and completion projections.

- statistics: median, MAD, trimmed mean, standard deviation
- analyzer: outlier-aware pace analysis and pace bands
- projection: level-60 scenario dates and level milestone dates
"""

from srs_insight.pace.analyzer import (
    PaceAnalysis,
    PaceOptions,
    analyze_durations,
    analyze_level_pace,
    calculate_level_durations,
)
from srs_insight.pace.projection import (
    LevelCompletionProjection,
    project_level_completion,
    project_level_milestones,
)

__all__ = [
    "LevelCompletionProjection",
    "PaceAnalysis",
    "PaceOptions",
    "analyze_durations",
    "analyze_level_pace",
    "calculate_level_durations",
    "project_level_completion",
    "project_level_milestones",
]
