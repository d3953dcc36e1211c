"""
Core: entity models and the shared primitives of the analytics engine.

- models: Subject, Assignment, ReviewStatistic, LevelProgression
- srs: stage transition table (swappable policy)
- seeded_random: deterministic random source for forecasts
- catalog: per-call lookup maps
- rounding: half-up rounding of reported numbers
"""

from srs_insight.core.models import (
    Assignment,
    Dataset,
    LearnerProfile,
    LevelProgression,
    Meaning,
    Reading,
    ReadingType,
    ReviewStatistic,
    Subject,
    SubjectType,
)
from srs_insight.core.rounding import round_half_up
from srs_insight.core.seeded_random import SeededRandom, create_forecast_seed
from srs_insight.core.srs import DEFAULT_TRANSITION_TABLE, SrsTransitionTable

__all__ = [
    # Models
    "Assignment",
    "Dataset",
    "LearnerProfile",
    "LevelProgression",
    "Meaning",
    "Reading",
    "ReadingType",
    "ReviewStatistic",
    "Subject",
    "SubjectType",
    # SRS
    "DEFAULT_TRANSITION_TABLE",
    "SrsTransitionTable",
    # Random
    "SeededRandom",
    "create_forecast_seed",
    # Rounding
    "round_half_up",
]
