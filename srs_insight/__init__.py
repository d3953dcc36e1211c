"""
srs-insight: analytics and forecasting engine for SRS (spaced repetition) learners.

Subpackages:
- core: entity models, SRS transition table, seeded random source
- forecast: workload, weekly, level and review queue forecasts
- pace: level pace analysis and completion projections
- analytics: leeches, accuracy, stability, milestones, burns, level progress
- cli: Typer command line
"""

__version__ = "0.1.0"
