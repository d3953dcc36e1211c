"""
Configuration settings for the srs-insight analytics engine.

Uses Pydantic Settings for environment variable management with .env file support.
Engine functions never read these settings directly; the CLI resolves them and
passes explicit parameters into each calculation.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from srs_insight.analytics.jlpt_readiness import SrsThreshold
from srs_insight.analytics.leeches import LeechThresholds
from srs_insight.pace.analyzer import PaceOptions


class Settings(BaseSettings):
    """Learner preferences and engine defaults loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SRS_INSIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Workload Forecast
    # ========================================
    lessons_per_day: int = Field(
        default=15,
        ge=0,
        description="New lessons started per day in the workload simulation",
    )
    forecast_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Forecast horizon in days",
    )
    week_start: int = Field(
        default=6,
        ge=0,
        le=6,
        description="First day of the week for weekly rollups (Python weekday, 6 = Sunday)",
    )
    forecast_include_vocabulary: bool = Field(
        default=True,
        description="Count vocabulary lessons toward level completion in the level forecast",
    )

    # ========================================
    # Pace Analysis
    # ========================================
    averaging_method: Literal["trimmed_mean", "median"] = Field(
        default="trimmed_mean",
        description="Statistic used for the expected days-per-level pace",
    )
    auto_exclude_breaks: bool = Field(
        default=True,
        description="Exclude statistical outlier levels (breaks) from the pace average",
    )
    use_custom_threshold: bool = Field(
        default=False,
        description="Use a fixed day threshold instead of MAD outlier detection",
    )
    custom_threshold_days: int = Field(
        default=60,
        ge=1,
        le=365,
        description="Levels taking this many days or more are excluded when the custom threshold is on",
    )

    # ========================================
    # Leech Detection
    # ========================================
    leech_min_reviews: int = Field(
        default=10,
        ge=1,
        description="Minimum total reviews before an item can count as a leech",
    )
    leech_max_accuracy: int = Field(
        default=75,
        ge=0,
        le=100,
        description="Maximum accuracy percentage for an item to count as a leech",
    )
    include_burned_leeches: bool = Field(
        default=False,
        description="Include burned items in leech detection",
    )

    # ========================================
    # Kanji Readiness
    # ========================================
    readiness_threshold: SrsThreshold = Field(
        default=SrsThreshold.GURU,
        description="Lowest SRS stage that counts a Jōyō kanji as known",
    )
    joyo_kanji_file: Path | None = Field(
        default=None,
        description="JSON file mapping Jōyō grades to kanji lists",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )

    def get_leech_thresholds(self) -> LeechThresholds:
        """Get leech detection thresholds as an explicit parameter object."""
        return LeechThresholds(
            min_reviews=self.leech_min_reviews,
            max_accuracy=self.leech_max_accuracy,
            include_burned=self.include_burned_leeches,
        )

    def get_pace_options(self) -> PaceOptions:
        """Get pace analysis options as an explicit parameter object."""
        return PaceOptions(
            auto_exclude_breaks=self.auto_exclude_breaks,
            custom_threshold_days=self.custom_threshold_days if self.use_custom_threshold else None,
            averaging_method=self.averaging_method,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
