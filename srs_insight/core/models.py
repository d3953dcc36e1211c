"""
Entity Models for the SRS Analytics Engine.

The four read-only entity kinds supplied by the data-access layer:
- Subject: a curriculum item (radical, kanji, vocabulary, kana vocabulary)
- Assignment: one learner's SRS progress on one subject
- ReviewStatistic: cumulative answer counts per subject
- LevelProgression: one record per level attempt

Subject variants are decided once, here, from an explicit type tag.
Timestamps are normalized to timezone-aware UTC at ingestion.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from srs_insight.core.rounding import round_half_up

# SRS stage numbers
STAGE_LOCKED = 0
STAGE_APPRENTICE_1 = 1
STAGE_APPRENTICE_4 = 4
STAGE_GURU_1 = 5
STAGE_GURU_2 = 6
STAGE_MASTER = 7
STAGE_ENLIGHTENED = 8
STAGE_BURNED = 9

MAX_LEVEL = 60


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class SubjectType(str, Enum):
    """Curriculum item variant."""

    RADICAL = "radical"
    KANJI = "kanji"
    VOCABULARY = "vocabulary"
    KANA_VOCABULARY = "kana_vocabulary"

    @property
    def has_reading_component(self) -> bool:
        """Only kanji and vocabulary are quizzed on readings."""
        return self in (SubjectType.KANJI, SubjectType.VOCABULARY)

    @property
    def category(self) -> SubjectType:
        """Breakdown bucket: kana vocabulary is reported as vocabulary."""
        if self is SubjectType.KANA_VOCABULARY:
            return SubjectType.VOCABULARY
        return self


class ReadingType(str, Enum):
    """Kanji reading classification."""

    ONYOMI = "onyomi"
    KUNYOMI = "kunyomi"
    NANORI = "nanori"


class _Entity(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Meaning(_Entity):
    meaning: str
    primary: bool = False
    accepted_answer: bool = True


class Reading(_Entity):
    reading: str
    primary: bool = False
    accepted_answer: bool = True
    type: ReadingType | None = None  # kanji only


class Subject(_Entity):
    """A curriculum item. Immutable reference data."""

    id: int
    subject_type: SubjectType = Field(validation_alias=AliasChoices("subject_type", "object"))
    level: int = Field(ge=1, le=MAX_LEVEL)
    characters: str | None = None
    character_image_url: str | None = None  # radicals without a unicode glyph
    meanings: list[Meaning] = Field(default_factory=list)
    readings: list[Reading] = Field(default_factory=list)
    component_subject_ids: list[int] = Field(default_factory=list)
    hidden_at: datetime | None = None
    document_url: str | None = None

    @field_validator("hidden_at")
    @classmethod
    def normalize_hidden_at(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    @property
    def is_removed(self) -> bool:
        """Removed from the curriculum."""
        return self.hidden_at is not None

    @property
    def primary_meaning(self) -> str:
        for meaning in self.meanings:
            if meaning.primary:
                return meaning.meaning
        return self.meanings[0].meaning if self.meanings else "Unknown"

    @property
    def display_character(self) -> str:
        return self.characters or "?"


class Assignment(_Entity):
    """One learner's progress on one subject."""

    subject_id: int
    subject_type: SubjectType
    srs_stage: int = Field(ge=STAGE_LOCKED, le=STAGE_BURNED)
    unlocked_at: datetime | None = None
    started_at: datetime | None = None
    available_at: datetime | None = None
    passed_at: datetime | None = None  # sticky: never cleared once set
    burned_at: datetime | None = None
    hidden: bool = False

    @field_validator(
        "unlocked_at", "started_at", "available_at", "passed_at", "burned_at"
    )
    @classmethod
    def normalize_timestamps(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)

    @property
    def is_started(self) -> bool:
        return self.started_at is not None

    @property
    def is_passed(self) -> bool:
        """Ever reached guru, regardless of the current stage."""
        return self.passed_at is not None

    @property
    def is_burned(self) -> bool:
        return self.srs_stage == STAGE_BURNED


class ReviewStatistic(_Entity):
    """Cumulative answer counts for one subject."""

    subject_id: int
    subject_type: SubjectType
    meaning_correct: int = Field(default=0, ge=0)
    meaning_incorrect: int = Field(default=0, ge=0)
    reading_correct: int = Field(default=0, ge=0)
    reading_incorrect: int = Field(default=0, ge=0)
    percentage_correct: int | None = Field(default=None, ge=0, le=100)
    hidden: bool = False

    @model_validator(mode="after")
    def derive_percentage(self) -> ReviewStatistic:
        if self.percentage_correct is None:
            correct = self.meaning_correct + self.effective_reading_correct
            total = correct + self.meaning_incorrect + self.effective_reading_incorrect
            value = round_half_up(correct / total * 100) if total > 0 else 100
            object.__setattr__(self, "percentage_correct", value)
        return self

    @property
    def effective_reading_correct(self) -> int:
        """Reading-correct count, zero for types without a reading component."""
        return self.reading_correct if self.subject_type.has_reading_component else 0

    @property
    def effective_reading_incorrect(self) -> int:
        """Reading-incorrect count, zero for types without a reading component."""
        return self.reading_incorrect if self.subject_type.has_reading_component else 0

    @property
    def total_correct(self) -> int:
        return self.meaning_correct + self.effective_reading_correct

    @property
    def total_incorrect(self) -> int:
        return self.meaning_incorrect + self.effective_reading_incorrect

    @property
    def total_reviews(self) -> int:
        return self.total_correct + self.total_incorrect


class LevelProgression(_Entity):
    """One attempt at one level."""

    level: int = Field(ge=1, le=MAX_LEVEL)
    unlocked_at: datetime | None = None
    started_at: datetime | None = None
    passed_at: datetime | None = None
    abandoned_at: datetime | None = None
    created_at: datetime

    @field_validator(
        "unlocked_at", "started_at", "passed_at", "abandoned_at", "created_at"
    )
    @classmethod
    def normalize_timestamps(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class LearnerProfile(_Entity):
    id: str
    level: int = Field(ge=1, le=MAX_LEVEL)


class Dataset(_Entity):
    """All collections for one learner, as handed over by the data-access layer."""

    user: LearnerProfile
    subjects: list[Subject] = Field(default_factory=list)
    assignments: list[Assignment] = Field(default_factory=list)
    review_statistics: list[ReviewStatistic] = Field(default_factory=list)
    level_progressions: list[LevelProgression] = Field(default_factory=list)
