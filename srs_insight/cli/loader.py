"""Load a learner dataset and reference kanji lists from JSON files."""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from srs_insight.analytics.jlpt_readiness import JoyoGrade
from srs_insight.core.models import Dataset


class DatasetLoadError(Exception):
    """The dataset file is missing, unreadable or fails validation."""


def load_dataset(path: Path) -> Dataset:
    """
    Read and validate a dataset file.

    Expected shape: {"user": {"id", "level"}, "subjects": [...],
    "assignments": [...], "review_statistics": [...], "level_progressions": [...]}.

    Raises:
        DatasetLoadError: If the file cannot be read or does not validate
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DatasetLoadError(f"Cannot read {path}: {e}") from e

    try:
        dataset = Dataset.model_validate_json(raw)
    except ValidationError as e:
        raise DatasetLoadError(f"Invalid dataset {path}: {e.error_count()} validation error(s)\n{e}") from e

    logger.debug(
        f"Loaded {path}: {len(dataset.subjects)} subjects, {len(dataset.assignments)} assignments, "
        f"{len(dataset.review_statistics)} review statistics, "
        f"{len(dataset.level_progressions)} level progressions"
    )
    return dataset


JoyoKanjiAdapter = TypeAdapter(dict[JoyoGrade, list[str]])


def load_joyo_kanji(path: Path) -> dict[JoyoGrade, list[str]]:
    """
    Read a Jōyō kanji list: {"grade_1": ["一", ...], ..., "secondary": [...]}.

    Raises:
        DatasetLoadError: If the file cannot be read or does not validate
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DatasetLoadError(f"Cannot read {path}: {e}") from e

    try:
        joyo = JoyoKanjiAdapter.validate_json(raw)
    except ValidationError as e:
        raise DatasetLoadError(f"Invalid Jōyō kanji list {path}: {e.error_count()} validation error(s)\n{e}") from e

    logger.debug(f"Loaded {path}: {sum(len(chars) for chars in joyo.values())} Jōyō kanji")
    return joyo
