"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml
with fallback to built-in defaults.

Usage:
    from lingueta.config.app_config import load_app_config

    config = load_app_config()
    seconds = config.quiz.seconds_per_question
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")


@dataclass
class QuizConfig:
    """Quiz generation and timing settings."""

    default_question_count: int = 10
    seconds_per_question: int = 30
    daily_seconds_per_question: int = 45
    daily_bonus_points: int = 50
    daily_lesson_count: int = 5
    tick_interval_seconds: float = 1.0


@dataclass
class LessonPointsConfig:
    """Point award formula for a completed lesson."""

    base: int = 50
    per_vocabulary: int = 5
    per_dialogue: int = 10


@dataclass
class ProgressConfig:
    """Progress bookkeeping settings."""

    # Fixed denominator, independent of a language's real lesson count
    completion_denominator: int = 50
    default_weekly_goal: int = 5


@dataclass
class AppConfig:
    """Application-wide configuration."""

    quiz: QuizConfig = field(default_factory=QuizConfig)
    lesson_points: LessonPointsConfig = field(default_factory=LessonPointsConfig)
    progress: ProgressConfig = field(default_factory=ProgressConfig)
    paths: dict[str, str] = field(default_factory=dict)

    @property
    def state_dir(self) -> Path:
        return Path(self.paths.get("state_dir", "data/state"))

    @property
    def catalog_dir(self) -> Path:
        return Path(self.paths.get("catalog_dir", "data/catalog"))


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "quiz": {
            "default_question_count": 10,
            "seconds_per_question": 30,
            "daily_seconds_per_question": 45,
            "daily_bonus_points": 50,
            "daily_lesson_count": 5,
            "tick_interval_seconds": 1.0,
        },
        "lesson_points": {
            "base": 50,
            "per_vocabulary": 5,
            "per_dialogue": 10,
        },
        "progress": {
            "completion_denominator": 50,
            "default_weekly_goal": 5,
        },
        "paths": {
            "state_dir": "data/state",
            "catalog_dir": "data/catalog",
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    quiz_data = {**defaults["quiz"], **(data.get("quiz") or {})}
    quiz = QuizConfig(
        default_question_count=int(quiz_data["default_question_count"]),
        seconds_per_question=int(quiz_data["seconds_per_question"]),
        daily_seconds_per_question=int(quiz_data["daily_seconds_per_question"]),
        daily_bonus_points=int(quiz_data["daily_bonus_points"]),
        daily_lesson_count=int(quiz_data["daily_lesson_count"]),
        tick_interval_seconds=float(quiz_data["tick_interval_seconds"]),
    )

    points_data = {**defaults["lesson_points"], **(data.get("lesson_points") or {})}
    lesson_points = LessonPointsConfig(
        base=int(points_data["base"]),
        per_vocabulary=int(points_data["per_vocabulary"]),
        per_dialogue=int(points_data["per_dialogue"]),
    )

    progress_data = {**defaults["progress"], **(data.get("progress") or {})}
    progress = ProgressConfig(
        completion_denominator=int(progress_data["completion_denominator"]),
        default_weekly_goal=int(progress_data["default_weekly_goal"]),
    )

    paths = {**defaults["paths"], **(data.get("paths") or {})}

    return AppConfig(quiz=quiz, lesson_points=lesson_points, progress=progress, paths=paths)


def load_app_config(force_reload: bool = False, config_file: Path | None = None) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.
        config_file: Override config file location (mainly for tests).

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    source = config_file or CONFIG_FILE
    data: dict[str, Any]

    if source.exists():
        logger.debug("loading_app_config", source=str(source))
        data = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
