"""Configuration package for lingueta."""

from lingueta.config.app_config import (
    AppConfig,
    LessonPointsConfig,
    ProgressConfig,
    QuizConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "LessonPointsConfig",
    "ProgressConfig",
    "QuizConfig",
    "clear_config_cache",
    "load_app_config",
]
