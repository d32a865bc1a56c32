"""User profile module.

Responsibilities:
- Model the durable user record (goals, preferences, progress, statistics)
- Derive ranks from cumulative points
- Persist the whole record through a Profile Store (load / save)

State persistence:
- data/state/profile_v1.json
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

import structlog

from lingueta.core.models import Achievement, Difficulty

logger = structlog.get_logger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

PROFILE_SCHEMA = "profile_v1"
PROFILE_FILENAME = "profile_v1.json"

DEFAULT_COMPLETION_DENOMINATOR = 50


class ProfileStoreError(Exception):
    """Error reading or writing the profile record."""

    pass


# =============================================================================
# RANKS
# =============================================================================


class Rank(Enum):
    """Tier derived from cumulative points."""

    NOVICE = ("novice", 0, "star")
    APPRENTICE = ("apprentice", 500, "star.fill")
    SCHOLAR = ("scholar", 1500, "graduationcap")
    EXPERT = ("expert", 3000, "crown")
    MASTER = ("master", 6000, "crown.fill")
    GRANDMASTER = ("grandmaster", 10000, "sparkles")

    def __init__(self, key: str, points_required: int, icon: str):
        self.key = key
        self.points_required = points_required
        self.icon = icon

    @property
    def label(self) -> str:
        return self.key.capitalize()

    @classmethod
    def from_key(cls, key: str) -> Rank:
        for rank in cls:
            if rank.key == key:
                return rank
        raise ValueError(f"Unknown rank: {key}")


def rank_for_points(points: int) -> Rank:
    """Highest rank whose threshold is <= points."""
    for rank in reversed(list(Rank)):
        if points >= rank.points_required:
            return rank
    return Rank.NOVICE


# =============================================================================
# GOALS & PREFERENCES
# =============================================================================


class GoalType(Enum):
    """Onboarding presets for study goals."""

    CASUAL = ("casual", 10, 3)
    REGULAR = ("regular", 20, 7)
    INTENSIVE = ("intensive", 45, 14)

    def __init__(self, key: str, daily_minutes: int, weekly_lessons: int):
        self.key = key
        self.daily_minutes = daily_minutes
        self.weekly_lessons = weekly_lessons

    @classmethod
    def from_key(cls, key: str) -> GoalType:
        for goal in cls:
            if goal.key == key:
                return goal
        raise ValueError(f"Unknown goal type: {key}")


@dataclass
class LearningGoals:
    """Study goals set during onboarding."""

    daily_goal_minutes: int = 15
    weekly_goal_lessons: int = 5
    target_proficiency: Difficulty = Difficulty.INTERMEDIATE

    @classmethod
    def from_goal_type(cls, goal: GoalType) -> LearningGoals:
        return cls(daily_goal_minutes=goal.daily_minutes, weekly_goal_lessons=goal.weekly_lessons)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "daily_goal_minutes": self.daily_goal_minutes,
            "weekly_goal_lessons": self.weekly_goal_lessons,
            "target_proficiency": self.target_proficiency.value,
        }


@dataclass
class UserPreferences:
    """Display preferences (stored, not acted upon by the engine)."""

    show_translations: bool = True
    auto_play_audio: bool = True
    sound_enabled: bool = True
    notifications_enabled: bool = True
    difficulty_level: Difficulty = Difficulty.BEGINNER

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "show_translations": self.show_translations,
            "auto_play_audio": self.auto_play_audio,
            "sound_enabled": self.sound_enabled,
            "notifications_enabled": self.notifications_enabled,
            "difficulty_level": self.difficulty_level.value,
        }


# =============================================================================
# PROGRESS & STATISTICS
# =============================================================================


@dataclass
class LearningProgress:
    """Progress for one language. Mutated only by the Progress Ledger."""

    language_code: str
    completed_lessons: list[int] = field(default_factory=list)  # set semantics
    total_points: int = 0
    current_streak: int = 0
    last_study_date: datetime | None = None
    weekly_goal: int = 5
    study_time_this_week: float = 0.0  # seconds

    def mark_completed(self, lesson_number: int) -> bool:
        """Add a lesson number; returns False if it was already present."""
        if lesson_number in self.completed_lessons:
            return False
        self.completed_lessons.append(lesson_number)
        return True

    def is_completed(self, lesson_number: int) -> bool:
        return lesson_number in self.completed_lessons

    def completion_percentage(self, denominator: int = DEFAULT_COMPLETION_DENOMINATOR) -> float:
        if not self.completed_lessons or denominator <= 0:
            return 0.0
        return len(self.completed_lessons) / denominator * 100.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "language_code": self.language_code,
            "completed_lessons": self.completed_lessons,
            "total_points": self.total_points,
            "current_streak": self.current_streak,
            "last_study_date": self.last_study_date.isoformat() if self.last_study_date else None,
            "weekly_goal": self.weekly_goal,
            "study_time_this_week": self.study_time_this_week,
        }


@dataclass
class UserStatistics:
    """Aggregate statistics across all languages."""

    total_study_time: float = 0.0
    total_lessons_completed: int = 0
    total_words_learned: int = 0
    total_quizzes_taken: int = 0
    average_quiz_score: float = 0.0
    longest_streak: int = 0
    current_streak: int = 0
    total_points: int = 0
    rank: Rank = Rank.NOVICE
    study_days: set[str] = field(default_factory=set)  # "yyyy-mm-dd"

    def update_rank(self) -> Rank:
        self.rank = rank_for_points(self.total_points)
        return self.rank

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_study_time": self.total_study_time,
            "total_lessons_completed": self.total_lessons_completed,
            "total_words_learned": self.total_words_learned,
            "total_quizzes_taken": self.total_quizzes_taken,
            "average_quiz_score": self.average_quiz_score,
            "longest_streak": self.longest_streak,
            "current_streak": self.current_streak,
            "total_points": self.total_points,
            "rank": self.rank.key,
            "study_days": sorted(self.study_days),
        }


# =============================================================================
# USER
# =============================================================================


@dataclass
class User:
    """The single durable user record."""

    name: str
    user_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    native_language: str = "en"
    selected_languages: list[str] = field(default_factory=list)
    goals: LearningGoals = field(default_factory=LearningGoals)
    preferences: UserPreferences = field(default_factory=UserPreferences)
    progress: dict[str, LearningProgress] = field(default_factory=dict)
    achievements: list[Achievement] = field(default_factory=list)
    statistics: UserStatistics = field(default_factory=UserStatistics)
    date_joined: str = ""

    def __post_init__(self):
        if not self.date_joined:
            self.date_joined = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "$schema": PROFILE_SCHEMA,
            "user_id": self.user_id,
            "name": self.name,
            "native_language": self.native_language,
            "selected_languages": self.selected_languages,
            "goals": self.goals.to_dict(),
            "preferences": self.preferences.to_dict(),
            "progress": {code: prog.to_dict() for code, prog in self.progress.items()},
            "achievements": [a.to_dict() for a in self.achievements],
            "statistics": self.statistics.to_dict(),
            "date_joined": self.date_joined,
        }


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def user_from_dict(data: dict[str, Any]) -> User:
    """Rebuild a User from its serialized form.

    Raises:
        KeyError / ValueError: On structurally invalid data.
    """
    goals_data = data.get("goals", {})
    prefs_data = data.get("preferences", {})
    stats_data = data.get("statistics", {})

    progress: dict[str, LearningProgress] = {}
    for code, prog_data in data.get("progress", {}).items():
        progress[code] = LearningProgress(
            language_code=prog_data.get("language_code", code),
            completed_lessons=list(prog_data.get("completed_lessons", [])),
            total_points=prog_data.get("total_points", 0),
            current_streak=prog_data.get("current_streak", 0),
            last_study_date=_parse_datetime(prog_data.get("last_study_date")),
            weekly_goal=prog_data.get("weekly_goal", 5),
            study_time_this_week=prog_data.get("study_time_this_week", 0.0),
        )

    statistics = UserStatistics(
        total_study_time=stats_data.get("total_study_time", 0.0),
        total_lessons_completed=stats_data.get("total_lessons_completed", 0),
        total_words_learned=stats_data.get("total_words_learned", 0),
        total_quizzes_taken=stats_data.get("total_quizzes_taken", 0),
        average_quiz_score=stats_data.get("average_quiz_score", 0.0),
        longest_streak=stats_data.get("longest_streak", 0),
        current_streak=stats_data.get("current_streak", 0),
        total_points=stats_data.get("total_points", 0),
        rank=Rank.from_key(stats_data.get("rank", Rank.NOVICE.key)),
        study_days=set(stats_data.get("study_days", [])),
    )

    return User(
        user_id=data["user_id"],
        name=data["name"],
        native_language=data.get("native_language", "en"),
        selected_languages=list(data.get("selected_languages", [])),
        goals=LearningGoals(
            daily_goal_minutes=goals_data.get("daily_goal_minutes", 15),
            weekly_goal_lessons=goals_data.get("weekly_goal_lessons", 5),
            target_proficiency=Difficulty(goals_data.get("target_proficiency", "intermediate")),
        ),
        preferences=UserPreferences(
            show_translations=prefs_data.get("show_translations", True),
            auto_play_audio=prefs_data.get("auto_play_audio", True),
            sound_enabled=prefs_data.get("sound_enabled", True),
            notifications_enabled=prefs_data.get("notifications_enabled", True),
            difficulty_level=Difficulty(prefs_data.get("difficulty_level", "beginner")),
        ),
        progress=progress,
        achievements=[Achievement.from_dict(a) for a in data.get("achievements", [])],
        statistics=statistics,
        date_joined=data.get("date_joined", ""),
    )


# =============================================================================
# PROFILE STORES
# =============================================================================


class ProfileStore(Protocol):
    """Durable key-value persistence of the single user record."""

    def load(self) -> User | None: ...

    def save(self, user: User) -> None: ...


class MemoryProfileStore:
    """Profile store kept in memory (tests, embedding)."""

    def __init__(self, user: User | None = None):
        self._data: dict[str, Any] | None = user.to_dict() if user else None
        self.save_count = 0

    def load(self) -> User | None:
        if self._data is None:
            return None
        return user_from_dict(self._data)

    def save(self, user: User) -> None:
        # Round-trip through the serialized form so callers never share state
        self._data = json.loads(json.dumps(user.to_dict()))
        self.save_count += 1


class JsonProfileStore:
    """Profile store writing data/state/profile_v1.json."""

    def __init__(self, data_dir: Path | None = None):
        if data_dir is None:
            data_dir = Path("data")
        self.path = data_dir / "state" / PROFILE_FILENAME

    def load(self) -> User | None:
        """Load the profile, or None if missing or corrupted."""
        if not self.path.exists():
            logger.debug("profile_not_found", path=str(self.path))
            return None

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)

            if data.get("$schema") != PROFILE_SCHEMA:
                logger.warning(
                    "profile_invalid_schema",
                    expected=PROFILE_SCHEMA,
                    got=data.get("$schema"),
                )
                return None

            return user_from_dict(data)

        except (json.JSONDecodeError, OSError, KeyError, ValueError) as e:
            logger.error("profile_load_failed", error=str(e))
            return None

    def save(self, user: User) -> None:
        """Replace the whole record on disk.

        Raises:
            ProfileStoreError: If the file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(user.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ProfileStoreError(f"Cannot write profile: {e}") from e

        logger.info("profile_saved", path=str(self.path))


def create_user(
    name: str,
    native_language: str = "en",
    goal: GoalType | None = None,
) -> User:
    """Create a fresh user record (onboarding)."""
    goals = LearningGoals.from_goal_type(goal) if goal else LearningGoals()
    return User(name=name, native_language=native_language, goals=goals)
