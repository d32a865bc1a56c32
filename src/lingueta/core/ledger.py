"""Progress Ledger module.

Responsibilities:
- Single authoritative mutator of LearningProgress and UserStatistics
- Award points for completed lessons and quizzes
- Maintain study-day streaks and ranks
- Persist the whole user record after every award

The ledger keeps the in-memory user as the source of truth for the session;
a failed save loses durability only until the next successful one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

import structlog

from lingueta.config.app_config import AppConfig, load_app_config
from lingueta.core.catalog import Catalog
from lingueta.core.models import Achievement, Lesson
from lingueta.core.profile import (
    LearningProgress,
    ProfileStore,
    ProfileStoreError,
    Rank,
    User,
)

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current local time (timezone-aware)."""
    return datetime.now().astimezone()


# =============================================================================
# AWARD SOURCES
# =============================================================================


@dataclass(frozen=True)
class LessonCompletion:
    """Points earned by finishing a specific lesson.

    study_seconds, the time spent walking the lesson, is added to study time
    in the same save as the points.
    """

    lesson_number: int
    study_seconds: float = 0.0


@dataclass(frozen=True)
class QuizCompletion:
    """Points earned by finishing a quiz (not tied to a lesson)."""


AwardSource = LessonCompletion | QuizCompletion


@dataclass(frozen=True)
class AwardOutcome:
    """What an award changed."""

    language_code: str
    points: int
    total_points: int
    rank: Rank
    previous_rank: Rank
    current_streak: int
    longest_streak: int
    newly_completed: bool

    @property
    def rank_changed(self) -> bool:
        return self.rank is not self.previous_rank


def date_key(moment: datetime) -> str:
    """Study-day key in yyyy-mm-dd format."""
    return moment.date().isoformat()


# =============================================================================
# LEDGER
# =============================================================================


class ProgressLedger:
    """Owns a user's progress and statistics.

    Args:
        store: Profile Store used for load() / save(user)
        config: Application config (defaults to load_app_config())
        clock: Returns the current local time; injected for tests
    """

    def __init__(
        self,
        store: ProfileStore,
        config: AppConfig | None = None,
        clock: Clock | None = None,
    ):
        self._store = store
        self._config = config or load_app_config()
        self._clock = clock or local_now
        self._user: User | None = store.load()

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    @property
    def user(self) -> User | None:
        return self._user

    def establish_profile(self, user: User) -> None:
        """Install a new user record and persist it."""
        self._user = user
        self._persist()
        logger.info("profile_established", user_id=user.user_id)

    def select_language(self, language_code: str) -> bool:
        """Add a language to the user's selection. False if no profile."""
        if self._user is None:
            return False
        if language_code not in self._user.selected_languages:
            self._user.selected_languages.append(language_code)
            self._persist()
        return True

    # -------------------------------------------------------------------------
    # Awards
    # -------------------------------------------------------------------------

    def award(self, language_code: str, source: AwardSource, points: int) -> AwardOutcome | None:
        """Credit points for a lesson or quiz completion.

        Points are not deduplicated per lesson: awarding the same lesson twice
        credits its points twice.

        Returns:
            AwardOutcome, or None when no profile is loaded.
        """
        user = self._user
        if user is None:
            logger.debug("award_skipped_no_profile", language_code=language_code)
            return None

        now = self._clock()
        progress = self._ensure_progress(user, language_code)

        newly_completed = False
        if isinstance(source, LessonCompletion):
            newly_completed = progress.mark_completed(source.lesson_number)
            if source.study_seconds > 0:
                progress.study_time_this_week += source.study_seconds
                user.statistics.total_study_time += source.study_seconds
        else:
            user.statistics.total_quizzes_taken += 1

        progress.total_points += points
        progress.last_study_date = now

        stats = user.statistics
        previous_rank = stats.rank
        stats.total_lessons_completed += 1
        stats.total_points += points
        stats.update_rank()

        self._update_streak(user, now)
        progress.current_streak = stats.current_streak

        self._persist()

        logger.info(
            "points_awarded",
            language_code=language_code,
            source=type(source).__name__,
            points=points,
            total_points=stats.total_points,
            rank=stats.rank.key,
            streak=stats.current_streak,
        )

        return AwardOutcome(
            language_code=language_code,
            points=points,
            total_points=stats.total_points,
            rank=stats.rank,
            previous_rank=previous_rank,
            current_streak=stats.current_streak,
            longest_streak=stats.longest_streak,
            newly_completed=newly_completed,
        )

    def record_study_time(self, language_code: str, seconds: float) -> None:
        """Add study time to the language and the aggregate statistics."""
        user = self._user
        if user is None or seconds <= 0:
            return
        progress = self._ensure_progress(user, language_code)
        progress.study_time_this_week += seconds
        user.statistics.total_study_time += seconds
        self._persist()

    def unlock_achievements(self, achievements: list[Achievement]) -> list[Achievement]:
        """Store achievements not unlocked before; returns the new ones."""
        user = self._user
        if user is None:
            return []
        known = {a.title for a in user.achievements}
        fresh = [a for a in achievements if a.title not in known]
        if fresh:
            user.achievements.extend(fresh)
            self._persist()
            logger.info("achievements_unlocked", titles=[a.title for a in fresh])
        return fresh

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def progress_for(self, language_code: str) -> LearningProgress | None:
        if self._user is None:
            return None
        return self._user.progress.get(language_code)

    def is_lesson_completed(self, language_code: str, lesson_number: int) -> bool:
        progress = self.progress_for(language_code)
        return progress is not None and progress.is_completed(lesson_number)

    def completion_percentage(self, language_code: str) -> float:
        progress = self.progress_for(language_code)
        if progress is None:
            return 0.0
        return progress.completion_percentage(self._config.progress.completion_denominator)

    def next_lesson(self, catalog: Catalog, language_code: str) -> Lesson | None:
        """First lesson, by ascending number, not yet completed."""
        progress = self.progress_for(language_code)
        completed = set(progress.completed_lessons) if progress else set()
        for lesson in catalog.lessons(language_code):
            if lesson.lesson_number not in completed:
                return lesson
        return None

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _ensure_progress(self, user: User, language_code: str) -> LearningProgress:
        progress = user.progress.get(language_code)
        if progress is None:
            progress = LearningProgress(
                language_code=language_code,
                weekly_goal=user.goals.weekly_goal_lessons or self._config.progress.default_weekly_goal,
            )
            user.progress[language_code] = progress
            logger.debug("progress_created", language_code=language_code)
        return progress

    def _update_streak(self, user: User, now: datetime) -> None:
        """Advance the streak; a gap of two or more days restarts it at 1."""
        stats = user.statistics
        today = date_key(now)
        yesterday = date_key(now - timedelta(days=1))

        stats.study_days.add(today)

        if yesterday in stats.study_days or stats.current_streak == 0:
            stats.current_streak += 1
        else:
            stats.current_streak = 1

        if stats.current_streak > stats.longest_streak:
            stats.longest_streak = stats.current_streak

    def _persist(self) -> None:
        if self._user is None:
            return
        try:
            self._store.save(self._user)
        except (ProfileStoreError, OSError) as e:
            logger.error("profile_save_failed", error=str(e))
