"""Analytics module.

Read-only derivations over quiz history and the user record:
- Quiz statistics and performance level
- Letter grades and pass/fail
- Weak exercise types and study recommendations
- Achievements triggered by a completed quiz
- Per-language progress statistics
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence

from lingueta.core.catalog import Catalog
from lingueta.core.models import Achievement, AchievementCategory, ExerciseType
from lingueta.core.profile import DEFAULT_COMPLETION_DENOMINATOR, User
from lingueta.core.quiz import QuizResult

# =============================================================================
# CONSTANTS
# =============================================================================

PASS_THRESHOLD = 60.0
WEAK_AREA_THRESHOLD = 0.7
RECENT_WINDOW = 3
QUIZ_MASTER_COUNT = 5
SPEED_DEMON_RATIO = 0.5

RECOMMENDATIONS = {
    ExerciseType.MULTIPLE_CHOICE: "Practice more vocabulary recognition exercises",
    ExerciseType.FILL_IN_THE_BLANK: "Focus on grammar and sentence structure",
    ExerciseType.TRANSLATION: "Spend more time on translation exercises",
    ExerciseType.PRONUNCIATION: "Practice pronunciation with audio exercises",
    ExerciseType.LISTENING: "Improve listening skills with dialogue practice",
}

ENCOURAGEMENT = (
    "Great job! Keep up the consistent practice",
    "Try increasing the difficulty level",
)


# =============================================================================
# QUIZ STATISTICS
# =============================================================================


@dataclass
class QuizStatistics:
    """Aggregate quiz performance for one language."""

    total_quizzes: int = 0
    total_questions: int = 0
    correct_answers: int = 0
    average_score: float = 0.0
    accuracy: float = 0.0  # percent
    best_score: int = 0
    recent_improvement: float = 0.0

    @property
    def performance_level(self) -> str:
        if self.accuracy >= 90:
            return "Excellent"
        if self.accuracy >= 80:
            return "Very Good"
        if self.accuracy >= 70:
            return "Good"
        if self.accuracy >= 60:
            return "Fair"
        return "Needs Improvement"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_quizzes": self.total_quizzes,
            "total_questions": self.total_questions,
            "correct_answers": self.correct_answers,
            "average_score": self.average_score,
            "accuracy": self.accuracy,
            "best_score": self.best_score,
            "recent_improvement": self.recent_improvement,
            "performance_level": self.performance_level,
        }


def _for_language(history: Sequence[QuizResult], language_code: str) -> list[QuizResult]:
    return [r for r in history if r.language_code == language_code]


def _average_score(results: Sequence[QuizResult]) -> float:
    if not results:
        return 0.0
    return sum(r.score for r in results) / len(results)


def recent_improvement(results: Sequence[QuizResult]) -> float:
    """Average score of the last few quizzes minus that of the earlier ones.

    The earlier window always holds at least the first result, so with fewer
    than four quizzes the two windows overlap.
    """
    if len(results) < 2:
        return 0.0
    recent = results[-RECENT_WINDOW:]
    older = results[: max(1, len(results) - RECENT_WINDOW)]
    return _average_score(recent) - _average_score(older)


def quiz_statistics(history: Sequence[QuizResult], language_code: str) -> QuizStatistics:
    """Summarize quiz history for a language.

    Args:
        history: Completed results in completion order
        language_code: Language to summarize

    Returns:
        QuizStatistics (all zero when there is no history).
    """
    results = _for_language(history, language_code)
    if not results:
        return QuizStatistics()

    total_questions = sum(r.question_count for r in results)
    correct = sum(r.correct_answers for r in results)

    return QuizStatistics(
        total_quizzes=len(results),
        total_questions=total_questions,
        correct_answers=correct,
        average_score=_average_score(results),
        accuracy=correct / total_questions * 100 if total_questions > 0 else 0.0,
        best_score=max(r.score for r in results),
        recent_improvement=recent_improvement(results),
    )


# =============================================================================
# GRADES
# =============================================================================


def grade(percentage: float) -> str:
    """Letter grade for a quiz percentage."""
    if 90 <= percentage <= 100:
        return "A+"
    if 80 <= percentage < 90:
        return "A"
    if 70 <= percentage < 80:
        return "B"
    if 60 <= percentage < 70:
        return "C"
    if 50 <= percentage < 60:
        return "D"
    return "F"


def is_passed(percentage: float) -> bool:
    return percentage >= PASS_THRESHOLD


# =============================================================================
# WEAK AREAS
# =============================================================================


def type_accuracy(history: Sequence[QuizResult], language_code: str) -> dict[ExerciseType, tuple[int, int]]:
    """(correct, total) answers per exercise type.

    Unanswered questions count as answered with the empty string.
    """
    performance: dict[ExerciseType, tuple[int, int]] = {}
    for result in _for_language(history, language_code):
        for index, question in enumerate(result.questions):
            correct, total = performance.get(question.type, (0, 0))
            if question.is_correct(result.answer_for(index)):
                correct += 1
            performance[question.type] = (correct, total + 1)
    return performance


def weak_areas(history: Sequence[QuizResult], language_code: str) -> list[ExerciseType]:
    """Exercise types answered correctly less than 70% of the time."""
    performance = type_accuracy(history, language_code)
    return [
        exercise_type
        for exercise_type in ExerciseType
        if exercise_type in performance
        and performance[exercise_type][0] / performance[exercise_type][1] < WEAK_AREA_THRESHOLD
    ]


def recommendations(history: Sequence[QuizResult], language_code: str) -> list[str]:
    """One study tip per weak area, or encouragement when there are none."""
    tips = [RECOMMENDATIONS[area] for area in weak_areas(history, language_code)]
    if not tips:
        tips = list(ENCOURAGEMENT)
    return tips


# =============================================================================
# ACHIEVEMENTS
# =============================================================================


def achievements_triggered(
    result: QuizResult,
    completed_quiz_count: int,
    now: datetime | None = None,
) -> list[Achievement]:
    """Achievements earned by a just-completed quiz.

    Each rule is independent, so one quiz can trigger several.

    Args:
        result: The completed quiz
        completed_quiz_count: Quizzes completed for the language, this one included
        now: Unlock timestamp (defaults to the result's completion time)

    Returns:
        Unlocked achievements, possibly empty.
    """
    unlocked_at = now or result.completed_at
    earned: list[Achievement] = []

    if result.question_count > 0 and result.percentage == 100.0:
        earned.append(
            Achievement(
                title="Perfect Score!",
                description="Got 100% on a quiz",
                icon="star.fill",
                requirement=1,
                category=AchievementCategory.POINTS,
                is_unlocked=True,
                unlocked_at=unlocked_at,
            )
        )

    if result.question_count > 0:
        per_question = result.elapsed_seconds / result.question_count
        allotted = result.time_limit / result.question_count
        if per_question < allotted * SPEED_DEMON_RATIO:
            earned.append(
                Achievement(
                    title="Speed Demon",
                    description="Completed quiz in record time",
                    icon="bolt.fill",
                    requirement=1,
                    category=AchievementCategory.POINTS,
                    is_unlocked=True,
                    unlocked_at=unlocked_at,
                )
            )

    if completed_quiz_count == QUIZ_MASTER_COUNT:
        earned.append(
            Achievement(
                title="Quiz Master",
                description="Completed 5 quizzes",
                icon="graduationcap.fill",
                requirement=QUIZ_MASTER_COUNT,
                category=AchievementCategory.POINTS,
                is_unlocked=True,
                unlocked_at=unlocked_at,
            )
        )

    return earned


# =============================================================================
# LANGUAGE STATISTICS
# =============================================================================


@dataclass
class LanguageStatistics:
    """Progress summary for one language."""

    language_code: str
    completed_lessons: int = 0
    total_lessons: int = 0
    total_points: int = 0
    current_streak: int = 0
    study_time_this_week: float = 0.0  # seconds
    completion_percentage: float = 0.0

    @property
    def average_points_per_lesson(self) -> float:
        if self.completed_lessons == 0:
            return 0.0
        return self.total_points / self.completed_lessons

    @property
    def estimated_time_to_complete(self) -> float:
        """Seconds still needed at the current pace; 0 when there is no pace yet."""
        if self.completed_lessons == 0 or self.study_time_this_week == 0:
            return 0.0
        remaining = max(0, self.total_lessons - self.completed_lessons)
        return self.study_time_this_week / self.completed_lessons * remaining

    @property
    def proficiency_level(self) -> str:
        percentage = self.completion_percentage
        if percentage < 20:
            return "Beginner"
        if percentage < 50:
            return "Elementary"
        if percentage < 75:
            return "Intermediate"
        if percentage < 90:
            return "Advanced"
        return "Expert"


def language_statistics(
    user: User,
    catalog: Catalog,
    language_code: str,
    denominator: int = DEFAULT_COMPLETION_DENOMINATOR,
) -> LanguageStatistics:
    """Progress statistics for one of the user's languages."""
    language = catalog.language(language_code)
    total_lessons = language.total_lessons if language else 0

    progress = user.progress.get(language_code)
    if progress is None:
        return LanguageStatistics(language_code=language_code, total_lessons=total_lessons)

    return LanguageStatistics(
        language_code=language_code,
        completed_lessons=len(progress.completed_lessons),
        total_lessons=total_lessons,
        total_points=progress.total_points,
        current_streak=progress.current_streak,
        study_time_this_week=progress.study_time_this_week,
        completion_percentage=progress.completion_percentage(denominator),
    )
