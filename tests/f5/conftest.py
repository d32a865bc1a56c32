"""Fixtures for F5 tests - Analytics."""

from datetime import datetime, timedelta, timezone
from types import MappingProxyType

import pytest

from lingueta.core.models import Difficulty, Exercise, ExerciseType
from lingueta.core.quiz import QuizResult

START = datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc)


def build_result(
    exercises,
    answers,
    language_code: str = "es",
    seconds: float = 60,
    time_limit: int | None = None,
    score: int | None = None,
    quiz_id: int = 1,
) -> QuizResult:
    """Completed result; score/correct derived from answers unless given."""
    correct = sum(1 for i, e in enumerate(exercises) if e.is_correct(answers.get(i, "")))
    if score is None:
        score = sum(e.points for i, e in enumerate(exercises) if e.is_correct(answers.get(i, "")))
    return QuizResult(
        quiz_id=quiz_id,
        language_code=language_code,
        difficulty=Difficulty.BEGINNER,
        questions=tuple(exercises),
        time_limit=time_limit if time_limit is not None else 30 * len(exercises),
        is_daily_challenge=False,
        bonus_points=0,
        score=score,
        correct_answers=correct,
        user_answers=MappingProxyType(dict(answers)),
        started_at=START,
        completed_at=START + timedelta(seconds=seconds),
    )


def typed_exercises(exercise_type: ExerciseType, count: int) -> list[Exercise]:
    return [Exercise(exercise_type, f"{exercise_type.value} {i}", ("yes", "no"), "yes") for i in range(count)]


@pytest.fixture
def make_result():
    return build_result


@pytest.fixture
def make_exercises():
    return typed_exercises
