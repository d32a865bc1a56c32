"""Fixtures for F4 tests - Quiz Engine."""

import random

import pytest

from lingueta.core.catalog import StaticCatalog
from lingueta.core.history import QuizHistory
from lingueta.core.ledger import ProgressLedger
from lingueta.core.models import Difficulty, Exercise, ExerciseType, Language, Lesson
from lingueta.core.profile import MemoryProfileStore, create_user
from lingueta.core.quiz_engine import QuizEngine


def exercise(name: str, points: int = 10, type: ExerciseType = ExerciseType.MULTIPLE_CHOICE) -> Exercise:
    """Exercise whose correct answer is its own name."""
    return Exercise(type, f"Q {name}", (name, "wrong"), name, points=points)


@pytest.fixture
def catalog() -> StaticCatalog:
    """Spanish: 5 beginner lessons (points 5, 5, 5, 10, 10), 1 advanced lesson.

    Italian: one lesson without exercises, one with two.
    """
    es_lessons = [
        Lesson("es", n, f"L{n}", exercises=(exercise(f"es{n}", points),))
        for n, points in zip(range(1, 6), (5, 5, 5, 10, 10))
    ]
    es_lessons.append(
        Lesson(
            "es", 6, "Hard", difficulty=Difficulty.ADVANCED,
            exercises=(exercise("adv1"), exercise("adv2")),
        )
    )
    it_lessons = [
        Lesson("it", 1, "Intro"),
        Lesson("it", 2, "Words", exercises=(exercise("it-a"), exercise("it-b"))),
    ]
    return StaticCatalog(
        [Language("es", "Spanish"), Language("it", "Italian")],
        es_lessons + it_lessons,
    )


@pytest.fixture
def store() -> MemoryProfileStore:
    return MemoryProfileStore(create_user("Ana"))


@pytest.fixture
def ledger(store, app_config, clock) -> ProgressLedger:
    return ProgressLedger(store, config=app_config, clock=clock)


@pytest.fixture
def history() -> QuizHistory:
    return QuizHistory()


@pytest.fixture
def engine(catalog, ledger, history, app_config, clock, scheduler) -> QuizEngine:
    return QuizEngine(
        catalog,
        ledger,
        history=history,
        config=app_config,
        rng=random.Random(7),
        clock=clock,
        scheduler=scheduler,
    )


def answer_all_correctly(engine: QuizEngine) -> None:
    """Submit the correct answer to every question and finish the quiz."""
    while engine.current_quiz is not None:
        quiz = engine.current_quiz
        question = quiz.current_question
        engine.submit_answer(quiz.current_question_index, question.correct_answer)
        engine.next_question()


@pytest.fixture
def make_exercise():
    return exercise


@pytest.fixture
def answer_all():
    """Callable that answers every question of the live quiz correctly."""
    return answer_all_correctly
