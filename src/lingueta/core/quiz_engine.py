"""Quiz Engine module.

Responsibilities:
- Build regular quizzes and daily challenges from catalog exercises
- Run a quiz question by question (submit / next / complete)
- Score answers by exact string match
- Drive the countdown and auto-submit on timeout
- Credit points to the Progress Ledger and append results to history

Invalid operations (no live quiz, index out of range) return False/None
instead of raising.
"""

from __future__ import annotations

import random

import structlog

from lingueta.config.app_config import AppConfig, load_app_config
from lingueta.core.catalog import Catalog
from lingueta.core.history import QuizHistory
from lingueta.core.ledger import Clock, ProgressLedger, QuizCompletion, local_now
from lingueta.core.models import Difficulty, Exercise, ExerciseType
from lingueta.core.quiz import Quiz, QuizResult
from lingueta.core.quiz_timer import QuizCountdown, Scheduler

logger = structlog.get_logger(__name__)

# =============================================================================
# BONUS EXERCISES
# =============================================================================

BONUS_EXERCISES: dict[str, tuple[Exercise, ...]] = {
    "es": (
        Exercise(
            type=ExerciseType.MULTIPLE_CHOICE,
            question="Which verb form is correct? 'Yo _____ español'",
            options=("hablo", "hablas", "habla", "hablamos"),
            correct_answer="hablo",
            explanation="'Hablo' is the first person singular form of 'hablar' (to speak).",
            points=20,
        ),
        Exercise(
            type=ExerciseType.TRANSLATION,
            question="Translate: 'I would like to order a coffee'",
            options=("Me gustaría pedir un café", "Quiero café", "Necesito café", "Café por favor"),
            correct_answer="Me gustaría pedir un café",
            explanation="'Me gustaría pedir' is the polite way to say 'I would like to order'.",
            points=25,
        ),
    ),
    "fr": (
        Exercise(
            type=ExerciseType.MULTIPLE_CHOICE,
            question="Which article is correct? '_____ maison'",
            options=("la", "le", "les", "un"),
            correct_answer="la",
            explanation="'Maison' is feminine, so it takes the feminine article 'la'.",
            points=20,
        ),
        Exercise(
            type=ExerciseType.FILL_IN_THE_BLANK,
            question="Complete: 'Je _____ français' (I speak French)",
            options=("parle", "parles", "parlons", "parlent"),
            correct_answer="parle",
            explanation="'Parle' is the first person singular form of 'parler'.",
            points=25,
        ),
    ),
}

DEFAULT_BONUS_EXERCISES: tuple[Exercise, ...] = (
    Exercise(
        type=ExerciseType.MULTIPLE_CHOICE,
        question="What is the most polite way to greet someone?",
        options=("Hello", "Hi", "Hey", "Good morning"),
        correct_answer="Good morning",
        explanation="Time-specific greetings like 'Good morning' are generally more formal and polite.",
        points=15,
    ),
)


def bonus_exercises(language_code: str) -> tuple[Exercise, ...]:
    """Curated daily-challenge extras for a language."""
    return BONUS_EXERCISES.get(language_code, DEFAULT_BONUS_EXERCISES)


# =============================================================================
# ENGINE
# =============================================================================


class QuizEngine:
    """Builds, runs and scores one quiz at a time.

    Args:
        catalog: Content Catalog providing lessons and exercises
        ledger: Progress Ledger credited on completion
        history: Append-only result history (in-memory if omitted)
        config: Application config (timing, bonus)
        rng: Random source for shuffling; injected for tests
        clock: Time source for start/elapsed times
        scheduler: Countdown scheduler, e.g. loop_scheduler(loop). None (the
            default) arms no countdown; callers drive tick() themselves
    """

    def __init__(
        self,
        catalog: Catalog,
        ledger: ProgressLedger,
        history: QuizHistory | None = None,
        config: AppConfig | None = None,
        rng: random.Random | None = None,
        clock: Clock | None = None,
        scheduler: Scheduler | None = None,
    ):
        self._catalog = catalog
        self._ledger = ledger
        self.history = history if history is not None else QuizHistory()
        self._config = config or load_app_config()
        self._rng = rng or random.Random()
        self._clock = clock or local_now
        self._scheduler = scheduler
        self._countdown: QuizCountdown | None = None
        self._last_quiz_id = 0
        self._result_shown = False
        self.current_quiz: Quiz | None = None

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def generate_quiz(
        self,
        language_code: str,
        difficulty: Difficulty,
        question_count: int | None = None,
    ) -> Quiz:
        """Build a quiz from lesson exercises and make it the live quiz.

        Beginner pools every lesson of the language; other difficulties pool
        only lessons of that difficulty. A small pool yields a shorter quiz;
        an empty one yields a quiz that is already completed.
        """
        if question_count is None:
            question_count = self._config.quiz.default_question_count
        question_count = max(0, question_count)

        pool: list[Exercise] = []
        for lesson in self._catalog.lessons(language_code):
            if lesson.difficulty == difficulty or difficulty == Difficulty.BEGINNER:
                pool.extend(lesson.exercises)

        shuffled = self._rng.sample(pool, len(pool))
        selected = tuple(shuffled[:question_count])

        quiz = self._new_quiz(
            language_code=language_code,
            difficulty=difficulty,
            questions=selected,
            time_limit=question_count * self._config.quiz.seconds_per_question,
        )

        logger.info(
            "quiz_generated",
            quiz_id=quiz.quiz_id,
            language_code=language_code,
            difficulty=difficulty.value,
            requested=question_count,
            pool=len(pool),
            questions=len(selected),
        )
        return quiz

    def generate_daily_challenge(self, language_code: str) -> Quiz:
        """Build the daily challenge and make it the live quiz.

        One random exercise from each of the first lessons, plus the curated
        bonus exercises for the language, shuffled.
        """
        quiz_config = self._config.quiz
        lessons = self._catalog.lessons(language_code)[: quiz_config.daily_lesson_count]

        exercises: list[Exercise] = []
        for lesson in lessons:
            if lesson.exercises:
                exercises.append(self._rng.choice(lesson.exercises))
        exercises.extend(bonus_exercises(language_code))

        self._rng.shuffle(exercises)

        quiz = self._new_quiz(
            language_code=language_code,
            difficulty=Difficulty.INTERMEDIATE,
            questions=tuple(exercises),
            time_limit=len(exercises) * quiz_config.daily_seconds_per_question,
            is_daily_challenge=True,
            bonus_points=quiz_config.daily_bonus_points,
        )

        logger.info(
            "daily_challenge_generated",
            quiz_id=quiz.quiz_id,
            language_code=language_code,
            questions=len(exercises),
        )
        return quiz

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    @property
    def result_shown(self) -> bool:
        """Whether the current question has already been answered."""
        return self._result_shown

    def submit_answer(self, question_index: int, answer: str) -> bool:
        """Record an answer and score it.

        Resubmitting for the same index replaces the previous answer and its
        score contribution.

        Returns:
            True if the answer is correct; False if incorrect or invalid.
        """
        quiz = self.current_quiz
        if quiz is None or quiz.is_completed:
            return False
        if question_index < 0 or question_index >= len(quiz.questions):
            return False

        question = quiz.questions[question_index]

        previous = quiz.user_answers.get(question_index)
        if previous is not None and question.is_correct(previous):
            quiz.score -= question.points
            quiz.correct_answers -= 1

        is_correct = question.is_correct(answer)
        quiz.user_answers[question_index] = answer
        if is_correct:
            quiz.score += question.points
            quiz.correct_answers += 1

        if question_index == quiz.current_question_index:
            self._result_shown = True

        logger.debug(
            "answer_submitted",
            quiz_id=quiz.quiz_id,
            question_index=question_index,
            correct=is_correct,
            score=quiz.score,
        )
        return is_correct

    def next_question(self) -> bool:
        """Advance to the next question, completing the quiz after the last.

        Returns:
            True if a question is now current, False if the quiz finished
            (or there was no live quiz).
        """
        quiz = self.current_quiz
        if quiz is None:
            return False

        self._result_shown = False
        if quiz.current_question_index < len(quiz.questions) - 1:
            quiz.current_question_index += 1
            return True

        self.complete_quiz()
        return False

    def complete_quiz(self) -> QuizResult | None:
        """Finalize the live quiz, credit points and record the result."""
        quiz = self.current_quiz
        if quiz is None:
            return None

        self._stop_countdown()

        quiz.is_completed = True
        quiz.current_question_index = len(quiz.questions)

        result = QuizResult.from_quiz(quiz, completed_at=self._clock())
        self._ledger.award(quiz.language_code, QuizCompletion(), result.credited_points)
        self.history.append(result)

        self.current_quiz = None
        self._result_shown = False

        logger.info(
            "quiz_completed",
            quiz_id=quiz.quiz_id,
            language_code=quiz.language_code,
            score=quiz.score,
            correct=quiz.correct_answers,
            questions=len(quiz.questions),
            credited=result.credited_points,
            daily=quiz.is_daily_challenge,
        )
        return result

    def reset(self) -> None:
        """Abandon the live quiz without crediting anything."""
        if self.current_quiz is not None:
            logger.info("quiz_abandoned", quiz_id=self.current_quiz.quiz_id)
        self._stop_countdown()
        self.current_quiz = None
        self._result_shown = False

    # -------------------------------------------------------------------------
    # Timer
    # -------------------------------------------------------------------------

    def time_remaining(self) -> int:
        quiz = self.current_quiz
        if quiz is None:
            return 0
        return quiz.time_remaining(self._clock())

    def tick(self, quiz_id: int) -> bool:
        """Countdown callback.

        Ignored unless quiz_id names the live quiz. Once time is up, an
        unanswered current question is submitted with an empty answer and the
        quiz moves on, one question per tick.

        Returns:
            True if the tick changed quiz state.
        """
        quiz = self.current_quiz
        if quiz is None or quiz.quiz_id != quiz_id or quiz.is_completed:
            return False
        if quiz.time_remaining(self._clock()) > 0:
            return False

        if not self._result_shown and quiz.current_question is not None:
            logger.info(
                "quiz_timeout_auto_submit",
                quiz_id=quiz.quiz_id,
                question_index=quiz.current_question_index,
            )
            self.submit_answer(quiz.current_question_index, "")

        self.next_question()
        return True

    def score_info(self) -> tuple[int, int, float]:
        """(score, max possible score, percentage) for the live quiz."""
        quiz = self.current_quiz
        if quiz is None:
            return (0, 0, 0.0)
        total = quiz.max_score
        percentage = quiz.score / total * 100 if total > 0 else 0.0
        return (quiz.score, total, percentage)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _new_quiz(self, **kwargs) -> Quiz:
        self.reset()
        self._last_quiz_id += 1
        quiz = Quiz(quiz_id=self._last_quiz_id, start_time=self._clock(), **kwargs)

        # Nothing to ask: completed at once, never live, nothing credited
        if not quiz.questions:
            quiz.is_completed = True
            logger.info("quiz_empty", quiz_id=quiz.quiz_id, language_code=quiz.language_code)
            return quiz

        self.current_quiz = quiz

        if self._scheduler is not None:
            self._countdown = QuizCountdown(
                quiz.quiz_id,
                self.tick,
                self._scheduler,
                interval=self._config.quiz.tick_interval_seconds,
            )
            self._countdown.start()
        return quiz

    def _stop_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None
