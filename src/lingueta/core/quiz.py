"""Quiz session and result models.

- Quiz: ephemeral working state of one quiz session
- QuizResult: immutable snapshot of a completed quiz, kept in history
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping

from lingueta.core.models import Difficulty, Exercise


@dataclass
class Quiz:
    """Live quiz state. Never persisted; only its QuizResult is kept."""

    quiz_id: int
    language_code: str
    difficulty: Difficulty
    questions: tuple[Exercise, ...]
    time_limit: int  # seconds
    start_time: datetime
    is_daily_challenge: bool = False
    bonus_points: int = 0
    current_question_index: int = 0
    score: int = 0
    correct_answers: int = 0
    user_answers: dict[int, str] = field(default_factory=dict)
    is_completed: bool = False

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Exercise | None:
        if self.current_question_index >= len(self.questions):
            return None
        return self.questions[self.current_question_index]

    @property
    def progress(self) -> float:
        if not self.questions:
            return 0.0
        return self.current_question_index / len(self.questions)

    @property
    def accuracy(self) -> float:
        """Correct answers over questions already passed, in percent."""
        if self.current_question_index == 0:
            return 0.0
        return self.correct_answers / self.current_question_index * 100

    @property
    def max_score(self) -> int:
        return sum(q.points for q in self.questions)

    def elapsed_seconds(self, now: datetime) -> int:
        return int((now - self.start_time).total_seconds())

    def time_remaining(self, now: datetime) -> int:
        return max(0, self.time_limit - self.elapsed_seconds(now))


@dataclass(frozen=True)
class QuizResult:
    """Immutable record of a completed quiz."""

    quiz_id: int
    language_code: str
    difficulty: Difficulty
    questions: tuple[Exercise, ...]
    time_limit: int
    is_daily_challenge: bool
    bonus_points: int
    score: int
    correct_answers: int
    user_answers: Mapping[int, str]
    started_at: datetime
    completed_at: datetime

    @classmethod
    def from_quiz(cls, quiz: Quiz, completed_at: datetime) -> QuizResult:
        return cls(
            quiz_id=quiz.quiz_id,
            language_code=quiz.language_code,
            difficulty=quiz.difficulty,
            questions=tuple(quiz.questions),
            time_limit=quiz.time_limit,
            is_daily_challenge=quiz.is_daily_challenge,
            bonus_points=quiz.bonus_points,
            score=quiz.score,
            correct_answers=quiz.correct_answers,
            user_answers=MappingProxyType(dict(quiz.user_answers)),
            started_at=quiz.start_time,
            completed_at=completed_at,
        )

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def percentage(self) -> float:
        if not self.questions:
            return 0.0
        return self.correct_answers / len(self.questions) * 100

    @property
    def is_passed(self) -> bool:
        return self.percentage >= 60.0

    @property
    def credited_points(self) -> int:
        return self.score + (self.bonus_points if self.is_daily_challenge else 0)

    @property
    def elapsed_seconds(self) -> float:
        return (self.completed_at - self.started_at).total_seconds()

    def answer_for(self, index: int) -> str:
        """Recorded answer, or the empty string if none was given."""
        return self.user_answers.get(index, "")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "quiz_id": self.quiz_id,
            "language_code": self.language_code,
            "difficulty": self.difficulty.value,
            "questions": [q.to_dict() for q in self.questions],
            "time_limit": self.time_limit,
            "is_daily_challenge": self.is_daily_challenge,
            "bonus_points": self.bonus_points,
            "score": self.score,
            "correct_answers": self.correct_answers,
            "user_answers": {str(k): v for k, v in self.user_answers.items()},
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuizResult:
        return cls(
            quiz_id=int(data.get("quiz_id", 0)),
            language_code=data["language_code"],
            difficulty=Difficulty(data.get("difficulty", Difficulty.BEGINNER.value)),
            questions=tuple(Exercise.from_dict(q) for q in data.get("questions", [])),
            time_limit=int(data.get("time_limit", 0)),
            is_daily_challenge=bool(data.get("is_daily_challenge", False)),
            bonus_points=int(data.get("bonus_points", 0)),
            score=int(data.get("score", 0)),
            correct_answers=int(data.get("correct_answers", 0)),
            user_answers=MappingProxyType({int(k): v for k, v in data.get("user_answers", {}).items()}),
            started_at=datetime.fromisoformat(data["started_at"]),
            completed_at=datetime.fromisoformat(data["completed_at"]),
        )
