"""Catalog domain models.

Immutable content entries served by the Content Catalog:
- Language, Lesson, VocabularyItem, Dialogue, DialogueLine, Exercise
- Achievement (signal emitted by analytics, stored by the profile)

Every entry round-trips through plain dicts (to_dict / from_dict) so it can
be read from YAML catalog files and embedded in JSON state files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

# =============================================================================
# ENUMS
# =============================================================================


class Difficulty(str, Enum):
    """Difficulty tier of a language or lesson."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ExerciseType(str, Enum):
    """Kind of exercise; drives weak-area recommendations."""

    MULTIPLE_CHOICE = "multiple_choice"
    FILL_IN_THE_BLANK = "fill_in_the_blank"
    TRANSLATION = "translation"
    PRONUNCIATION = "pronunciation"
    LISTENING = "listening"

    @property
    def label(self) -> str:
        return _EXERCISE_TYPE_LABELS[self]


_EXERCISE_TYPE_LABELS = {
    ExerciseType.MULTIPLE_CHOICE: "Multiple Choice",
    ExerciseType.FILL_IN_THE_BLANK: "Fill in the Blank",
    ExerciseType.TRANSLATION: "Translation",
    ExerciseType.PRONUNCIATION: "Pronunciation",
    ExerciseType.LISTENING: "Listening",
}


class AchievementCategory(str, Enum):
    """Grouping used when displaying achievements."""

    STREAK = "streak"
    LESSONS = "lessons"
    POINTS = "points"
    VOCABULARY = "vocabulary"
    PRONUNCIATION = "pronunciation"


# =============================================================================
# CONTENT
# =============================================================================


@dataclass(frozen=True)
class VocabularyItem:
    """A word with its translation and usage example."""

    word: str
    translation: str
    pronunciation: str = ""
    example: str = ""
    example_translation: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "word": self.word,
            "translation": self.translation,
            "pronunciation": self.pronunciation,
            "example": self.example,
            "example_translation": self.example_translation,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VocabularyItem:
        return cls(
            word=data["word"],
            translation=data["translation"],
            pronunciation=data.get("pronunciation", ""),
            example=data.get("example", ""),
            example_translation=data.get("example_translation", ""),
        )


@dataclass(frozen=True)
class DialogueLine:
    """One spoken line of a dialogue."""

    speaker: str
    text: str
    translation: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"speaker": self.speaker, "text": self.text, "translation": self.translation}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DialogueLine:
        return cls(
            speaker=data["speaker"],
            text=data["text"],
            translation=data.get("translation", ""),
        )


@dataclass(frozen=True)
class Dialogue:
    """A short scripted conversation."""

    title: str
    scenario: str = ""
    participants: tuple[str, ...] = ()
    lines: tuple[DialogueLine, ...] = ()

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "scenario": self.scenario,
            "participants": list(self.participants),
            "lines": [line.to_dict() for line in self.lines],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dialogue:
        return cls(
            title=data["title"],
            scenario=data.get("scenario", ""),
            participants=tuple(data.get("participants", [])),
            lines=tuple(DialogueLine.from_dict(line) for line in data.get("lines", [])),
        )


@dataclass(frozen=True)
class Exercise:
    """A single quiz question.

    Correctness is exact string equality against ``correct_answer``; the
    catalog guarantees the answer is one of ``options``.
    """

    type: ExerciseType
    question: str
    options: tuple[str, ...]
    correct_answer: str
    explanation: str = ""
    points: int = 10

    def is_correct(self, answer: str) -> bool:
        return answer == self.correct_answer

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.type.value,
            "question": self.question,
            "options": list(self.options),
            "correct_answer": self.correct_answer,
            "explanation": self.explanation,
            "points": self.points,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Exercise:
        return cls(
            type=ExerciseType(data["type"]),
            question=data["question"],
            options=tuple(data.get("options", [])),
            correct_answer=data["correct_answer"],
            explanation=data.get("explanation", ""),
            points=int(data.get("points", 10)),
        )


@dataclass(frozen=True)
class Lesson:
    """Ordered lesson content for one language.

    Completion is tracked in LearningProgress, never on the lesson itself.
    """

    language_code: str
    lesson_number: int
    title: str
    difficulty: Difficulty = Difficulty.BEGINNER
    description: str = ""
    vocabulary: tuple[VocabularyItem, ...] = ()
    dialogues: tuple[Dialogue, ...] = ()
    exercises: tuple[Exercise, ...] = ()

    @property
    def total_dialogue_lines(self) -> int:
        return sum(d.line_count for d in self.dialogues)

    @property
    def total_items(self) -> int:
        """Vocabulary items plus dialogue lines."""
        return len(self.vocabulary) + self.total_dialogue_lines

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "language_code": self.language_code,
            "lesson_number": self.lesson_number,
            "title": self.title,
            "difficulty": self.difficulty.value,
            "description": self.description,
            "vocabulary": [v.to_dict() for v in self.vocabulary],
            "dialogues": [d.to_dict() for d in self.dialogues],
            "exercises": [e.to_dict() for e in self.exercises],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Lesson:
        return cls(
            language_code=data["language_code"],
            lesson_number=int(data["lesson_number"]),
            title=data.get("title", f"Lesson {data['lesson_number']}"),
            difficulty=Difficulty(data.get("difficulty", Difficulty.BEGINNER.value)),
            description=data.get("description", ""),
            vocabulary=tuple(VocabularyItem.from_dict(v) for v in data.get("vocabulary", [])),
            dialogues=tuple(Dialogue.from_dict(d) for d in data.get("dialogues", [])),
            exercises=tuple(Exercise.from_dict(e) for e in data.get("exercises", [])),
        )


@dataclass(frozen=True)
class Language:
    """A learnable language in the catalog."""

    code: str
    name: str
    difficulty: Difficulty = Difficulty.BEGINNER
    total_lessons: int = 50
    flag: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "name": self.name,
            "difficulty": self.difficulty.value,
            "total_lessons": self.total_lessons,
            "flag": self.flag,
        }


# =============================================================================
# ACHIEVEMENTS
# =============================================================================


@dataclass(frozen=True)
class Achievement:
    """An unlockable badge."""

    title: str
    description: str
    icon: str
    requirement: int
    category: AchievementCategory
    is_unlocked: bool = False
    unlocked_at: datetime | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "requirement": self.requirement,
            "category": self.category.value,
            "is_unlocked": self.is_unlocked,
            "unlocked_at": self.unlocked_at.isoformat() if self.unlocked_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Achievement:
        unlocked_at = data.get("unlocked_at")
        return cls(
            title=data["title"],
            description=data.get("description", ""),
            icon=data.get("icon", ""),
            requirement=int(data.get("requirement", 1)),
            category=AchievementCategory(data.get("category", AchievementCategory.POINTS.value)),
            is_unlocked=bool(data.get("is_unlocked", False)),
            unlocked_at=datetime.fromisoformat(unlocked_at) if unlocked_at else None,
        )
