"""Lesson Walker module.

Cursor state machine over one lesson's content:

    VOCABULARY(index) -> DIALOGUE(dialogue_index, line_index) -> COMPLETED

Progress is the fraction of vocabulary items and dialogue lines already
passed. Entering COMPLETED awards the lesson's points to the Progress Ledger
exactly once. Out-of-range moves are ignored and reported as False.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

import structlog

from lingueta.config.app_config import AppConfig, LessonPointsConfig, load_app_config
from lingueta.core.ledger import AwardOutcome, Clock, LessonCompletion, ProgressLedger, local_now
from lingueta.core.models import Dialogue, DialogueLine, Lesson, VocabularyItem

logger = structlog.get_logger(__name__)


class WalkerPhase(Enum):
    """Section of the lesson the cursor is in."""

    VOCABULARY = auto()
    DIALOGUE = auto()
    COMPLETED = auto()


@dataclass(frozen=True)
class WalkerCursor:
    """Position inside a lesson."""

    phase: WalkerPhase
    vocabulary_index: int = 0
    dialogue_index: int = 0
    line_index: int = 0


def lesson_points(lesson: Lesson, points: LessonPointsConfig | None = None) -> int:
    """Points credited for completing a lesson.

    base + per_vocabulary * vocabulary + per_dialogue * dialogues + exercise points
    """
    points = points or LessonPointsConfig()
    return (
        points.base
        + points.per_vocabulary * len(lesson.vocabulary)
        + points.per_dialogue * len(lesson.dialogues)
        + sum(exercise.points for exercise in lesson.exercises)
    )


class LessonWalker:
    """Steps a learner through one lesson.

    Args:
        lesson: Lesson to walk
        ledger: Progress Ledger credited on completion
        config: Application config (point formula)
        clock: Time source used to measure study time
    """

    def __init__(
        self,
        lesson: Lesson,
        ledger: ProgressLedger,
        config: AppConfig | None = None,
        clock: Clock | None = None,
    ):
        self.lesson = lesson
        self._ledger = ledger
        self._config = config or load_app_config()
        self._clock = clock or local_now
        self.cursor = WalkerCursor(WalkerPhase.VOCABULARY)
        self.progress = 0.0
        self.earned_points = 0
        self.award: AwardOutcome | None = None
        self._awarded = False
        self._started_at = self._clock()
        self.start()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_completed(self) -> bool:
        return self.cursor.phase is WalkerPhase.COMPLETED

    def start(self) -> None:
        """Reset to the first item; empty sections are skipped."""
        self.progress = 0.0
        self.earned_points = 0
        self._started_at = self._clock()
        if self.lesson.vocabulary:
            self._move(WalkerCursor(WalkerPhase.VOCABULARY))
        elif self._has_dialogue_lines():
            self._move(WalkerCursor(WalkerPhase.DIALOGUE, dialogue_index=self._first_dialogue_with_lines(0)))
        else:
            self._move(WalkerCursor(WalkerPhase.COMPLETED))

    def current_vocabulary_item(self) -> VocabularyItem | None:
        if self.cursor.phase is not WalkerPhase.VOCABULARY:
            return None
        if self.cursor.vocabulary_index >= len(self.lesson.vocabulary):
            return None
        return self.lesson.vocabulary[self.cursor.vocabulary_index]

    def current_dialogue(self) -> Dialogue | None:
        if self.cursor.phase is not WalkerPhase.DIALOGUE:
            return None
        return self.lesson.dialogues[self.cursor.dialogue_index]

    def current_dialogue_line(self) -> DialogueLine | None:
        dialogue = self.current_dialogue()
        if dialogue is None or self.cursor.line_index >= dialogue.line_count:
            return None
        return dialogue.lines[self.cursor.line_index]

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def advance(self) -> bool:
        """Move one step forward. Returns False if already completed."""
        cursor = self.cursor
        lesson = self.lesson

        if cursor.phase is WalkerPhase.VOCABULARY:
            if cursor.vocabulary_index < len(lesson.vocabulary) - 1:
                self._move(WalkerCursor(WalkerPhase.VOCABULARY, vocabulary_index=cursor.vocabulary_index + 1))
            elif self._has_dialogue_lines():
                self._move(WalkerCursor(WalkerPhase.DIALOGUE, dialogue_index=self._first_dialogue_with_lines(0)))
            else:
                self._move(WalkerCursor(WalkerPhase.COMPLETED))
            return True

        if cursor.phase is WalkerPhase.DIALOGUE:
            dialogue = lesson.dialogues[cursor.dialogue_index]
            if cursor.line_index < dialogue.line_count - 1:
                self._move(
                    WalkerCursor(
                        WalkerPhase.DIALOGUE,
                        dialogue_index=cursor.dialogue_index,
                        line_index=cursor.line_index + 1,
                    )
                )
                return True
            following = self._first_dialogue_with_lines(cursor.dialogue_index + 1)
            if following < len(lesson.dialogues):
                self._move(WalkerCursor(WalkerPhase.DIALOGUE, dialogue_index=following))
            else:
                self._move(WalkerCursor(WalkerPhase.COMPLETED))
            return True

        return False

    def retreat(self) -> bool:
        """Move one step back within the current section.

        No-op (False) at Vocabulary(0), at the first dialogue line and after
        completion.
        """
        cursor = self.cursor

        if cursor.phase is WalkerPhase.VOCABULARY:
            if cursor.vocabulary_index == 0:
                return False
            self._move(WalkerCursor(WalkerPhase.VOCABULARY, vocabulary_index=cursor.vocabulary_index - 1))
            return True

        if cursor.phase is WalkerPhase.DIALOGUE:
            if cursor.line_index > 0:
                self._move(
                    WalkerCursor(
                        WalkerPhase.DIALOGUE,
                        dialogue_index=cursor.dialogue_index,
                        line_index=cursor.line_index - 1,
                    )
                )
                return True
            previous = self._last_dialogue_with_lines(cursor.dialogue_index - 1)
            if previous < 0:
                return False
            last_line = self.lesson.dialogues[previous].line_count - 1
            self._move(WalkerCursor(WalkerPhase.DIALOGUE, dialogue_index=previous, line_index=last_line))
            return True

        return False

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _move(self, cursor: WalkerCursor) -> None:
        self.cursor = cursor
        self._update_progress()
        if cursor.phase is WalkerPhase.COMPLETED:
            self._complete()

    def _update_progress(self) -> None:
        total = self.lesson.total_items
        if total == 0:
            self.progress = 0.0
            return

        cursor = self.cursor
        if cursor.phase is WalkerPhase.COMPLETED:
            self.progress = 1.0
            return

        if cursor.phase is WalkerPhase.VOCABULARY:
            done = cursor.vocabulary_index
        else:
            previous_lines = sum(d.line_count for d in self.lesson.dialogues[: cursor.dialogue_index])
            done = len(self.lesson.vocabulary) + previous_lines + cursor.line_index

        self.progress = done / total

    def _complete(self) -> None:
        if self._awarded:
            return
        self._awarded = True

        lesson = self.lesson
        self.earned_points = lesson_points(lesson, self._config.lesson_points)
        elapsed = (self._clock() - self._started_at).total_seconds()
        self.award = self._ledger.award(
            lesson.language_code,
            LessonCompletion(lesson.lesson_number, study_seconds=elapsed),
            self.earned_points,
        )

        logger.info(
            "lesson_completed",
            language_code=lesson.language_code,
            lesson_number=lesson.lesson_number,
            points=self.earned_points,
            seconds=round(elapsed, 1),
        )

    def _has_dialogue_lines(self) -> bool:
        return self.lesson.total_dialogue_lines > 0

    def _first_dialogue_with_lines(self, start: int) -> int:
        """Index of the first dialogue at or after start that has lines."""
        dialogues = self.lesson.dialogues
        index = start
        while index < len(dialogues) and dialogues[index].line_count == 0:
            index += 1
        return index

    def _last_dialogue_with_lines(self, start: int) -> int:
        dialogues = self.lesson.dialogues
        index = start
        while index >= 0 and dialogues[index].line_count == 0:
            index -= 1
        return index
